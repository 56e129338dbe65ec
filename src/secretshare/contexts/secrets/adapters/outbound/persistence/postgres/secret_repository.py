from __future__ import annotations

from typing import Any, Mapping

from secretshare.contexts.secrets.adapters.outbound.persistence.postgres.gateway import (
    SecretsPostgresGateway,
)
from secretshare.contexts.secrets.application.ports.secret_repository import SecretRepository
from secretshare.contexts.secrets.domain.entities import Secret
from secretshare.contexts.secrets.domain.errors import SecretAlreadyExistsError


class PostgresSecretRepository(SecretRepository):
    """
    PostgresSecretRepository — Postgres adapter for secrets storage.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/ports/secret_repository.py
      - alembic/versions/20221001_0001_secrets_storage_v1.py
      - src/secretshare/contexts/secrets/adapters/outbound/persistence/postgres/gateway.py
    """

    def __init__(
        self,
        *,
        gateway: SecretsPostgresGateway,
        table_name: str = "secrets_secrets",
    ) -> None:
        """
        Initialize repository with SQL gateway and target table name.

        Args:
            gateway: SQL gateway abstraction.
            table_name: Target secrets table name.
        Returns:
            None.
        Assumptions:
            Table schema follows migration `20221001_0001_secrets_storage_v1.py`.
        Raises:
            ValueError: If dependencies are invalid.
        Side Effects:
            None.
        """
        if gateway is None:  # type: ignore[truthy-bool]
            raise ValueError("PostgresSecretRepository requires gateway")
        normalized_table_name = table_name.strip()
        if not normalized_table_name:
            raise ValueError("PostgresSecretRepository requires non-empty table_name")
        self._gateway = gateway
        self._table_name = normalized_table_name

    def find_by_id(self, secret_id: str) -> Secret | None:
        """
        Load one secret row by primary key.

        Args:
            secret_id: Secret identifier.
        Returns:
            Secret | None: Mapped secret or `None` when row is absent.
        Assumptions:
            Expired rows are returned as stored; eviction is a separate concern.
        Raises:
            ValueError: If row cannot be mapped.
        Side Effects:
            Executes one SQL select statement.
        """
        query = f"""
        SELECT
            id,
            secret,
            token,
            iv,
            expire_at,
            created_at,
            updated_at,
            organisation
        FROM {self._table_name}
        WHERE id = %(id)s
        """
        row = self._gateway.fetch_one(query=query, parameters={"id": secret_id})
        if row is None:
            return None
        return _map_secret_row(row=row)

    def save(self, secret: Secret) -> None:
        """
        Insert secret row, reporting a concurrent duplicate id as conflict.

        Args:
            secret: Secret entity to store.
        Returns:
            None.
        Assumptions:
            Primary key on `id` makes the insert atomic against concurrent writers.
        Raises:
            SecretAlreadyExistsError: If row with same id already exists.
        Side Effects:
            Executes one SQL insert statement.
        """
        query = f"""
        INSERT INTO {self._table_name}
        (
            id,
            secret,
            token,
            iv,
            expire_at,
            created_at,
            updated_at,
            organisation
        )
        VALUES
        (
            %(id)s,
            %(secret)s,
            %(token)s,
            %(iv)s,
            %(expire_at)s,
            %(created_at)s,
            %(updated_at)s,
            %(organisation)s
        )
        ON CONFLICT (id) DO NOTHING
        RETURNING id
        """
        row = self._gateway.fetch_one(
            query=query,
            parameters={
                "id": secret.id,
                "secret": secret.secret,
                "token": secret.token,
                "iv": secret.iv,
                "expire_at": secret.expire_at,
                "created_at": secret.created_at,
                "updated_at": secret.updated_at,
                "organisation": secret.organisation,
            },
        )
        if row is None:
            raise SecretAlreadyExistsError(secret_id=secret.id)



def _map_secret_row(*, row: Mapping[str, Any]) -> Secret:
    """
    Map SQL row mapping into immutable domain `Secret` entity.

    Args:
        row: SQL result mapping.
    Returns:
        Secret: Domain secret entity.
    Assumptions:
        Row follows schema from `secrets_secrets` table.
    Raises:
        ValueError: If row fields are missing or malformed.
    Side Effects:
        None.
    """
    try:
        return Secret(
            id=str(row["id"]),
            secret=str(row["secret"]),
            token=str(row["token"]),
            iv=str(row["iv"]),
            expire_at=row["expire_at"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            organisation=str(row["organisation"]),
        )
    except (KeyError, TypeError, ValueError) as error:
        raise ValueError("PostgresSecretRepository cannot map secret row") from error
