from __future__ import annotations

from typing import Any, Mapping, Protocol, cast

import psycopg
from psycopg.rows import dict_row


class SecretsPostgresGateway(Protocol):
    """
    SecretsPostgresGateway — single-statement SQL seam used by `PostgresSecretRepository`.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/adapters/outbound/persistence/postgres/
        secret_repository.py
      - alembic/versions/20221001_0001_secrets_storage_v1.py
    """

    def fetch_one(self, *, query: str, parameters: Mapping[str, Any]) -> Mapping[str, Any] | None:
        """
        Run one statement in its own transaction and return its first row.

        Args:
            query: SQL text with `%(name)s` placeholders.
            parameters: Named bind values.
        Returns:
            Mapping[str, Any] | None: First row keyed by column name, or `None`.
        Assumptions:
            Writes report their outcome through `RETURNING`.
        Raises:
            Exception: Driver errors from the implementation.
        Side Effects:
            Executes one SQL statement.
        """
        ...


class PsycopgSecretsPostgresGateway(SecretsPostgresGateway):
    """
    PsycopgSecretsPostgresGateway — psycopg 3 gateway opening one connection per statement.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - apps/api/wiring/modules/secrets.py
    """

    def __init__(self, *, dsn: str, connect_timeout_s: int = 5) -> None:
        """
        Store DSN and connect timeout for later statements.

        Args:
            dsn: PostgreSQL URL or libpq conninfo.
            connect_timeout_s: Seconds to wait for a connection.
        Returns:
            None.
        Assumptions:
            No connection is opened until the first statement.
        Raises:
            ValueError: If DSN is blank or timeout is not positive.
        Side Effects:
            None.
        """
        if not dsn.strip():
            raise ValueError("PsycopgSecretsPostgresGateway requires non-empty dsn")
        if connect_timeout_s <= 0:
            raise ValueError("PsycopgSecretsPostgresGateway requires connect_timeout_s > 0")
        self._dsn = dsn.strip()
        self._connect_timeout_s = connect_timeout_s

    def fetch_one(self, *, query: str, parameters: Mapping[str, Any]) -> Mapping[str, Any] | None:
        # leaving the connection block commits on success and rolls back on error
        with psycopg.connect(
            self._dsn,
            connect_timeout=self._connect_timeout_s,
            row_factory=cast(Any, dict_row),
        ) as connection:
            row = connection.execute(cast(Any, query), parameters).fetchone()
        return None if row is None else dict(row)
