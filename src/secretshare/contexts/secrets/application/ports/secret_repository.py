from __future__ import annotations

from typing import Protocol

from secretshare.contexts.secrets.domain.entities import Secret


class SecretRepository(Protocol):
    """
    SecretRepository — storage port for `Secret` snapshots.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
      - src/secretshare/contexts/secrets/adapters/outbound/persistence/in_memory/
        secret_repository.py
      - src/secretshare/contexts/secrets/adapters/outbound/persistence/postgres/
        secret_repository.py
    """

    def find_by_id(self, secret_id: str) -> Secret | None:
        """
        Find stored secret by identifier.

        Args:
            secret_id: Secret identifier.
        Returns:
            Secret | None: Stored snapshot or `None` when absent.
        Assumptions:
            Expired records may still be returned until the store evicts them.
        Raises:
            Exception: Storage/driver exceptions from implementation.
        Side Effects:
            Reads storage.
        """
        ...

    def save(self, secret: Secret) -> None:
        """
        Persist one fully-formed secret snapshot.

        Args:
            secret: Secret entity to store.
        Returns:
            None.
        Assumptions:
            Adapters with atomic inserts report a concurrent duplicate id as conflict.
        Raises:
            SecretAlreadyExistsError: If adapter detects duplicate id on insert.
            Exception: Storage/driver exceptions from implementation.
        Side Effects:
            Writes one record in storage.
        """
        ...
