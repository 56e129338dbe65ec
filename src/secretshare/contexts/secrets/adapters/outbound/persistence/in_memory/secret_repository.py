from __future__ import annotations

from secretshare.contexts.secrets.application.ports.secret_repository import SecretRepository
from secretshare.contexts.secrets.domain.entities import Secret


class InMemorySecretRepository(SecretRepository):
    """
    InMemorySecretRepository — deterministic in-memory secrets storage.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/ports/secret_repository.py
      - src/secretshare/contexts/secrets/adapters/outbound/persistence/postgres/
        secret_repository.py
      - tests/unit/contexts/secrets/application/test_save_secret_use_case.py
    """

    def __init__(self) -> None:
        """
        Initialize isolated in-memory rows map keyed by secret id.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Repository instance is process-local and deterministic for tests.
        Raises:
            None.
        Side Effects:
            None.
        """
        self._rows: dict[str, Secret] = {}

    def find_by_id(self, secret_id: str) -> Secret | None:
        return self._rows.get(secret_id)

    def save(self, secret: Secret) -> None:
        """
        Store secret snapshot under its id, replacing any previous row.

        Args:
            secret: Secret entity to store.
        Returns:
            None.
        Assumptions:
            Upsert semantics; collision checks belong to the save use-case.
        Raises:
            None.
        Side Effects:
            Mutates in-memory rows map.
        """
        self._rows[secret.id] = secret

    def list_all(self) -> tuple[Secret, ...]:
        """
        Return stored rows sorted by `created_at ASC, id ASC`.

        Args:
            None.
        Returns:
            tuple[Secret, ...]: Sorted stored rows.
        Assumptions:
            Inspection helper for tests; not part of the `SecretRepository` port, and
            no application code calls it.
        Raises:
            None.
        Side Effects:
            None.
        """
        rows = list(self._rows.values())
        rows.sort(key=lambda item: (item.created_at, item.id))
        return tuple(rows)
