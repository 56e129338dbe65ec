from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from secretshare.contexts.secrets.domain.errors import SecretValidationError


@dataclass(frozen=True, slots=True)
class Secret:
    """
    Secret — immutable snapshot of one stored secret: ciphertext plus access metadata.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
      - src/secretshare/contexts/secrets/application/ports/secret_repository.py
      - alembic/versions/20221001_0001_secrets_storage_v1.py
    """

    id: str
    secret: str
    token: str
    iv: str
    expire_at: datetime
    created_at: datetime
    updated_at: datetime
    organisation: str | None = None

    def __post_init__(self) -> None:
        """
        Validate mandatory organisation scope.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Remaining fields are computed by the save use-case and trusted as supplied.
            A missing organisation is `None`, including when the field is omitted.
        Raises:
            SecretValidationError: If organisation is missing, empty, or whitespace-only.
        Side Effects:
            None.
        """
        if not is_organisation_provided(organisation=self.organisation):
            raise SecretValidationError()


def is_organisation_provided(*, organisation: object) -> bool:
    """
    Check that organisation scope is a non-blank string.

    Args:
        organisation: Raw organisation value.
    Returns:
        bool: `True` when organisation is a non-empty string after stripping.
    Assumptions:
        Wildcard scope `*` is a valid organisation.
    Raises:
        None.
    Side Effects:
        None.
    """
    return isinstance(organisation, str) and bool(organisation.strip())
