from __future__ import annotations

ORGANISATION_REQUIRED_MESSAGE = "Organization must be provided"
EXPIRATION_INVALID_MESSAGE = "Expiration must be a non-negative integer number of minutes"
SECRET_ID_EXISTS_MESSAGE = "Secret id already exists"


class SecretDomainError(ValueError):
    """
    Base deterministic domain error for the secrets bounded context.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/domain/entities/secret.py
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
      - src/secretshare/contexts/secrets/application/use_cases/errors.py
    """


class SecretValidationError(SecretDomainError):
    """
    Raised when a save request or `Secret` snapshot violates entity invariants.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/domain/entities/secret.py
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
    """

    def __init__(self, message: str = ORGANISATION_REQUIRED_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class SecretAlreadyExistsError(SecretDomainError):
    """
    Raised when a generated secret id already exists in storage.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
      - src/secretshare/contexts/secrets/adapters/outbound/persistence/postgres/
        secret_repository.py
      - src/secretshare/contexts/secrets/adapters/outbound/persistence/redis/
        secret_repository.py
    """

    def __init__(self, *, secret_id: str | None = None) -> None:
        super().__init__(SECRET_ID_EXISTS_MESSAGE)
        self.message = SECRET_ID_EXISTS_MESSAGE
        self.secret_id = secret_id
