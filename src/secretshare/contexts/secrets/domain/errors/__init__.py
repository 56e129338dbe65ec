from .secret_errors import (
    EXPIRATION_INVALID_MESSAGE,
    ORGANISATION_REQUIRED_MESSAGE,
    SECRET_ID_EXISTS_MESSAGE,
    SecretAlreadyExistsError,
    SecretDomainError,
    SecretValidationError,
)

__all__ = [
    "EXPIRATION_INVALID_MESSAGE",
    "ORGANISATION_REQUIRED_MESSAGE",
    "SECRET_ID_EXISTS_MESSAGE",
    "SecretAlreadyExistsError",
    "SecretDomainError",
    "SecretValidationError",
]
