from .entities import Secret
from .errors import SecretAlreadyExistsError, SecretDomainError, SecretValidationError

__all__ = [
    "Secret",
    "SecretAlreadyExistsError",
    "SecretDomainError",
    "SecretValidationError",
]
