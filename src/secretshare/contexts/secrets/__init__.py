from .application import (
    EncryptedSecret,
    SaveSecretRequest,
    SaveSecretUseCase,
    SecretCipher,
    SecretIdGenerator,
    SecretRepository,
    SecretsClock,
)
from .domain import Secret, SecretAlreadyExistsError, SecretDomainError, SecretValidationError

__all__ = [
    "EncryptedSecret",
    "SaveSecretRequest",
    "SaveSecretUseCase",
    "Secret",
    "SecretAlreadyExistsError",
    "SecretCipher",
    "SecretDomainError",
    "SecretIdGenerator",
    "SecretRepository",
    "SecretValidationError",
    "SecretsClock",
]
