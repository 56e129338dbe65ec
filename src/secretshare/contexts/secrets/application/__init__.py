from .ports import (
    EncryptedSecret,
    SecretCipher,
    SecretIdGenerator,
    SecretRepository,
    SecretsClock,
)
from .use_cases import SaveSecretRequest, SaveSecretUseCase

__all__ = [
    "EncryptedSecret",
    "SaveSecretRequest",
    "SaveSecretUseCase",
    "SecretCipher",
    "SecretIdGenerator",
    "SecretRepository",
    "SecretsClock",
]
