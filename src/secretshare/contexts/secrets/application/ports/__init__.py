from .clock import SecretsClock
from .secret_cipher import EncryptedSecret, SecretCipher
from .secret_id_generator import SecretIdGenerator
from .secret_repository import SecretRepository

__all__ = [
    "EncryptedSecret",
    "SecretCipher",
    "SecretIdGenerator",
    "SecretRepository",
    "SecretsClock",
]
