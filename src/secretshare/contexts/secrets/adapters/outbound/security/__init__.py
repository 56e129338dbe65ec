from .aes_gcm import AesGcmEnvelopeSecretCipher
from .ids import TokenSecretIdGenerator

__all__ = [
    "AesGcmEnvelopeSecretCipher",
    "TokenSecretIdGenerator",
]
