from .aes_gcm_envelope_secret_cipher import AesGcmEnvelopeSecretCipher

__all__ = ["AesGcmEnvelopeSecretCipher"]
