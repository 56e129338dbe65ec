from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class EncryptedSecret:
    """
    EncryptedSecret — cipher output needed to persist and later decrypt one payload.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/ports/secret_cipher.py
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
    """

    iv: str
    secret_key: str
    secret: str


class SecretCipher(Protocol):
    """
    SecretCipher — encryption port for secret payloads.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
      - src/secretshare/contexts/secrets/adapters/outbound/security/aes_gcm/
        aes_gcm_envelope_secret_cipher.py
    """

    def encrypt(self, plaintext: str) -> EncryptedSecret:
        """
        Encrypt plaintext payload into ciphertext, IV, and key material.

        Args:
            plaintext: Raw secret payload.
        Returns:
            EncryptedSecret: Ciphertext with the IV and key material required to decrypt it.
        Assumptions:
            Plaintext is kept in-memory only and never logged.
        Raises:
            ValueError: If input is invalid or encryption fails.
        Side Effects:
            None.
        """
        ...
