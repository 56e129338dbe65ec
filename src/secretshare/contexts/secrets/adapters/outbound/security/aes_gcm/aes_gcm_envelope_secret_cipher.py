from __future__ import annotations

import base64
import binascii
import os
import struct

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from secretshare.contexts.secrets.application.ports.secret_cipher import (
    EncryptedSecret,
    SecretCipher,
)

_KEY_BLOB_VERSION_V1 = 1
_NONCE_LENGTH = 12
_DEK_LENGTH = 32
_GCM_TAG_LENGTH = 16
_KEY_HEADER_STRUCT = struct.Struct(">BB")
_DEK_WRAP_AAD = b"secretshare.secrets.v1|dek"
_SUPPORTED_KEK_LENGTHS = {16, 24, 32}


class AesGcmEnvelopeSecretCipher(SecretCipher):
    """
    AesGcmEnvelopeSecretCipher — AES-GCM envelope cipher for shared secret payloads.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/ports/secret_cipher.py
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
      - apps/api/wiring/modules/secrets.py
    """

    def __init__(self, *, kek_b64: str) -> None:
        """
        Initialize envelope cipher from base64 KEK (`SECRETS_KEK_B64`).

        Args:
            kek_b64: Base64-encoded KEK bytes.
        Returns:
            None.
        Assumptions:
            KEK length must be valid AES key size (16/24/32 bytes).
        Raises:
            ValueError: If KEK is blank, malformed, or unsupported length.
        Side Effects:
            None.
        """
        normalized_kek_b64 = kek_b64.strip()
        if not normalized_kek_b64:
            raise ValueError("AesGcmEnvelopeSecretCipher requires non-empty kek_b64")
        try:
            kek_bytes = base64.b64decode(normalized_kek_b64, validate=True)
        except binascii.Error as error:
            raise ValueError("SECRETS_KEK_B64 must be valid base64") from error
        if len(kek_bytes) not in _SUPPORTED_KEK_LENGTHS:
            raise ValueError("SECRETS_KEK_B64 must decode to 16, 24, or 32 bytes for AES-GCM")
        self._kek = kek_bytes

    def encrypt(self, plaintext: str) -> EncryptedSecret:
        """
        Seal plaintext under a fresh DEK and wrap the DEK with the KEK.

        Args:
            plaintext: Raw secret payload.
        Returns:
            EncryptedSecret: Base64 IV, base64 wrapped-DEK blob, and base64 ciphertext.
        Assumptions:
            Plaintext is never logged; whitespace is preserved as-is.
        Raises:
            ValueError: If plaintext is not a string.
        Side Effects:
            Uses OS CSPRNG for DEK and nonces.
        """
        if not isinstance(plaintext, str):
            raise ValueError("AesGcmEnvelopeSecretCipher plaintext must be a string")

        dek = os.urandom(_DEK_LENGTH)
        iv = os.urandom(_NONCE_LENGTH)
        ciphertext = AESGCM(dek).encrypt(iv, plaintext.encode("utf-8"), None)

        dek_nonce = os.urandom(_NONCE_LENGTH)
        wrapped_dek = AESGCM(self._kek).encrypt(dek_nonce, dek, _DEK_WRAP_AAD)
        header = _KEY_HEADER_STRUCT.pack(_KEY_BLOB_VERSION_V1, len(dek_nonce))
        key_blob = b"".join((header, dek_nonce, wrapped_dek))

        return EncryptedSecret(
            iv=_b64encode(iv),
            secret_key=_b64encode(key_blob),
            secret=_b64encode(ciphertext),
        )

    def decrypt(self, *, secret: str, iv: str, secret_key: str) -> str:
        """
        Unwrap DEK from key blob and open the sealed payload.

        Args:
            secret: Base64 ciphertext produced by `encrypt`.
            iv: Base64 IV produced by `encrypt`.
            secret_key: Base64 wrapped-DEK blob produced by `encrypt`.
        Returns:
            str: Decrypted plaintext payload.
        Assumptions:
            Decrypted value is used transiently by retrieval flows.
        Raises:
            ValueError: If any part is malformed or authentication fails.
        Side Effects:
            None.
        """
        ciphertext = _b64decode(value=secret, field_name="secret")
        iv_bytes = _b64decode(value=iv, field_name="iv")
        key_blob = _b64decode(value=secret_key, field_name="secret_key")
        if len(iv_bytes) != _NONCE_LENGTH:
            raise ValueError("Encrypted secret contains invalid IV length")
        if len(ciphertext) < _GCM_TAG_LENGTH:
            raise ValueError("Encrypted secret payload is truncated")

        dek_nonce, wrapped_dek = _parse_key_blob(blob=key_blob)
        try:
            dek = AESGCM(self._kek).decrypt(dek_nonce, wrapped_dek, _DEK_WRAP_AAD)
            plaintext = AESGCM(dek).decrypt(iv_bytes, ciphertext, None)
        except InvalidTag as error:
            raise ValueError("Encrypted secret authentication failed") from error

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as error:
            raise ValueError("Encrypted secret plaintext is not valid UTF-8") from error



def _parse_key_blob(*, blob: bytes) -> tuple[bytes, bytes]:
    """
    Parse versioned wrapped-DEK blob into nonce and wrapped key bytes.

    Args:
        blob: Decoded `secret_key` blob.
    Returns:
        tuple[bytes, bytes]: `(dek_nonce, wrapped_dek)` tuple.
    Assumptions:
        Header follows deterministic `_KEY_HEADER_STRUCT` binary layout.
    Raises:
        ValueError: If blob is too short, version is unknown, or payload is truncated.
    Side Effects:
        None.
    """
    if len(blob) < _KEY_HEADER_STRUCT.size:
        raise ValueError("Encrypted secret key blob is too short")
    version, dek_nonce_len = _KEY_HEADER_STRUCT.unpack_from(blob)
    if version != _KEY_BLOB_VERSION_V1:
        raise ValueError("Unsupported encrypted secret key blob version")
    if dek_nonce_len != _NONCE_LENGTH:
        raise ValueError("Encrypted secret key blob contains invalid nonce length")
    payload = blob[_KEY_HEADER_STRUCT.size :]
    if len(payload) != dek_nonce_len + _DEK_LENGTH + _GCM_TAG_LENGTH:
        raise ValueError("Encrypted secret key blob payload is truncated")
    return payload[:dek_nonce_len], payload[dek_nonce_len:]


def _b64encode(value: bytes) -> str:
    return base64.b64encode(value).decode("ascii")


def _b64decode(*, value: str, field_name: str) -> bytes:
    """
    Decode strict base64 field of an encrypted secret.

    Args:
        value: Base64 text.
        field_name: Field label for deterministic error messages.
    Returns:
        bytes: Decoded bytes.
    Assumptions:
        Fields are produced by `AesGcmEnvelopeSecretCipher.encrypt`.
    Raises:
        ValueError: If value is blank or not valid base64.
    Side Effects:
        None.
    """
    normalized = value.strip()
    if not normalized:
        raise ValueError(f"Encrypted secret {field_name} must be non-empty")
    try:
        return base64.b64decode(normalized, validate=True)
    except binascii.Error as error:
        raise ValueError(f"Encrypted secret {field_name} must be valid base64") from error
