from __future__ import annotations

import base64

import pytest

from secretshare.contexts.secrets.adapters.outbound import AesGcmEnvelopeSecretCipher

_TEST_KEK_B64 = "c2VjcmV0c2hhcmUtdGVzdC1zZWNyZXRzLWtlay0wMDE="
_OTHER_KEK_B64 = base64.b64encode(b"o" * 32).decode("ascii")


def test_envelope_cipher_roundtrip_does_not_expose_plaintext() -> None:
    """
    Verify encrypted triple decrypts back and none of its fields contains plaintext.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Test KEK decodes to 32 bytes.
    Raises:
        AssertionError: If roundtrip fails or plaintext leaks into outputs.
    Side Effects:
        None.
    """
    cipher = AesGcmEnvelopeSecretCipher(kek_b64=_TEST_KEK_B64)
    plaintext = "  SuperSECRET with spaces  "

    encrypted = cipher.encrypt(plaintext)

    assert len(base64.b64decode(encrypted.iv)) == 12
    for field_value in (encrypted.iv, encrypted.secret_key, encrypted.secret):
        assert plaintext.strip() not in field_value
        assert plaintext.strip() not in base64.b64decode(field_value).decode("latin-1")
    assert (
        cipher.decrypt(
            secret=encrypted.secret,
            iv=encrypted.iv,
            secret_key=encrypted.secret_key,
        )
        == plaintext
    )


def test_envelope_cipher_uses_fresh_iv_and_key_per_call() -> None:
    cipher = AesGcmEnvelopeSecretCipher(kek_b64=_TEST_KEK_B64)

    first = cipher.encrypt("same")
    second = cipher.encrypt("same")

    assert first.iv != second.iv
    assert first.secret_key != second.secret_key
    assert first.secret != second.secret


def test_envelope_cipher_rejects_tampered_ciphertext() -> None:
    """
    Verify AES-GCM authentication rejects a flipped ciphertext byte.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Tampering is detected by the GCM tag.
    Raises:
        AssertionError: If tampered ciphertext decrypts.
    Side Effects:
        None.
    """
    cipher = AesGcmEnvelopeSecretCipher(kek_b64=_TEST_KEK_B64)
    encrypted = cipher.encrypt("payload")
    raw = bytearray(base64.b64decode(encrypted.secret))
    raw[0] ^= 0x01
    tampered = base64.b64encode(bytes(raw)).decode("ascii")

    with pytest.raises(ValueError, match="authentication failed"):
        cipher.decrypt(secret=tampered, iv=encrypted.iv, secret_key=encrypted.secret_key)


def test_envelope_cipher_rejects_decrypt_under_different_kek() -> None:
    encrypted = AesGcmEnvelopeSecretCipher(kek_b64=_TEST_KEK_B64).encrypt("payload")
    other_cipher = AesGcmEnvelopeSecretCipher(kek_b64=_OTHER_KEK_B64)

    with pytest.raises(ValueError, match="authentication failed"):
        other_cipher.decrypt(
            secret=encrypted.secret,
            iv=encrypted.iv,
            secret_key=encrypted.secret_key,
        )


@pytest.mark.parametrize(
    ("kek_b64", "message"),
    [
        ("   ", "non-empty kek_b64"),
        ("not-base64!!", "must be valid base64"),
        (base64.b64encode(b"short").decode("ascii"), "16, 24, or 32 bytes"),
    ],
)
def test_envelope_cipher_rejects_invalid_kek(kek_b64: str, message: str) -> None:
    """
    Verify constructor fails fast on blank, malformed, or wrong-length KEK.

    Args:
        kek_b64: Invalid KEK candidate.
        message: Expected error fragment.
    Returns:
        None.
    Assumptions:
        None.
    Raises:
        AssertionError: If invalid KEK is accepted.
    Side Effects:
        None.
    """
    with pytest.raises(ValueError, match=message):
        AesGcmEnvelopeSecretCipher(kek_b64=kek_b64)


def test_envelope_cipher_rejects_non_string_plaintext() -> None:
    cipher = AesGcmEnvelopeSecretCipher(kek_b64=_TEST_KEK_B64)

    with pytest.raises(ValueError, match="must be a string"):
        cipher.encrypt(b"bytes")  # type: ignore[arg-type]


def test_envelope_cipher_rejects_truncated_key_blob() -> None:
    cipher = AesGcmEnvelopeSecretCipher(kek_b64=_TEST_KEK_B64)
    encrypted = cipher.encrypt("payload")
    truncated = base64.b64encode(base64.b64decode(encrypted.secret_key)[:-1]).decode("ascii")

    with pytest.raises(ValueError, match="truncated"):
        cipher.decrypt(secret=encrypted.secret, iv=encrypted.iv, secret_key=truncated)
