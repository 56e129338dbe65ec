from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi import FastAPI
from fastapi.testclient import TestClient

from apps.api.common import register_api_error_handlers
from apps.api.routes import build_secrets_router
from secretshare.contexts.secrets.adapters.outbound import (
    AesGcmEnvelopeSecretCipher,
    InMemorySecretRepository,
)
from secretshare.contexts.secrets.application import SecretIdGenerator, SecretsClock
from secretshare.contexts.secrets.application.use_cases import SaveSecretUseCase

_TEST_KEK_B64 = "c2VjcmV0c2hhcmUtdGVzdC1zZWNyZXRzLWtlay0wMDE="
_FIXED_NOW = datetime(2022, 6, 30, 20, 28, 10, 1000, tzinfo=timezone.utc)


class _FixedIdGenerator(SecretIdGenerator):
    """
    Id generator returning one configured id on every call.
    """

    def __init__(self, *, secret_id: str) -> None:
        self._secret_id = secret_id

    def generate(self) -> str:
        return self._secret_id


class _FixedClock(SecretsClock):
    """
    Deterministic UTC clock for secrets route tests.
    """

    def now(self) -> datetime:
        return _FIXED_NOW


def _build_client(
    *,
    max_expire_minutes: int = 43200,
) -> tuple[TestClient, InMemorySecretRepository, AesGcmEnvelopeSecretCipher]:
    """
    Build test client with secrets router wired on in-memory storage.

    Args:
        max_expire_minutes: API TTL upper bound.
    Returns:
        tuple[TestClient, InMemorySecretRepository, AesGcmEnvelopeSecretCipher]:
            Client plus storage and cipher used by the app.
    Assumptions:
        Id generator always returns `111133333`.
    Raises:
        None.
    Side Effects:
        None.
    """
    repository = InMemorySecretRepository()
    cipher = AesGcmEnvelopeSecretCipher(kek_b64=_TEST_KEK_B64)
    use_case = SaveSecretUseCase(
        id_generator=_FixedIdGenerator(secret_id="111133333"),
        secret_repository=repository,
        cipher=cipher,
        clock=_FixedClock(),
    )
    app = FastAPI()
    register_api_error_handlers(app=app)
    app.include_router(
        build_secrets_router(save_use_case=use_case, max_expire_minutes=max_expire_minutes)
    )
    return TestClient(app), repository, cipher


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_post_secret_returns_created_projection_without_ciphertext() -> None:
    """
    Verify `POST /secrets` stores encrypted secret and returns id, token, and timestamps only.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Stored ciphertext decrypts back to request payload.
    Raises:
        AssertionError: If status, response shape, or stored record differ.
    Side Effects:
        None.
    """
    client, repository, cipher = _build_client()

    response = client.post(
        "/secrets",
        json={"payload": "SuperSECRET", "expireAt": 6000, "organisation": "*"},
    )

    assert response.status_code == 201
    body = response.json()
    assert set(body) == {"id", "token", "expireAt", "createdAt", "organisation"}
    assert body["id"] == "111133333"
    assert body["organisation"] == "*"
    assert _parse_datetime(body["createdAt"]) == _FIXED_NOW
    assert _parse_datetime(body["expireAt"]) == _FIXED_NOW + timedelta(minutes=6000)
    assert "SuperSECRET" not in response.text

    stored = repository.find_by_id("111133333")
    assert stored is not None
    assert stored.token == body["token"]
    assert cipher.decrypt(secret=stored.secret, iv=stored.iv, secret_key=stored.token) == (
        "SuperSECRET"
    )


def test_post_secret_without_organisation_returns_validation_error() -> None:
    """
    Verify missing organisation yields canonical 422 payload and nothing is stored.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Organisation presence is checked by the use-case, not the request schema.
    Raises:
        AssertionError: If status or payload differ.
    Side Effects:
        None.
    """
    client, repository, _ = _build_client()

    response = client.post("/secrets", json={"payload": "SuperSECRET", "expireAt": 6000})

    assert response.status_code == 422
    assert response.json() == {
        "error": {
            "code": "validation_error",
            "message": "Organization must be provided",
            "details": {},
        }
    }
    assert repository.list_all() == ()


def test_post_secret_with_colliding_id_returns_conflict() -> None:
    """
    Verify second save under the same generated id returns canonical 409 payload.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Id generator is deterministic.
    Raises:
        AssertionError: If second request is not rejected as conflict.
    Side Effects:
        None.
    """
    client, repository, _ = _build_client()
    body = {"payload": "SuperSECRET", "expireAt": 5, "organisation": "acme"}

    first = client.post("/secrets", json=body)
    second = client.post("/secrets", json=body)

    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json() == {
        "error": {
            "code": "conflict",
            "message": "Secret id already exists",
            "details": {},
        }
    }
    assert len(repository.list_all()) == 1


def test_post_secret_rejects_malformed_body_with_sorted_errors() -> None:
    """
    Verify request schema errors use canonical validation payload.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        `expireAt` is a strict integer and `payload` is required.
    Raises:
        AssertionError: If validation payload differs.
    Side Effects:
        None.
    """
    client, _, _ = _build_client()

    response = client.post("/secrets", json={"expireAt": "10", "organisation": "acme"})

    assert response.status_code == 422
    payload = response.json()
    assert payload["error"]["code"] == "validation_error"
    assert payload["error"]["message"] == "Validation failed"
    errors = payload["error"]["details"]["errors"]
    assert [(item["path"], item["code"]) for item in errors] == [
        ("body.expireAt", "int_type"),
        ("body.payload", "required"),
    ]


def test_post_secret_rejects_negative_ttl() -> None:
    client, _, _ = _build_client()

    response = client.post(
        "/secrets",
        json={"payload": "x", "expireAt": -1, "organisation": "acme"},
    )

    assert response.status_code == 422
    errors = response.json()["error"]["details"]["errors"]
    assert errors[0]["path"] == "body.expireAt"


def test_post_secret_rejects_ttl_above_configured_maximum() -> None:
    """
    Verify API TTL policy rejects `expireAt` above configured maximum before saving.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Maximum is an API policy; the use-case accepts any non-negative TTL.
    Raises:
        AssertionError: If long TTL is accepted or payload differs.
    Side Effects:
        None.
    """
    client, repository, _ = _build_client(max_expire_minutes=60)

    response = client.post(
        "/secrets",
        json={"payload": "x", "expireAt": 61, "organisation": "acme"},
    )

    assert response.status_code == 422
    assert response.json() == {
        "error": {
            "code": "validation_error",
            "message": "Expiration must not exceed 60 minutes",
            "details": {"max_expire_minutes": 60},
        }
    }
    assert repository.list_all() == ()
