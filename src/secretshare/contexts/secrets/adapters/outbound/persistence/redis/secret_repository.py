from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

from redis import Redis

from secretshare.contexts.secrets.application.ports.secret_repository import SecretRepository
from secretshare.contexts.secrets.domain.entities import Secret
from secretshare.contexts.secrets.domain.errors import SecretAlreadyExistsError

log = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_SCHEMA_VERSION_V1 = 1


class RedisSecretRepository(SecretRepository):
    """
    RedisSecretRepository — Redis adapter storing one self-expiring JSON document per secret.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/ports/secret_repository.py
      - src/secretshare/platform/config/secrets_runtime.py
      - apps/api/wiring/modules/secrets.py
    """

    def __init__(self, *, redis_client: Redis, key_prefix: str) -> None:
        """
        Initialize repository with Redis client and key namespace.

        Args:
            redis_client: Connected Redis client.
            key_prefix: Prefix prepended to every secret id.
        Returns:
            None.
        Assumptions:
            Prefix isolates secrets keys from other data in the same Redis db.
        Raises:
            ValueError: If dependencies are invalid.
        Side Effects:
            None.
        """
        if redis_client is None:  # type: ignore[truthy-bool]
            raise ValueError("RedisSecretRepository requires redis_client")
        normalized_prefix = key_prefix.strip()
        if not normalized_prefix:
            raise ValueError("RedisSecretRepository requires non-empty key_prefix")
        self._redis = redis_client
        self._key_prefix = normalized_prefix

    def find_by_id(self, secret_id: str) -> Secret | None:
        """
        Load one secret document by id.

        Args:
            secret_id: Secret identifier.
        Returns:
            Secret | None: Mapped secret or `None` when key is absent or expired.
        Assumptions:
            Redis evicts documents at `expire_at`.
        Raises:
            ValueError: If stored document cannot be mapped.
            redis.RedisError: When Redis command fails.
        Side Effects:
            Executes one Redis GET command.
        """
        raw = self._redis.get(self._key(secret_id))
        if raw is None:
            return None
        return _map_secret_document(raw=raw)

    def save(self, secret: Secret) -> None:
        """
        Store secret document with `SET NX PXAT`, reporting a lost race as conflict.

        Args:
            secret: Secret entity to store.
        Returns:
            None.
        Assumptions:
            `expire_at` in the past makes Redis drop the key immediately.
        Raises:
            SecretAlreadyExistsError: If key with same id already exists.
            redis.RedisError: When Redis command fails.
        Side Effects:
            Executes one Redis SET command.
        """
        stored = self._redis.set(
            self._key(secret.id),
            _to_secret_document(secret=secret),
            nx=True,
            pxat=_to_epoch_milliseconds(value=secret.expire_at),
        )
        if not stored:
            log.warning("redis secret insert lost NX race: id=%s", secret.id)
            raise SecretAlreadyExistsError(secret_id=secret.id)

    def _key(self, secret_id: str) -> str:
        return f"{self._key_prefix}{secret_id}"



def _to_secret_document(*, secret: Secret) -> str:
    """
    Serialize secret entity into deterministic JSON document.

    Args:
        secret: Secret entity.
    Returns:
        str: JSON text with sorted keys.
    Assumptions:
        Datetimes are timezone-aware and serialized in ISO-8601.
    Raises:
        None.
    Side Effects:
        None.
    """
    payload = {
        "schema_version": _SCHEMA_VERSION_V1,
        "id": secret.id,
        "secret": secret.secret,
        "token": secret.token,
        "iv": secret.iv,
        "expire_at": secret.expire_at.isoformat(),
        "created_at": secret.created_at.isoformat(),
        "updated_at": secret.updated_at.isoformat(),
        "organisation": secret.organisation,
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":"))


def _map_secret_document(*, raw: bytes | str) -> Secret:
    """
    Map stored JSON document into immutable domain `Secret` entity.

    Args:
        raw: Raw Redis value.
    Returns:
        Secret: Domain secret entity.
    Assumptions:
        Document was written by `_to_secret_document`.
    Raises:
        ValueError: If document is malformed or uses unknown schema version.
    Side Effects:
        None.
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)
        payload: Mapping[str, Any] = json.loads(text)
        if payload.get("schema_version") != _SCHEMA_VERSION_V1:
            raise ValueError("unsupported secret document schema_version")
        return Secret(
            id=str(payload["id"]),
            secret=str(payload["secret"]),
            token=str(payload["token"]),
            iv=str(payload["iv"]),
            expire_at=datetime.fromisoformat(payload["expire_at"]),
            created_at=datetime.fromisoformat(payload["created_at"]),
            updated_at=datetime.fromisoformat(payload["updated_at"]),
            organisation=str(payload["organisation"]),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as error:
        raise ValueError("RedisSecretRepository cannot map secret document") from error


def _to_epoch_milliseconds(*, value: datetime) -> int:
    return (value - _EPOCH) // timedelta(milliseconds=1)
