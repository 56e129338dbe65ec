"""
Composition helpers for secrets API module.

Docs: docs/architecture/secrets/secrets-save-path-v1.md
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping

from fastapi import APIRouter
from redis import Redis

from apps.api.routes import build_secrets_router as build_secrets_api_router
from secretshare.contexts.secrets.adapters.outbound import (
    AesGcmEnvelopeSecretCipher,
    InMemorySecretRepository,
    PostgresSecretRepository,
    PsycopgSecretsPostgresGateway,
    RedisSecretRepository,
    SystemSecretsClock,
    TokenSecretIdGenerator,
)
from secretshare.contexts.secrets.application import SecretRepository
from secretshare.contexts.secrets.application.use_cases import SaveSecretUseCase
from secretshare.platform.config import (
    SecretsRuntimeConfig,
    load_secrets_runtime_config,
    resolve_env_name,
)

log = logging.getLogger(__name__)

_FAIL_FAST_KEY = "SECRETSHARE_FAIL_FAST"
_SECRETS_KEK_B64_KEY = "SECRETS_KEK_B64"
_SECRETS_PG_DSN_KEY = "SECRETS_PG_DSN"
_SECRETS_REDIS_URL_KEY = "SECRETS_REDIS_URL"
_DEV_SECRETS_KEK_B64 = "c2VjcmV0c2hhcmUtZGV2LXNlY3JldHMta2VrLTAwMDE="


@dataclass(frozen=True, slots=True)
class SecretsRuntimeSettings:
    """
    SecretsRuntimeSettings — runtime policy for secrets v1 wiring.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - apps/api/wiring/modules/secrets.py
      - apps/api/main/app.py
      - src/secretshare/platform/config/secrets_runtime.py
    """

    env_name: str
    fail_fast: bool
    kek_b64: str
    postgres_dsn: str
    redis_url: str
    config: SecretsRuntimeConfig

    def __post_init__(self) -> None:
        """
        Validate secrets runtime settings invariants.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Values are normalized by resolver before dataclass construction.
        Raises:
            ValueError: If one of invariants is violated.
        Side Effects:
            None.
        """
        if not self.kek_b64:
            raise ValueError("SecretsRuntimeSettings.kek_b64 must be non-empty")
        if self.fail_fast and not (self.postgres_dsn or self.redis_url):
            raise ValueError(
                f"{_SECRETS_PG_DSN_KEY} or {_SECRETS_REDIS_URL_KEY} must be set "
                f"when {_FAIL_FAST_KEY}=true"
            )


@dataclass(frozen=True, slots=True)
class SecretsApiModule:
    """
    SecretsApiModule — wired secrets router plus the use-case and storage behind it.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - apps/api/main/app.py
      - apps/api/routes/secrets.py
    """

    router: APIRouter
    save_use_case: SaveSecretUseCase
    repository: SecretRepository
    settings: SecretsRuntimeSettings


def build_secrets_api_module(*, environ: Mapping[str, str]) -> SecretsApiModule:
    """
    Build fully wired secrets API module from environment settings.

    Docs: docs/architecture/secrets/secrets-save-path-v1.md
    Related: apps.api.routes.secrets,
      secretshare.contexts.secrets.adapters.outbound,
      apps.api.main.app

    Args:
        environ: Runtime environment mapping.
    Returns:
        SecretsApiModule: Router, use-case, repository, and resolved settings.
    Assumptions:
        Fail-fast policy and secrets are resolved by `_resolve_secrets_runtime_settings`.
    Raises:
        ValueError: If fail-fast settings require missing values or values are invalid.
    Side Effects:
        Reads secrets YAML config when present.
    """
    settings = _resolve_secrets_runtime_settings(environ=environ)
    repository = _build_secret_repository(settings=settings)
    save_use_case = SaveSecretUseCase(
        id_generator=TokenSecretIdGenerator(num_bytes=settings.config.id_num_bytes),
        secret_repository=repository,
        cipher=AesGcmEnvelopeSecretCipher(kek_b64=settings.kek_b64),
        clock=SystemSecretsClock(),
    )
    router = build_secrets_api_router(
        save_use_case=save_use_case,
        max_expire_minutes=settings.config.max_expire_minutes,
    )
    log.info(
        "secrets module wired: env=%s storage=%s",
        settings.env_name,
        type(repository).__name__,
    )
    return SecretsApiModule(
        router=router,
        save_use_case=save_use_case,
        repository=repository,
        settings=settings,
    )


def _build_secret_repository(*, settings: SecretsRuntimeSettings) -> SecretRepository:
    """
    Build secret repository adapter based on runtime storage settings.

    Args:
        settings: Resolved runtime settings.
    Returns:
        SecretRepository: Postgres, Redis, or in-memory adapter.
    Assumptions:
        Postgres has priority over Redis; in-memory is acceptable for local runs.
    Raises:
        ValueError: If DSN or URL is malformed for client construction.
    Side Effects:
        None.
    """
    if settings.postgres_dsn:
        gateway = PsycopgSecretsPostgresGateway(dsn=settings.postgres_dsn)
        return PostgresSecretRepository(gateway=gateway)
    if settings.redis_url:
        return RedisSecretRepository(
            redis_client=Redis.from_url(settings.redis_url),
            key_prefix=settings.config.redis_key_prefix,
        )
    return InMemorySecretRepository()


def _resolve_secrets_runtime_settings(*, environ: Mapping[str, str]) -> SecretsRuntimeSettings:
    """
    Resolve secrets runtime settings with fail-fast policy and defaults.

    Args:
        environ: Runtime environment mapping.
    Returns:
        SecretsRuntimeSettings: Validated normalized settings.
    Assumptions:
        Missing `SECRETSHARE_ENV` defaults to `dev`.
    Raises:
        ValueError: If env values are invalid or fail-fast policy requires missing values.
    Side Effects:
        Reads secrets YAML config when present.
    """
    env_name = resolve_env_name(environ=environ)
    fail_fast = _resolve_fail_fast(environ=environ, env_name=env_name)

    kek_b64 = environ.get(_SECRETS_KEK_B64_KEY, "").strip()
    if fail_fast and not kek_b64:
        raise ValueError(f"{_SECRETS_KEK_B64_KEY} must be set when {_FAIL_FAST_KEY}=true")

    return SecretsRuntimeSettings(
        env_name=env_name,
        fail_fast=fail_fast,
        kek_b64=kek_b64 or _DEV_SECRETS_KEK_B64,
        postgres_dsn=environ.get(_SECRETS_PG_DSN_KEY, "").strip(),
        redis_url=environ.get(_SECRETS_REDIS_URL_KEY, "").strip(),
        config=load_secrets_runtime_config(environ=environ),
    )


def _resolve_fail_fast(*, environ: Mapping[str, str], env_name: str) -> bool:
    """
    Resolve fail-fast policy for secrets startup validation.

    Args:
        environ: Runtime environment mapping.
        env_name: Normalized environment name.
    Returns:
        bool: Effective fail-fast flag.
    Assumptions:
        Default is enabled for `prod` and disabled for `dev`/`test`.
    Raises:
        ValueError: If override value is not parseable as boolean.
    Side Effects:
        None.
    """
    raw_override = environ.get(_FAIL_FAST_KEY, "").strip()
    if not raw_override:
        return env_name == "prod"
    return _parse_bool(raw_value=raw_override, key=_FAIL_FAST_KEY)


def _parse_bool(*, raw_value: str, key: str) -> bool:
    """
    Parse strict boolean env value from known textual literals.

    Args:
        raw_value: Raw env string value.
        key: Env key used in error messages.
    Returns:
        bool: Parsed boolean value.
    Assumptions:
        Accepted true values: `1,true,yes,on`; false values: `0,false,no,off`.
    Raises:
        ValueError: If value is not recognized.
    Side Effects:
        None.
    """
    normalized = raw_value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(
        f"{key} must be a boolean literal (1/0/true/false/yes/no/on/off), got {raw_value!r}"
    )
