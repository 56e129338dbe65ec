from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI

import apps.api.wiring as api_wiring
from apps.api.wiring.modules import SecretsApiModule, build_secrets_api_module
from secretshare.contexts.secrets.adapters.outbound import (
    InMemorySecretRepository,
    PostgresSecretRepository,
    RedisSecretRepository,
)

_TEST_KEK_B64 = "c2VjcmV0c2hhcmUtdGVzdC1zZWNyZXRzLWtlay0wMDE="


def _write_config(tmp_path: Path, *, max_expire_minutes: int = 90) -> Path:
    path = tmp_path / "secrets.yaml"
    path.write_text(
        "schema_version: 1\n"
        "secrets:\n"
        "  id_num_bytes: 12\n"
        f"  max_expire_minutes: {max_expire_minutes}\n"
        "  redis_key_prefix: \"wiring:secret:\"\n",
        encoding="utf-8",
    )
    return path


def test_build_secrets_api_module_uses_in_memory_storage_in_dev(tmp_path: Path) -> None:
    """
    Verify dev wiring falls back to in-memory storage and dev KEK without fail-fast.

    Args:
        tmp_path: Pytest temporary directory fixture.
    Returns:
        None.
    Assumptions:
        Dev environment disables fail-fast by default.
    Raises:
        AssertionError: If wiring picks another adapter or ignores YAML values.
    Side Effects:
        Writes temporary YAML file.
    """
    config_path = _write_config(tmp_path)

    module = build_secrets_api_module(
        environ={
            "SECRETSHARE_ENV": "dev",
            "SECRETSHARE_SECRETS_CONFIG": str(config_path),
        }
    )

    assert isinstance(module, SecretsApiModule)
    assert isinstance(module.repository, InMemorySecretRepository)
    assert module.settings.fail_fast is False
    assert module.settings.config.id_num_bytes == 12
    assert module.settings.config.max_expire_minutes == 90

    app = FastAPI()
    app.include_router(module.router)
    assert "/secrets" in app.openapi()["paths"]


def test_build_secrets_api_module_fail_fast_requires_kek(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path)

    with pytest.raises(ValueError, match="SECRETS_KEK_B64 must be set"):
        build_secrets_api_module(
            environ={
                "SECRETSHARE_ENV": "prod",
                "SECRETSHARE_SECRETS_CONFIG": str(config_path),
                "SECRETS_PG_DSN": "postgresql://secretshare@localhost/secretshare",
            }
        )


def test_build_secrets_api_module_fail_fast_requires_durable_storage(tmp_path: Path) -> None:
    """
    Verify fail-fast mode refuses to start on process-local storage.

    Args:
        tmp_path: Pytest temporary directory fixture.
    Returns:
        None.
    Assumptions:
        Fail-fast is forced on through `SECRETSHARE_FAIL_FAST`.
    Raises:
        AssertionError: If wiring succeeds without Postgres or Redis.
    Side Effects:
        Writes temporary YAML file.
    """
    config_path = _write_config(tmp_path)

    with pytest.raises(ValueError, match="SECRETS_PG_DSN or SECRETS_REDIS_URL must be set"):
        build_secrets_api_module(
            environ={
                "SECRETSHARE_ENV": "test",
                "SECRETSHARE_FAIL_FAST": "yes",
                "SECRETSHARE_SECRETS_CONFIG": str(config_path),
                "SECRETS_KEK_B64": _TEST_KEK_B64,
            }
        )


def test_build_secrets_api_module_prefers_postgres_over_redis(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path)

    module = build_secrets_api_module(
        environ={
            "SECRETSHARE_ENV": "prod",
            "SECRETSHARE_SECRETS_CONFIG": str(config_path),
            "SECRETS_KEK_B64": _TEST_KEK_B64,
            "SECRETS_PG_DSN": "postgresql://secretshare@localhost/secretshare",
            "SECRETS_REDIS_URL": "redis://localhost:6379/0",
        }
    )

    assert isinstance(module.repository, PostgresSecretRepository)


def test_build_secrets_api_module_uses_redis_when_only_redis_url_is_set(tmp_path: Path) -> None:
    """
    Verify Redis adapter is selected when Postgres DSN is absent.

    Args:
        tmp_path: Pytest temporary directory fixture.
    Returns:
        None.
    Assumptions:
        `Redis.from_url` does not connect until the first command.
    Raises:
        AssertionError: If another adapter is selected.
    Side Effects:
        Writes temporary YAML file.
    """
    config_path = _write_config(tmp_path)

    module = build_secrets_api_module(
        environ={
            "SECRETSHARE_ENV": "test",
            "SECRETSHARE_SECRETS_CONFIG": str(config_path),
            "SECRETS_KEK_B64": _TEST_KEK_B64,
            "SECRETS_REDIS_URL": "redis://localhost:6379/0",
        }
    )

    assert isinstance(module.repository, RedisSecretRepository)


def test_build_secrets_api_module_rejects_invalid_kek(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path)

    with pytest.raises(ValueError, match="16, 24, or 32 bytes"):
        build_secrets_api_module(
            environ={
                "SECRETSHARE_SECRETS_CONFIG": str(config_path),
                "SECRETS_KEK_B64": "c2hvcnQ=",
            }
        )


def test_build_secrets_api_module_rejects_unparseable_fail_fast_flag(tmp_path: Path) -> None:
    config_path = _write_config(tmp_path)

    with pytest.raises(ValueError, match="SECRETSHARE_FAIL_FAST must be a boolean literal"):
        build_secrets_api_module(
            environ={
                "SECRETSHARE_FAIL_FAST": "maybe",
                "SECRETSHARE_SECRETS_CONFIG": str(config_path),
            }
        )


def test_api_wiring_exposes_module_builder_only() -> None:
    """
    Verify the wiring package publishes one composition entrypoint used by `create_app`.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Routers are obtained from `SecretsApiModule.router`.
    Raises:
        AssertionError: If a second router builder is exported.
    Side Effects:
        None.
    """
    assert api_wiring.__all__ == ["build_secrets_api_module"]
    assert not hasattr(api_wiring, "build_secrets_router")
