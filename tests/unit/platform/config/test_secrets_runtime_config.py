from __future__ import annotations

from pathlib import Path

import pytest

from secretshare.platform.config import (
    SecretsRuntimeConfig,
    load_secrets_runtime_config,
    resolve_env_name,
)


def _write_yaml(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "secrets.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_secrets_runtime_config_reads_yaml_section(tmp_path: Path) -> None:
    """
    Verify YAML `secrets` section values are loaded when env overrides are absent.

    Args:
        tmp_path: Pytest temporary directory fixture.
    Returns:
        None.
    Assumptions:
        Explicit path is passed through `SECRETSHARE_SECRETS_CONFIG`.
    Raises:
        AssertionError: If loaded values differ from YAML.
    Side Effects:
        Writes temporary YAML file.
    """
    path = _write_yaml(
        tmp_path,
        "schema_version: 1\n"
        "secrets:\n"
        "  id_num_bytes: 24\n"
        "  max_expire_minutes: 120\n"
        "  redis_key_prefix: \"yaml:secret:\"\n",
    )

    config = load_secrets_runtime_config(environ={"SECRETSHARE_SECRETS_CONFIG": str(path)})

    assert config == SecretsRuntimeConfig(
        id_num_bytes=24,
        max_expire_minutes=120,
        redis_key_prefix="yaml:secret:",
    )


def test_load_secrets_runtime_config_env_overrides_yaml(tmp_path: Path) -> None:
    path = _write_yaml(tmp_path, "secrets:\n  max_expire_minutes: 120\n")

    config = load_secrets_runtime_config(
        environ={
            "SECRETSHARE_SECRETS_CONFIG": str(path),
            "SECRETS_MAX_EXPIRE_MINUTES": "15",
            "SECRETS_REDIS_KEY_PREFIX": "env:secret:",
        }
    )

    assert config.max_expire_minutes == 15
    assert config.redis_key_prefix == "env:secret:"
    assert config.id_num_bytes == 16


def test_load_secrets_runtime_config_uses_defaults_for_missing_env_file(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """
    Verify env-derived config path may be absent and defaults apply.

    Args:
        tmp_path: Pytest temporary directory fixture.
        monkeypatch: Pytest monkeypatch fixture.
    Returns:
        None.
    Assumptions:
        Working directory has no `configs/` tree.
    Raises:
        AssertionError: If defaults differ or missing file raises.
    Side Effects:
        Changes working directory for the test.
    """
    monkeypatch.chdir(tmp_path)

    config = load_secrets_runtime_config(environ={"SECRETSHARE_ENV": "test"})

    assert config == SecretsRuntimeConfig()
    assert config.max_expire_minutes == 43200


def test_load_secrets_runtime_config_requires_explicit_file_to_exist(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_secrets_runtime_config(
            environ={"SECRETSHARE_SECRETS_CONFIG": str(tmp_path / "missing.yaml")}
        )


@pytest.mark.parametrize(
    ("yaml_text", "environ", "message"),
    [
        ("secrets:\n  id_num_bytes: 4\n", {}, "id_num_bytes must be >= 8"),
        ("secrets:\n  max_expire_minutes: 0\n", {}, "max_expire_minutes must be > 0"),
        ("secrets:\n  max_expire_minutes: true\n", {}, "expected int"),
        ("secrets: [1, 2]\n", {}, "secrets section must be a mapping"),
        ("- 1\n", {}, "mapping at top-level"),
        ("secrets: {}\n", {"SECRETS_ID_NUM_BYTES": "many"}, "SECRETS_ID_NUM_BYTES must be int"),
    ],
)
def test_load_secrets_runtime_config_rejects_invalid_values(
    tmp_path: Path,
    yaml_text: str,
    environ: dict[str, str],
    message: str,
) -> None:
    """
    Verify loader fails fast on invalid YAML structure and values.

    Args:
        tmp_path: Pytest temporary directory fixture.
        yaml_text: YAML document content.
        environ: Extra environment overrides.
        message: Expected error fragment.
    Returns:
        None.
    Assumptions:
        None.
    Raises:
        AssertionError: If invalid configuration is accepted.
    Side Effects:
        Writes temporary YAML file.
    """
    path = _write_yaml(tmp_path, yaml_text)

    with pytest.raises(ValueError, match=message):
        load_secrets_runtime_config(
            environ={"SECRETSHARE_SECRETS_CONFIG": str(path), **environ}
        )


def test_resolve_env_name_defaults_to_dev_and_rejects_unknown() -> None:
    assert resolve_env_name(environ={}) == "dev"
    assert resolve_env_name(environ={"SECRETSHARE_ENV": " PROD "}) == "prod"
    with pytest.raises(ValueError, match="SECRETSHARE_ENV must be one of"):
        resolve_env_name(environ={"SECRETSHARE_ENV": "staging"})
