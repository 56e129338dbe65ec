"""
Runtime config loader for the secrets context.

Docs: docs/architecture/secrets/secrets-save-path-v1.md
Related: apps.api.wiring.modules.secrets,
  secretshare.contexts.secrets.adapters.outbound.security.ids.token_secret_id_generator
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

_ENV_NAME_KEY = "SECRETSHARE_ENV"
_CONFIG_PATH_KEY = "SECRETSHARE_SECRETS_CONFIG"
_KNOWN_ENV_NAMES = ("dev", "prod", "test")
_YAML_SECTION = "secrets"

# yaml key -> environment override key
_ENV_OVERRIDES: Mapping[str, str] = {
    "id_num_bytes": "SECRETS_ID_NUM_BYTES",
    "max_expire_minutes": "SECRETS_MAX_EXPIRE_MINUTES",
    "redis_key_prefix": "SECRETS_REDIS_KEY_PREFIX",
}

_MIN_ID_NUM_BYTES = 8
_DEFAULT_ID_NUM_BYTES = 16
_DEFAULT_MAX_EXPIRE_MINUTES = 30 * 24 * 60
_DEFAULT_REDIS_KEY_PREFIX = "secretshare:secret:"


@dataclass(frozen=True, slots=True)
class SecretsRuntimeConfig:
    """
    Immutable runtime config for secrets id generation, API TTL policy, and Redis storage.

    Docs: docs/architecture/secrets/secrets-save-path-v1.md
    Related: apps.api.wiring.modules.secrets,
      secretshare.contexts.secrets.adapters.inbound.api.routes.secrets
    """

    id_num_bytes: int = _DEFAULT_ID_NUM_BYTES
    max_expire_minutes: int = _DEFAULT_MAX_EXPIRE_MINUTES
    redis_key_prefix: str = _DEFAULT_REDIS_KEY_PREFIX

    def __post_init__(self) -> None:
        """
        Check bounds of every setting.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            Id entropy below 64 bits is not acceptable for public secret ids.
        Raises:
            ValueError: If a setting is out of bounds.
        Side Effects:
            None.
        """
        if self.id_num_bytes < _MIN_ID_NUM_BYTES:
            raise ValueError(
                f"id_num_bytes must be >= {_MIN_ID_NUM_BYTES}, got {self.id_num_bytes}"
            )
        if self.max_expire_minutes <= 0:
            raise ValueError(f"max_expire_minutes must be > 0, got {self.max_expire_minutes}")
        if not self.redis_key_prefix.strip():
            raise ValueError("redis_key_prefix must be non-empty")


def load_secrets_runtime_config(*, environ: Mapping[str, str]) -> SecretsRuntimeConfig:
    """
    Build secrets runtime config with precedence env override -> YAML `secrets` -> default.

    Args:
        environ: Environment mapping used to pick the YAML file and overrides.
    Returns:
        SecretsRuntimeConfig: Validated runtime settings.
    Assumptions:
        Without `SECRETSHARE_SECRETS_CONFIG` the file is `configs/<env>/secrets.yaml`
        relative to the working directory and may be absent.
    Raises:
        FileNotFoundError: If the explicitly configured YAML path does not exist.
        ValueError: If YAML shape or any value is invalid.
    Side Effects:
        Reads at most one YAML file from disk.
    """
    explicit_path = environ.get(_CONFIG_PATH_KEY, "").strip()
    if explicit_path:
        section = _read_yaml_section(path=Path(explicit_path), must_exist=True)
    else:
        default_path = Path("configs") / resolve_env_name(environ=environ) / "secrets.yaml"
        section = _read_yaml_section(path=default_path, must_exist=False)

    values: dict[str, Any] = {}
    for yaml_key, env_key in _ENV_OVERRIDES.items():
        override = environ.get(env_key, "").strip()
        if override:
            values[yaml_key] = override
        elif section.get(yaml_key) is not None:
            values[yaml_key] = section[yaml_key]

    return SecretsRuntimeConfig(
        id_num_bytes=_coerce_int(
            values.get("id_num_bytes", _DEFAULT_ID_NUM_BYTES),
            label=_label(yaml_key="id_num_bytes", environ=environ),
        ),
        max_expire_minutes=_coerce_int(
            values.get("max_expire_minutes", _DEFAULT_MAX_EXPIRE_MINUTES),
            label=_label(yaml_key="max_expire_minutes", environ=environ),
        ),
        redis_key_prefix=_coerce_str(
            values.get("redis_key_prefix", _DEFAULT_REDIS_KEY_PREFIX),
            label=_label(yaml_key="redis_key_prefix", environ=environ),
        ),
    )


def resolve_env_name(*, environ: Mapping[str, str]) -> str:
    """
    Return normalized `SECRETSHARE_ENV`, defaulting to `dev`.

    Args:
        environ: Environment mapping.
    Returns:
        str: One of `dev`, `prod`, `test`.
    Assumptions:
        Comparison is case-insensitive.
    Raises:
        ValueError: If the value names an unknown environment.
    Side Effects:
        None.
    """
    env_name = environ.get(_ENV_NAME_KEY, "dev").strip().lower()
    if env_name not in _KNOWN_ENV_NAMES:
        raise ValueError(f"{_ENV_NAME_KEY} must be one of {_KNOWN_ENV_NAMES}, got {env_name!r}")
    return env_name


def _read_yaml_section(*, path: Path, must_exist: bool) -> Mapping[str, Any]:
    """
    Read the `secrets` mapping from a YAML document.

    Args:
        path: YAML file path.
        must_exist: Whether a missing file is an error.
    Returns:
        Mapping[str, Any]: Section contents, empty when file or section is absent.
    Assumptions:
        Keys other than the known settings are ignored.
    Raises:
        FileNotFoundError: If `must_exist` and the file is missing.
        ValueError: If the document or the section is not a mapping.
    Side Effects:
        Reads one UTF-8 file from disk.
    """
    if not path.is_file():
        if must_exist:
            raise FileNotFoundError(f"secrets runtime config not found: {path}")
        return {}

    document = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(document, dict):
        raise ValueError(f"secrets config must be a mapping at top-level: {path}")
    section = document.get(_YAML_SECTION) or {}
    if not isinstance(section, dict):
        raise ValueError(f"{_YAML_SECTION} section must be a mapping: {path}")
    return section


def _label(*, yaml_key: str, environ: Mapping[str, str]) -> str:
    env_key = _ENV_OVERRIDES[yaml_key]
    return env_key if environ.get(env_key, "").strip() else f"{_YAML_SECTION}.{yaml_key}"


def _coerce_int(value: Any, *, label: str) -> int:
    # env overrides arrive as strings, YAML values must already be ints
    if isinstance(value, str):
        try:
            return int(value, 10)
        except ValueError as error:
            raise ValueError(f"{label} must be int, got {value!r}") from error
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected int for {label}, got {type(value).__name__}")
    return value


def _coerce_str(value: Any, *, label: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected string for {label}, got {type(value).__name__}")
    return value.strip()


__all__ = [
    "SecretsRuntimeConfig",
    "load_secrets_runtime_config",
    "resolve_env_name",
]
