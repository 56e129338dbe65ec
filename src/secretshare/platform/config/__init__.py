from .secrets_runtime import (
    SecretsRuntimeConfig,
    load_secrets_runtime_config,
    resolve_env_name,
)

__all__ = [
    "SecretsRuntimeConfig",
    "load_secrets_runtime_config",
    "resolve_env_name",
]
