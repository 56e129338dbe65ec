from .secrets import (
    SecretsApiModule,
    SecretsRuntimeSettings,
    build_secrets_api_module,
)

__all__ = [
    "SecretsApiModule",
    "SecretsRuntimeSettings",
    "build_secrets_api_module",
]
