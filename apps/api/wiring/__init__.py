from .modules import build_secrets_api_module

__all__ = [
    "build_secrets_api_module",
]
