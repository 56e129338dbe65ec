from .secrets import build_secrets_router

__all__ = ["build_secrets_router"]
