from .secrets import SaveSecretApiRequest, SecretResponse, build_secrets_router

__all__ = [
    "SaveSecretApiRequest",
    "SecretResponse",
    "build_secrets_router",
]
