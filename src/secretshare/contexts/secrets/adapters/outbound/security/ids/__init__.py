from .token_secret_id_generator import TokenSecretIdGenerator

__all__ = ["TokenSecretIdGenerator"]
