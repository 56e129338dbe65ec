from .secret_repository import RedisSecretRepository

__all__ = ["RedisSecretRepository"]
