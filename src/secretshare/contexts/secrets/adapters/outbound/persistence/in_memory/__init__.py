from .secret_repository import InMemorySecretRepository

__all__ = ["InMemorySecretRepository"]
