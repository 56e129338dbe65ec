from .in_memory import InMemorySecretRepository
from .postgres import (
    PostgresSecretRepository,
    PsycopgSecretsPostgresGateway,
    SecretsPostgresGateway,
)
from .redis import RedisSecretRepository

__all__ = [
    "InMemorySecretRepository",
    "PostgresSecretRepository",
    "PsycopgSecretsPostgresGateway",
    "RedisSecretRepository",
    "SecretsPostgresGateway",
]
