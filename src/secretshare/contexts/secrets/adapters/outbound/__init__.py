from .persistence import (
    InMemorySecretRepository,
    PostgresSecretRepository,
    PsycopgSecretsPostgresGateway,
    RedisSecretRepository,
    SecretsPostgresGateway,
)
from .security import AesGcmEnvelopeSecretCipher, TokenSecretIdGenerator
from .time import SystemSecretsClock

__all__ = [
    "AesGcmEnvelopeSecretCipher",
    "InMemorySecretRepository",
    "PostgresSecretRepository",
    "PsycopgSecretsPostgresGateway",
    "RedisSecretRepository",
    "SecretsPostgresGateway",
    "SystemSecretsClock",
    "TokenSecretIdGenerator",
]
