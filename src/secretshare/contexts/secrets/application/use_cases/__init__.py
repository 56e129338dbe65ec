from .errors import map_secrets_exception
from .save_secret import (
    MAX_EXPIRE_IN_MINUTES,
    SaveSecretRequest,
    SaveSecretUseCase,
    compute_expire_at,
)

__all__ = [
    "MAX_EXPIRE_IN_MINUTES",
    "SaveSecretRequest",
    "SaveSecretUseCase",
    "compute_expire_at",
    "map_secrets_exception",
]
