from __future__ import annotations

import secrets

from secretshare.contexts.secrets.application.ports.secret_id_generator import (
    SecretIdGenerator,
)

_MIN_NUM_BYTES = 8


class TokenSecretIdGenerator(SecretIdGenerator):
    """
    TokenSecretIdGenerator — URL-safe random secret ids from the OS CSPRNG.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/ports/secret_id_generator.py
      - src/secretshare/platform/config/secrets_runtime.py
      - apps/api/wiring/modules/secrets.py
    """

    def __init__(self, *, num_bytes: int = 16) -> None:
        """
        Initialize generator with id entropy size.

        Args:
            num_bytes: Number of random bytes encoded into each id.
        Returns:
            None.
        Assumptions:
            Ids appear in share links, so they must stay URL-safe.
        Raises:
            ValueError: If entropy is below 64 bits.
        Side Effects:
            None.
        """
        if num_bytes < _MIN_NUM_BYTES:
            raise ValueError(
                f"TokenSecretIdGenerator num_bytes must be >= {_MIN_NUM_BYTES}, got {num_bytes}"
            )
        self._num_bytes = num_bytes

    def generate(self) -> str:
        return secrets.token_urlsafe(self._num_bytes)
