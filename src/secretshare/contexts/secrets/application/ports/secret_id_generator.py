from __future__ import annotations

from typing import Protocol


class SecretIdGenerator(Protocol):
    """
    SecretIdGenerator — port producing fresh public identifiers for secrets.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
      - src/secretshare/contexts/secrets/adapters/outbound/security/ids/
        token_secret_id_generator.py
    """

    def generate(self) -> str:
        """
        Produce one new identifier.

        Args:
            None.
        Returns:
            str: Unique-looking identifier string.
        Assumptions:
            Uniqueness is best-effort; callers still check storage for collisions.
        Raises:
            None.
        Side Effects:
            May consume OS randomness.
        """
        ...
