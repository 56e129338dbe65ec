from __future__ import annotations

from datetime import datetime
from typing import Protocol


class SecretsClock(Protocol):
    """
    SecretsClock — port of the current-time source for secrets use-cases.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
      - src/secretshare/contexts/secrets/adapters/outbound/time/system_secrets_clock.py
    """

    def now(self) -> datetime:
        """
        Return current UTC timestamp used as secret creation instant.

        Args:
            None.
        Returns:
            datetime: Timezone-aware UTC datetime.
        Assumptions:
            Implementations return wall-clock time; tests inject fixed instants.
        Raises:
            None.
        Side Effects:
            None.
        """
        ...
