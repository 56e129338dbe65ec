from __future__ import annotations

from datetime import datetime, timezone

from secretshare.contexts.secrets.application.ports.clock import SecretsClock


class SystemSecretsClock(SecretsClock):
    """
    SystemSecretsClock — platform implementation of `SecretsClock` on system UTC time.

    Docs:
      - docs/architecture/secrets/secrets-save-path-v1.md
    Related:
      - src/secretshare/contexts/secrets/application/ports/clock.py
      - src/secretshare/contexts/secrets/application/use_cases/save_secret.py
      - apps/api/wiring/modules/secrets.py
    """

    def now(self) -> datetime:
        """
        Return current timezone-aware UTC datetime.

        Args:
            None.
        Returns:
            datetime: Current UTC datetime.
        Assumptions:
            System clock is reasonably synchronized.
        Raises:
            None.
        Side Effects:
            Reads system wall clock.
        """
        return datetime.now(timezone.utc)
