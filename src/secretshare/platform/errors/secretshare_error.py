from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class SecretShareError(Exception):
    """
    SecretShareError — the one error type rendered by the HTTP boundary.

    Docs:
      - docs/architecture/api/api-errors-payload-v1.md
    Related:
      - apps/api/common/errors.py
      - src/secretshare/contexts/secrets/application/use_cases/errors.py
      - src/secretshare/contexts/secrets/adapters/inbound/api/routes/secrets.py
    """

    code: str
    message: str
    details: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        """
        Strip code and message, and replace details with a sorted JSON-ready copy.

        Args:
            None.
        Returns:
            None.
        Assumptions:
            `code` selects the HTTP status in `apps.api.common.errors`.
        Raises:
            ValueError: If `code` or `message` is blank.
            TypeError: If `details` is given but is not a mapping.
        Side Effects:
            Rebinds frozen fields through `object.__setattr__`.
        """
        code = self.code.strip()
        message = self.message.strip()
        if not code:
            raise ValueError("SecretShareError.code must be non-empty")
        if not message:
            raise ValueError("SecretShareError.message must be non-empty")
        object.__setattr__(self, "code", code)
        object.__setattr__(self, "message", message)

        if self.details is not None:
            if not isinstance(self.details, Mapping):
                raise TypeError("SecretShareError.details must be a mapping when provided")
            object.__setattr__(self, "details", _to_json_value(self.details))

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> dict[str, Any]:
        """
        Render `{"error": {"code", "message", "details"}}` with empty details as `{}`.

        Args:
            None.
        Returns:
            dict[str, Any]: Fresh payload dict safe to mutate by callers.
        Assumptions:
            Details were normalized at construction.
        Raises:
            None.
        Side Effects:
            None.
        """
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": dict(self.details or {}),
            }
        }


def _to_json_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(key): _to_json_value(value[key]) for key in sorted(value, key=str)}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
        return [_to_json_value(item) for item in items]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)
