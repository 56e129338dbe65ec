from __future__ import annotations

from datetime import datetime, timezone

import pytest

from secretshare.platform.errors import SecretShareError


def test_secretshare_error_normalizes_details_into_sorted_plain_payload() -> None:
    """
    Verify details are copied into deterministic JSON-compatible structures.

    Args:
        None.
    Returns:
        None.
    Assumptions:
        Datetimes are rendered in ISO-8601; other non-JSON scalars are stringified.
    Raises:
        AssertionError: If payload shape or normalization differ.
    Side Effects:
        None.
    """
    error = SecretShareError(
        code=" validation_error ",
        message=" Bad input ",
        details={
            "z": (1, 2),
            "a": {"when": datetime(2022, 6, 30, tzinfo=timezone.utc)},
        },
    )

    assert str(error) == "Bad input"
    assert error.to_payload() == {
        "error": {
            "code": "validation_error",
            "message": "Bad input",
            "details": {
                "a": {"when": "2022-06-30T00:00:00+00:00"},
                "z": [1, 2],
            },
        }
    }
    assert list(error.to_payload()["error"]["details"]) == ["a", "z"]


@pytest.mark.parametrize(
    ("code", "message", "details", "error_type"),
    [
        ("", "message", None, ValueError),
        ("conflict", "  ", None, ValueError),
        ("conflict", "message", ["not", "mapping"], TypeError),
    ],
)
def test_secretshare_error_rejects_invalid_fields(
    code: str,
    message: str,
    details: object,
    error_type: type[Exception],
) -> None:
    with pytest.raises(error_type):
        SecretShareError(code=code, message=message, details=details)  # type: ignore[arg-type]
