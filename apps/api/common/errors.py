"""
Global FastAPI error handlers rendering every failure as `{"error": {code, message, details}}`.

Docs:
  - docs/architecture/api/api-errors-payload-v1.md
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, cast

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse

from secretshare.platform.errors import SecretShareError

log = logging.getLogger(__name__)

_HTTP_STATUS_BY_ERROR_CODE: Mapping[str, int] = {
    "validation_error": 422,
    "conflict": 409,
    "unexpected_error": 500,
}
_VALIDATION_ITEM_KEYS = ("path", "code", "message")


def register_api_error_handlers(*, app: FastAPI) -> None:
    """
    Install SecretShareError and request-validation handlers on the application.

    Args:
        app: FastAPI application instance.
    Returns:
        None.
    Assumptions:
        Called once from `apps.api.main.app.create_app`.
    Raises:
        ValueError: If `app` is missing.
    Side Effects:
        Mutates FastAPI exception-handler registry.
    """
    if app is None:  # type: ignore[truthy-bool]
        raise ValueError("register_api_error_handlers requires app")

    app.add_exception_handler(SecretShareError, secretshare_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)


def secretshare_error_handler(_request: Request, error: Exception) -> JSONResponse:
    """
    Render SecretShareError with the status mapped from its code.

    Args:
        _request: Starlette request object (unused).
        error: Raised SecretShareError instance.
    Returns:
        JSONResponse: Canonical error payload.
    Assumptions:
        Unknown codes are treated as server errors.
    Raises:
        None.
    Side Effects:
        Logs server errors.
    """
    shared_error = cast(SecretShareError, error)
    status_code = _HTTP_STATUS_BY_ERROR_CODE.get(shared_error.code, 500)
    if status_code >= 500:
        log.error("api error: code=%s message=%s", shared_error.code, shared_error.message)

    payload = shared_error.to_payload()
    details = payload["error"]["details"]
    if shared_error.code == "validation_error" and "errors" in details:
        details["errors"] = _sorted_validation_items(raw_errors=details["errors"])
    return JSONResponse(status_code=status_code, content=payload)


def request_validation_error_handler(request: Request, error: Exception) -> JSONResponse:
    """
    Render FastAPI request-schema failures as `validation_error` with sorted items.

    Args:
        request: Starlette request object.
        error: Raised RequestValidationError.
    Returns:
        JSONResponse: HTTP 422 canonical payload.
    Assumptions:
        Pydantic error dicts carry `loc`, `type`, and `msg`.
    Raises:
        None.
    Side Effects:
        None.
    """
    raw_errors = cast(RequestValidationError, error).errors()
    return secretshare_error_handler(
        request,
        SecretShareError(
            code="validation_error",
            message="Validation failed",
            details={"errors": _sorted_validation_items(raw_errors=raw_errors)},
        ),
    )


def _sorted_validation_items(*, raw_errors: Any) -> list[dict[str, str]]:
    """
    Normalize validation errors to `{path, code, message}` items sorted by those keys.

    Args:
        raw_errors: Pydantic error dicts or already normalized items.
    Returns:
        list[dict[str, str]]: Sorted items.
    Assumptions:
        Non-iterable input yields an empty list.
    Raises:
        None.
    Side Effects:
        None.
    """
    if isinstance(raw_errors, (str, bytes)) or not isinstance(raw_errors, Iterable):
        return []
    items = [_to_validation_item(raw_error=raw_error) for raw_error in raw_errors]
    return sorted(items, key=lambda item: tuple(item[key] for key in _VALIDATION_ITEM_KEYS))


def _to_validation_item(*, raw_error: Any) -> dict[str, str]:
    if not isinstance(raw_error, Mapping):
        return {"path": "unknown", "code": "validation_error", "message": str(raw_error)}
    if all(key in raw_error for key in _VALIDATION_ITEM_KEYS):
        return {key: str(raw_error[key]) for key in _VALIDATION_ITEM_KEYS}
    return {
        "path": _error_path(loc=raw_error.get("loc")),
        "code": _error_code(raw_type=raw_error.get("type")),
        "message": str(raw_error.get("msg", "Validation error")),
    }


def _error_path(*, loc: Any) -> str:
    # ("body", "expireAt") -> "body.expireAt"
    if isinstance(loc, (list, tuple)):
        return ".".join(str(part) for part in loc) or "unknown"
    return "unknown" if loc is None else str(loc)


def _error_code(*, raw_type: Any) -> str:
    normalized = "" if raw_type is None else str(raw_type).strip().lower()
    if not normalized:
        return "validation_error"
    if normalized == "missing" or normalized.endswith(".missing"):
        return "required"
    return normalized
