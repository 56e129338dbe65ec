from __future__ import annotations

from secretshare.contexts.secrets.domain.errors import (
    SecretAlreadyExistsError,
    SecretValidationError,
)
from secretshare.platform.errors import SecretShareError


def map_secrets_exception(*, error: Exception) -> SecretShareError:
    """
    Map known secrets domain exceptions to canonical SecretShareError variants.

    Args:
        error: Caught secrets exception.
    Returns:
        SecretShareError: Canonical mapped error object.
    Assumptions:
        Unknown exceptions are mapped to generic `unexpected_error` response contract.
    Raises:
        None.
    Side Effects:
        None.
    """
    if isinstance(error, SecretValidationError):
        return SecretShareError(code="validation_error", message=error.message)
    if isinstance(error, SecretAlreadyExistsError):
        return SecretShareError(code="conflict", message=error.message)

    return SecretShareError(
        code="unexpected_error",
        message="Unexpected secrets operation error",
        details={"reason": type(error).__name__},
    )
