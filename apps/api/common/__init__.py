from .errors import (
    register_api_error_handlers,
    request_validation_error_handler,
    secretshare_error_handler,
)

__all__ = [
    "register_api_error_handlers",
    "request_validation_error_handler",
    "secretshare_error_handler",
]
