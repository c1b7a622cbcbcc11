"""
API middleware components.

Provides cross-cutting concerns for the API:
- Error handling
- CORS configuration
- Request/response logging
"""

from .error_handler import (
    ContactbookException,
    BadRequestError,
    UnauthenticatedError,
    InternalServerError,
    setup_exception_handlers,
    create_error_response,
)

from .cors import (
    CORSConfig,
    get_cors_config,
    setup_cors,
)

from .logging import (
    REQUEST_ID_HEADER,
    RequestLoggingMiddleware,
    setup_logging,
    redact,
    redact_headers,
)


__all__ = [
    # Error handling
    "ContactbookException",
    "BadRequestError",
    "UnauthenticatedError",
    "InternalServerError",
    "setup_exception_handlers",
    "create_error_response",
    # CORS
    "CORSConfig",
    "get_cors_config",
    "setup_cors",
    # Logging
    "REQUEST_ID_HEADER",
    "RequestLoggingMiddleware",
    "setup_logging",
    "redact",
    "redact_headers",
]
