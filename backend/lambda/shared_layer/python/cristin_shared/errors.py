"""cristin_shared.errors — Error taxonomy and client-visible messages.

Every exception raised inside the request pipeline derives from
``CristinProxyError`` and carries the HTTP status and machine code the
handlers put on the problem body. Messages are stable, human-readable
strings; internal causes are chained with ``raise ... from`` and logged,
never returned to the caller.
"""

from __future__ import annotations

ERROR_MESSAGE_TITLE_MISSING_OR_HAS_ILLEGAL_CHARACTERS = (
    "Parameter 'title' is missing or invalid. "
    "May only contain alphanumeric characters, dash, comma, period and whitespace"
)
ERROR_MESSAGE_LANGUAGE_INVALID = "Parameter 'language' has invalid value"
ERROR_MESSAGE_PAGE_VALUE_INVALID = "Parameter 'page' has invalid value"
ERROR_MESSAGE_NUMBER_OF_RESULTS_VALUE_INVALID = "Parameter 'results' has invalid value"
ERROR_MESSAGE_INVALID_PATH_PARAMETER_FOR_ID = "Invalid path parameter for id, needs to be a number"
ERROR_MESSAGE_PROJECT_NOT_FOUND = "Could not find project with id: %s"
ERROR_MESSAGE_BACKEND_FETCH_FAILED = (
    "Your request cannot be processed at this time due to an upstream error"
)
ERROR_MESSAGE_SERVER_ERROR = "Internal server error. Contact application administrator."


class CristinProxyError(Exception):
    """Base class for failures that map onto an HTTP status."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CristinProxyError):
    status_code = 400
    code = "INVALID_INPUT"


class NotFoundError(CristinProxyError):
    status_code = 404
    code = "NOT_FOUND"


class UpstreamError(CristinProxyError):
    """Cristin was unreachable or answered with an unexpected status."""

    status_code = 502
    code = "UPSTREAM_ERROR"

    def __init__(self, message: str = ERROR_MESSAGE_BACKEND_FETCH_FAILED, upstream_status: int = 0):
        super().__init__(message)
        self.upstream_status = upstream_status


class DecodeError(UpstreamError):
    """Cristin answered with a body that is not the expected JSON shape."""

    def __init__(self, reason: str):
        super().__init__(ERROR_MESSAGE_BACKEND_FETCH_FAILED)
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.message} ({self.reason})"


class InternalError(CristinProxyError):
    def __init__(self, message: str = ERROR_MESSAGE_SERVER_ERROR):
        super().__init__(message)


class UrlConstructionError(InternalError):
    def __init__(self, reason: str):
        super().__init__(ERROR_MESSAGE_SERVER_ERROR)
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.message} ({self.reason})"


class ConfigurationError(RuntimeError):
    """Raised at cold start when configuration cannot be resolved."""
