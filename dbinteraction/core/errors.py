"""
Error taxonomy for the data-access layer.
Challenge: Callers need a machine-readable kind next to the message to decide on retry/backoff.
Design: Exceptions are raised internally and converted to the response envelope at the
SqlDataAccess boundary; nothing escapes to callers.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Structured error code carried on ResponseEnvelope.error_code."""

    CONFIGURATION = "configuration"
    INVALID_QUERY = "invalid_query"
    UNSUPPORTED = "unsupported"
    TRANSIENT = "transient"
    EXECUTION = "execution"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"

    @property
    def retryable(self) -> bool:
        """True when the same call may succeed if repeated later."""
        return self in (ErrorKind.TRANSIENT, ErrorKind.TIMEOUT)


class DataAccessError(RuntimeError):
    """Raised when a data-access operation fails.

    Wraps lower-level exceptions to provide a stable, domain-friendly API.
    """

    kind: ErrorKind = ErrorKind.EXECUTION

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class ConfigurationError(DataAccessError):
    """A named connection string is missing from the settings."""

    kind = ErrorKind.CONFIGURATION
