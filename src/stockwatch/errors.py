"""Stockwatch error types."""

from __future__ import annotations

from enum import Enum


class StockWatchErrorCode(Enum):
    """Error classification codes."""

    RATE_LIMITED = "rate_limited"
    AUTH_FAILED = "auth_failed"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    PROVIDER_ERROR = "provider_error"
    VALIDATION_FAILED = "validation_failed"
    NO_DATA = "no_data"


class StockWatchError(Exception):
    """Fetch-side exception with error code and retryable flag.

    The indicator engine never raises this; it is reserved for the data
    collaborators (providers, quality gate, feed manager).

    Attributes:
        message: Human-readable error description, safe to show to users.
        code: Structured error code for programmatic handling.
        retryable: Whether the caller should retry with another provider.
    """

    def __init__(
        self,
        message: str,
        code: StockWatchErrorCode = StockWatchErrorCode.PROVIDER_ERROR,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.retryable = retryable
