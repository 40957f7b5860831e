"""
Custom exception classes for the token tracker.

The query core reports "not found", malformed input and an unbootstrapped
indexer as empty results, not exceptions. These classes cover the
conditions that do fail a request: using the database before it is
initialized, and the HTTP layer's mapping of a missing token to a 404.
"""

from typing import Any, Optional, Dict


class TokenTrackerException(Exception):
    """Base exception class for the token tracker."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(TokenTrackerException):
    """Raised when there's a configuration error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFIGURATION_ERROR", details)


class NotFoundError(TokenTrackerException):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "NOT_FOUND", details)


class TokenNotFoundError(NotFoundError):
    """Raised when a token id or token address does not resolve."""

    def __init__(self, token_id_or_addr: str):
        super().__init__(
            f"Token not found: {token_id_or_addr}",
            {"token": token_id_or_addr}
        )
