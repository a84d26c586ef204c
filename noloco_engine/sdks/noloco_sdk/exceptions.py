"""
Exception classes for Noloco SDK.
"""

from typing import Any, Dict, Optional


class NolocoError(Exception):
    """Base exception for all Noloco SDK errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}


class NolocoAPIError(NolocoError):
    """Raised for non-success responses without a more specific class."""
    pass


class NolocoAuthError(NolocoError):
    """Raised when authentication fails."""
    pass


class NolocoPermissionError(NolocoError):
    """Raised when the API keys lack access to the app or table."""
    pass


class NolocoNotFoundError(NolocoError):
    """Raised when an app, table or record is not found."""
    pass


class NolocoValidationError(NolocoError):
    """Raised when request validation fails."""
    pass


class NolocoRateLimitError(NolocoError):
    """Raised when rate limit is exceeded."""

    def __init__(self, message: str, retry_after: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class NolocoConflictError(NolocoError):
    """Raised when there's a conflict (e.g., unique field violation)."""
    pass


class NolocoServerError(NolocoError):
    """Raised when Noloco returns a 5xx error."""
    pass


class NolocoConnectionError(NolocoError):
    """Raised when the request never produced a response."""
    pass
