"""
Error Taxonomy - Closed Set of Application Failures
====================================================

Every failure that crosses a layer boundary is one of the classes below.
The persistence and LLM layers translate driver/transport exceptions into
these, and the web layer maps them to HTTP responses by ``status_code``.
"""

from typing import Any, Optional


class ReviewHubError(Exception):
    """Base exception for all application errors."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class Unauthorized(ReviewHubError):
    """No valid session on a protected route."""
    status_code = 401


class ValidationError(ReviewHubError):
    """Malformed or missing request fields."""
    status_code = 400


class InvalidArgument(ReviewHubError):
    """Malformed identifier or argument."""
    status_code = 400


class NotFound(ReviewHubError):
    status_code = 404


class ConfigurationError(ReviewHubError):
    """A required setting or external credential is missing."""
    status_code = 500


class UpstreamParseError(ReviewHubError):
    """The AI provider answered with something we cannot use."""
    status_code = 500


class InternalError(ReviewHubError):
    """Unexpected storage, driver or transport failure."""
    status_code = 500
