"""Typed exception hierarchy for Confluence wiki client errors.

This module defines all custom exceptions raised by the wiki client.
All exceptions inherit from the WikiError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional


class WikiError(Exception):
    """Base exception for all confluence-wiki-client errors."""
    pass


class ConfigurationError(WikiError):
    """Raised when client configuration values are malformed."""

    def __init__(self, setting: str, value: str, reason: str):
        super().__init__(f"Invalid value for {setting}: '{value}' ({reason})")
        self.setting = setting
        self.value = value
        self.reason = reason


class InvalidEndpointError(WikiError, ValueError):
    """Raised when an endpoint URL cannot be built from the given identifiers."""

    def __init__(self, message: str):
        super().__init__(message)


class TransportError(WikiError):
    """Base exception for failures while executing an HTTP request."""
    pass


class APIUnreachableError(TransportError):
    """Raised when the Confluence API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class HTTPStatusError(TransportError):
    """Raised when the server answers with a non-2xx status code."""

    def __init__(
        self,
        status_code: int,
        method: str,
        url: str,
        detail: Optional[str] = None,
    ):
        message = f"{method} {url} failed with HTTP {status_code}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.status_code = status_code
        self.method = method
        self.url = url
        self.detail = detail


class InvalidCredentialsError(WikiError):
    """Raised when API credentials are missing, invalid or rejected.

    ``status_code`` is None when the credentials were rejected locally
    (missing environment variables) rather than by the server.
    """

    def __init__(self, user: str, endpoint: str, status_code: Optional[int] = None):
        super().__init__(
            f"API key is invalid (user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint
        self.status_code = status_code


class AuthenticationError(HTTPStatusError, InvalidCredentialsError):
    """Raised when the server rejects the credentials (HTTP 401 or 403).

    Both a TransportError, like every other non-2xx response, and an
    InvalidCredentialsError.
    """

    def __init__(
        self,
        status_code: int,
        method: str,
        url: str,
        user: str,
        detail: Optional[str] = None,
    ):
        # The two parents take different arguments, so set their state here
        message = f"API key is invalid (user: {user}, endpoint: {url}, HTTP {status_code})"
        if detail:
            message += f": {detail}"
        WikiError.__init__(self, message)
        self.status_code = status_code
        self.method = method
        self.url = url
        self.detail = detail
        self.user = user
        self.endpoint = url


class ContentNotFoundError(HTTPStatusError):
    """Raised when a requested content item or resource does not exist."""

    def __init__(self, method: str, url: str, detail: Optional[str] = None):
        super().__init__(404, method, url, detail)


class VersionConflictError(HTTPStatusError):
    """Raised when an update is rejected because its version number is stale."""

    def __init__(self, method: str, url: str, detail: Optional[str] = None):
        super().__init__(409, method, url, detail)


class DeserializationError(WikiError):
    """Raised when a response body does not match the expected schema."""

    def __init__(self, entity: str, reason: str):
        super().__init__(f"Cannot decode {entity}: {reason}")
        self.entity = entity
        self.reason = reason


class AttachmentNotFoundError(WikiError):
    """Raised when no attachment with the requested filename exists."""

    def __init__(self, content_id: str, filename: str, reason: str = "no match"):
        super().__init__(
            f"Attachment '{filename}' not found on content {content_id} ({reason})"
        )
        self.content_id = content_id
        self.filename = filename
        self.reason = reason
