"""Confluence REST API client for content and attachments.

This package provides Python abstractions over the Confluence REST API
content endpoints: page CRUD, child-page listing, and attachment
upload and download.
"""

from .client import WikiClient
from .config import Authenticator, WikiConfig
from .errors import (
    WikiError,
    ConfigurationError,
    InvalidEndpointError,
    TransportError,
    APIUnreachableError,
    HTTPStatusError,
    AuthenticationError,
    InvalidCredentialsError,
    ContentNotFoundError,
    VersionConflictError,
    DeserializationError,
    AttachmentNotFoundError,
)
from .models import (
    Attachment,
    AttachmentResults,
    Content,
    ContentAncestor,
    ContentBody,
    ContentResults,
    ResultPagination,
)
from .transport import Request, RequestsTransport, Transport

__all__ = [
    "WikiClient",
    "Authenticator",
    "WikiConfig",
    "Request",
    "RequestsTransport",
    "Transport",
    "Attachment",
    "AttachmentResults",
    "Content",
    "ContentAncestor",
    "ContentBody",
    "ContentResults",
    "ResultPagination",
    "WikiError",
    "ConfigurationError",
    "InvalidEndpointError",
    "TransportError",
    "APIUnreachableError",
    "HTTPStatusError",
    "AuthenticationError",
    "InvalidCredentialsError",
    "ContentNotFoundError",
    "VersionConflictError",
    "DeserializationError",
    "AttachmentNotFoundError",
]
