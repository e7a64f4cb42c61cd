"""Data models for Confluence content and attachments.

These dataclasses mirror the JSON documents exchanged with the Confluence
REST API. Each model can be built from a decoded response with
``from_dict`` and turned back into a request payload with ``to_dict``.
Unknown response fields are ignored; missing required fields raise
DeserializationError.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Type, Union

from .errors import DeserializationError

STORAGE_REPRESENTATION = "storage"


def decode_json(raw: Union[bytes, str], entity: str) -> Dict[str, Any]:
    """Decode a response body into a JSON object.

    Args:
        raw: Response body as returned by the transport
        entity: Name of the expected entity (used in error messages)

    Returns:
        The decoded JSON object

    Raises:
        DeserializationError: If the body is not valid JSON or not an object
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise DeserializationError(entity, f"invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise DeserializationError(entity, f"expected a JSON object, got {type(data).__name__}")
    return data


def _require(
    data: Dict[str, Any],
    key: str,
    expected: Union[Type, Tuple[Type, ...]],
    entity: str,
) -> Any:
    if key not in data or data[key] is None:
        raise DeserializationError(entity, f"missing required field '{key}'")
    return _check(data[key], key, expected, entity)


def _optional(
    data: Dict[str, Any],
    key: str,
    expected: Union[Type, Tuple[Type, ...]],
    entity: str,
) -> Any:
    value = data.get(key)
    if value is None:
        return None
    return _check(value, key, expected, entity)


def _check(value: Any, key: str, expected: Union[Type, Tuple[Type, ...]], entity: str) -> Any:
    # bool is an int subclass; JSON true/false is never a valid number here
    if isinstance(value, bool) and bool not in _as_tuple(expected):
        raise DeserializationError(entity, f"field '{key}' has type bool")
    if not isinstance(value, expected):
        raise DeserializationError(
            entity, f"field '{key}' has type {type(value).__name__}"
        )
    return value


def _as_tuple(expected: Union[Type, Tuple[Type, ...]]) -> Tuple[Type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)


def _identifier(data: Dict[str, Any], entity: str) -> str:
    # The API documents ids as strings but some endpoints emit bare numbers
    return str(_require(data, "id", (str, int), entity))


@dataclass
class ContentAncestor:
    """Parent reference of a content item.

    Attributes:
        id: Identifier of the parent content
    """
    id: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentAncestor":
        if not isinstance(data, dict):
            raise DeserializationError("ancestor", "expected a JSON object")
        return cls(id=_identifier(data, "ancestor"))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id}


@dataclass
class ContentBody:
    """Page body in a given representation.

    Attributes:
        value: Body markup (XHTML-like for the storage representation)
        representation: Representation tag sent alongside the value
    """
    value: str
    representation: str = STORAGE_REPRESENTATION


@dataclass
class Content:
    """A Confluence page or blog post.

    Fields other than title, type and status are only returned by the server
    when they are requested through ``expand`` (body, version, ancestors) or
    are otherwise available, so they are optional here.

    Attributes:
        title: Page title
        id: Server-assigned identifier (None before creation)
        type: Content type, "page" or "blogpost"
        status: Content status, usually "current"
        body: Storage-format body
        version: Version number used for optimistic locking on update
        ancestors: Parent chain, root first; the last entry is the direct parent
        space_key: Key of the space holding the content (required for creation)
    """
    title: str
    id: Optional[str] = None
    type: str = "page"
    status: str = "current"
    body: Optional[ContentBody] = None
    version: Optional[int] = None
    ancestors: List[ContentAncestor] = field(default_factory=list)
    space_key: Optional[str] = None

    @property
    def parent_id(self) -> Optional[str]:
        """Identifier of the direct parent, or None for a top-level page."""
        if not self.ancestors:
            return None
        return self.ancestors[-1].id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Content":
        """Build a Content from a decoded API document.

        Raises:
            DeserializationError: If required fields are missing or mistyped
        """
        if not isinstance(data, dict):
            raise DeserializationError("content", "expected a JSON object")

        body = None
        body_data = _optional(data, "body", dict, "content")
        if body_data:
            storage = _optional(body_data, "storage", dict, "content body")
            if storage is not None:
                representation = _optional(storage, "representation", str, "content body")
                body = ContentBody(
                    value=_require(storage, "value", str, "content body"),
                    representation=(
                        representation if representation is not None
                        else STORAGE_REPRESENTATION
                    ),
                )

        version = None
        version_data = _optional(data, "version", dict, "content")
        if version_data is not None:
            version = _require(version_data, "number", int, "content version")

        space_key = None
        space_data = _optional(data, "space", dict, "content")
        if space_data is not None:
            space_key = _optional(space_data, "key", str, "content space")

        ancestors_data = _optional(data, "ancestors", list, "content") or []
        status = _optional(data, "status", str, "content")

        return cls(
            id=_identifier(data, "content"),
            type=_require(data, "type", str, "content"),
            status=status if status is not None else "current",
            title=_require(data, "title", str, "content"),
            body=body,
            version=version,
            ancestors=[ContentAncestor.from_dict(a) for a in ancestors_data],
            space_key=space_key,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON payload accepted by create and update.

        Unset optional fields are left out, so a Content without an id
        serializes as a creation payload.
        """
        result: Dict[str, Any] = {}
        if self.id is not None:
            result["id"] = self.id
        result["type"] = self.type
        result["status"] = self.status
        result["title"] = self.title
        if self.space_key is not None:
            result["space"] = {"key": self.space_key}
        if self.body is not None:
            result["body"] = {
                "storage": {
                    "value": self.body.value,
                    "representation": self.body.representation,
                }
            }
        if self.version is not None:
            result["version"] = {"number": self.version}
        if self.ancestors:
            result["ancestors"] = [a.to_dict() for a in self.ancestors]
        return result


# NOTE: `_links.download` is not listed in the REST API reference, but the
#       server returns it on every attachment and it is the only way to reach
#       the binary data. It is relative to the site root, not the API base.
@dataclass
class Attachment:
    """A file attached to a content item.

    Attributes:
        id: Attachment identifier (e.g., "att123456")
        title: File name
        download: Download link relative to the site root
        media_type: MIME type reported by the server
        version: Attachment version number
    """
    id: str
    title: str
    download: Optional[str] = None
    media_type: Optional[str] = None
    version: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Attachment":
        if not isinstance(data, dict):
            raise DeserializationError("attachment", "expected a JSON object")

        links = _optional(data, "_links", dict, "attachment") or {}
        metadata = _optional(data, "metadata", dict, "attachment") or {}
        version_data = _optional(data, "version", dict, "attachment")

        return cls(
            id=_identifier(data, "attachment"),
            title=_require(data, "title", str, "attachment"),
            download=_optional(links, "download", str, "attachment links"),
            media_type=_optional(metadata, "mediaType", str, "attachment metadata"),
            version=(
                _optional(version_data, "number", int, "attachment version")
                if version_data is not None else None
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": self.id, "title": self.title}
        if self.media_type is not None:
            result["metadata"] = {"mediaType": self.media_type}
        if self.version is not None:
            result["version"] = {"number": self.version}
        if self.download is not None:
            result["_links"] = {"download": self.download}
        return result


@dataclass
class ResultPagination:
    """Paging metadata shared by every result envelope.

    Attributes:
        start: Index of the first result in this page
        limit: Page size requested
        size: Number of results in this page
        next_link: Relative link to the next page, if any
    """
    start: Optional[int] = None
    limit: Optional[int] = None
    size: Optional[int] = None
    next_link: Optional[str] = None

    @property
    def has_next(self) -> bool:
        return self.next_link is not None

    @staticmethod
    def _pagination_from_dict(data: Dict[str, Any], entity: str) -> Dict[str, Any]:
        links = _optional(data, "_links", dict, entity) or {}
        return {
            "start": _optional(data, "start", int, entity),
            "limit": _optional(data, "limit", int, entity),
            "size": _optional(data, "size", int, entity),
            "next_link": _optional(links, "next", str, entity),
        }


@dataclass
class ContentResults(ResultPagination):
    """A page of Content results."""
    results: List[Content] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentResults":
        items = _require(data, "results", list, "content results")
        return cls(
            results=[Content.from_dict(item) for item in items],
            **cls._pagination_from_dict(data, "content results"),
        )


@dataclass
class AttachmentResults(ResultPagination):
    """A page of Attachment results."""
    results: List[Attachment] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AttachmentResults":
        items = _require(data, "results", list, "attachment results")
        return cls(
            results=[Attachment.from_dict(item) for item in items],
            **cls._pagination_from_dict(data, "attachment results"),
        )
