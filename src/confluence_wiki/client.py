"""Client for the Confluence content and attachment REST endpoints.

WikiClient exposes one method per supported operation. Every method builds
an endpoint URL, wraps it in a Request, hands it to the transport and
decodes the JSON response into the models from ``confluence_wiki.models``.
The client holds no per-call state, so a single instance can be shared by
independent callers.
"""

import json
import logging
import os
import re
from typing import List, Optional, Sequence, Tuple, Union
from urllib.parse import quote, urlencode, urlsplit

from urllib3.filepost import encode_multipart_formdata

from .config import Authenticator, WikiConfig
from .errors import AttachmentNotFoundError, InvalidEndpointError
from .models import (
    Attachment,
    AttachmentResults,
    Content,
    ContentResults,
    decode_json,
)
from .transport import Request, RequestsTransport, Transport

logger = logging.getLogger(__name__)

Expand = Optional[Union[str, Sequence[str]]]
PathLike = Union[str, "os.PathLike[str]"]

JSON_HEADERS = {"Content-Type": "application/json"}

# The server detects the real media type from the file name
UPLOAD_CONTENT_TYPE = "application/octet-stream"

# From https://docs.atlassian.com/ConfluenceServer/rest/latest/#api/content/{id}/child/attachment-createAttachments
#   Because this method accepts multipart/form-data, it has XSRF protection on it.
#   You must submit a header of X-Atlassian-Token: nocheck with the request,
#   otherwise it will be blocked.
XSRF_HEADER = ("X-Atlassian-Token", "nocheck")

_CONTENT_ID = re.compile(r'^[0-9]+$')
_ATTACHMENT_ID = re.compile(r'^[A-Za-z0-9]+$')


class WikiClient:
    """Facade over the Confluence REST API content and attachment endpoints.

    Example:
        >>> client = WikiClient(WikiConfig("https://example.atlassian.net/wiki", user, token))
        >>> page = client.get_content("123456", ["body.storage", "version"])
        >>> page.version += 1
        >>> page.body.value = "<p>Updated</p>"
        >>> client.update_content(page)
    """

    def __init__(self, config: WikiConfig, transport: Optional[Transport] = None):
        """Initialize the client.

        Args:
            config: Site settings; endpoint URLs are built from config.api_url
                and attachment downloads from config.site_url
            transport: Transport that executes requests (defaults to a
                RequestsTransport built from config). A supplied transport
                stays owned by the caller and is not closed by close()
        """
        self._config = config
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else RequestsTransport(config)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "WikiClient":
        """Create a client configured from CONFLUENCE_* environment variables."""
        return cls(Authenticator(env_file).get_config())

    @property
    def config(self) -> WikiConfig:
        return self._config

    def close(self) -> None:
        """Close the default transport; a caller-supplied one is left open."""
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> "WikiClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Endpoints

    def _build_url(self, path: str, params: Optional[List[Tuple[str, str]]] = None) -> str:
        url = self._config.api_url + path
        if params:
            url += "?" + urlencode(params, safe=",", quote_via=quote)
        return url

    def _existing_content_endpoint(self, content_id: str, params=None) -> str:
        return self._build_url(f"/content/{_content_id(content_id)}", params)

    def _new_content_endpoint(self) -> str:
        return self._build_url("/content")

    def _child_pages_endpoint(self, content_id: str, params) -> str:
        return self._build_url(f"/content/{_content_id(content_id)}/child/page", params)

    def _attachment_by_filename_endpoint(self, content_id: str, filename: str) -> str:
        if not filename:
            raise InvalidEndpointError("filename cannot be empty")
        return self._build_url(
            f"/content/{_content_id(content_id)}/child/attachment",
            [("filename", filename)],
        )

    def _create_attachment_endpoint(self, content_id: str) -> str:
        return self._build_url(f"/content/{_content_id(content_id)}/child/attachment")

    def _update_attachment_endpoint(self, content_id: str, attachment_id: str) -> str:
        return self._build_url(
            f"/content/{_content_id(content_id)}/child/attachment/"
            f"{_attachment_id(attachment_id)}/data"
        )

    def _download_url(self, link: str) -> str:
        """Resolve a download link against the site root (not the API base).

        Raises:
            InvalidEndpointError: If the link is absolute and points outside
                the configured site; the transport would send credentials there
        """
        parts = urlsplit(link)
        if parts.scheme or parts.netloc:
            site = urlsplit(self._config.site_url)
            if (parts.scheme.lower(), parts.netloc.lower()) != (
                site.scheme.lower(),
                site.netloc.lower(),
            ):
                raise InvalidEndpointError(
                    f"Download link points outside {self._config.site_url}: '{link}'"
                )
            return link
        if not link.startswith("/"):
            link = "/" + link
        return self._config.site_url + link

    # ------------------------------------------------------------------
    # Content

    def get_content(self, content_id: str, expand: Expand = None) -> Content:
        """Fetch a content item.

        Args:
            content_id: Numeric content identifier
            expand: Fields the server should inline (e.g., ["body.storage",
                    "version", "ancestors"]); joined with commas

        Returns:
            Content: The decoded content

        Raises:
            InvalidEndpointError: If content_id is malformed
            TransportError: If the request fails (ContentNotFoundError on 404)
            DeserializationError: If the response is not a content document
        """
        endpoint = self._existing_content_endpoint(content_id, _expand_params(expand))
        raw = self._transport.send(Request("GET", endpoint))
        return Content.from_dict(decode_json(raw, "content"))

    def create_content(self, content: Content) -> Content:
        """Create a content item.

        The id field of ``content`` is ignored; the server assigns one and
        returns the stored content with version 1.
        """
        payload = content.to_dict()
        payload.pop("id", None)
        logger.info(f"Creating {content.type} '{content.title}'")
        created = self._send_content("POST", self._new_content_endpoint(), payload)
        logger.info(f"Created {created.type} {created.id} (version {created.version})")
        return created

    def update_content(self, content: Content) -> Content:
        """Replace a content item.

        ``content.version`` must be the current server version plus one;
        otherwise the server rejects the write with 409, raised as
        VersionConflictError.

        Raises:
            InvalidEndpointError: If content has no id
            VersionConflictError: If the version number is stale
        """
        if not content.id:
            raise InvalidEndpointError("content id is required for update")
        endpoint = self._existing_content_endpoint(content.id)
        logger.info(f"Updating content {content.id} to version {content.version}")
        return self._send_content("PUT", endpoint, content.to_dict())

    def delete_content(self, content_id: str) -> None:
        """Delete a content item; the server answers with an empty body."""
        endpoint = self._existing_content_endpoint(content_id)
        logger.info(f"Deleting content {content_id}")
        self._transport.send(Request("DELETE", endpoint))

    def get_child_pages(
        self,
        content_id: str,
        expand: Expand = None,
        start: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> ContentResults:
        """List the direct child pages of a content item.

        Args:
            content_id: Numeric identifier of the parent
            expand: Fields to inline for every child
            start: Index of the first result (server default when None)
            limit: Maximum results in the page (server default when None)

        Returns:
            ContentResults: One page of children with paging metadata
        """
        params = _expand_params(expand)
        if start is not None:
            params.append(("start", str(start)))
        if limit is not None:
            params.append(("limit", str(limit)))
        endpoint = self._child_pages_endpoint(content_id, params)
        raw = self._transport.send(Request("GET", endpoint))
        return ContentResults.from_dict(decode_json(raw, "content results"))

    def _send_content(self, method: str, endpoint: str, payload: dict) -> Content:
        body = json.dumps(payload).encode("utf-8")
        raw = self._transport.send(Request(method, endpoint, dict(JSON_HEADERS), body))
        return Content.from_dict(decode_json(raw, "content"))

    # ------------------------------------------------------------------
    # Attachments

    def get_attachment_metadata(self, content_id: str, filename: str) -> AttachmentResults:
        """Look up attachments of a content item by file name.

        Filtering happens on the server; the result may be empty.
        """
        endpoint = self._attachment_by_filename_endpoint(content_id, filename)
        raw = self._transport.send(Request("GET", endpoint))
        return AttachmentResults.from_dict(decode_json(raw, "attachment results"))

    def get_attachment_data(self, content_id: str, filename: str) -> bytes:
        """Download the binary data of an attachment.

        Resolves the first attachment matching ``filename`` and fetches its
        download link relative to the site root.

        Raises:
            AttachmentNotFoundError: If no attachment matches or the match
                has no download link
        """
        metadata = self.get_attachment_metadata(content_id, filename)
        if not metadata.results:
            raise AttachmentNotFoundError(content_id, filename)

        attachment = metadata.results[0]
        if not attachment.download:
            raise AttachmentNotFoundError(content_id, filename, "no download link")

        url = self._download_url(attachment.download)
        return self._transport.send(Request("GET", url))

    def create_attachment(self, content_id: str, file_path: PathLike) -> AttachmentResults:
        """Upload a file as a new attachment of a content item.

        Raises:
            FileNotFoundError: If file_path does not exist
        """
        endpoint = self._create_attachment_endpoint(content_id)
        logger.info(f"Attaching {os.path.basename(file_path)} to content {content_id}")
        return self._upload(endpoint, file_path)

    def update_attachment(
        self,
        content_id: str,
        file_path: PathLike,
        attachment_id: str,
    ) -> AttachmentResults:
        """Replace the binary data of an existing attachment.

        Raises:
            FileNotFoundError: If file_path does not exist
        """
        endpoint = self._update_attachment_endpoint(content_id, attachment_id)
        logger.info(
            f"Replacing attachment {attachment_id} on content {content_id} "
            f"with {os.path.basename(file_path)}"
        )
        return self._upload(endpoint, file_path)

    def _upload(self, endpoint: str, file_path: PathLike) -> AttachmentResults:
        with open(file_path, "rb") as f:
            body, content_type = encode_multipart_formdata(
                {"file": (os.path.basename(file_path), f.read(), UPLOAD_CONTENT_TYPE)}
            )

        headers = {"Content-Type": content_type}
        headers[XSRF_HEADER[0]] = XSRF_HEADER[1]

        raw = self._transport.send(Request("POST", endpoint, headers, body))
        data = decode_json(raw, "attachment results")
        # The /data endpoint answers with the bare attachment
        if "results" not in data:
            return AttachmentResults(results=[Attachment.from_dict(data)], size=1)
        return AttachmentResults.from_dict(data)


def _expand_params(expand: Expand) -> List[Tuple[str, str]]:
    """Build the expand query parameter; it is sent even when empty."""
    if expand is None:
        value = ""
    elif isinstance(expand, str):
        value = expand
    else:
        value = ",".join(expand)
    return [("expand", value)]


def _content_id(content_id: str) -> str:
    """Validate a content identifier before it is placed in a URL path.

    Confluence content ids are always numeric.

    Raises:
        InvalidEndpointError: If content_id is empty or not numeric
    """
    value = str(content_id).strip() if content_id is not None else ""
    if not value:
        raise InvalidEndpointError("content_id cannot be empty")
    if not _CONTENT_ID.match(value):
        raise InvalidEndpointError(
            f"Invalid content_id format: '{content_id}'. "
            f"Content IDs must contain only numeric characters."
        )
    return value


def _attachment_id(attachment_id: str) -> str:
    value = str(attachment_id).strip() if attachment_id is not None else ""
    if not value or not _ATTACHMENT_ID.match(value):
        raise InvalidEndpointError(f"Invalid attachment_id format: '{attachment_id}'")
    return value
