"""Unit tests for WikiClient attachment operations."""

import pytest
from unittest.mock import mock_open, patch

from confluence_wiki.errors import (
    AttachmentNotFoundError,
    DeserializationError,
    HTTPStatusError,
    InvalidEndpointError,
)
from tests.fixtures import (
    API_URL,
    ATTACHMENT_RESULTS_RESPONSE,
    EMPTY_ATTACHMENT_RESULTS_RESPONSE,
    SINGLE_ATTACHMENT_RESPONSE,
    SITE_URL,
)


@pytest.fixture
def upload_file(tmp_path):
    """A small file to upload."""
    path = tmp_path / "diagram.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nfake image data")
    return path


class TestGetAttachmentMetadata:
    """Test cases for get_attachment_metadata."""

    def test_queries_by_filename(self, client, stub_transport):
        stub_transport.respond(ATTACHMENT_RESULTS_RESPONSE)

        results = client.get_attachment_metadata("123456", "diagram.png")

        assert stub_transport.last_request.method == "GET"
        assert stub_transport.last_request.url == \
            f"{API_URL}/content/123456/child/attachment?filename=diagram.png"
        assert results.results[0].id == "att789"

    def test_empty_result_is_returned_as_is(self, client, stub_transport):
        stub_transport.respond(EMPTY_ATTACHMENT_RESULTS_RESPONSE)

        results = client.get_attachment_metadata("123456", "missing.png")

        assert results.results == []


class TestGetAttachmentData:
    """Test cases for get_attachment_data."""

    def test_downloads_from_site_root(self, client, stub_transport):
        stub_transport.respond(ATTACHMENT_RESULTS_RESPONSE, b"\x89PNG binary")

        data = client.get_attachment_data("123456", "diagram.png")

        assert data == b"\x89PNG binary"
        assert len(stub_transport.requests) == 2
        download = stub_transport.requests[1]
        assert download.method == "GET"
        assert download.url == \
            f"{SITE_URL}/download/attachments/123456/diagram.png?version=2&api=v2"

    def test_uses_first_match(self, client, stub_transport):
        response = dict(ATTACHMENT_RESULTS_RESPONSE)
        response["results"] = [
            {"id": "att1", "title": "a.txt", "_links": {"download": "/download/first"}},
            {"id": "att2", "title": "a.txt", "_links": {"download": "/download/second"}},
        ]
        stub_transport.respond(response, b"first")

        client.get_attachment_data("123456", "a.txt")

        assert stub_transport.last_request.url == f"{SITE_URL}/download/first"

    def test_no_match_raises_attachment_not_found(self, client, stub_transport):
        stub_transport.respond(EMPTY_ATTACHMENT_RESULTS_RESPONSE)

        with pytest.raises(AttachmentNotFoundError) as exc_info:
            client.get_attachment_data("123456", "missing.png")

        assert exc_info.value.filename == "missing.png"
        assert exc_info.value.content_id == "123456"
        assert len(stub_transport.requests) == 1

    def test_missing_download_link_raises_attachment_not_found(self, client, stub_transport):
        stub_transport.respond({"results": [{"id": "att1", "title": "a.txt"}]})

        with pytest.raises(AttachmentNotFoundError) as exc_info:
            client.get_attachment_data("123456", "a.txt")

        assert exc_info.value.reason == "no download link"

    def test_download_link_to_another_host_is_not_fetched(self, client, stub_transport):
        stub_transport.respond({
            "results": [{
                "id": "att1",
                "title": "a.txt",
                "_links": {"download": "https://attacker.example.org/collect"},
            }],
        })

        with pytest.raises(InvalidEndpointError):
            client.get_attachment_data("123456", "a.txt")

        assert len(stub_transport.requests) == 1

    def test_download_failure_propagates(self, client, stub_transport):
        stub_transport.respond(
            ATTACHMENT_RESULTS_RESPONSE,
            HTTPStatusError(500, "GET", f"{SITE_URL}/download/x"),
        )

        with pytest.raises(HTTPStatusError):
            client.get_attachment_data("123456", "diagram.png")


class TestCreateAttachment:
    """Test cases for create_attachment."""

    def test_posts_multipart_with_xsrf_header(self, client, stub_transport, upload_file):
        stub_transport.respond(ATTACHMENT_RESULTS_RESPONSE)

        results = client.create_attachment("123456", str(upload_file))

        request = stub_transport.last_request
        assert request.method == "POST"
        assert request.url == f"{API_URL}/content/123456/child/attachment"
        assert request.headers["X-Atlassian-Token"] == "nocheck"
        assert results.results[0].id == "att789"

    def test_multipart_body_has_single_file_part(self, client, stub_transport, upload_file):
        stub_transport.respond(ATTACHMENT_RESULTS_RESPONSE)

        client.create_attachment("123456", upload_file)

        request = stub_transport.last_request
        content_type = request.headers["Content-Type"]
        assert content_type.startswith("multipart/form-data; boundary=")
        boundary = content_type.split("boundary=", 1)[1].encode()

        body = request.body
        assert body.count(b"--" + boundary) == 2
        assert body.rstrip().endswith(b"--" + boundary + b"--")
        assert b'Content-Disposition: form-data; name="file"; filename="diagram.png"' in body
        assert b"\x89PNG\r\n\x1a\nfake image data" in body

    def test_filename_is_base_name(self, client, stub_transport, tmp_path):
        nested = tmp_path / "docs" / "images"
        nested.mkdir(parents=True)
        path = nested / "chart.svg"
        path.write_bytes(b"<svg/>")
        stub_transport.respond(ATTACHMENT_RESULTS_RESPONSE)

        client.create_attachment("123456", str(path))

        body = stub_transport.last_request.body
        assert b'filename="chart.svg"' in body
        assert b"docs" not in body

    def test_missing_file_raises_before_request(self, client, stub_transport, tmp_path):
        with pytest.raises(FileNotFoundError):
            client.create_attachment("123456", str(tmp_path / "nope.png"))
        assert stub_transport.requests == []

    def test_file_is_closed_after_upload(self, client, stub_transport):
        stub_transport.respond(ATTACHMENT_RESULTS_RESPONSE)
        opener = mock_open(read_data=b"data")

        with patch("builtins.open", opener):
            client.create_attachment("123456", "/tmp/report.txt")

        opener.assert_called_once_with("/tmp/report.txt", "rb")
        opener.return_value.__exit__.assert_called_once()

    def test_file_is_closed_when_read_fails(self, client, stub_transport):
        opener = mock_open()
        opener.return_value.read.side_effect = OSError("disk error")

        with patch("builtins.open", opener):
            with pytest.raises(OSError):
                client.create_attachment("123456", "/tmp/report.txt")

        opener.return_value.__exit__.assert_called_once()
        assert stub_transport.requests == []

    def test_malformed_response_raises(self, client, stub_transport, upload_file):
        stub_transport.respond({"results": [{"title": "no id"}]})

        with pytest.raises(DeserializationError):
            client.create_attachment("123456", str(upload_file))


class TestUpdateAttachment:
    """Test cases for update_attachment."""

    def test_posts_to_data_endpoint_with_xsrf_header(self, client, stub_transport, upload_file):
        stub_transport.respond(SINGLE_ATTACHMENT_RESPONSE)

        client.update_attachment("123456", str(upload_file), "att789")

        request = stub_transport.last_request
        assert request.method == "POST"
        assert request.url == f"{API_URL}/content/123456/child/attachment/att789/data"
        assert request.headers["X-Atlassian-Token"] == "nocheck"
        assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        assert b'name="file"; filename="diagram.png"' in request.body

    def test_single_attachment_response_is_wrapped(self, client, stub_transport, upload_file):
        stub_transport.respond(SINGLE_ATTACHMENT_RESPONSE)

        results = client.update_attachment("123456", str(upload_file), "att789")

        assert len(results.results) == 1
        assert results.size == 1
        assert results.results[0].version == 2

    def test_envelope_response_is_accepted(self, client, stub_transport, upload_file):
        stub_transport.respond(ATTACHMENT_RESULTS_RESPONSE)

        results = client.update_attachment("123456", str(upload_file), "att789")

        assert results.results[0].id == "att789"
        assert results.limit == 50


class TestXsrfHeaderOnEveryUpload:
    """Every multipart write carries X-Atlassian-Token: nocheck."""

    def test_both_upload_paths(self, client, stub_transport, upload_file):
        stub_transport.respond(ATTACHMENT_RESULTS_RESPONSE, SINGLE_ATTACHMENT_RESPONSE)

        client.create_attachment("123456", str(upload_file))
        client.update_attachment("123456", str(upload_file), "att789")

        assert len(stub_transport.requests) == 2
        for request in stub_transport.requests:
            assert request.headers.get("X-Atlassian-Token") == "nocheck"
