"""Root pytest configuration and shared fixtures for all tests."""

import logging

import pytest

from confluence_wiki.client import WikiClient
from confluence_wiki.config import WikiConfig
from tests.fixtures import SITE_URL
from tests.helpers import FakeConfluence, StubTransport

# Keep urllib3 connection chatter out of captured logs
logging.getLogger("urllib3").setLevel(logging.WARNING)


@pytest.fixture
def wiki_config():
    """Config for a fake Confluence site."""
    return WikiConfig(
        url=SITE_URL,
        user="test@example.com",
        api_token="test-token-123",
    )

@pytest.fixture
def stub_transport():
    """Transport that records requests and replays queued responses."""
    return StubTransport()

@pytest.fixture
def client(wiki_config, stub_transport):
    """WikiClient wired to the stub transport."""
    return WikiClient(wiki_config, stub_transport)

@pytest.fixture
def fake_confluence():
    """In-memory Confluence server."""
    return FakeConfluence()

@pytest.fixture
def fake_client(wiki_config, fake_confluence):
    """WikiClient wired to the in-memory server."""
    return WikiClient(wiki_config, fake_confluence)
