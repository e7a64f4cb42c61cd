"""Test helper modules for wiki client testing.

This package provides transports that stand in for a Confluence server:
- stub_transport: Records requests and replays canned responses
- fake_confluence: In-memory content store with version checks
"""

from .stub_transport import StubTransport
from .fake_confluence import FakeConfluence

__all__ = [
    'StubTransport',
    'FakeConfluence',
]
