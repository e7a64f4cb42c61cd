"""Test fixtures for wiki client tests.

This module provides:
- Sample storage-format page bodies
- Sample Confluence REST API response documents
"""

from .sample_pages import (
    SAMPLE_PAGE_SIMPLE,
    SAMPLE_PAGE_WITH_MACROS,
)
from .sample_responses import (
    SITE_URL,
    API_URL,
    CONTENT_RESPONSE,
    CHILD_PAGES_RESPONSE,
    ATTACHMENT_RESULTS_RESPONSE,
    EMPTY_ATTACHMENT_RESULTS_RESPONSE,
    SINGLE_ATTACHMENT_RESPONSE,
)

__all__ = [
    'SITE_URL',
    'API_URL',
    'SAMPLE_PAGE_SIMPLE',
    'SAMPLE_PAGE_WITH_MACROS',
    'CONTENT_RESPONSE',
    'CHILD_PAGES_RESPONSE',
    'ATTACHMENT_RESULTS_RESPONSE',
    'EMPTY_ATTACHMENT_RESULTS_RESPONSE',
    'SINGLE_ATTACHMENT_RESPONSE',
]
