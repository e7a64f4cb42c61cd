"""Client configuration and credential loading.

This module holds the explicit configuration passed to WikiClient at
construction time and an Authenticator that builds it from environment
variables using python-dotenv. There is no process-wide client state.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError, InvalidCredentialsError

API_PATH = "/rest/api"
DEFAULT_TIMEOUT = 30.0

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


class WikiConfig(NamedTuple):
    """Connection settings for a single Confluence site.

    Attributes:
        url: Site root including its context path
             (e.g., https://yourinstance.atlassian.net/wiki)
        user: Confluence user email address
        api_token: Confluence API token
        timeout: Per-request timeout in seconds
        verify_tls: Whether TLS certificates are verified
    """
    url: str
    user: str
    api_token: str
    timeout: float = DEFAULT_TIMEOUT
    verify_tls: bool = True

    @property
    def site_url(self) -> str:
        """Site root without trailing slash; attachment downloads resolve here."""
        return self.url.rstrip("/")

    @property
    def api_url(self) -> str:
        """REST API base that endpoint paths are appended to."""
        return self.site_url + API_PATH


class Authenticator:
    """Loads and validates Confluence settings from environment variables.

    Values are loaded from a .env file using python-dotenv. Credentials are
    never cached or logged.

    Required environment variables:
        CONFLUENCE_URL: Confluence site root (e.g., https://yourinstance.atlassian.net/wiki)
        CONFLUENCE_USER: Confluence user email address
        CONFLUENCE_API_TOKEN: Confluence API token

    Optional environment variables:
        CONFLUENCE_TIMEOUT: Request timeout in seconds (default 30)
        CONFLUENCE_VERIFY_TLS: "false" to disable certificate checks

    Example:
        >>> config = Authenticator().get_config()
        >>> client = WikiClient(config)
    """

    def __init__(self, env_file: Optional[str] = None):
        """Load environment variables from the given .env file (or the default lookup)."""
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

    def get_config(self) -> WikiConfig:
        """Build a WikiConfig from environment variables.

        Returns:
            WikiConfig: Settings for the configured Confluence site

        Raises:
            InvalidCredentialsError: If any required variable is missing or empty
            ConfigurationError: If an optional variable cannot be parsed
        """
        url = os.getenv('CONFLUENCE_URL')
        user = os.getenv('CONFLUENCE_USER')
        api_token = os.getenv('CONFLUENCE_API_TOKEN')

        if not url or not user or not api_token:
            raise InvalidCredentialsError(
                user=user if user else "unknown",
                endpoint=url if url else "unknown"
            )

        return WikiConfig(
            url=url.rstrip("/"),
            user=user,
            api_token=api_token,
            timeout=_parse_timeout(os.getenv('CONFLUENCE_TIMEOUT')),
            verify_tls=_parse_bool('CONFLUENCE_VERIFY_TLS', os.getenv('CONFLUENCE_VERIFY_TLS')),
        )


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError as e:
        raise ConfigurationError('CONFLUENCE_TIMEOUT', raw, "not a number") from e
    if timeout <= 0:
        raise ConfigurationError('CONFLUENCE_TIMEOUT', raw, "must be positive")
    return timeout


def _parse_bool(setting: str, raw: Optional[str]) -> bool:
    if not raw:
        return True
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(setting, raw, "expected true or false")
