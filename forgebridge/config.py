"""
Provider configuration.

Configuration is passed explicitly into providers. Only ``from_env`` reads
the process environment, so callers decide where settings come from.
"""

import os
from dataclasses import dataclass
from urllib.parse import urlsplit

from forgebridge.exceptions import ConfigurationError

GITLAB_CLOUD_URL = "https://gitlab.com"
_API_SUFFIX = "/api/v4"

DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_CLI_TIMEOUT = 60.0


@dataclass(frozen=True)
class GitLabConfig:
    """
    Settings for the GitLab provider.

    Example:
        ```python
        from forgebridge.config import GitLabConfig

        # Public gitlab.com, comments disabled (no token)
        config = GitLabConfig()

        # Self-hosted instance with API access
        config = GitLabConfig(
            base_url="https://gitlab.example.com",
            token="glpat-...",
        )

        # Or read GITLAB_BASE_URL / GITLAB_TOKEN
        config = GitLabConfig.from_env()
        ```
    """

    base_url: str = GITLAB_CLOUD_URL
    token: str | None = None
    timeout: float = DEFAULT_HTTP_TIMEOUT

    def __post_init__(self) -> None:
        parts = urlsplit(self.base_url.strip())
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ConfigurationError(
                f"Invalid GitLab base URL: {self.base_url!r}. "
                "Expected something like https://gitlab.example.com"
            )

    def __repr__(self) -> str:
        token = "[REDACTED]" if self.token else None
        return (
            f"GitLabConfig(base_url={self.base_url!r}, token={token!r}, "
            f"timeout={self.timeout!r})"
        )

    @classmethod
    def from_env(cls, timeout: float = DEFAULT_HTTP_TIMEOUT) -> "GitLabConfig":
        """
        Create a configuration from environment variables.

        Environment variables:
            GITLAB_BASE_URL: Instance URL (optional, default: https://gitlab.com).
                A value ending in /api/v4 is accepted.
            GITLAB_TOKEN: Personal access token (optional). Without it comment
                retrieval returns no comments.

        Raises:
            ConfigurationError: If GITLAB_BASE_URL is not an http(s) URL
        """
        base_url = os.environ.get("GITLAB_BASE_URL") or GITLAB_CLOUD_URL
        token = os.environ.get("GITLAB_TOKEN") or None
        return cls(base_url=base_url, token=token, timeout=timeout)

    @classmethod
    def for_host(cls, host: str, token: str | None = None) -> "GitLabConfig":
        """Configuration for a GitLab instance served over HTTPS at ``host``."""
        return cls(base_url=f"https://{host}", token=token)

    @property
    def web_base_url(self) -> str:
        """Instance URL without the API suffix or trailing slash."""
        url = self.base_url.strip().rstrip("/")
        if url.endswith(_API_SUFFIX):
            url = url[: -len(_API_SUFFIX)]
        return url.rstrip("/")

    @property
    def api_base_url(self) -> str:
        return f"{self.web_base_url}{_API_SUFFIX}"

    @property
    def is_self_hosted(self) -> bool:
        return self.web_base_url != GITLAB_CLOUD_URL

    @property
    def cli_host(self) -> str | None:
        """Host passed to glab as GITLAB_HOST, or None for gitlab.com."""
        if not self.is_self_hosted:
            return None
        return urlsplit(self.web_base_url).netloc

    @property
    def has_token(self) -> bool:
        return bool(self.token)
