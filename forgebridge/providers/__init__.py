"""Git hosting providers and their factory."""

from forgebridge.providers.base import GitProvider
from forgebridge.providers.factory import (
    create_provider,
    create_provider_by_type,
    open_repository,
)
from forgebridge.providers.github import GitHubProvider
from forgebridge.providers.gitlab import GitLabProvider

__all__ = [
    "GitProvider",
    "GitHubProvider",
    "GitLabProvider",
    "create_provider",
    "create_provider_by_type",
    "open_repository",
]
