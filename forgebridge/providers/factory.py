"""
Provider construction.

The only place that branches on the provider type.
"""

from pathlib import Path

from forgebridge.config import GitLabConfig
from forgebridge.detection import detect_provider
from forgebridge.exceptions import ConfigurationError
from forgebridge.logging import get_logger
from forgebridge.providers.base import GitProvider
from forgebridge.providers.github import GitHubProvider
from forgebridge.providers.gitlab import GitLabProvider
from forgebridge.retry import RetryConfig
from forgebridge.types.providers import ProviderType, RepositoryIdentifier

logger = get_logger()


def _resolve_gitlab_config(
    gitlab_config: GitLabConfig | None, repo: RepositoryIdentifier | None = None
) -> GitLabConfig:
    if gitlab_config is not None:
        return gitlab_config

    config = GitLabConfig.from_env()
    # A self-hosted remote wins over the gitlab.com default
    if repo is not None and repo.host and not config.is_self_hosted:
        logger.debug("Targeting self-hosted GitLab at %s from the git remote", repo.host)
        return GitLabConfig.for_host(repo.host, token=config.token)
    return config


def create_provider_by_type(
    provider_type: ProviderType | str,
    gitlab_config: GitLabConfig | None = None,
    retry_config: RetryConfig | None = None,
) -> GitProvider:
    """
    Create a provider without inspecting any repository.

    Args:
        provider_type: ``ProviderType`` or its value ("github", "gitlab")
        gitlab_config: GitLab settings (default: ``GitLabConfig.from_env()``)
        retry_config: Retry behavior (default: 3 retries, 1s initial, 30s cap)

    Raises:
        ConfigurationError: If the provider type is not recognized
    """
    if not isinstance(provider_type, ProviderType):
        try:
            provider_type = ProviderType(str(provider_type).strip().lower())
        except ValueError as e:
            raise ConfigurationError(f"Unsupported provider type: {provider_type!r}") from e

    if provider_type is ProviderType.GITHUB:
        return GitHubProvider(retry_config=retry_config)
    return GitLabProvider(_resolve_gitlab_config(gitlab_config), retry_config=retry_config)


def open_repository(
    repo_path: str | Path,
    gitlab_config: GitLabConfig | None = None,
    retry_config: RetryConfig | None = None,
) -> tuple[GitProvider, RepositoryIdentifier]:
    """
    Detect the provider of a local repository and bind a provider to it.

    Example:
        ```python
        provider, repo = open_repository("/path/to/checkout")
        prs = await provider.list_for_branch(repo, "feature/login")
        ```

    Raises:
        GitError: If the path is not a repository or has no remote
        UnknownProviderError: If the remote is neither GitHub nor GitLab
    """
    provider_type, repo = detect_provider(repo_path)
    logger.debug("Detected %s repository %s", provider_type, repo.full_path)

    if provider_type is ProviderType.GITHUB:
        return GitHubProvider(retry_config=retry_config), repo
    config = _resolve_gitlab_config(gitlab_config, repo)
    return GitLabProvider(config, retry_config=retry_config), repo


def create_provider(
    repo_path: str | Path,
    gitlab_config: GitLabConfig | None = None,
    retry_config: RetryConfig | None = None,
) -> GitProvider:
    """
    Create the provider for a local repository from its git remote.

    Raises:
        GitError: If the path is not a repository or has no remote
        UnknownProviderError: If the remote is neither GitHub nor GitLab
    """
    provider, _ = open_repository(repo_path, gitlab_config, retry_config)
    return provider
