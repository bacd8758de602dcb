"""GitLab provider: glab CLI for merge requests, REST API for comments."""

import asyncio
from collections.abc import Callable
from typing import TypeVar

import httpx

from forgebridge.cli.glab import GlabCli
from forgebridge.config import GitLabConfig
from forgebridge.gitlab_api import GitLabApiClient
from forgebridge.logging import get_logger
from forgebridge.providers.base import GitProvider
from forgebridge.retry import RetryConfig, retry_async
from forgebridge.types.comments import UnifiedComment
from forgebridge.types.merge_requests import MergeRequestCreationRequest, MergeRequestInfo
from forgebridge.types.providers import ProviderType, RepositoryIdentifier

T = TypeVar("T")

logger = get_logger()


class GitLabProvider(GitProvider):
    """
    GitLab provider for gitlab.com and self-hosted instances.

    Merge request creation, status and listing go through glab only; a
    missing or logged-out CLI is reported, never papered over with the REST
    API. Comments come from the REST API only and are skipped when no token
    is configured.

    Example:
        ```python
        provider = GitLabProvider(GitLabConfig.from_env())
        repo = RepositoryIdentifier.gitlab("org/team", "project")
        comments = await provider.get_comments(repo, 7)
        ```
    """

    def __init__(
        self,
        config: GitLabConfig | None = None,
        retry_config: RetryConfig | None = None,
        cli: GlabCli | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the provider.

        Args:
            config: Instance settings (default: gitlab.com without a token)
            retry_config: Retry behavior for CLI and API calls
            cli: Custom glab wrapper (default: one bound to config.cli_host)
            transport: Custom httpx transport for the REST client (used by tests)
        """
        self.config = config or GitLabConfig()
        self.retry_config = retry_config
        self.cli = cli or GlabCli(host=self.config.cli_host)
        self._transport = transport

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.GITLAB

    def api_client(self) -> GitLabApiClient:
        """Create a REST client for one logical operation."""
        return GitLabApiClient(self.config, self.retry_config, transport=self._transport)

    async def _run(self, description: str, func: Callable[..., T], *args: object) -> T:
        return await retry_async(
            lambda: asyncio.to_thread(func, *args),
            self.retry_config,
            description=description,
        )

    async def check_auth(self) -> None:
        await self._run("glab auth status", self.cli.check_auth)

    async def check_api_auth(self) -> str:
        """
        Verify the configured API token.

        Returns:
            The username the token belongs to

        Raises:
            NotAuthenticatedError: If no token is configured or it is rejected
        """
        async with self.api_client() as api:
            return await api.check_auth()

    async def create_merge_request(
        self, repo: RepositoryIdentifier, request: MergeRequestCreationRequest
    ) -> MergeRequestInfo:
        return await self._run("glab mr create", self.cli.create_mr, repo, request)

    async def get_status(self, repo: RepositoryIdentifier, number: int) -> MergeRequestInfo:
        return await self._run("glab mr view", self.cli.get_mr_status, repo, number)

    async def list_for_branch(
        self, repo: RepositoryIdentifier, branch: str
    ) -> list[MergeRequestInfo]:
        return await self._run("glab mr list", self.cli.list_mrs_for_branch, repo, branch)

    async def get_comments(
        self, repo: RepositoryIdentifier, number: int
    ) -> list[UnifiedComment]:
        if not self.config.has_token:
            logger.info(
                "GITLAB_TOKEN not set; skipping comments for %s!%d",
                repo.full_path,
                number,
            )
            return []

        async with self.api_client() as api:
            return await api.get_comments(repo, number)
