"""GitHub provider backed by the gh CLI."""

import asyncio
from collections.abc import Callable
from typing import TypeVar

from forgebridge.cli.gh import GhCli
from forgebridge.providers.base import GitProvider
from forgebridge.retry import RetryConfig, retry_async
from forgebridge.types.comments import UnifiedComment, unify_comments
from forgebridge.types.merge_requests import MergeRequestCreationRequest, MergeRequestInfo
from forgebridge.types.providers import ProviderType, RepositoryIdentifier

T = TypeVar("T")


class GitHubProvider(GitProvider):
    """
    GitHub provider.

    Every gh invocation runs in a worker thread and goes through the retry
    policy.

    Example:
        ```python
        provider = GitHubProvider()
        repo = RepositoryIdentifier.github("octo", "hello")
        pr = await provider.create_merge_request(
            repo,
            MergeRequestCreationRequest(
                title="Add feature",
                source_branch="feature",
                target_branch="main",
            ),
        )
        ```
    """

    def __init__(
        self,
        cli: GhCli | None = None,
        retry_config: RetryConfig | None = None,
    ) -> None:
        self.cli = cli or GhCli()
        self.retry_config = retry_config

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.GITHUB

    async def _run(self, description: str, func: Callable[..., T], *args: object) -> T:
        return await retry_async(
            lambda: asyncio.to_thread(func, *args),
            self.retry_config,
            description=description,
        )

    async def check_auth(self) -> None:
        await self._run("gh auth status", self.cli.check_auth)

    async def create_merge_request(
        self, repo: RepositoryIdentifier, request: MergeRequestCreationRequest
    ) -> MergeRequestInfo:
        return await self._run("gh pr create", self.cli.create_pr, repo, request)

    async def get_status(self, repo: RepositoryIdentifier, number: int) -> MergeRequestInfo:
        return await self._run("gh pr view", self.cli.view_pr, repo, number)

    async def list_for_branch(
        self, repo: RepositoryIdentifier, branch: str
    ) -> list[MergeRequestInfo]:
        return await self._run("gh pr list", self.cli.list_prs_for_branch, repo, branch)

    async def get_comments(
        self, repo: RepositoryIdentifier, number: int
    ) -> list[UnifiedComment]:
        # Both fetches are retried independently; a failure cancels the other
        try:
            async with asyncio.TaskGroup() as group:
                general = group.create_task(
                    self._run("gh pr view comments", self.cli.get_pr_comments, repo, number)
                )
                review = group.create_task(
                    self._run(
                        "gh api review comments", self.cli.get_pr_review_comments, repo, number
                    )
                )
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None

        return unify_comments(general.result(), review.result())
