"""
Pytest fixtures for forgebridge testing.

Provides common fixtures and factory helpers for testing code that drives a
GitProvider.
"""

from datetime import datetime, timezone
from typing import Any, Generator

import pytest

from forgebridge.retry import RetryConfig
from forgebridge.testing.mock import MockGitProvider
from forgebridge.types.comments import GeneralComment, ReviewComment
from forgebridge.types.merge_requests import (
    MergeRequestCreationRequest,
    MergeRequestInfo,
    MergeRequestState,
)
from forgebridge.types.providers import ProviderType, RepositoryIdentifier

_SAMPLE_TIME = datetime(2024, 1, 15, 10, 30, 0, tzinfo=timezone.utc)


# ============================================================================
# Mock Provider Fixtures
# ============================================================================


@pytest.fixture
def mock_provider() -> Generator[MockGitProvider, None, None]:
    """
    Provide a GitHub MockGitProvider for testing.

    Example:
        ```python
        async def test_my_feature(mock_provider, sample_repository):
            mock_provider.configure_list_for_branch(response=[])
            assert await find_pr(mock_provider, sample_repository) is None
            assert mock_provider.was_called("list_for_branch")
        ```
    """
    provider = MockGitProvider(ProviderType.GITHUB)
    yield provider
    provider.reset()


@pytest.fixture
def mock_gitlab_provider() -> Generator[MockGitProvider, None, None]:
    """Provide a GitLab MockGitProvider for testing."""
    provider = MockGitProvider(ProviderType.GITLAB)
    yield provider
    provider.reset()


@pytest.fixture
def no_delay_retry_config() -> RetryConfig:
    """Provide a retry configuration that never sleeps."""
    return RetryConfig(initial_delay=0.0, max_delay=0.0, jitter=0.0)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_repository() -> RepositoryIdentifier:
    """Provide a sample GitHub repository."""
    return create_mock_repository()


@pytest.fixture
def sample_gitlab_repository() -> RepositoryIdentifier:
    """Provide a sample self-hosted GitLab repository with a nested namespace."""
    return create_mock_repository(
        provider=ProviderType.GITLAB,
        owner="org/team",
        name="project",
        host="gitlab.example.com",
    )


@pytest.fixture
def sample_creation_request() -> MergeRequestCreationRequest:
    """Provide a sample merge request creation request."""
    return MergeRequestCreationRequest(
        title="Add login page",
        source_branch="feature/login",
        target_branch="main",
        body="Implements the login form.",
    )


@pytest.fixture
def sample_merge_request() -> MergeRequestInfo:
    """Provide a sample open merge request."""
    return create_mock_merge_request()


@pytest.fixture
def sample_merged_merge_request() -> MergeRequestInfo:
    """Provide a sample merged merge request."""
    return create_mock_merge_request(
        number=43,
        state=MergeRequestState.MERGED,
        merged_at=_SAMPLE_TIME,
        merge_commit_sha="0123456789abcdef0123456789abcdef01234567",
    )


@pytest.fixture
def sample_general_comment() -> GeneralComment:
    """Provide a sample general comment."""
    return create_mock_general_comment()


@pytest.fixture
def sample_review_comment() -> ReviewComment:
    """Provide a sample review comment."""
    return create_mock_review_comment()


@pytest.fixture
def mock_provider_with_merge_request(
    mock_provider: MockGitProvider,
    sample_merge_request: MergeRequestInfo,
) -> MockGitProvider:
    """Provide a mock provider whose branch listing returns a sample merge request."""
    mock_provider.configure_list_for_branch(response=[sample_merge_request])
    mock_provider.configure_get_status(response=sample_merge_request)
    return mock_provider


# ============================================================================
# Helper Functions
# ============================================================================


def create_mock_repository(
    provider: ProviderType = ProviderType.GITHUB,
    owner: str = "test-owner",
    name: str = "test-repo",
    host: str | None = None,
) -> RepositoryIdentifier:
    """
    Create a RepositoryIdentifier with customizable fields.

    Args:
        provider: Hosting provider
        owner: Owner or GitLab namespace
        name: Repository name
        host: Self-hosted GitLab host

    Returns:
        RepositoryIdentifier object
    """
    return RepositoryIdentifier(provider=provider, owner=owner, name=name, host=host)


def create_mock_merge_request(
    number: int = 42,
    url: str | None = None,
    state: MergeRequestState = MergeRequestState.OPEN,
    **kwargs: Any,
) -> MergeRequestInfo:
    """
    Create a MergeRequestInfo with customizable fields.

    Args:
        number: Merge request number
        url: Web URL (default: a github.com pull request URL)
        state: Merge request state
        **kwargs: merged_at / merge_commit_sha overrides

    Returns:
        MergeRequestInfo object
    """
    return MergeRequestInfo(
        number=number,
        url=url or f"https://github.com/test-owner/test-repo/pull/{number}",
        state=state,
        **kwargs,
    )


def create_mock_general_comment(
    comment_id: str = "IC_kwDOtest1",
    author: str = "octocat",
    body: str = "Looks good to me",
    created_at: datetime | None = None,
    **kwargs: Any,
) -> GeneralComment:
    """
    Create a GeneralComment with customizable fields.

    Args:
        comment_id: Comment ID
        author: Author login
        body: Comment text
        created_at: Creation time (default: a fixed sample time)
        **kwargs: Additional fields to override

    Returns:
        GeneralComment object
    """
    defaults = {
        "author_association": "MEMBER",
        "url": "https://github.com/test-owner/test-repo/pull/42#issuecomment-1",
    }
    defaults.update(kwargs)
    return GeneralComment(
        id=comment_id,
        author=author,
        body=body,
        created_at=created_at or _SAMPLE_TIME,
        **defaults,
    )


def create_mock_review_comment(
    comment_id: int = 1001,
    author: str = "reviewer",
    body: str = "Consider renaming this variable",
    created_at: datetime | None = None,
    **kwargs: Any,
) -> ReviewComment:
    """
    Create a ReviewComment with customizable fields.

    Args:
        comment_id: Comment ID
        author: Author login
        body: Comment text
        created_at: Creation time (default: a fixed sample time)
        **kwargs: Additional fields to override

    Returns:
        ReviewComment object
    """
    defaults = {
        "author_association": "CONTRIBUTOR",
        "url": "https://github.com/test-owner/test-repo/pull/42#discussion_r1001",
        "path": "src/app.py",
        "line": 12,
        "diff_hunk": "@@ -10,3 +10,4 @@",
    }
    defaults.update(kwargs)
    return ReviewComment(
        id=comment_id,
        author=author,
        body=body,
        created_at=created_at or _SAMPLE_TIME,
        **defaults,
    )


__all__ = [
    # Fixtures
    "mock_provider",
    "mock_gitlab_provider",
    "no_delay_retry_config",
    "sample_repository",
    "sample_gitlab_repository",
    "sample_creation_request",
    "sample_merge_request",
    "sample_merged_merge_request",
    "sample_general_comment",
    "sample_review_comment",
    "mock_provider_with_merge_request",
    # Helper functions
    "create_mock_repository",
    "create_mock_merge_request",
    "create_mock_general_comment",
    "create_mock_review_comment",
]
