"""
Merge request workflows built on a provider.

Callers plug in their own follow-up runner (for example a coding agent that
rewrites the description) and shared-state publisher through small
protocols; this module only decides when to call them.
"""

from typing import Protocol

from forgebridge.logging import get_logger
from forgebridge.providers.base import GitProvider
from forgebridge.types.merge_requests import MergeRequestCreationRequest, MergeRequestInfo
from forgebridge.types.providers import RepositoryIdentifier

logger = get_logger()

DEFAULT_PR_DESCRIPTION_PROMPT = """Update the merge request that was just created with a better title and description.
The merge request number is #{pr_number} and the URL is {pr_url}.

Analyze the changes in this branch and write:
1. A concise, descriptive title that summarizes the changes
2. A detailed description that explains:
   - What changes were made
   - Why they were made (based on the task context)
   - Any important implementation details

Use the provider CLI (`gh pr edit` or `glab mr update`) to update the merge request."""


class FollowUpRunner(Protocol):
    """Starts follow-up work after a merge request is created."""

    async def start_follow_up(self, prompt: str) -> None: ...


class SharedUpdatePublisher(Protocol):
    """Publishes shared state once an attached merge request is known to be merged."""

    async def publish_update(self) -> None: ...


def render_follow_up_prompt(template: str, number: int, url: str) -> str:
    """Fill ``{pr_number}`` and ``{pr_url}`` placeholders in a prompt template."""
    return template.replace("{pr_number}", str(number)).replace("{pr_url}", url)


async def create_merge_request_with_follow_up(
    provider: GitProvider,
    repo: RepositoryIdentifier,
    request: MergeRequestCreationRequest,
    follow_up: FollowUpRunner | None = None,
    prompt_template: str | None = None,
) -> MergeRequestInfo:
    """
    Create a merge request and optionally start follow-up work on it.

    Args:
        provider: Provider bound to the repository's host
        repo: Target repository
        request: Title, branches, body and draft flag
        follow_up: Runner started with the rendered prompt once the MR exists
        prompt_template: Template with ``{pr_number}``/``{pr_url}``
            placeholders (default: DEFAULT_PR_DESCRIPTION_PROMPT)

    Returns:
        The created merge request

    Raises:
        ProviderError: If creation fails. Follow-up failures are logged only.
    """
    info = await provider.create_merge_request(repo, request)
    logger.info("Created %s merge request #%d: %s", provider.provider_type, info.number, info.url)

    if follow_up is None:
        return info

    prompt = render_follow_up_prompt(
        prompt_template or DEFAULT_PR_DESCRIPTION_PROMPT, info.number, info.url
    )
    try:
        await follow_up.start_follow_up(prompt)
    except Exception:
        logger.exception("Failed to start follow-up for merge request #%d", info.number)

    return info


async def attach_existing_merge_request(
    provider: GitProvider,
    repo: RepositoryIdentifier,
    branch: str,
    publisher: SharedUpdatePublisher | None = None,
) -> MergeRequestInfo | None:
    """
    Find the merge request already opened from ``branch``.

    The first merge request the provider lists is used. When it is already
    merged and a publisher is given, the shared update is published; a
    publishing failure is logged and does not affect the result.

    Returns:
        The merge request, or None if the branch has none
    """
    merge_requests = await provider.list_for_branch(repo, branch)
    if not merge_requests:
        logger.debug("No merge request found for branch %s in %s", branch, repo.full_path)
        return None

    info = merge_requests[0]
    logger.info("Attached merge request #%d (%s) for branch %s", info.number, info.state.value, branch)

    if info.is_merged and publisher is not None:
        try:
            await publisher.publish_update()
        except Exception:
            logger.exception("Failed to publish update for merged merge request #%d", info.number)

    return info


__all__ = [
    "DEFAULT_PR_DESCRIPTION_PROMPT",
    "FollowUpRunner",
    "SharedUpdatePublisher",
    "render_follow_up_prompt",
    "create_merge_request_with_follow_up",
    "attach_existing_merge_request",
]
