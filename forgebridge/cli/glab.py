"""
GitLab CLI (``glab``) wrapper.

Self-hosted instances are selected through the ``GITLAB_HOST`` environment
variable of each glab invocation.
"""

import json
from datetime import datetime
from typing import Any

from forgebridge.cli.base import CliRunner
from forgebridge.config import DEFAULT_CLI_TIMEOUT
from forgebridge.exceptions import CommandFailedError, NotAuthenticatedError, ParseError
from forgebridge.types.merge_requests import (
    MergeRequestCreationRequest,
    MergeRequestInfo,
    MergeRequestState,
    parse_timestamp,
)
from forgebridge.types.providers import RepositoryIdentifier

GLAB_AUTH_MARKERS = (
    "authentication failed",
    "unauthorized",
    "bad credentials",
    "glab auth login",
    "not logged in",
)

_STATE_MAP = {
    "opened": MergeRequestState.OPEN,
    "merged": MergeRequestState.MERGED,
    "closed": MergeRequestState.CLOSED,
    "locked": MergeRequestState.CLOSED,
}


def map_mr_state(value: str | None) -> MergeRequestState:
    """Map a GitLab merge request state onto the unified state."""
    return _STATE_MAP.get((value or "opened").lower(), MergeRequestState.UNKNOWN)


def extract_mr_info(data: Any) -> MergeRequestInfo | None:
    """
    Build merge request info from a GitLab merge request object.

    Returns None when required fields (``iid``, ``web_url``) are missing.
    Shared by the CLI and REST backends, which return the same schema.
    """
    if not isinstance(data, dict):
        return None

    number = data.get("iid")
    url = data.get("web_url")
    if isinstance(number, bool) or not isinstance(number, int) or number < 0:
        return None
    if not isinstance(url, str) or not url:
        return None

    merged_at: datetime | None = None
    raw_merged_at = data.get("merged_at")
    if isinstance(raw_merged_at, str) and raw_merged_at:
        try:
            merged_at = parse_timestamp(raw_merged_at)
        except ValueError:
            merged_at = None

    sha = data.get("merge_commit_sha")

    return MergeRequestInfo(
        number=number,
        url=url,
        state=map_mr_state(data.get("state")),
        merged_at=merged_at,
        merge_commit_sha=sha if isinstance(sha, str) and sha else None,
    )


def parse_mr_create_output(raw: str) -> MergeRequestInfo:
    """
    Parse ``glab mr create`` output.

    glab prints free text such as::

        !123 Create new feature (https://gitlab.com/owner/repo/-/merge_requests/123)

    or only the URL.

    Raises:
        ParseError: If no merge request URL or number can be found
    """
    token = next(
        (
            token
            for line in raw.splitlines()
            for token in (word.lstrip("(<") for word in line.split())
            if token.startswith("http") and "/merge_requests/" in token
        ),
        None,
    )
    if token is None:
        raise ParseError(
            f"glab mr create did not return a merge request URL; raw output: {raw!r}"
        )

    url = token.rstrip(").,;>")
    tail = url.rsplit("/", 1)[-1]
    try:
        number = int(tail)
    except ValueError as e:
        raise ParseError(f"Failed to parse MR number from URL {url!r}") from e

    return MergeRequestInfo(number=number, url=url, state=MergeRequestState.OPEN)


def parse_mr_json(raw: str) -> MergeRequestInfo:
    """Parse ``glab mr view --output json`` output."""
    try:
        value = json.loads(raw.strip())
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse glab mr view response: {e}; raw: {raw!r}") from e

    info = extract_mr_info(value)
    if info is None:
        raise ParseError(f"glab mr view response missing required fields: {value!r}")
    return info


def parse_mr_list_json(raw: str) -> list[MergeRequestInfo]:
    """Parse ``glab mr list --output json`` output."""
    text = raw.strip()
    if not text:
        return []
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse glab mr list response: {e}; raw: {raw!r}") from e

    if not isinstance(value, list):
        raise ParseError(f"glab mr list response is not an array: {value!r}")

    result = []
    for item in value:
        info = extract_mr_info(item)
        if info is None:
            raise ParseError(f"glab mr list item missing required fields: {item!r}")
        result.append(info)
    return result


class GlabCli:
    """Blocking wrapper around the ``glab`` executable."""

    def __init__(self, host: str | None = None, timeout: float = DEFAULT_CLI_TIMEOUT) -> None:
        """
        Initialize the wrapper.

        Args:
            host: Self-hosted GitLab host, or None for gitlab.com
            timeout: Per-invocation timeout in seconds
        """
        self.host = host
        env = {"GITLAB_HOST": host} if host else None
        self.runner = CliRunner("glab", GLAB_AUTH_MARKERS, env=env, timeout=timeout)

    def check_auth(self) -> None:
        """
        Check that glab is installed and logged in.

        Raises:
            NotInstalledError: If glab is missing
            NotAuthenticatedError: If glab auth status fails
        """
        args = ["auth", "status"]
        if self.host:
            args.extend(["--hostname", self.host])
        try:
            self.runner.run(args)
        except CommandFailedError as e:
            raise NotAuthenticatedError(e.detail) from e

    def create_mr(
        self, repo: RepositoryIdentifier, request: MergeRequestCreationRequest
    ) -> MergeRequestInfo:
        args = [
            "mr",
            "create",
            "--repo",
            repo.full_path,
            "--source-branch",
            request.source_branch,
            "--target-branch",
            request.target_branch,
            "--title",
            request.title,
        ]
        if request.body:
            args.extend(["--description", request.body])
        if request.is_draft:
            args.append("--draft")
        # Skip the interactive confirmation prompt
        args.append("--yes")

        return parse_mr_create_output(self.runner.run(args))

    def get_mr_status(self, repo: RepositoryIdentifier, number: int) -> MergeRequestInfo:
        raw = self.runner.run(
            ["mr", "view", str(number), "--repo", repo.full_path, "--output", "json"]
        )
        return parse_mr_json(raw)

    def list_mrs_for_branch(
        self, repo: RepositoryIdentifier, branch: str
    ) -> list[MergeRequestInfo]:
        raw = self.runner.run(
            [
                "mr",
                "list",
                "--repo",
                repo.full_path,
                "--source-branch",
                branch,
                "--all",
                "--output",
                "json",
            ]
        )
        return parse_mr_list_json(raw)
