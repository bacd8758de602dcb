"""
GitHub CLI (``gh``) wrapper.

Each command has a matching pure parse function so output handling can be
tested without spawning a process.
"""

import json
from datetime import datetime
from typing import Any

from forgebridge.cli.base import CliRunner
from forgebridge.config import DEFAULT_CLI_TIMEOUT
from forgebridge.exceptions import CommandFailedError, NotAuthenticatedError, ParseError
from forgebridge.types.comments import GeneralComment, ReviewComment
from forgebridge.types.merge_requests import (
    MergeRequestCreationRequest,
    MergeRequestInfo,
    MergeRequestState,
    parse_timestamp,
)
from forgebridge.types.providers import RepositoryIdentifier

GH_AUTH_MARKERS = (
    "authentication failed",
    "bad credentials",
    "gh auth login",
    "not logged into",
    "not logged in",
    "must authenticate",
    "unauthorized",
    "http 401",
)

PR_JSON_FIELDS = "number,url,state,mergedAt,mergeCommit"

_STATE_MAP = {
    "open": MergeRequestState.OPEN,
    "merged": MergeRequestState.MERGED,
    "closed": MergeRequestState.CLOSED,
}


def _load_json(raw: str, what: str) -> Any:
    try:
        return json.loads(raw.strip())
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse {what} response: {e}; raw: {raw!r}") from e


def _load_json_pages(raw: str, what: str) -> list[Any]:
    """Decode ``gh api --paginate`` output, which concatenates one array per page."""
    decoder = json.JSONDecoder()
    items: list[Any] = []
    text = raw.strip()
    index = 0
    while index < len(text):
        try:
            page, index = decoder.raw_decode(text, index)
        except json.JSONDecodeError as e:
            raise ParseError(f"Failed to parse {what} response: {e}; raw: {raw!r}") from e
        if not isinstance(page, list):
            raise ParseError(f"{what} response is not an array: {page!r}")
        items.extend(page)
        while index < len(text) and text[index].isspace():
            index += 1
    return items


def _parse_optional_timestamp(value: Any, what: str) -> datetime | None:
    if not value:
        return None
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Invalid {what} timestamp {value!r}") from e


def _pr_from_dict(data: Any) -> MergeRequestInfo:
    if not isinstance(data, dict):
        raise ParseError(f"Expected a pull request object, got {data!r}")

    number = data.get("number")
    url = data.get("url")
    if isinstance(number, bool) or not isinstance(number, int) or number < 0:
        raise ParseError(f"Pull request response missing a valid number: {data!r}")
    if not isinstance(url, str) or not url:
        raise ParseError(f"Pull request response missing url: {data!r}")

    state = _STATE_MAP.get(str(data.get("state") or "").lower(), MergeRequestState.UNKNOWN)

    merge_commit = data.get("mergeCommit")
    sha = merge_commit.get("oid") if isinstance(merge_commit, dict) else None
    sha = sha or data.get("mergeCommitSha") or None

    return MergeRequestInfo(
        number=number,
        url=url,
        state=state,
        merged_at=_parse_optional_timestamp(data.get("mergedAt"), "mergedAt"),
        merge_commit_sha=sha,
    )


def parse_pr_json(raw: str) -> MergeRequestInfo:
    """Parse ``gh pr view --json`` output."""
    return _pr_from_dict(_load_json(raw, "gh pr view"))


def parse_pr_list_json(raw: str) -> list[MergeRequestInfo]:
    """Parse ``gh pr list --json`` output."""
    data = _load_json(raw, "gh pr list")
    if not isinstance(data, list):
        raise ParseError(f"gh pr list response is not an array: {data!r}")
    return [_pr_from_dict(item) for item in data]


def parse_pr_create_output(raw: str) -> MergeRequestInfo:
    """
    Parse ``gh pr create`` output.

    gh prints the URL of the new pull request, possibly after progress lines.
    """
    url = next(
        (
            token.rstrip(").,;")
            for line in raw.splitlines()
            for token in line.split()
            if token.startswith("http") and "/pull/" in token
        ),
        None,
    )
    if url is None:
        raise ParseError(f"gh pr create did not return a pull request URL; raw output: {raw!r}")

    tail = url.rstrip("/").rsplit("/", 1)[-1]
    try:
        number = int(tail)
    except ValueError as e:
        raise ParseError(f"Failed to parse PR number from URL {url!r}") from e

    return MergeRequestInfo(number=number, url=url, state=MergeRequestState.OPEN)


def _login(user: Any) -> str:
    if isinstance(user, dict):
        return str(user.get("login") or "ghost")
    return "ghost"


def parse_comments_json(raw: str) -> list[GeneralComment]:
    """Parse ``gh pr view --json comments`` output into general comments."""
    data = _load_json(raw, "gh pr view comments")
    comments = data.get("comments") if isinstance(data, dict) else None
    if not isinstance(comments, list):
        raise ParseError(f"gh pr view response has no comments array: {data!r}")

    result = []
    for item in comments:
        try:
            result.append(
                GeneralComment(
                    id=str(item["id"]),
                    author=_login(item.get("author")),
                    author_association=str(item.get("authorAssociation") or "NONE"),
                    body=item.get("body") or "",
                    created_at=parse_timestamp(item["createdAt"]),
                    url=item.get("url") or "",
                )
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ParseError(f"Malformed PR comment {item!r}: {e}") from e
    return result


def parse_review_comments_json(raw: str) -> list[ReviewComment]:
    """Parse ``gh api repos/{o}/{r}/pulls/{n}/comments`` output into review comments."""
    result = []
    for item in _load_json_pages(raw, "gh api review comments"):
        try:
            line = item.get("line")
            if line is None:
                line = item.get("original_line")
            result.append(
                ReviewComment(
                    id=int(item["id"]),
                    author=_login(item.get("user")),
                    author_association=str(item.get("author_association") or "NONE"),
                    body=item.get("body") or "",
                    created_at=parse_timestamp(item["created_at"]),
                    url=item.get("html_url") or "",
                    path=item.get("path") or "",
                    line=int(line) if line is not None else None,
                    diff_hunk=item.get("diff_hunk") or "",
                )
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ParseError(f"Malformed review comment {item!r}: {e}") from e
    return result


class GhCli:
    """
    Blocking wrapper around the ``gh`` executable.

    Example:
        ```python
        cli = GhCli()
        cli.check_auth()
        pr = cli.view_pr(RepositoryIdentifier.github("octo", "hello"), 42)
        ```
    """

    def __init__(self, timeout: float = DEFAULT_CLI_TIMEOUT) -> None:
        self.runner = CliRunner("gh", GH_AUTH_MARKERS, timeout=timeout)

    def check_auth(self) -> None:
        """
        Check that gh is installed and logged in.

        Raises:
            NotInstalledError: If gh is missing
            NotAuthenticatedError: If gh auth status fails
        """
        try:
            self.runner.run(["auth", "status"])
        except CommandFailedError as e:
            raise NotAuthenticatedError(e.detail) from e

    def create_pr(
        self, repo: RepositoryIdentifier, request: MergeRequestCreationRequest
    ) -> MergeRequestInfo:
        args = [
            "pr",
            "create",
            "--repo",
            repo.full_path,
            "--head",
            request.source_branch,
            "--base",
            request.target_branch,
            "--title",
            request.title,
            "--body",
            request.body or "",
        ]
        if request.is_draft:
            args.append("--draft")

        return parse_pr_create_output(self.runner.run(args))

    def view_pr(self, repo: RepositoryIdentifier, number: int) -> MergeRequestInfo:
        raw = self.runner.run(
            ["pr", "view", str(number), "--repo", repo.full_path, "--json", PR_JSON_FIELDS]
        )
        return parse_pr_json(raw)

    def list_prs_for_branch(
        self, repo: RepositoryIdentifier, branch: str
    ) -> list[MergeRequestInfo]:
        raw = self.runner.run(
            [
                "pr",
                "list",
                "--repo",
                repo.full_path,
                "--head",
                branch,
                "--state",
                "all",
                "--json",
                PR_JSON_FIELDS,
            ]
        )
        return parse_pr_list_json(raw)

    def get_pr_comments(self, repo: RepositoryIdentifier, number: int) -> list[GeneralComment]:
        raw = self.runner.run(
            ["pr", "view", str(number), "--repo", repo.full_path, "--json", "comments"]
        )
        return parse_comments_json(raw)

    def get_pr_review_comments(
        self, repo: RepositoryIdentifier, number: int
    ) -> list[ReviewComment]:
        raw = self.runner.run(
            ["api", f"repos/{repo.full_path}/pulls/{number}/comments", "--paginate"]
        )
        return parse_review_comments_json(raw)
