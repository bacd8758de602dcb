"""
GitLab REST API client.

Used for data the glab CLI cannot emit in structured form, currently
merge request notes. Authenticates with a personal access token sent in the
``PRIVATE-TOKEN`` header.
"""

import json
import time
from typing import Any
from urllib.parse import quote

import httpx

from forgebridge.config import GitLabConfig
from forgebridge.exceptions import (
    ApiError,
    CommandFailedError,
    NotAuthenticatedError,
    ParseError,
    ProviderError,
)
from forgebridge.logging import get_logger, log_http_request, log_http_response
from forgebridge.retry import RetryConfig, retry_async
from forgebridge.types.comments import (
    GeneralComment,
    ReviewComment,
    UnifiedComment,
    unify_comments,
)
from forgebridge.types.merge_requests import parse_timestamp
from forgebridge.types.providers import RepositoryIdentifier

logger = get_logger()

NOTES_PER_PAGE = 100
MEMBER_ASSOCIATION = "MEMBER"


def encode_project_path(repo: RepositoryIdentifier) -> str:
    """URL-encode ``owner/name`` for use as a GitLab project id."""
    return quote(repo.full_path, safe="")


def error_message_from_body(text: str) -> str:
    """
    Extract a human-readable message from a GitLab error body.

    GitLab answers with ``{"message": ...}``, ``{"error": ...}`` or OAuth-style
    ``{"error_description": ...}``. Structured messages (validation errors
    keyed by field) are JSON-encoded. Falls back to the raw body.
    """
    try:
        data = json.loads(text)
    except ValueError:
        return text

    if isinstance(data, dict):
        for key in ("message", "error", "error_description"):
            value = data.get(key)
            if value is None:
                continue
            if isinstance(value, str):
                return value
            return json.dumps(value, sort_keys=True)

    return text


def parse_error_response(response: httpx.Response) -> ProviderError:
    """
    Map a non-success response onto the provider error taxonomy.

    Returns:
        NotAuthenticatedError for 401/403, ApiError otherwise
    """
    status = response.status_code
    message = error_message_from_body(response.text)

    if status in (401, 403):
        return NotAuthenticatedError(message or f"HTTP {status}")
    return ApiError(status, message or f"HTTP {status}")


def _username(author: Any) -> str:
    if isinstance(author, dict):
        return str(author.get("username") or author.get("name") or "unknown")
    return "unknown"


def note_url(
    config: GitLabConfig, repo: RepositoryIdentifier, mr_iid: int, note_id: int
) -> str:
    return f"{config.web_base_url}/{repo.full_path}/-/merge_requests/{mr_iid}#note_{note_id}"


def note_to_comment(
    note: dict[str, Any],
    config: GitLabConfig,
    repo: RepositoryIdentifier,
    mr_iid: int,
) -> UnifiedComment | None:
    """
    Convert one GitLab note into a unified comment.

    Returns None for system notes (state changes, pushed commits, ...).
    Diff notes carrying a position become review comments.

    Raises:
        ParseError: If a required field is missing or malformed
    """
    if note.get("system"):
        return None

    try:
        note_id = int(note["id"])
        created_at = parse_timestamp(note["created_at"])
    except (KeyError, TypeError, ValueError) as e:
        raise ParseError(f"Malformed GitLab note {note!r}: {e}") from e

    author = _username(note.get("author"))
    body = note.get("body") or ""
    url = note_url(config, repo, mr_iid, note_id)

    position = note.get("position")
    if note.get("type") == "DiffNote" and isinstance(position, dict):
        line = position.get("new_line")
        if line is None:
            line = position.get("old_line")
        return ReviewComment(
            id=note_id,
            author=author,
            author_association=MEMBER_ASSOCIATION,
            body=body,
            created_at=created_at,
            url=url,
            path=position.get("new_path") or position.get("old_path") or "",
            line=int(line) if line is not None else None,
            diff_hunk="",
        )

    return GeneralComment(
        id=str(note_id),
        author=author,
        author_association=MEMBER_ASSOCIATION,
        body=body,
        created_at=created_at,
        url=url,
    )


class GitLabApiClient:
    """
    Async GitLab REST client.

    One instance serves one logical operation; use it as an async context
    manager so the underlying connection pool is closed afterwards.

    Example:
        ```python
        config = GitLabConfig.from_env()
        async with GitLabApiClient(config) as api:
            comments = await api.get_comments(repo, 12)
        ```
    """

    def __init__(
        self,
        config: GitLabConfig,
        retry_config: RetryConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: GitLab instance settings; a token is required for requests
            retry_config: Retry behavior for each request
            transport: Custom httpx transport (used by tests)
        """
        self.config = config
        self.retry_config = retry_config

        headers = {"Accept": "application/json"}
        if config.token:
            headers["PRIVATE-TOKEN"] = config.token

        self._client = httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.timeout,
            headers=headers,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "GitLabApiClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _require_token(self) -> None:
        if not self.config.has_token:
            raise NotAuthenticatedError("GITLAB_TOKEN not set")

    async def _request(
        self, method: str, path: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        """
        Send one request and raise on non-success responses.

        Raises:
            NotAuthenticatedError: On 401/403
            ApiError: On any other non-2xx status
            CommandFailedError: On transport failures (DNS, connect, timeout)
        """
        url = f"{self.config.api_base_url}{path}"
        log_http_request(method, url, dict(self._client.headers), params)

        started = time.monotonic()
        try:
            response = await self._client.request(method, path, params=params)
        except httpx.RequestError as e:
            raise CommandFailedError(f"API request failed: {e}") from e

        log_http_response(response.status_code, url, (time.monotonic() - started) * 1000)

        if not response.is_success:
            raise parse_error_response(response)
        return response

    async def _get(
        self, path: str, params: dict[str, Any] | None = None
    ) -> tuple[Any, httpx.Response]:
        async def attempt() -> tuple[Any, httpx.Response]:
            response = await self._request("GET", path, params)
            try:
                return response.json(), response
            except ValueError as e:
                raise ParseError(f"Invalid JSON from GET {path}: {e}") from e

        return await retry_async(attempt, self.retry_config, description=f"GitLab GET {path}")

    async def get_project_id(self, repo: RepositoryIdentifier) -> int:
        """
        Resolve the numeric project id for ``owner/name``.

        Raises:
            NotAuthenticatedError: If no token is configured or it is rejected
            ApiError: If the project does not exist or is not visible
            ParseError: If the response has no numeric id
        """
        self._require_token()
        data, _ = await self._get(f"/projects/{encode_project_path(repo)}")

        project_id = data.get("id") if isinstance(data, dict) else None
        if isinstance(project_id, bool) or not isinstance(project_id, int):
            raise ParseError(f"GitLab project response has no id: {data!r}")
        return project_id

    async def get_notes(self, project_id: int, mr_iid: int) -> list[dict[str, Any]]:
        """Fetch every note on a merge request, oldest first."""
        self._require_token()
        path = f"/projects/{project_id}/merge_requests/{mr_iid}/notes"

        notes: list[dict[str, Any]] = []
        page: str | None = "1"
        while page:
            params = {
                "sort": "asc",
                "order_by": "created_at",
                "per_page": NOTES_PER_PAGE,
                "page": page,
            }
            data, response = await self._get(path, params)
            if not isinstance(data, list):
                raise ParseError(f"GitLab notes response is not an array: {data!r}")
            notes.extend(item for item in data if isinstance(item, dict))
            page = response.headers.get("X-Next-Page", "").strip() or None

        return notes

    async def get_comments(
        self, repo: RepositoryIdentifier, mr_iid: int
    ) -> list[UnifiedComment]:
        """
        Fetch the non-system notes of a merge request as unified comments.

        Returns:
            Comments sorted by creation time
        """
        project_id = await self.get_project_id(repo)
        notes = await self.get_notes(project_id, mr_iid)

        comments = []
        for note in notes:
            comment = note_to_comment(note, self.config, repo, mr_iid)
            if comment is not None:
                comments.append(comment)

        logger.debug(
            "Fetched %d GitLab notes (%d comments) for %s!%d",
            len(notes),
            len(comments),
            repo.full_path,
            mr_iid,
        )
        return unify_comments(comments)

    async def check_auth(self) -> str:
        """
        Verify the token against ``GET /user``.

        Returns:
            The authenticated username

        Raises:
            NotAuthenticatedError: If no token is configured or it is rejected
        """
        self._require_token()
        data, _ = await self._get("/user")
        return _username(data)
