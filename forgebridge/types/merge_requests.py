"""Merge request (pull request) data models."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class MergeRequestState(str, Enum):
    """Unified merge request state."""

    OPEN = "open"
    MERGED = "merged"
    CLOSED = "closed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class MergeRequestInfo:
    """Merge request information as reported by a provider."""

    number: int
    url: str
    state: MergeRequestState
    merged_at: datetime | None = None
    merge_commit_sha: str | None = None

    def __post_init__(self) -> None:
        if self.number < 0:
            raise ValueError(f"Merge request number must be non-negative, got {self.number}")

    @property
    def is_merged(self) -> bool:
        return self.state is MergeRequestState.MERGED

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "url": self.url,
            "state": self.state.value,
            "merged_at": self.merged_at.isoformat() if self.merged_at else None,
            "merge_commit_sha": self.merge_commit_sha,
        }


@dataclass(frozen=True)
class MergeRequestCreationRequest:
    """Request to open a merge request."""

    title: str
    source_branch: str
    target_branch: str
    body: str | None = None
    draft: bool | None = None

    @property
    def is_draft(self) -> bool:
        return bool(self.draft)


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp from a provider into an aware UTC datetime.

    Accepts a trailing ``Z`` and naive values (treated as UTC).

    Raises:
        ValueError: If the value is not a valid timestamp
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
