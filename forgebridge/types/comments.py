"""Unified comment models.

GitHub conversation comments, GitHub inline review comments and GitLab notes
all normalize into one of two shapes, distinguished by ``comment_type``.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Union


@dataclass(frozen=True)
class GeneralComment:
    """Conversation-level comment on a merge request."""

    comment_type: ClassVar[str] = "general"

    id: str
    author: str
    author_association: str
    body: str
    created_at: datetime
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "comment_type": self.comment_type,
            "id": self.id,
            "author": self.author,
            "author_association": self.author_association,
            "body": self.body,
            "created_at": self.created_at.isoformat(),
            "url": self.url,
        }


@dataclass(frozen=True)
class ReviewComment:
    """Inline comment attached to a line of the diff."""

    comment_type: ClassVar[str] = "review"

    id: int
    author: str
    author_association: str
    body: str
    created_at: datetime
    url: str
    path: str
    line: int | None
    diff_hunk: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "comment_type": self.comment_type,
            "id": self.id,
            "author": self.author,
            "author_association": self.author_association,
            "body": self.body,
            "created_at": self.created_at.isoformat(),
            "url": self.url,
            "path": self.path,
            "line": self.line,
            "diff_hunk": self.diff_hunk,
        }


UnifiedComment = Union[GeneralComment, ReviewComment]


def unify_comments(*sources: Iterable[UnifiedComment]) -> list[UnifiedComment]:
    """
    Merge comment sequences into one list ordered by creation time.

    The sort is stable, so comments sharing a timestamp keep the order in
    which their sources were given.
    """
    merged: list[UnifiedComment] = []
    for source in sources:
        merged.extend(source)
    merged.sort(key=lambda comment: comment.created_at)
    return merged
