"""forgebridge type definitions.

This module exports all data model types used by the package.
"""

from forgebridge.types.comments import (
    GeneralComment,
    ReviewComment,
    UnifiedComment,
    unify_comments,
)
from forgebridge.types.merge_requests import (
    MergeRequestCreationRequest,
    MergeRequestInfo,
    MergeRequestState,
    parse_timestamp,
)
from forgebridge.types.providers import ProviderType, RepositoryIdentifier

__all__ = [
    # Provider types
    "ProviderType",
    "RepositoryIdentifier",
    # Merge request types
    "MergeRequestState",
    "MergeRequestInfo",
    "MergeRequestCreationRequest",
    "parse_timestamp",
    # Comment types
    "GeneralComment",
    "ReviewComment",
    "UnifiedComment",
    "unify_comments",
]
