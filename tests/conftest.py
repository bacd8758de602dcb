"""Shared fixtures for the forgebridge test suite."""

from forgebridge.testing.fixtures import (  # noqa: F401
    mock_gitlab_provider,
    mock_provider,
    mock_provider_with_merge_request,
    no_delay_retry_config,
    sample_creation_request,
    sample_general_comment,
    sample_gitlab_repository,
    sample_merge_request,
    sample_merged_merge_request,
    sample_repository,
    sample_review_comment,
)
