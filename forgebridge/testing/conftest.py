"""
Pytest plugin for forgebridge testing fixtures.

This module re-exports all fixtures from fixtures.py so they can be
automatically discovered by pytest when this package is installed.

To use these fixtures in your tests, add this to your conftest.py:

    pytest_plugins = ["forgebridge.testing.conftest"]

Or import the fixtures directly:

    from forgebridge.testing.fixtures import mock_provider, sample_repository
"""

# Re-export all fixtures for pytest auto-discovery
from forgebridge.testing.fixtures import (
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

__all__ = [
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
]
