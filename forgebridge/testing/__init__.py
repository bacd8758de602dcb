"""forgebridge testing utilities.

Provides a mock provider and fixtures for testing applications that use
forgebridge. The fixtures need pytest; install the ``testing`` extra
(``pip install forgebridge[testing]``) to get it.
"""

from forgebridge.testing.fixtures import (
    create_mock_general_comment,
    create_mock_merge_request,
    create_mock_repository,
    create_mock_review_comment,
)
from forgebridge.testing.mock import MockCall, MockGitProvider, MockResponse

__all__ = [
    # Mock provider
    "MockGitProvider",
    "MockCall",
    "MockResponse",
    # Helper functions
    "create_mock_repository",
    "create_mock_merge_request",
    "create_mock_general_comment",
    "create_mock_review_comment",
]
