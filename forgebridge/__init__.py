"""forgebridge - one interface for GitHub and GitLab merge requests."""

from forgebridge.config import GitLabConfig
from forgebridge.detection import (
    detect_provider,
    detect_provider_from_url,
    get_remote_url,
    resolve_provider_type,
)
from forgebridge.exceptions import (
    ApiError,
    CommandFailedError,
    ConfigurationError,
    ErrorKind,
    GitError,
    NotAuthenticatedError,
    NotInstalledError,
    NotSupportedError,
    ParseError,
    ProviderError,
    UnknownProviderError,
    is_retryable,
)
from forgebridge.logging import configure_logging, get_logger
from forgebridge.providers import (
    GitHubProvider,
    GitLabProvider,
    GitProvider,
    create_provider,
    create_provider_by_type,
    open_repository,
)
from forgebridge.retry import RetryConfig, retry_async
from forgebridge.types import (
    GeneralComment,
    MergeRequestCreationRequest,
    MergeRequestInfo,
    MergeRequestState,
    ProviderType,
    RepositoryIdentifier,
    ReviewComment,
    UnifiedComment,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Providers
    "GitProvider",
    "GitHubProvider",
    "GitLabProvider",
    "create_provider",
    "create_provider_by_type",
    "open_repository",
    # Detection
    "detect_provider",
    "detect_provider_from_url",
    "get_remote_url",
    "resolve_provider_type",
    # Types
    "ProviderType",
    "RepositoryIdentifier",
    "MergeRequestState",
    "MergeRequestInfo",
    "MergeRequestCreationRequest",
    "GeneralComment",
    "ReviewComment",
    "UnifiedComment",
    # Exceptions
    "ErrorKind",
    "ProviderError",
    "NotInstalledError",
    "NotAuthenticatedError",
    "NotSupportedError",
    "ApiError",
    "ParseError",
    "CommandFailedError",
    "GitError",
    "UnknownProviderError",
    "ConfigurationError",
    "is_retryable",
    # Configuration
    "GitLabConfig",
    "RetryConfig",
    "retry_async",
    # Logging
    "configure_logging",
    "get_logger",
]
