"""forgebridge exception classes."""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of provider error kinds."""

    NOT_INSTALLED = "not_installed"
    NOT_AUTHENTICATED = "not_authenticated"
    NOT_SUPPORTED = "not_supported"
    API_ERROR = "api_error"
    PARSE_ERROR = "parse_error"
    COMMAND_FAILED = "command_failed"
    GIT_ERROR = "git_error"
    UNKNOWN_PROVIDER = "unknown_provider"
    CONFIGURATION = "configuration"


_TERMINAL_KINDS = frozenset(
    {
        ErrorKind.NOT_INSTALLED,
        ErrorKind.NOT_AUTHENTICATED,
        ErrorKind.NOT_SUPPORTED,
        ErrorKind.GIT_ERROR,
        ErrorKind.UNKNOWN_PROVIDER,
        ErrorKind.CONFIGURATION,
    }
)


def is_retryable(kind: ErrorKind) -> bool:
    """Return True if errors of this kind may succeed on a later attempt."""
    return kind not in _TERMINAL_KINDS


class ProviderError(Exception):
    """Base exception for all forgebridge errors."""

    kind: ErrorKind = ErrorKind.COMMAND_FAILED

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        return is_retryable(self.kind)

    @property
    def is_auth_error(self) -> bool:
        return self.kind is ErrorKind.NOT_AUTHENTICATED

    @property
    def is_not_installed(self) -> bool:
        return self.kind is ErrorKind.NOT_INSTALLED


class NotInstalledError(ProviderError):
    """Raised when a required provider CLI is not on PATH."""

    kind = ErrorKind.NOT_INSTALLED

    def __init__(self, cli_name: str) -> None:
        self.cli_name = cli_name
        super().__init__(f"Provider CLI not installed: {cli_name}")


class NotAuthenticatedError(ProviderError):
    """Raised when CLI or API credentials are missing or rejected."""

    kind = ErrorKind.NOT_AUTHENTICATED

    def __init__(self, message: str) -> None:
        super().__init__(f"Provider authentication failed: {message}")
        self.detail = message


class NotSupportedError(ProviderError):
    """Raised when a backend cannot perform an operation."""

    kind = ErrorKind.NOT_SUPPORTED

    def __init__(self, feature: str) -> None:
        self.feature = feature
        super().__init__(f"Feature not supported: {feature}")


class ApiError(ProviderError):
    """Raised on non-success HTTP responses."""

    kind = ErrorKind.API_ERROR

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.detail = message
        super().__init__(f"API error ({status}): {message}")


class ParseError(ProviderError):
    """Raised when a provider response cannot be understood."""

    kind = ErrorKind.PARSE_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(f"Failed to parse: {message}")
        self.detail = message


class CommandFailedError(ProviderError):
    """Raised when a CLI command exits non-zero without an auth signal."""

    kind = ErrorKind.COMMAND_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(f"Command failed: {message}")
        self.detail = message


class GitError(ProviderError):
    """Raised when local repository inspection fails."""

    kind = ErrorKind.GIT_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(f"Git error: {message}")
        self.detail = message


class UnknownProviderError(ProviderError):
    """Raised when a remote URL matches no supported provider."""

    kind = ErrorKind.UNKNOWN_PROVIDER

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Unknown provider for URL: {url}")


class ConfigurationError(ProviderError):
    """Raised when forgebridge configuration is invalid or missing."""

    kind = ErrorKind.CONFIGURATION
