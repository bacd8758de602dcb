"""
forgebridge logging utilities.

Provides configurable logging for HTTP requests/responses and CLI invocations.
Ensures no credentials (personal access tokens, private tokens) are logged.
"""

import logging
import re
from collections.abc import Sequence
from typing import Any

# Create package-specific loggers
_sdk_logger = logging.getLogger("forgebridge")
_http_logger = logging.getLogger("forgebridge.http")
_cli_logger = logging.getLogger("forgebridge.cli")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # GitLab personal/project/group access tokens
    (re.compile(r"\bgl(?:pat|dt|rt|ptt|cbt|oas)-[A-Za-z0-9_\-]{16,}"), "[TOKEN_REDACTED]"),
    # GitHub tokens (classic, fine-grained, OAuth, app)
    (re.compile(r"\b(?:gh[pousr]_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,})"), "[TOKEN_REDACTED]"),
    # Header values
    (re.compile(r"(PRIVATE-TOKEN|Authorization)(['\"]?\s*[:=]\s*['\"]?)[^'\"\s,}]+(?:\s+[^'\"\s,}]+)?", re.IGNORECASE), r"\1\2[REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_DEFAULT_SENSITIVE_KEYS = frozenset(
    {"private-token", "authorization", "token", "secret", "password", "api_key"}
)


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    cli_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure forgebridge logging.

    Args:
        level: Default log level for all package loggers (default: INFO)
        http_level: Log level for REST request/response logging (default: same as level)
        cli_level: Log level for CLI invocation logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from forgebridge.logging import configure_logging

        # Show every gh/glab invocation
        configure_logging(level=logging.INFO, cli_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _cli_logger.setLevel(cli_level if cli_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a forgebridge logger.

    Args:
        name: Logger name suffix (e.g., "http", "cli"). If None, returns main package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"forgebridge.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Replaces provider tokens and credential header values with redacted
    placeholders.

    Args:
        text: Text that may contain sensitive data

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of lowercase keys to mask (default: token headers and secrets)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    keys = _DEFAULT_SENSITIVE_KEYS if sensitive_keys is None else sensitive_keys

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in keys or any(sk in key_lower for sk in keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
) -> None:
    """Log a REST request at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(dict(headers))}")

    if params:
        log_parts.append(f"params={safe_log_dict(params)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
) -> None:
    """Log a REST response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _http_logger.debug(" | ".join(log_parts))


def log_cli_command(
    program: str,
    args: Sequence[str],
    returncode: int | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """
    Log a CLI invocation at DEBUG level.

    Arguments are masked because `--description`/`--body` values are user
    supplied and may carry pasted credentials.
    """
    if not _cli_logger.isEnabledFor(logging.DEBUG):
        return

    command = mask_sensitive_data(" ".join([program, *args]))
    log_parts = [command]

    if returncode is not None:
        log_parts.append(f"exit={returncode}")

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    _cli_logger.debug(" | ".join(log_parts))


# Export public API
__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_cli_command",
]
