"""
Provider detection from git remote URLs.

Recognizes GitHub (github.com only) and GitLab (gitlab.com and any host whose
URL mentions "gitlab"). Everything else is an unknown provider.
"""

import re
import subprocess
from pathlib import Path

from forgebridge.exceptions import GitError, UnknownProviderError
from forgebridge.logging import get_logger
from forgebridge.types.providers import ProviderType, RepositoryIdentifier

logger = get_logger()

GITLAB_CLOUD_HOST = "gitlab.com"

# git@github.com:owner/repo.git, https://github.com/owner/repo, ssh://git@github.com/owner/repo.git
_GITHUB_URL_RE = re.compile(
    r"github\.com[:/](?P<owner>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?(?:/|$)"
)

# scheme://[user@]host[:port]/path
_SCHEME_URL_RE = re.compile(
    r"^(?P<scheme>[A-Za-z][A-Za-z0-9+.\-]*)://(?:[^@/]+@)?(?P<host>[^/]+)(?P<path>/.*)?$"
)
# [user@]host:path (scp-like SSH shorthand)
_SCP_URL_RE = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>.*)$")
# host/path without a scheme
_BARE_URL_RE = re.compile(r"^(?P<host>[^/:@]+)(?P<path>/.*)$")

_REMOTE_PREFERENCE = ("origin", "upstream")
_GIT_TIMEOUT = 5


def _split_remote_url(url: str) -> tuple[str, str] | None:
    """Split a remote URL into (host, path).

    The port is kept for http(s) URLs, where it is part of the web address,
    and dropped for SSH/git transports.
    """
    url = url.strip()

    match = _SCHEME_URL_RE.match(url)
    if match:
        host = match.group("host")
        if match.group("scheme").lower() not in ("http", "https"):
            host = host.split(":", 1)[0]
        return host, match.group("path") or ""

    match = _SCP_URL_RE.match(url)
    if match:
        return match.group("host"), match.group("path")

    match = _BARE_URL_RE.match(url)
    if match:
        return match.group("host"), match.group("path")

    return None


def extract_host(url: str) -> str | None:
    """
    Extract the bare host from a remote URL.

    Handles ``git@host:path`` SSH shorthand as well as
    ``scheme://[user@]host[:port]/path``.

    Returns:
        The host, or None if the URL has no recognizable host
    """
    parts = _split_remote_url(url)
    if parts is None or not parts[0]:
        return None
    return parts[0]


def _parse_github_url(url: str) -> RepositoryIdentifier | None:
    match = _GITHUB_URL_RE.search(url)
    if not match:
        return None
    return RepositoryIdentifier.github(match.group("owner"), match.group("repo"))


def _parse_gitlab_url(url: str) -> RepositoryIdentifier | None:
    if "gitlab" not in url.lower():
        return None

    parts = _split_remote_url(url)
    if parts is None:
        return None
    host, path = parts
    if not host:
        return None

    path = path.strip().strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]

    # GitLab supports nested groups: everything before the last segment is the namespace
    segments = [segment for segment in path.split("/") if segment]
    if len(segments) < 2:
        return None

    is_cloud = host.lower() == GITLAB_CLOUD_HOST
    return RepositoryIdentifier.gitlab(
        owner="/".join(segments[:-1]),
        name=segments[-1],
        host=None if is_cloud else host,
    )


def detect_provider_from_url(url: str) -> tuple[ProviderType, RepositoryIdentifier]:
    """
    Detect the provider type and repository identity from a remote URL.

    GitHub is tried first, then GitLab; the first match wins.

    Example:
        ```python
        provider, repo = detect_provider_from_url("git@gitlab.company.io:dev/app.git")
        # provider == ProviderType.GITLAB
        # repo.owner == "dev", repo.name == "app", repo.host == "gitlab.company.io"
        ```

    Raises:
        UnknownProviderError: If the URL matches neither provider
    """
    repo = _parse_github_url(url)
    if repo is not None:
        return ProviderType.GITHUB, repo

    repo = _parse_gitlab_url(url)
    if repo is not None:
        return ProviderType.GITLAB, repo

    raise UnknownProviderError(url)


def _run_git(repo_path: Path, *args: str) -> subprocess.CompletedProcess[str]:
    try:
        return subprocess.run(
            ["git", *args],
            cwd=repo_path,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            timeout=_GIT_TIMEOUT,
        )
    except FileNotFoundError as e:
        if not repo_path.exists():
            raise GitError(f"Repository path does not exist: {repo_path}") from e
        raise GitError("git executable not found") from e
    except NotADirectoryError as e:
        raise GitError(f"Repository path is not a directory: {repo_path}") from e
    except subprocess.TimeoutExpired as e:
        raise GitError(f"git {' '.join(args)} timed out") from e


def get_remote_url(repo_path: str | Path) -> str:
    """
    Get the remote URL of a local repository.

    Prefers ``origin``, then ``upstream``, then the first configured remote.

    Raises:
        GitError: If the path is not a git repository or has no remotes
    """
    repo_path = Path(repo_path)

    probe = _run_git(repo_path, "rev-parse", "--git-dir")
    if probe.returncode != 0:
        raise GitError(f"Failed to open repo at {repo_path}: {probe.stderr.strip()}")

    for name in _REMOTE_PREFERENCE:
        result = _run_git(repo_path, "remote", "get-url", name)
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout.strip()

    remotes = _run_git(repo_path, "remote")
    if remotes.returncode == 0:
        for name in remotes.stdout.split():
            result = _run_git(repo_path, "remote", "get-url", name)
            if result.returncode == 0 and result.stdout.strip():
                return result.stdout.strip()

    raise GitError("No remote URL found")


def detect_provider(repo_path: str | Path) -> tuple[ProviderType, RepositoryIdentifier]:
    """Detect provider and repository identity from a local repository."""
    url = get_remote_url(repo_path)
    return detect_provider_from_url(url)


def resolve_provider_type(
    setting: str | None, repo_path: str | Path
) -> ProviderType:
    """
    Get the provider to use for a repository.

    Fallback chain:
    1. Explicit setting ("github" or "gitlab", case-insensitive)
    2. Auto-detection from the git remote

    ``None``, ``"auto"`` and unrecognized settings fall through to detection.

    Raises:
        GitError: If detection is needed and the remote cannot be read
        UnknownProviderError: If detection is needed and the remote is unrecognized
    """
    normalized = setting.strip().lower() if setting else None

    if normalized and normalized != "auto":
        try:
            return ProviderType(normalized)
        except ValueError:
            logger.warning("Ignoring unknown provider setting %r, auto-detecting", setting)

    provider_type, _ = detect_provider(repo_path)
    return provider_type
