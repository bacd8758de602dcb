"""Provider and repository identity models."""

from dataclasses import dataclass
from enum import Enum


class ProviderType(str, Enum):
    """Git hosting provider type."""

    GITHUB = "github"
    GITLAB = "gitlab"

    def __str__(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    ProviderType.GITHUB: "GitHub",
    ProviderType.GITLAB: "GitLab",
}


@dataclass(frozen=True)
class RepositoryIdentifier:
    """Repository on a hosting provider.

    ``owner`` is the GitHub owner or the GitLab namespace, which may span
    nested groups (``org/team``). ``host`` is set only for self-hosted
    instances.
    """

    provider: ProviderType
    owner: str
    name: str
    host: str | None = None

    def __post_init__(self) -> None:
        if not self.owner:
            raise ValueError("Repository owner must not be empty")
        if not self.name:
            raise ValueError("Repository name must not be empty")

    @classmethod
    def github(cls, owner: str, name: str) -> "RepositoryIdentifier":
        return cls(provider=ProviderType.GITHUB, owner=owner, name=name)

    @classmethod
    def gitlab(
        cls, owner: str, name: str, host: str | None = None
    ) -> "RepositoryIdentifier":
        return cls(provider=ProviderType.GITLAB, owner=owner, name=name, host=host)

    @property
    def full_path(self) -> str:
        """Canonical ``owner/name`` lookup key for provider APIs."""
        return f"{self.owner}/{self.name}"

    @property
    def is_self_hosted(self) -> bool:
        return self.host is not None
