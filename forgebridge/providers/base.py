"""Uniform provider interface."""

from abc import ABC, abstractmethod

from forgebridge.types.comments import UnifiedComment
from forgebridge.types.merge_requests import MergeRequestCreationRequest, MergeRequestInfo
from forgebridge.types.providers import ProviderType, RepositoryIdentifier


class GitProvider(ABC):
    """
    Operations every git hosting provider supports.

    Callers hold a ``GitProvider`` and never branch on the concrete class.
    Implementations hold only immutable configuration, so one instance may
    serve concurrent calls.
    """

    @property
    @abstractmethod
    def provider_type(self) -> ProviderType:
        """The hosting provider this instance talks to."""

    @abstractmethod
    async def check_auth(self) -> None:
        """
        Verify the provider's credentials.

        Raises:
            NotInstalledError: If the provider CLI is missing
            NotAuthenticatedError: If the CLI is not logged in
        """

    @abstractmethod
    async def create_merge_request(
        self, repo: RepositoryIdentifier, request: MergeRequestCreationRequest
    ) -> MergeRequestInfo:
        """Open a merge request and return its info (state ``open``)."""

    @abstractmethod
    async def get_status(self, repo: RepositoryIdentifier, number: int) -> MergeRequestInfo:
        """Fetch the current state of merge request ``number``."""

    @abstractmethod
    async def list_for_branch(
        self, repo: RepositoryIdentifier, branch: str
    ) -> list[MergeRequestInfo]:
        """List merge requests in any state whose source branch is ``branch``."""

    @abstractmethod
    async def get_comments(
        self, repo: RepositoryIdentifier, number: int
    ) -> list[UnifiedComment]:
        """Fetch all comments of a merge request, oldest first."""
