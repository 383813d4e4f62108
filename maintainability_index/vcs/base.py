"""
Base interface for repository data sources.
"""

from abc import ABC, abstractmethod

from maintainability_index.models import RepositorySnapshot


class BaseVCSProvider(ABC):
    """Fetches everything the metric calculators need in one snapshot."""

    @abstractmethod
    def get_repository_url(self, owner: str, repo: str) -> str:
        """Web URL of a repository."""

    @abstractmethod
    async def get_snapshot(self, owner: str, repo: str) -> RepositorySnapshot:
        """
        Fetch a complete repository snapshot.

        Raises:
            ValueError: If the repository is not found or inaccessible.
            httpx.HTTPStatusError: If the platform API returns an error.
        """
