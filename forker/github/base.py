"""Abstract interface for GitHub access used by ForkManager."""

from abc import ABC, abstractmethod
from typing import List

from forker.models import Comparison, ForkInfo, Peer, PullRequest, RepositoryInfo, RootRepository


class GitHubBackend(ABC):
    """Narrow GitHub capability set: fork, inspect, list forks/PRs, compare.

    Methods documented as degrading return an empty/zero result instead of
    raising; all others raise GitHubError.
    """

    @abstractmethod
    def fork_repository(self, url: str, account: str) -> ForkInfo:
        """Fork url into account; return the new fork record."""
        ...

    @abstractmethod
    def list_user_forks(self, account: str) -> List[ForkInfo]:
        """List forked repositories of an account."""
        ...

    @abstractmethod
    def get_repository_info(self, full_name: str) -> RepositoryInfo:
        """Fetch metadata of owner/repo."""
        ...

    @abstractmethod
    def find_root_repository(self, owner: str, repo: str) -> RootRepository:
        """Follow parent links from owner/repo up to the non-fork root."""
        ...

    @abstractmethod
    def list_forks(self, owner: str, repo: str) -> List[Peer]:
        """All forks of owner/repo. Degrades to []."""
        ...

    @abstractmethod
    def list_pull_requests(self, owner: str, repo: str) -> List[PullRequest]:
        """Pull requests of owner/repo. Degrades to []."""
        ...

    @abstractmethod
    def compare_commits(self, owner: str, repo: str, base: str, head: str) -> Comparison:
        """Ahead/behind counts of head vs base. Degrades to 0/0."""
        ...
