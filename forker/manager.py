"""Fork operations over tracked repositories.

ForkManager combines Storage (.forker/ records) with a GitHubBackend.
Every per-repository step is isolated: a repository whose record cannot be
loaded, or whose root cannot be parsed, is skipped with a warning and the
rest of the operation continues.
"""

import logging
from typing import List

from pydantic import ValidationError

from forker.config import GitHubConfig
from forker.errors import GitHubError, StorageError
from forker.github.base import GitHubBackend
from forker.models import (
    ActiveFork,
    ForkInfo,
    ForkStatus,
    Peer,
    PeerReport,
    PullRequest,
    PullRequestReport,
)
from forker.storage import Storage
from forker.utils import parse_repo_url

LOG = logging.getLogger("forker.manager")


class ForkManager:
    """Fork, list, status, peers, PRs and most-active over tracked forks."""

    def __init__(
        self,
        storage: Storage,
        github: GitHubBackend,
        config: GitHubConfig | None = None,
    ) -> None:
        self._storage = storage
        self._github = github
        self._config = config or GitHubConfig()

    def _load_info(self, name: str) -> ForkInfo | None:
        """Stored fork record of a tracked repository, or None if missing or
        unreadable."""
        try:
            data = self._storage.load_fork_info(name)
            if data is None:
                return None
            return ForkInfo.model_validate(data)
        except (StorageError, ValidationError) as e:
            LOG.warning("Skipping %s: cannot load fork info: %s", name, e)
            return None

    def fork_repository(self, url: str, account: str) -> ForkInfo:
        """Fork url into account and track the fork."""
        result = self._github.fork_repository(url, account)
        self._storage.save_fork_info(result.name, result)
        return result

    def list_forks(self, account: str) -> List[ForkInfo]:
        """List the account's forks and track each of them."""
        forks = self._github.list_user_forks(account)
        for fork in forks:
            self._storage.save_fork_info(fork.name, fork)
        LOG.info("Tracked %d forks of %s", len(forks), account)
        return forks

    def fork_statuses(self) -> List[ForkStatus]:
        """Status of each tracked fork, with ahead/behind vs root when it can
        be compared."""
        statuses: List[ForkStatus] = []
        for name in self._storage.list_tracked():
            info = self._load_info(name)
            if info is None:
                continue

            status = ForkStatus(
                name=name,
                fork_url=info.location,
                root_url=info.root_url,
                updated_at=info.updated_at,
            )
            if info.owner and info.name and info.root_url:
                try:
                    root_owner, root_repo = parse_repo_url(info.root_url)
                    branch = self._root_branch(root_owner, root_repo)
                    comparison = self._github.compare_commits(
                        info.owner, info.name, f"{root_owner}:{branch}", branch
                    )
                    status.ahead_by = comparison.ahead_by
                    status.behind_by = comparison.behind_by
                except GitHubError as e:
                    LOG.warning("Comparison failed for %s: %s", name, e)
            statuses.append(status)
        return statuses

    def _root_branch(self, owner: str, repo: str) -> str:
        """Default branch of the root, or the configured default."""
        try:
            info = self._github.get_repository_info(f"{owner}/{repo}")
        except GitHubError as e:
            LOG.warning("Cannot get default branch of %s/%s: %s", owner, repo, e)
            return self._config.default_branch
        return info.default_branch or self._config.default_branch

    def find_peers(self) -> List[PeerReport]:
        """Other forks of each tracked fork's root; persisted to peers.json."""
        reports: List[PeerReport] = []
        for name in self._storage.list_tracked():
            info = self._load_info(name)
            if info is None or not info.root_url:
                continue
            try:
                root_owner, root_repo = parse_repo_url(info.root_url)
            except GitHubError as e:
                LOG.warning("Skipping peers of %s: %s", name, e)
                continue

            own_url = info.location
            peers = [p for p in self._github.list_forks(root_owner, root_repo) if p.url != own_url]
            self._storage.save_peers(name, peers)
            reports.append(PeerReport(name=name, root_url=info.root_url, peers=peers))
        return reports

    def list_pull_requests(self) -> List[PullRequestReport]:
        """Fork PRs followed by root PRs for each tracked fork; persisted to
        prs.json."""
        reports: List[PullRequestReport] = []
        for name in self._storage.list_tracked():
            info = self._load_info(name)
            if info is None:
                continue

            prs: List[PullRequest] = []
            if info.owner and info.name:
                prs = list(self._github.list_pull_requests(info.owner, info.name))
            if info.root_url:
                try:
                    root_owner, root_repo = parse_repo_url(info.root_url)
                    prs += self._github.list_pull_requests(root_owner, root_repo)
                except GitHubError as e:
                    LOG.warning("Root PRs of %s unavailable: %s", name, e)

            self._storage.save_prs(name, prs)
            reports.append(PullRequestReport(name=name, prs=prs))
        return reports

    def most_active_forks(self) -> List[ActiveFork]:
        """All forks of all tracked roots plus the roots, most recently
        updated first, one entry per URL.

        Timestamps are compared as strings.
        """
        candidates: List[Peer] = []
        for name in self._storage.list_tracked():
            info = self._load_info(name)
            if info is None or not info.root_url:
                continue
            try:
                root_owner, root_repo = parse_repo_url(info.root_url)
            except GitHubError as e:
                LOG.warning("Skipping %s: %s", name, e)
                continue

            candidates.extend(self._github.list_forks(root_owner, root_repo))
            try:
                root = self._github.get_repository_info(f"{root_owner}/{root_repo}")
            except GitHubError as e:
                LOG.warning("Root %s/%s left out of ranking: %s", root_owner, root_repo, e)
                continue
            candidates.append(Peer(owner=root_owner, name=root_repo, url=root.url, updated_at=root.updated_at))

        ranked = sorted(candidates, key=lambda fork: fork.updated_at or "")
        ranked.reverse()

        seen: set[str] = set()
        active: List[ActiveFork] = []
        for fork in ranked:
            if fork.url in seen:
                continue
            seen.add(fork.url)
            active.append(
                ActiveFork(name=fork.name, url=fork.url, owner=fork.owner, updated_at=fork.updated_at, root_url=None)
            )
        return active
