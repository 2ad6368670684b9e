"""GitHub access through the gh CLI.

gh must be installed and authenticated (gh auth login); every call runs
one gh process and parses its JSON output. Fork, view and user-fork
listing raise GitHubError on failure; fork/PR listing and commit
comparison degrade to an empty result.
"""

import json
import logging
import shutil
import subprocess
from datetime import UTC, datetime
from typing import Any, Dict, List

from forker.config import GitHubConfig
from forker.errors import GitHubError
from forker.github.base import GitHubBackend
from forker.models import Comparison, ForkInfo, Peer, PullRequest, RepositoryInfo, RootRepository
from forker.utils import parse_repo_url, username_from_account

LOG = logging.getLogger("forker.github.gh_cli")

USER_FORK_FIELDS = "name,url,description,updatedAt,parent"
VIEW_FIELDS = "name,url,description,updatedAt,parent,isFork,defaultBranchRef"
PR_FIELDS = "number,title,author,state,createdAt"
FORKS_JQ = ".[] | {owner: .owner.login, name: .name, url: .html_url, updated_at: .updated_at}"
COMPARE_JQ = "{ahead_by: .ahead_by, behind_by: .behind_by}"


class GhCliClient(GitHubBackend):
    """GitHubBackend backed by the gh command-line tool."""

    def __init__(self, config: GitHubConfig | None = None) -> None:
        self._config = config or GitHubConfig()
        self._command = self._config.command
        self._check_installed()

    def _check_installed(self) -> None:
        if shutil.which(self._command) is None:
            raise GitHubError(
                f"GitHub CLI ({self._command}) is not installed. Please install it from https://cli.github.com/"
            )

    def _run_gh(self, args: list[str]) -> tuple[str, bool]:
        """Run gh with args; return (combined stdout/stderr, success)."""
        cmd = [self._command] + args
        LOG.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                check=False,
            )
        except (OSError, ValueError) as e:
            return str(e), False
        output = (result.stdout or "").strip()
        if result.returncode != 0:
            LOG.debug("gh %s exited with %s: %s", args[:2], result.returncode, output)
        return output, result.returncode == 0

    def _repo_url(self, owner: str, repo: str) -> str:
        return f"https://{self._config.host}/{owner}/{repo}"

    def _parent_url(self, parent: Dict[str, Any]) -> str | None:
        """URL of a parent reference; gh repo view omits it, so build it from
        owner login and name."""
        if parent.get("url"):
            return parent["url"]
        owner = (parent.get("owner") or {}).get("login")
        name = parent.get("name")
        if owner and name:
            return self._repo_url(owner, name)
        return None

    def _root_from_parent(self, parent: Dict[str, Any] | None) -> str | None:
        """Follow nested parent objects of a repo listing up to the root."""
        if not parent:
            return None
        if parent.get("isFork") and parent.get("parent"):
            return self._root_from_parent(parent["parent"])
        return self._parent_url(parent)

    def fork_repository(self, url: str, account: str) -> ForkInfo:
        owner, repo = parse_repo_url(url)
        output, ok = self._run_gh(["repo", "fork", f"{owner}/{repo}", "--clone=false", "--remote=false"])
        if not ok:
            raise GitHubError(f"Failed to fork repository: {output}")

        username = username_from_account(account)
        fork = self.get_repository_info(f"{username}/{repo}")
        try:
            root_url: str | None = self.find_root_repository(owner, repo).url
        except GitHubError as e:
            LOG.warning("Could not resolve root of %s/%s: %s", owner, repo, e)
            root_url = None

        LOG.info("Forked %s/%s to %s", owner, repo, fork.url)
        return ForkInfo(
            name=repo,
            original_url=url,
            fork_url=fork.url,
            root_url=root_url,
            owner=username,
            description=fork.description,
            updated_at=fork.updated_at,
            created_at=datetime.now(UTC).isoformat(),
        )

    def list_user_forks(self, account: str) -> List[ForkInfo]:
        username = username_from_account(account)
        output, ok = self._run_gh(
            [
                "repo",
                "list",
                username,
                "--fork",
                "--json",
                USER_FORK_FIELDS,
                "--limit",
                str(self._config.fork_list_limit),
            ]
        )
        if not ok:
            raise GitHubError(f"Failed to list forks: {output}")
        try:
            return [
                ForkInfo(
                    name=data["name"],
                    url=data.get("url"),
                    description=data.get("description"),
                    updated_at=data.get("updatedAt"),
                    root_url=self._root_from_parent(data.get("parent")),
                    owner=username,
                )
                for data in json.loads(output or "[]")
            ]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise GitHubError(f"Failed to parse GitHub response: {e}") from e

    def get_repository_info(self, full_name: str) -> RepositoryInfo:
        output, ok = self._run_gh(["repo", "view", full_name, "--json", VIEW_FIELDS])
        if not ok:
            raise GitHubError(f"Failed to get repository info: {output}")
        try:
            data = json.loads(output)
        except json.JSONDecodeError as e:
            raise GitHubError(f"Failed to parse repository info: {e}") from e
        if not isinstance(data, dict):
            raise GitHubError(f"Unexpected repository info for {full_name}: {output}")

        parent = data.get("parent")
        return RepositoryInfo(
            name=data.get("name") or "",
            url=data.get("url") or "",
            description=data.get("description"),
            updated_at=data.get("updatedAt"),
            is_fork=bool(data.get("isFork")),
            parent_url=self._parent_url(parent) if parent else None,
            default_branch=(data.get("defaultBranchRef") or {}).get("name") or None,
        )

    def find_root_repository(self, owner: str, repo: str) -> RootRepository:
        current_owner, current_repo = owner, repo
        visited: set[str] = set()

        while True:
            full_name = f"{current_owner}/{current_repo}"
            if full_name in visited:
                break
            visited.add(full_name)

            info = self.get_repository_info(full_name)
            if not info.is_fork or not info.parent_url:
                return RootRepository(url=info.url, owner=current_owner, name=current_repo)

            current_owner, current_repo = parse_repo_url(info.parent_url)

        LOG.warning("Fork chain of %s/%s loops at %s; using it as root", owner, repo, full_name)
        return RootRepository(url=self._repo_url(owner, repo), owner=owner, name=repo)

    def list_forks(self, owner: str, repo: str) -> List[Peer]:
        output, ok = self._run_gh(["api", f"repos/{owner}/{repo}/forks", "--paginate", "--jq", FORKS_JQ])
        if not ok:
            LOG.warning("Failed to list forks of %s/%s: %s", owner, repo, output)
            return []
        try:
            return [Peer.model_validate(json.loads(line)) for line in output.splitlines() if line.strip()]
        except ValueError as e:
            LOG.warning("Failed to parse forks of %s/%s: %s", owner, repo, e)
            return []

    def list_pull_requests(self, owner: str, repo: str) -> List[PullRequest]:
        output, ok = self._run_gh(
            [
                "pr",
                "list",
                "--repo",
                f"{owner}/{repo}",
                "--json",
                PR_FIELDS,
                "--limit",
                str(self._config.pr_list_limit),
            ]
        )
        if not ok:
            LOG.warning("Failed to list pull requests of %s/%s: %s", owner, repo, output)
            return []
        try:
            prs = json.loads(output or "[]")
            return [
                PullRequest(
                    number=pr["number"],
                    title=pr.get("title") or "",
                    author=(pr.get("author") or {}).get("login") or "",
                    state=pr.get("state") or "",
                    created_at=pr.get("createdAt"),
                )
                for pr in prs
            ]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            LOG.warning("Failed to parse pull requests of %s/%s: %s", owner, repo, e)
            return []

    def compare_commits(self, owner: str, repo: str, base: str, head: str) -> Comparison:
        output, ok = self._run_gh(["api", f"repos/{owner}/{repo}/compare/{base}...{head}", "--jq", COMPARE_JQ])
        if not ok:
            LOG.warning("Failed to compare %s...%s on %s/%s: %s", base, head, owner, repo, output)
            return Comparison()
        try:
            return Comparison.model_validate(json.loads(output))
        except ValueError as e:
            LOG.warning("Failed to parse comparison for %s/%s: %s", owner, repo, e)
            return Comparison()
