"""Records for forks, peers, pull requests and reports.

Stored records (ForkInfo, Peer, PullRequest) are written to .forker/ as
JSON with these field names.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class ForkInfo(BaseModel):
    """Fork record as stored in .forker/{name}/fork_info.json.

    Written by fork (original_url, fork_url, owner, created_at) and by list
    (url, description, updated_at); either shape is accepted.
    """

    name: str = Field(..., description="Repository name")
    url: Optional[str] = Field(default=None, description="Fork URL (from list)")
    fork_url: Optional[str] = Field(default=None, description="Fork URL (from fork)")
    original_url: Optional[str] = Field(default=None, description="URL passed to fork")
    root_url: Optional[str] = Field(default=None, description="Upstream root repository URL")
    owner: Optional[str] = Field(default=None, description="Account owning the fork")
    description: Optional[str] = Field(default=None, description="Repository description")
    updated_at: Optional[str] = Field(default=None, description="Last update timestamp")
    created_at: Optional[str] = Field(default=None, description="When the fork was created")

    model_config = {"extra": "ignore"}

    @property
    def location(self) -> Optional[str]:
        """URL of the fork itself, whichever field carries it."""
        return self.fork_url or self.url


class Peer(BaseModel):
    """Another fork of a root repository."""

    owner: str = Field(..., description="Fork owner login")
    name: str = Field(..., description="Repository name")
    url: str = Field(..., description="Fork URL")
    updated_at: Optional[str] = Field(default=None, description="Last update timestamp")

    model_config = {"extra": "ignore"}


class PullRequest(BaseModel):
    """Pull request summary."""

    number: int
    title: str = ""
    author: str = ""
    state: str = ""
    created_at: Optional[str] = None

    model_config = {"extra": "ignore"}


class RepositoryInfo(BaseModel):
    """Metadata of a single repository from gh repo view."""

    name: str
    url: str
    description: Optional[str] = None
    updated_at: Optional[str] = None
    is_fork: bool = False
    parent_url: Optional[str] = None
    default_branch: Optional[str] = None


class RootRepository(BaseModel):
    """Top of a fork chain."""

    url: str
    owner: str
    name: str


class Comparison(BaseModel):
    """Commits ahead/behind between two refs."""

    ahead_by: int = 0
    behind_by: int = 0


class ForkStatus(BaseModel):
    """Status line for a tracked fork; ahead/behind only when compared."""

    name: str
    fork_url: Optional[str] = None
    root_url: Optional[str] = None
    updated_at: Optional[str] = None
    ahead_by: Optional[int] = None
    behind_by: Optional[int] = None


class PeerReport(BaseModel):
    """Peers of one tracked fork."""

    name: str
    root_url: str
    peers: List[Peer] = Field(default_factory=list)


class PullRequestReport(BaseModel):
    """Pull requests across one tracked fork and its root."""

    name: str
    prs: List[PullRequest] = Field(default_factory=list)


class ActiveFork(BaseModel):
    """Entry of the most-active ranking."""

    name: str
    url: str
    owner: Optional[str] = None
    updated_at: Optional[str] = None
    root_url: Optional[str] = None
