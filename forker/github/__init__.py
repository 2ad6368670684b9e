"""GitHub access: capability interface and gh CLI implementation."""

from forker.github.base import GitHubBackend
from forker.github.gh_cli import GhCliClient

__all__ = ["GhCliClient", "GitHubBackend"]
