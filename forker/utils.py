"""Shared utilities (directory name sanitization, repository URL parsing)."""

import re

from forker.errors import GitHubError

_UNSAFE_NAME_CHARS_RE = re.compile(r"[^a-zA-Z0-9_\-]")

# https://host/owner/repo[.git][/path][?query][#fragment], also ssh:// and git://
_URL_RE = re.compile(
    r"^(?:https?|ssh|git)://(?:[^@/]+@)?[^/]+/(?P<owner>[^/]+)/(?P<repo>[^/?#]+?)(?:\.git)?(?:[/?#].*)?$"
)
# [user@]host:owner/repo[.git]
_SCP_RE = re.compile(r"^(?:[^@/\s]+@)?[A-Za-z0-9.\-]+:(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?/?$")
# owner/repo shorthand
_SHORT_RE = re.compile(r"^(?P<owner>[A-Za-z0-9_.\-]+)/(?P<repo>[A-Za-z0-9_.\-]+?)(?:\.git)?$")


def sanitize_name(name: str) -> str:
    """Turn a repository name into a safe directory name.

    Every character outside ``[a-zA-Z0-9_-]`` becomes ``_`` and the result
    is lowercased, so ``"test/gem@123"`` becomes ``"test_gem_123"``. Two
    names that sanitize to the same value share one directory.
    """
    return _UNSAFE_NAME_CHARS_RE.sub("_", name).lower()


def parse_repo_url(url: str) -> tuple[str, str]:
    """Split a repository reference into (owner, repo).

    Accepts ``https://github.com/owner/repo``, the same with ``.git``,
    ``git@github.com:owner/repo.git`` and ``owner/repo``.

    Raises:
        GitHubError: url is not a recognizable repository reference.
    """
    text = (url or "").strip()
    for pattern in (_URL_RE, _SCP_RE, _SHORT_RE):
        match = pattern.match(text)
        if match and match.group("owner") and match.group("repo"):
            return match.group("owner"), match.group("repo")
    raise GitHubError(f"Invalid GitHub repository URL: {url}")


def username_from_account(account: str) -> str:
    """Return the username from a profile URL or bare username."""
    return account.strip().rstrip("/").split("/")[-1]
