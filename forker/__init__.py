"""Forker: track GitHub forks of locally-vendored dependencies."""

from forker.errors import ConfigError, ForkerError, GitHubError, StorageError

__version__ = "0.1.0"

__all__ = ["ConfigError", "ForkerError", "GitHubError", "StorageError", "__version__"]
