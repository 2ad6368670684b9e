"""Error kinds raised by forker."""


class ForkerError(Exception):
    """Base error for all forker failures."""

    pass


class GitHubError(ForkerError):
    """Raised when the GitHub CLI is missing, a URL is invalid, or a gh call
    fails."""

    pass


class StorageError(ForkerError):
    """Raised when reading or writing .forker data fails."""

    pass


class ConfigError(ForkerError):
    """Raised when forker.yaml or FORKER_* settings cannot be loaded."""

    pass
