"""Logging setup for the forker CLI.

Reports are printed to stdout; log records go to stderr so the two never
mix. The level comes from forker.yaml (logging.level),
FORKER_LOGGING_LEVEL or --log-level. Only DEBUG, INFO, WARNING and ERROR
are recognized; anything else means WARNING.
"""

import logging
import sys

from forker.config import LoggingConfig

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "WARNING"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def level_from_name(name: str | None) -> int:
    """Logging constant for a level name; unknown or empty gives
    DEFAULT_LEVEL."""
    return LEVELS.get((name or "").strip().upper(), LEVELS[DEFAULT_LEVEL])


class ForkerLogging:
    """Root logger setup for one forker run."""

    def __init__(self, config: LoggingConfig) -> None:
        self._requested = (config.level or "").strip().upper()
        self.level = level_from_name(self._requested)
        self.format = config.format or DEFAULT_FORMAT

    def setup(self) -> logging.Logger:
        """Route records to stderr at the configured level; return the
        package logger."""
        logging.basicConfig(
            level=self.level,
            format=self.format,
            stream=sys.stderr,
            force=True,
        )
        log = logging.getLogger("forker")
        if self._requested not in LEVELS:
            log.warning("Unknown log level %r, using %s", self._requested, DEFAULT_LEVEL)
        return log
