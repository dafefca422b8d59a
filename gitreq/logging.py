"""Logging from config and env.

Levels (inclusive):
- ERROR: critical errors only
- WARNING: non-critical issues and ERROR (default for the CLI)
- INFO: progress messages, WARNING, and ERROR
- DEBUG: API calls, git commands and all levels above

Configure via config.yaml (logging.level, logging.format), env
(GIT_REQ_LOGGING_LEVEL, GIT_REQ_LOGGING_FORMAT) or ``git req -v``.
"""

import logging

from gitreq.config import LoggingConfig

# Supported levels only (DEBUG, INFO, WARNING, ERROR)
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "WARNING"
DEFAULT_FORMAT = "%(levelname)s - %(name)s - %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to WARNING if unknown.
    """
    return LEVELS.get(level.upper().strip(), LEVELS[DEFAULT_LEVEL])


class GitReqLogging:
    """Configures root logger from LoggingConfig (YAML + env GIT_REQ_LOGGING_*)."""

    def __init__(self, config: LoggingConfig, verbose: bool = False) -> None:
        """Store logging config; verbose forces DEBUG."""
        self._level = logging.DEBUG if verbose else _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT

    @property
    def level(self) -> int:
        return self._level

    def setup(self) -> None:
        """Apply level and format to the root logger."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            force=True,
        )
        # urllib3 logs every connection at DEBUG; keep it at INFO unless asked
        logging.getLogger("urllib3").setLevel(max(self._level, logging.INFO))
