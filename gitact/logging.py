"""Logging from config and env.

Levels (inclusive):
- ERROR: critical errors only
- WARNING: non-critical issues and ERROR
- INFO: service messages, WARNING, and ERROR
- DEBUG: debugging and all levels above

Configure via config.yaml (logging.level, logging.format) or env (LOGGING_LEVEL, LOGGING_FORMAT).
Every record passes through RedactingFilter so tokens and emails never reach
the output.
"""

import logging

from gitact.config import LoggingConfig
from gitact.sanitize import redact_message

# Supported levels only (DEBUG, INFO, WARNING, ERROR)
LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str) -> int:
    """Map level name to logging constant.

    Falls back to INFO if unknown.
    """
    return LEVELS.get(level.upper().strip(), logging.INFO)


class RedactingFilter(logging.Filter):
    """Replace the formatted message with its redacted form."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact_message(record.getMessage())
        record.args = None
        return True


class GitactLogging:
    """Configures root logger from LoggingConfig (YAML + env LOGGING_*)."""

    def __init__(self, config: LoggingConfig) -> None:
        """Store logging config (level and format)."""
        self._level = _resolve_level(config.level)
        self._format = config.format or DEFAULT_FORMAT

    def setup(self) -> None:
        """Apply level and format to the root logger and install redaction."""
        logging.basicConfig(
            level=self._level,
            format=self._format,
            force=True,
        )
        for handler in logging.getLogger().handlers:
            if not any(isinstance(f, RedactingFilter) for f in handler.filters):
                handler.addFilter(RedactingFilter())

    def get_logger(self, name: str) -> logging.Logger:
        """Return a logger with the given name (uses root config)."""
        return logging.getLogger(name)
