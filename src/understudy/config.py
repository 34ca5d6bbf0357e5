"""Configuration helpers for understudy.

Settings come from the environment (log level) and from pytest's ini file
(auto-restore between tests, see `understudy.pytest_plugin`).
"""

import logging
import os

LOG_LEVEL_ENV = "UNDERSTUDY_LOG_LEVEL"  # pragma: no mutate
AUTORESTORE_INI = "understudy_autorestore"  # pragma: no mutate


class InvalidLogLevelError(ValueError):
    """Raised when a configured log level is not a standard level name."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid log level: {value!r}")
        self.value = value


def parse_log_level(value: str) -> int:
    """Convert a level name such as ``"debug"`` or ``"WARNING"`` to its number.

    Args:
        value: Level name, case-insensitive, surrounding whitespace ignored.

    Returns:
        int: The numeric logging level.

    Raises:
        InvalidLogLevelError: If ``value`` is not a standard level name.
    """
    level = logging.getLevelNamesMapping().get(value.strip().upper())
    if level is None:
        raise InvalidLogLevelError(value)
    return level


def get_log_level(default: int = logging.WARNING) -> int:
    """Get the console log level from the environment.

    Args:
        default: Level used when `UNDERSTUDY_LOG_LEVEL` is unset or empty.

    Returns:
        int: The configured numeric level.

    Raises:
        InvalidLogLevelError: If `UNDERSTUDY_LOG_LEVEL` names no known level.
    """
    if not (value := os.environ.get(LOG_LEVEL_ENV)):
        return default
    return parse_log_level(value)
