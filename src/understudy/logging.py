"""Console logging for understudy.

The library logs patch and restore activity at DEBUG through standard
``logging`` loggers under the ``understudy`` namespace and never configures
handlers on import. This module offers an opt-in Rich console handler for
tracing that activity, used by the pytest plugin's ``--understudy-trace``
flag.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from .config import get_log_level

PROJECT_LOGGER = "understudy"

# handler installed by enable_console_logging
_state: dict[str, RichHandler] = {}


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Build the stderr handler that traces stub activity.

    Tracing mode shows every record from DEBUG up, prefixed with the emitting
    understudy module (``understudy.registry`` for patch and restore,
    ``understudy.stubs`` for failing fakes) and a timestamp. Outside tracing
    mode only the message is printed.

    Args:
        level: Lowest level shown outside tracing mode.
        debug_mode: Enable tracing mode.
        color: Colorize output. Disable for plain text in captured streams.

    Returns:
        RichHandler: A handler that is not attached to any logger yet.
    """
    console = Console(stderr=True, color_system="auto" if color else None)
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=console,
        show_time=debug_mode,
        show_path=False,
        markup=False,
        rich_tracebacks=debug_mode,
    )
    fmt = "%(name)s: %(message)s" if debug_mode else "%(message)s"
    handler.setFormatter(logging.Formatter(fmt=fmt))
    return handler


def enable_console_logging(level: int | None = None, color: bool = True) -> RichHandler:
    """Attach a Rich console handler to the ``understudy`` logger.

    Calling this again replaces the handler installed by the previous call
    rather than adding a second one.

    Args:
        level: Minimum level to show. Defaults to `UNDERSTUDY_LOG_LEVEL`
            from the environment, or WARNING.
        color: Enable color output when True.

    Returns:
        RichHandler: The attached handler.
    """
    if level is None:
        level = get_log_level()

    disable_console_logging()
    handler = config_console_handler(
        level=level, debug_mode=level <= logging.DEBUG, color=color
    )
    logger = logging.getLogger(PROJECT_LOGGER)
    logger.addHandler(handler)
    logger.setLevel(level)
    _state["handler"] = handler
    return handler


def disable_console_logging() -> None:
    """Detach the handler installed by `enable_console_logging`, if any."""
    if (handler := _state.pop("handler", None)) is not None:
        logger = logging.getLogger(PROJECT_LOGGER)
        logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        handler.close()
