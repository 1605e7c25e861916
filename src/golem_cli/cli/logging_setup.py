"""Process-wide logging configuration.

Called exactly once, from the entry point, before any handler runs.
Logs always go to stderr; stdout is reserved for command output.
"""

from __future__ import annotations

import logging
import sys

from golem_cli.core.models import Verbosity

TRACE: int = 5
"""Below DEBUG; enables wire-level chatter from httpcore."""

logging.addLevelName(TRACE, "TRACE")

NOISY_LOGGERS = ["httpx", "httpcore"]

_LEVELS: dict[Verbosity, int] = {
    Verbosity.ERROR: logging.ERROR,
    Verbosity.WARN: logging.WARNING,
    Verbosity.INFO: logging.INFO,
    Verbosity.DEBUG: logging.DEBUG,
    Verbosity.TRACE: TRACE,
}


def setup_logging(verbosity: Verbosity) -> None:
    """Configure the root logger for *verbosity*.

    * ``OFF`` disables logging entirely.
    * Third-party HTTP libraries stay at WARNING unless the level is
      DEBUG or finer.
    """
    if verbosity is Verbosity.OFF:
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    level = _LEVELS[verbosity]
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)-5s %(name)s: %(message)s",
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if level <= logging.DEBUG else logging.WARNING)
