# SPDX-License-Identifier: MIT

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    """Route punchcard's loggers through rich, on stderr."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    level_value = logging.getLevelName(level.upper())
    if not isinstance(level_value, int):
        level_value = logging.WARNING

    root = logging.getLogger("punchcard")
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level_value)
    root.propagate = False
