"""Logging setup.

Modules log through ``logging.getLogger(__name__)``; this module only wires
the root logger once per process.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO", fmt: str = "console") -> None:
    """Configure the root logger.

    Does nothing if the root logger already has handlers, so calling it from
    both the CLI and ``create_app`` is safe.

    Args:
        level: Logging level name, case insensitive. Unknown names fall back to INFO.
        fmt: ``"console"`` for rich output, ``"plain"`` for timestamped lines.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler: logging.Handler
    if fmt == "console":
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
