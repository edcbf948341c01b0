"""
Logging setup for Commit Insight.

Records go to stderr through rich so they never mix with the report on stdout.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "commit_insight"

LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Install a rich stderr handler, plus a plain file handler if ``log_file`` is set.

    Args:
        verbosity: "quiet" (errors only), "normal" (warnings) or "verbose" (debug)
        log_file: Optional path that log records are appended to

    Returns:
        The ``commit_insight`` root logger
    """
    level = LEVELS.get(verbosity, logging.WARNING)
    debug = level == logging.DEBUG

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=debug,
            markup=False,
            show_time=debug,
            show_path=debug,
        )
    ]

    if log_file:
        to_file = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        to_file.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )
        handlers.append(to_file)

    # force=True replaces handlers installed by an earlier call
    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``commit_insight`` namespace (the root one if ``name`` is None)."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
