"""Output formatters for Commit Insight."""

from typing import Dict, Type

from .base import BaseFormatter
from .json_formatter import JsonFormatter
from .quiet_formatter import QuietFormatter
from .rich_formatter import RichFormatter

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "rich": RichFormatter,
    "json": JsonFormatter,
    "quiet": QuietFormatter,
}


def get_formatter(name: str) -> BaseFormatter:
    """Instantiate the formatter registered under ``name`` with its defaults.

    Raises:
        ValueError: If no formatter has that name
    """
    try:
        return FORMATTERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(FORMATTERS))}"
        ) from None


__all__ = [
    "FORMATTERS",
    "BaseFormatter",
    "JsonFormatter",
    "QuietFormatter",
    "RichFormatter",
    "get_formatter",
]
