"""Export exceptions."""

from pathlib import Path
from typing import Union

from .base import CommitInsightError


class ExportError(CommitInsightError):
    """Raised when an analysis result cannot be written to disk."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(
            f"Cannot export to: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
