"""Root of the Commit Insight exception tree."""

from typing import Any, Mapping, Optional


class CommitInsightError(Exception):
    """Any failure the CLI reports to the user and turns into exit code 1.

    ``details`` holds structured context (rendered after the message by
    ``str()``); ``hint`` is an optional suggestion the CLI prints on its own line.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = {key: str(value) for key, value in (details or {}).items()}
        self.hint = hint

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
