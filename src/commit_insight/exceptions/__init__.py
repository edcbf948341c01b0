"""Exception hierarchy for Commit Insight."""

from .base import CommitInsightError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)
from .export import ExportError
from .git import (
    GitCommandError,
    GitError,
    GitNotFoundError,
    NotAGitRepositoryError,
)

__all__ = [
    "CommitInsightError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "GitError",
    "GitNotFoundError",
    "NotAGitRepositoryError",
    "GitCommandError",
    "ExportError",
]
