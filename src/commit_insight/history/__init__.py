"""Commit history: records and the git log reader."""

from .git_extractor import GitExtractor, parse_commit_line, parse_numstat_line
from .models import Commit, FileChange

__all__ = [
    "Commit",
    "FileChange",
    "GitExtractor",
    "parse_commit_line",
    "parse_numstat_line",
]
