"""Commit statistics: aggregation engine and result models."""

from .aggregator import (
    author_contributions,
    commits_by_day_of_week,
    commits_by_hour,
    compute_statistics,
    longest_streak,
    most_edited_files,
)
from .models import AnalysisResult, AuthorStats, FileEditCount, Weekday

__all__ = [
    "AnalysisResult",
    "AuthorStats",
    "FileEditCount",
    "Weekday",
    "compute_statistics",
    "commits_by_day_of_week",
    "commits_by_hour",
    "most_edited_files",
    "author_contributions",
    "longest_streak",
]
