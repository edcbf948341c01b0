"""
Commit Insight - Git commit history statistics

Reads a repository's commit log and summarizes it: weekday and hour
histograms, author contributions, most-edited files and commit streaks.
"""

__version__ = "0.1.0"

from .history import Commit, FileChange, GitExtractor
from .stats import AnalysisResult, AuthorStats, FileEditCount, Weekday, compute_statistics

__all__ = [
    "compute_statistics",  # Main entry point
    "AnalysisResult",
    "AuthorStats",
    "FileEditCount",
    "Weekday",
    "Commit",
    "FileChange",
    "GitExtractor",
]
