"""Data models for computed commit statistics.

Every model is frozen. Mappings are exposed as read-only views and
collections as tuples, so an AnalysisResult cannot change after the
aggregator hands it out.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional, Tuple

from ..history.models import Commit


class Weekday(IntEnum):
    """Day of week, numbered like ``datetime.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class FileEditCount:
    file_path: str
    edit_count: int  # commits that touched the file
    total_insertions: int
    total_deletions: int

    @property
    def total_lines_changed(self) -> int:
        return self.total_insertions + self.total_deletions


@dataclass(frozen=True)
class AuthorStats:
    name: str
    email: str
    commit_count: int
    total_insertions: int
    total_deletions: int
    commit_percentage: float  # 0-100
    first_commit_date: datetime
    last_commit_date: datetime


@dataclass(frozen=True)
class AnalysisResult:
    """Complete, immutable statistics for one repository and window."""

    # ── Identity and window ───────────────────────────────────────
    repository_path: str
    repository_name: str
    analysis_start_date: datetime
    analysis_end_date: datetime

    # ── Totals ────────────────────────────────────────────────────
    total_commits: int
    merge_commits: int
    total_insertions: int
    total_deletions: int

    # ── Histograms (every key always present) ─────────────────────
    commits_by_day_of_week: Mapping[Weekday, int]
    commits_by_hour: Mapping[int, int]

    # ── Rankings ──────────────────────────────────────────────────
    most_edited_files: Tuple[FileEditCount, ...]
    author_contributions: Tuple[AuthorStats, ...]

    # ── Activity ──────────────────────────────────────────────────
    active_days: int
    average_commits_per_active_day: float
    average_commits_per_week: float
    longest_streak: int
    longest_streak_start: Optional[date]
    longest_streak_end: Optional[date]

    commits: Tuple[Commit, ...]

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-ready structure: ISO-8601 dates, string mapping keys."""
        return {
            "repository_path": self.repository_path,
            "repository_name": self.repository_name,
            "analysis_start_date": self.analysis_start_date.isoformat(),
            "analysis_end_date": self.analysis_end_date.isoformat(),
            "total_commits": self.total_commits,
            "merge_commits": self.merge_commits,
            "total_insertions": self.total_insertions,
            "total_deletions": self.total_deletions,
            "commits_by_day_of_week": {
                day.label: count for day, count in self.commits_by_day_of_week.items()
            },
            "commits_by_hour": {str(hour): count for hour, count in self.commits_by_hour.items()},
            "most_edited_files": [
                {
                    "file_path": f.file_path,
                    "edit_count": f.edit_count,
                    "total_insertions": f.total_insertions,
                    "total_deletions": f.total_deletions,
                }
                for f in self.most_edited_files
            ],
            "author_contributions": [
                {
                    "name": a.name,
                    "email": a.email,
                    "commit_count": a.commit_count,
                    "total_insertions": a.total_insertions,
                    "total_deletions": a.total_deletions,
                    "commit_percentage": a.commit_percentage,
                    "first_commit_date": a.first_commit_date.isoformat(),
                    "last_commit_date": a.last_commit_date.isoformat(),
                }
                for a in self.author_contributions
            ],
            "active_days": self.active_days,
            "average_commits_per_active_day": self.average_commits_per_active_day,
            "average_commits_per_week": self.average_commits_per_week,
            "longest_streak": self.longest_streak,
            "longest_streak_start": _iso_or_none(self.longest_streak_start),
            "longest_streak_end": _iso_or_none(self.longest_streak_end),
            "commits": [_commit_to_dict(c) for c in self.commits],
        }


def _iso_or_none(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _commit_to_dict(commit: Commit) -> Dict[str, Any]:
    return {
        "hash": commit.hash,
        "full_hash": commit.full_hash,
        "author": commit.author,
        "author_email": commit.author_email,
        "timestamp": commit.timestamp.isoformat(),
        "message": commit.message,
        "is_merge": commit.is_merge,
        "total_insertions": commit.total_insertions,
        "total_deletions": commit.total_deletions,
        "file_changes": [
            {
                "file_path": fc.file_path,
                "insertions": fc.insertions,
                "deletions": fc.deletions,
                "is_binary": fc.is_binary,
            }
            for fc in commit.file_changes
        ],
    }
