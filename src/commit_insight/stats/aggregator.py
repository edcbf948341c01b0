"""Statistics engine: commit records in, one immutable AnalysisResult out.

Every function here is pure. The only wall-clock read is the window
end in ``compute_statistics`` (and it can be injected through ``now``),
so two calls over the same commits differ only in the window fields.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..history.models import Commit
from .models import AnalysisResult, AuthorStats, FileEditCount, Weekday

DEFAULT_TOP_FILES = 10

Streak = Tuple[int, Optional[date], Optional[date]]


def compute_statistics(
    commits: Sequence[Commit],
    repository_path: str,
    repository_name: str,
    window_days: int,
    now: Optional[datetime] = None,
    top_files: int = DEFAULT_TOP_FILES,
) -> AnalysisResult:
    """Aggregate commits into frequency tables, rankings, averages and streaks.

    Args:
        commits: Commit records in any order; may be empty
        repository_path: Path reported in the result
        repository_name: Display name reported in the result
        window_days: Look-back window; positivity is the caller's concern
        now: Window end. Defaults to the current local time
        top_files: Maximum number of most-edited files to keep

    Returns:
        Fully populated AnalysisResult. Never raises on well-formed commits.

    Note:
        A non-positive ``window_days`` puts the window start at or after its
        end. The per-week average then falls back to its floor of one week.
    """
    end = now if now is not None else datetime.now().astimezone()
    start = end - timedelta(days=window_days)

    total_commits = len(commits)
    active_dates = sorted({c.timestamp.date() for c in commits})
    active_days = len(active_dates)

    avg_per_active_day = total_commits / active_days if active_days > 0 else 0.0

    window_length_days = (end - start).total_seconds() / 86400
    avg_per_week = total_commits / max(1.0, window_length_days / 7)

    streak_length, streak_start, streak_end = longest_streak(active_dates)

    return AnalysisResult(
        repository_path=repository_path,
        repository_name=repository_name,
        analysis_start_date=start,
        analysis_end_date=end,
        total_commits=total_commits,
        merge_commits=sum(1 for c in commits if c.is_merge),
        total_insertions=sum(c.total_insertions for c in commits),
        total_deletions=sum(c.total_deletions for c in commits),
        commits_by_day_of_week=commits_by_day_of_week(commits),
        commits_by_hour=commits_by_hour(commits),
        most_edited_files=most_edited_files(commits, top_files),
        author_contributions=author_contributions(commits),
        active_days=active_days,
        average_commits_per_active_day=avg_per_active_day,
        average_commits_per_week=avg_per_week,
        longest_streak=streak_length,
        longest_streak_start=streak_start,
        longest_streak_end=streak_end,
        commits=tuple(commits),
    )


def commits_by_day_of_week(commits: Sequence[Commit]) -> Mapping[Weekday, int]:
    """Commit count per weekday; all seven days present."""
    counts: Dict[Weekday, int] = {day: 0 for day in Weekday}
    for commit in commits:
        counts[Weekday(commit.timestamp.weekday())] += 1
    return MappingProxyType(counts)


def commits_by_hour(commits: Sequence[Commit]) -> Mapping[int, int]:
    """Commit count per hour of day; all 24 hours present."""
    counts: Dict[int, int] = {hour: 0 for hour in range(24)}
    for commit in commits:
        counts[commit.timestamp.hour] += 1
    return MappingProxyType(counts)


def most_edited_files(
    commits: Sequence[Commit], top_n: int = DEFAULT_TOP_FILES
) -> Tuple[FileEditCount, ...]:
    """Rank files by number of commits touching them.

    Ties are broken by total lines changed, both descending. A file listed
    twice in one commit counts as one edit but both entries add to its lines.
    """
    edits: Dict[str, int] = defaultdict(int)
    insertions: Dict[str, int] = defaultdict(int)
    deletions: Dict[str, int] = defaultdict(int)

    for commit in commits:
        seen = set()
        for change in commit.file_changes:
            path = change.file_path
            if path not in seen:
                seen.add(path)
                edits[path] += 1
            insertions[path] += change.insertions
            deletions[path] += change.deletions

    ranked = sorted(
        edits,
        key=lambda path: (edits[path], insertions[path] + deletions[path]),
        reverse=True,
    )
    return tuple(
        FileEditCount(
            file_path=path,
            edit_count=edits[path],
            total_insertions=insertions[path],
            total_deletions=deletions[path],
        )
        for path in ranked[:top_n]
    )


def author_contributions(commits: Sequence[Commit]) -> Tuple[AuthorStats, ...]:
    """Per-author totals keyed by (name, email), most commits first.

    Authors with equal commit counts keep the order they first appear in.
    """
    counts: Dict[Tuple[str, str], int] = {}
    insertions: Dict[Tuple[str, str], int] = {}
    deletions: Dict[Tuple[str, str], int] = {}
    first_seen: Dict[Tuple[str, str], datetime] = {}
    last_seen: Dict[Tuple[str, str], datetime] = {}

    for commit in commits:
        key = (commit.author, commit.author_email)
        ts = commit.timestamp
        if key not in counts:
            counts[key] = 0
            insertions[key] = 0
            deletions[key] = 0
            first_seen[key] = ts
            last_seen[key] = ts
        counts[key] += 1
        insertions[key] += commit.total_insertions
        deletions[key] += commit.total_deletions
        if ts < first_seen[key]:
            first_seen[key] = ts
        if ts > last_seen[key]:
            last_seen[key] = ts

    total = len(commits)
    authors: List[AuthorStats] = [
        AuthorStats(
            name=name,
            email=email,
            commit_count=count,
            total_insertions=insertions[(name, email)],
            total_deletions=deletions[(name, email)],
            commit_percentage=100.0 * count / total if total > 0 else 0.0,
            first_commit_date=first_seen[(name, email)],
            last_commit_date=last_seen[(name, email)],
        )
        for (name, email), count in counts.items()
    ]
    # sorted() is stable, so ties stay in first-seen order
    return tuple(sorted(authors, key=lambda a: a.commit_count, reverse=True))


def longest_streak(dates: Sequence[date]) -> Streak:
    """Longest run of consecutive calendar days.

    Args:
        dates: Distinct dates in ascending order

    Returns:
        (length, start, end); (0, None, None) for no dates. The earliest run
        wins when several share the maximum length.
    """
    if not dates:
        return 0, None, None

    one_day = timedelta(days=1)
    best_length, best_start, best_end = 1, dates[0], dates[0]
    run_length, run_start = 1, dates[0]

    for previous, current in zip(dates, dates[1:]):
        if current - previous == one_day:
            run_length += 1
            continue
        if run_length > best_length:
            best_length, best_start, best_end = run_length, run_start, previous
        run_length, run_start = 1, current

    if run_length > best_length:
        best_length, best_start, best_end = run_length, run_start, dates[-1]

    return best_length, best_start, best_end
