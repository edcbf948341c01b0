"""Quiet formatter: one summary line."""

from ..stats.models import AnalysisResult
from .base import BaseFormatter


class QuietFormatter(BaseFormatter):
    """Render a single line of headline numbers."""

    def render(self, result: AnalysisResult) -> None:
        print(self.format(result))

    def format(self, result: AnalysisResult) -> str:
        return (
            f"{result.repository_name}: {result.total_commits} commits, "
            f"{len(result.author_contributions)} authors, "
            f"+{result.total_insertions}/-{result.total_deletions} lines, "
            f"{result.active_days} active days, "
            f"longest streak {result.longest_streak}d"
        )
