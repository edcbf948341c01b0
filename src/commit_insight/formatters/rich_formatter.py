"""Rich terminal formatter for Commit Insight."""

import io
from typing import Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from ..stats.models import AnalysisResult, Weekday
from .base import BaseFormatter

BAR_WIDTH = 50
MAX_PATH_LENGTH = 50


def activity_color(count: int, max_count: int) -> str:
    """Colour for a cell whose value is ``count`` out of a peak of ``max_count``."""
    if count == 0 or max_count == 0:
        return "grey30"
    ratio = count / max_count
    if ratio >= 0.75:
        return "red"
    elif ratio >= 0.5:
        return "yellow"
    elif ratio >= 0.25:
        return "green"
    else:
        return "green4"


def percent_bar(percentage: float) -> str:
    filled = max(0, min(10, int(percentage / 10)))
    return f"[green]{'█' * filled}[/green][grey30]{'░' * (10 - filled)}[/grey30]"


def activity_bar(count: int, max_count: int) -> str:
    ratio = count / max_count if max_count > 0 else 0
    filled = max(0, min(10, int(ratio * 10)))
    return f"[cyan]{'█' * filled}[/cyan][grey30]{'░' * (10 - filled)}[/grey30]"


def truncate_path(path: str, max_length: int = MAX_PATH_LENGTH) -> str:
    if len(path) <= max_length:
        return path
    return "..." + path[-(max_length - 3):]


def _section(console: Console, title: str) -> None:
    console.print(Rule(f"[bold yellow]{title}[/bold yellow]", align="left"))


def _no_data(console: Console, what: str) -> None:
    console.print(f"[grey50]No {what} data available[/grey50]")
    console.print()


class RichFormatter(BaseFormatter):
    """Rich terminal output: overview, activity charts, rankings, streak."""

    def __init__(self, console: Optional[Console] = None, top_authors: int = 10):
        self.console = console or Console()
        self.top_authors = top_authors

    def render(self, result: AnalysisResult) -> None:
        self._render_to(self.console, result)

    def format(self, result: AnalysisResult) -> str:
        recorder = Console(record=True, width=self.console.width, file=io.StringIO())
        self._render_to(recorder, result)
        return recorder.export_text()

    def _render_to(self, console: Console, result: AnalysisResult) -> None:
        self._print_header(console, result)
        self._print_overview(console, result)
        self._print_day_of_week(console, result)
        self._print_hourly_heatmap(console, result)
        self._print_authors(console, result)
        self._print_files(console, result)
        self._print_streak(console, result)

    # -- private helpers --

    def _print_header(self, console: Console, result: AnalysisResult) -> None:
        start = result.analysis_start_date.strftime("%Y-%m-%d")
        end = result.analysis_end_date.strftime("%Y-%m-%d")
        console.print(
            Panel(
                f"[bold]Repository:[/bold] {escape(result.repository_path)}\n"
                f"[bold]Analysis Period:[/bold] {start} to {end}",
                title=f"[bold blue]{escape(result.repository_name)}[/bold blue]",
                box=box.ROUNDED,
                border_style="blue",
                expand=False,
            )
        )
        console.print()

    def _print_overview(self, console: Console, result: AnalysisResult) -> None:
        _section(console, "Overview")
        table = Table(box=box.ROUNDED)
        table.add_column("Metric")
        table.add_column("Value")
        table.add_row("Total Commits", f"[green]{result.total_commits:,}[/green]")
        table.add_row("Merge Commits", f"[yellow]{result.merge_commits:,}[/yellow]")
        table.add_row("Lines Added", f"[green]+{result.total_insertions:,}[/green]")
        table.add_row("Lines Deleted", f"[red]-{result.total_deletions:,}[/red]")
        table.add_row("Active Days", f"[cyan]{result.active_days}[/cyan]")
        table.add_row(
            "Avg Commits/Active Day", f"[blue]{result.average_commits_per_active_day:.1f}[/blue]"
        )
        table.add_row("Avg Commits/Week", f"[blue]{result.average_commits_per_week:.1f}[/blue]")
        console.print(table)
        console.print()

    def _print_day_of_week(self, console: Console, result: AnalysisResult) -> None:
        _section(console, "Commits by Day of Week")
        counts = result.commits_by_day_of_week
        max_count = max(counts.values(), default=0)
        if max_count == 0:
            _no_data(console, "commit")
            return

        chart = Table(box=None, show_header=False, padding=(0, 1))
        chart.add_column(justify="right")
        chart.add_column()
        chart.add_column(justify="right")
        for day in Weekday:
            count = counts[day]
            width = round(count / max_count * BAR_WIDTH)
            color = activity_color(count, max_count)
            chart.add_row(day.label[:3], f"[{color}]{'█' * width}[/{color}]", str(count))
        console.print(chart)
        console.print()

    def _print_hourly_heatmap(self, console: Console, result: AnalysisResult) -> None:
        _section(console, "Commits by Hour (Heatmap)")
        counts = result.commits_by_hour
        max_count = max(counts.values(), default=0)
        if max_count == 0:
            _no_data(console, "commit")
            return

        heatmap = Table(box=None, show_header=False, padding=(0, 0))
        for _ in range(24):
            heatmap.add_column(justify="center", min_width=3)

        hours = range(24)
        heatmap.add_row(*(f"[grey50]{hour:02d}[/grey50]" for hour in hours))
        colors = [activity_color(counts[hour], max_count) for hour in hours]
        heatmap.add_row(*(f"[{color}]██[/{color}]" for color in colors))
        heatmap.add_row(
            *(f"[grey50]{counts[hour]}[/grey50]" if counts[hour] else "[grey50]·[/grey50]" for hour in hours)
        )
        console.print(heatmap)
        console.print(
            "\n[grey50]Legend:[/grey50] [grey30]█[/grey30] None  [green4]█[/green4] Low  "
            "[green]█[/green] Medium  [yellow]█[/yellow] High  [red]█[/red] Very High"
        )
        console.print()

    def _print_authors(self, console: Console, result: AnalysisResult) -> None:
        _section(console, "Author Contributions")
        if not result.author_contributions:
            _no_data(console, "author")
            return

        table = Table(box=box.ROUNDED)
        table.add_column("Author")
        table.add_column("Commits", justify="center")
        table.add_column("%", justify="center")
        table.add_column("+Lines", justify="right")
        table.add_column("-Lines", justify="right")
        for author in result.author_contributions[: self.top_authors]:
            table.add_row(
                f"[bold]{escape(author.name)}[/bold]",
                f"[cyan]{author.commit_count}[/cyan]",
                f"{percent_bar(author.commit_percentage)} [grey50]{author.commit_percentage:.1f}%[/grey50]",
                f"[green]+{author.total_insertions:,}[/green]",
                f"[red]-{author.total_deletions:,}[/red]",
            )
        console.print(table)
        console.print()

    def _print_files(self, console: Console, result: AnalysisResult) -> None:
        files = result.most_edited_files
        _section(console, f"Most Frequently Edited Files (Top {len(files) or 10})")
        if not files:
            _no_data(console, "file")
            return

        max_edits = max(f.edit_count for f in files)
        table = Table(box=box.ROUNDED)
        table.add_column("File")
        table.add_column("Edits", justify="center")
        table.add_column("+Lines", justify="right")
        table.add_column("-Lines", justify="right")
        for f in files:
            table.add_row(
                f"[blue]{escape(truncate_path(f.file_path))}[/blue]",
                f"{activity_bar(f.edit_count, max_edits)} [cyan]{f.edit_count}[/cyan]",
                f"[green]+{f.total_insertions:,}[/green]",
                f"[red]-{f.total_deletions:,}[/red]",
            )
        console.print(table)
        console.print()

    def _print_streak(self, console: Console, result: AnalysisResult) -> None:
        _section(console, "Commit Streak")
        if result.longest_streak <= 0:
            _no_data(console, "streak")
            return

        text = f"[bold green]{result.longest_streak}[/bold green] consecutive days"
        if result.longest_streak_start and result.longest_streak_end:
            text += (
                f"\n[grey50]From {result.longest_streak_start:%Y-%m-%d} "
                f"to {result.longest_streak_end:%Y-%m-%d}[/grey50]"
            )
        console.print(
            Panel(
                text,
                title="[bold]Longest Streak[/bold]",
                box=box.ROUNDED,
                border_style="green",
                expand=False,
            )
        )
        console.print()

