"""Main analysis command: read git history, compute statistics, render, export."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from .. import __version__
from ..exceptions import CommitInsightError, InvalidConfigError, NotAGitRepositoryError
from ..formatters import RichFormatter, get_formatter
from ..formatters.json_formatter import JsonFormatter
from ..history import GitExtractor
from ..logging_config import get_logger, setup_logging
from ..stats import compute_statistics
from . import app
from ._common import console, err_console, print_error, resolve_config

logger = get_logger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"commit-insight {__version__}")
        raise typer.Exit()


@app.command()
def main(
    path: Optional[Path] = typer.Argument(
        None,
        help="Path to the Git repository to analyze (default: current directory)",
        show_default=False,
    ),
    days: Optional[int] = typer.Option(
        None,
        "--days",
        "-d",
        help="Number of days to analyze, counted back from today (default: 90)",
        show_default=False,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output path for JSON export",
        dir_okay=False,
    ),
    fmt: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Terminal output format: rich (default), json, quiet",
        show_default=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML configuration file",
        exists=True,
        dir_okay=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Analyze a Git repository's commit history.

    [bold]Examples:[/bold]

      commit-insight

      commit-insight /path/to/repo --days 60

      commit-insight --output stats.json
    """
    setup_logging("verbose" if verbose else "normal")

    repo_path = path if path is not None else Path.cwd()
    if not repo_path.is_dir():
        print_error(f"Directory not found: [yellow]{escape(str(repo_path))}[/yellow]")
        raise typer.Exit(1)

    try:
        settings = resolve_config(config=config, days=days, output_format=fmt, verbose=verbose)
    except InvalidConfigError as e:
        # The days message is complete on its own; other keys need their name
        print_error(escape(e.reason if e.key == "days" else str(e)))
        raise typer.Exit(1)
    except CommitInsightError as e:
        print_error(escape(str(e)), hint=e.hint)
        raise typer.Exit(1)

    if settings.verbosity != "normal":
        setup_logging(settings.verbosity)
    logger.debug("Using config: %s", settings)

    extractor = GitExtractor(
        str(repo_path),
        timeout_seconds=settings.git_timeout_seconds,
        max_output_mb=settings.max_output_mb,
    )

    with err_console.status("Checking Git repository...", spinner="dots"):
        is_repo = extractor.is_git_repo()
    if not is_repo:
        not_a_repo = NotAGitRepositoryError(repo_path)
        print_error(
            f"Not a Git repository: [yellow]{escape(str(repo_path))}[/yellow]",
            hint=not_a_repo.hint,
        )
        raise typer.Exit(1)

    try:
        with err_console.status("Analyzing repository...", spinner="dots") as status:
            commits = extractor.extract(settings.days, progress=status.update)
    except CommitInsightError as e:
        logger.debug("git extraction failed", exc_info=True)
        print_error(escape(str(e)), hint=e.hint)
        raise typer.Exit(1)

    if not commits:
        err_console.print(f"[yellow]No commits found[/yellow] in the last {settings.days} days.")
        raise typer.Exit(0)

    result = compute_statistics(
        commits,
        extractor.repo_path,
        extractor.repository_name,
        settings.days,
        top_files=settings.top_files,
    )
    logger.debug(
        "Computed statistics: %d commits, %d authors",
        result.total_commits,
        len(result.author_contributions),
    )

    if settings.output_format == "rich":
        formatter = RichFormatter(console=console, top_authors=settings.top_authors)
    else:
        formatter = get_formatter(settings.output_format)
    formatter.render(result)

    if output is not None:
        try:
            written = JsonFormatter().export(result, output)
        except CommitInsightError as e:
            print_error(f"exporting JSON: {escape(str(e))}")
            raise typer.Exit(1)
        err_console.print(f"[green]JSON exported to:[/green] [blue]{escape(str(written))}[/blue]")
