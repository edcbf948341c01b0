"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import AnalysisConfig, load_config

# Report output goes to stdout; progress and errors go to stderr
console = Console()
err_console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    days: Optional[int] = None,
    output_format: Optional[str] = None,
    verbose: bool = False,
) -> AnalysisConfig:
    """Build the analysis config from CLI options."""
    overrides = {}
    if days is not None:
        overrides["days"] = days
    if output_format is not None:
        overrides["output_format"] = output_format
    if verbose:
        overrides["verbose"] = True
    return load_config(config_file=config, **overrides)


def print_error(message: str, hint: Optional[str] = None) -> None:
    err_console.print(f"[red]Error:[/red] {message}")
    if hint:
        err_console.print(f"[grey50]Hint: {hint}[/grey50]")
