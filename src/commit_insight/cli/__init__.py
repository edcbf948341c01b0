"""CLI entry point. Importing the command modules registers them on the app."""

import typer

app = typer.Typer(
    name="commit-insight",
    help="Commit Insight - Git commit history statistics",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import commands to register them
from .analyze import main as _main  # noqa: F401, E402
