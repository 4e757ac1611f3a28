"""
TenderFlow CLI - Main entry point.

A terminal front end for tenders, bids and approval voting with
versioned edits and rollback.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.markup import escape
from rich.panel import Panel
from rich.traceback import install as install_rich_traceback

from tenderflow import __app_name__, __version__

from .common import console, err_console

# Load environment variables from .env (if present)
load_dotenv()

# Install rich traceback for better error display
install_rich_traceback(show_locals=False, width=120)

# Create main app
app = typer.Typer(
    name=__app_name__,
    help="Tenders, bids and approval voting with versioned history",
    rich_markup_mode="rich",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """TenderFlow - tenders, bids and approvals."""
    pass


# =============================================================================
# Import and register subcommand modules
# =============================================================================

from .commands import bids, db, tenders  # noqa: E402

app.add_typer(tenders.app, name="tenders", help="Create, edit and list tenders")
app.add_typer(bids.app, name="bids", help="Create, edit, list and decide on bids")
app.add_typer(db.app, name="db", help="Database operations")


# =============================================================================
# Init Command
# =============================================================================


@app.command()
def init(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
) -> None:
    """Initialize TenderFlow database and configuration.

    Creates required directories, a default configuration file,
    and the database schema.
    """
    from rich.progress import Progress, SpinnerColumn, TextColumn

    from tenderflow.core.config import resolve_config_path

    from .common import bootstrap, handle_errors

    app_config_path = resolve_config_path()

    with handle_errors(), Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Creating default configuration...", total=None)

        if not app_config_path.exists() or force:
            _create_default_app_config(app_config_path)

        progress.update(task, description="Initializing database...")

        config = bootstrap()

        from tenderflow.persistence.db import init_db

        init_db(config.database.url, timeout_seconds=config.database.timeout_seconds)

        progress.update(task, description="Done!")

    console.print()
    console.print(Panel.fit(
        "[bold green]OK - TenderFlow initialized successfully![/bold green]\n\n"
        "Created:\n"
        f"  - [cyan]{escape(str(app_config_path))}[/cyan] - Application configuration\n"
        f"  - [cyan]{escape(config.database.url)}[/cyan] - Database\n\n"
        "Next steps:\n"
        "  1. List organization members under [yellow]organizations[/yellow] in the config\n"
        "  2. Create a tender: [yellow]tenderflow tenders create[/yellow]\n"
        "  3. Publish it: [yellow]tenderflow tenders set-status <id> Published[/yellow]",
        title="[bold]Initialization Complete[/bold]",
        border_style="green",
    ))


def _create_default_app_config(path: Path) -> None:
    """Create default app.yaml configuration."""
    default_config = """\
# TenderFlow Configuration

# Database settings
database:
  url: ${DATABASE_URL:-sqlite:///data/tenderflow.db}
  echo: false
  timeout_seconds: 5

# Logging settings
logging:
  level: INFO
  file: logs/tenderflow.log
  json_format: true
  rich_console: true

# Listing defaults (0 = no limit)
pagination:
  default_limit: 5

# Approvals needed to close a tender
approvals:
  quorum: 3

# Organization id -> ids of the users responsible for it
organizations: {}
"""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(default_config, encoding="utf-8")


# =============================================================================
# Config Check Command
# =============================================================================


@app.command("check-config")
def check_config(
    path: Optional[Path] = typer.Argument(
        None,
        help="Configuration file (default: $TENDERFLOW_CONFIG or configs/app.yaml)",
    ),
) -> None:
    """Validate a configuration file."""
    from tenderflow.core.config import resolve_config_path, validate_app_config_file

    path = resolve_config_path(path)
    errors = validate_app_config_file(path)

    if errors:
        err_console.print(f"[red]Invalid configuration:[/red] {escape(str(path))}")
        for error in errors:
            err_console.print(f"  - {escape(error)}")
        raise typer.Exit(1)

    console.print(f"[green]OK[/green] {escape(str(path))} is valid")


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
