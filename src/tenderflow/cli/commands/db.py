"""
Database management commands.
"""

from __future__ import annotations

import typer
from rich.markup import escape

from tenderflow.errors import translate_store_errors

from ..common import bootstrap, console, err_console, handle_errors

app = typer.Typer(
    help="Database operations",
    no_args_is_help=True,
)


def _alembic_config(url: str):
    from alembic.config import Config

    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", url)
    # Logging is already set up by bootstrap()
    alembic_cfg.attributes["configure_logger"] = False
    return alembic_cfg


@app.command("init")
def init_database(
    drop_existing: bool = typer.Option(
        False,
        "--drop",
        help="Drop existing tables before creating",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Do not ask before dropping",
    ),
) -> None:
    """Initialize the database schema.

    Creates all tables. Use --drop to reset the database.
    """
    from tenderflow.persistence.db import drop_db, init_db

    with handle_errors():
        config = bootstrap()

        if drop_existing:
            if not yes and not typer.confirm("This will DELETE ALL DATA. Continue?", default=False):
                raise typer.Abort()

            console.print("[yellow]Dropping existing tables...[/yellow]")
            with translate_store_errors():
                drop_db(config.database.url)

        console.print("Creating database schema...")
        with translate_store_errors():
            init_db(config.database.url, timeout_seconds=config.database.timeout_seconds)

    console.print("[green]OK[/green] Database initialized")


@app.command("drop")
def drop_database(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Do not ask for confirmation",
    ),
) -> None:
    """Drop every table."""
    from tenderflow.persistence.db import drop_db

    with handle_errors():
        config = bootstrap()

        if not yes and not typer.confirm("This will DELETE ALL DATA. Continue?", default=False):
            raise typer.Abort()

        with translate_store_errors():
            drop_db(config.database.url)

    console.print("[green]OK[/green] Tables dropped")


@app.command("migrate")
def run_migrations(
    revision: str = typer.Option(
        "head",
        "--revision",
        "-r",
        help="Target revision (default: head)",
    ),
) -> None:
    """Run database migrations."""
    from alembic import command
    from alembic.util import CommandError

    with handle_errors():
        config = bootstrap()

    console.print(f"Running migrations to: {escape(revision)}")

    try:
        with handle_errors(), translate_store_errors():
            command.upgrade(_alembic_config(config.database.url), revision)
    except CommandError as e:
        err_console.print(f"[red]Migration failed:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e

    console.print("[green]OK[/green] Migrations complete")


@app.command("current")
def show_current() -> None:
    """Show current database revision."""
    from alembic import command

    with handle_errors():
        config = bootstrap()

    console.print("[bold]Current database revision:[/bold]")
    with handle_errors(), translate_store_errors():
        command.current(_alembic_config(config.database.url), verbose=True)
