"""
Shared plumbing for CLI commands.

Every command loads the configuration, configures logging and the
engine, and reports domain errors as a red message with exit code 1.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer
from rich.console import Console
from rich.markup import escape

from tenderflow.core.config import AppConfig, ConfigError, load_app_config
from tenderflow.core.directory import StaticDirectory
from tenderflow.core.logging import setup_logging
from tenderflow.errors import TenderFlowError

console = Console()
err_console = Console(stderr=True)

USER_OPTION_HELP = "Id of the user acting"


def bootstrap() -> AppConfig:
    """Load config, set up logging and bind the engine."""
    from tenderflow.persistence.db import get_engine

    config = load_app_config()
    config.ensure_directories()

    setup_logging(
        level=config.logging.level,
        log_file=config.logging.file,
        json_format=config.logging.json_format,
        rich_console=config.logging.rich_console,
    )
    get_engine(
        config.database.url,
        echo=config.database.echo,
        pool_size=config.database.pool_size,
        timeout_seconds=config.database.timeout_seconds,
    )
    return config


def directory_for(config: AppConfig) -> StaticDirectory:
    return StaticDirectory(config.organizations)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn domain and config errors into a message and exit code 1."""
    try:
        yield
    except ConfigError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        if e.details:
            err_console.print(f"[dim]{escape(e.details)}[/dim]")
        raise typer.Exit(1) from e
    except TenderFlowError as e:
        err_console.print(f"[red]{e.code}:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e


def page_limit(config: AppConfig, limit: int | None) -> int:
    """Use the configured default when no limit was passed."""
    return config.pagination.default_limit if limit is None else limit
