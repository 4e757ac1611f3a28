"""
Tender commands.

Create, publish, edit, roll back and list tenders. The acting user is
passed with --user and resolved to an organization through the
``organizations`` section of the configuration.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import typer
from rich.markup import escape
from rich.table import Table

from tenderflow.core import TenderPatch, TenderService
from tenderflow.core.guards import ensure_tender_responsible
from tenderflow.persistence.models import Tender, TenderHistory

from ..common import USER_OPTION_HELP, bootstrap, console, directory_for, handle_errors, page_limit

app = typer.Typer(
    help="Create, edit and list tenders",
    no_args_is_help=True,
)


def _tender_table(tenders: Sequence[Tender], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Service")
    table.add_column("Status", justify="center")
    table.add_column("Version", justify="right")

    for tender in tenders:
        table.add_row(
            tender.id,
            escape(tender.name),
            tender.service_type,
            tender.status,
            str(tender.version),
        )
    return table


def _show(tender: Tender, action: str) -> None:
    console.print(
        f"[green]OK[/green] {action} tender [cyan]{tender.id}[/cyan] "
        f"({tender.status}, version {tender.version})"
    )


def _responsible_tender(service: TenderService, tender_id: str, user: str) -> Tender:
    config = bootstrap()
    tender = service.get(tender_id)
    ensure_tender_responsible(tender, directory_for(config).organization_of(user))
    return tender


@app.command("create")
def create_tender(
    name: str = typer.Argument(..., help="Tender name"),
    description: str = typer.Option(..., "--description", "-d", help="Tender description"),
    service_type: str = typer.Option(
        ...,
        "--service-type",
        "-s",
        help="Construction, Delivery or Manufacture",
    ),
    organization: str = typer.Option(..., "--org", "-o", help="Owning organization id"),
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
) -> None:
    """Create a tender in status Created."""
    with handle_errors():
        config = bootstrap()
        tender = TenderService().create(
            name=name,
            description=description,
            service_type=service_type,
            organization_id=organization,
            creator_organization_id=directory_for(config).organization_of(user),
        )
    _show(tender, "Created")


@app.command("list")
def list_tenders(
    service_types: Optional[List[str]] = typer.Option(
        None,
        "--service-type",
        "-s",
        help="Only this service type (repeatable)",
    ),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Page size (0 = no limit)"),
    offset: int = typer.Option(0, "--offset", help="Rows to skip"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List published tenders."""
    with handle_errors():
        config = bootstrap()
        tenders = TenderService().list_published(
            limit=page_limit(config, limit),
            offset=offset,
            service_types=service_types,
        )

    if as_json:
        console.print_json(data=[t.to_dict() for t in tenders])
        return
    if not tenders:
        console.print("[dim]No published tenders.[/dim]")
        return
    console.print(_tender_table(tenders, "Published Tenders"))


@app.command("mine")
def my_tenders(
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Page size (0 = no limit)"),
    offset: int = typer.Option(0, "--offset", help="Rows to skip"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List every tender of the user's organization."""
    from tenderflow.errors import ForbiddenError

    with handle_errors():
        config = bootstrap()
        organization_id = directory_for(config).organization_of(user)
        if organization_id is None:
            raise ForbiddenError(f"User {user} is not responsible for any organization")
        tenders = TenderService().list_by_organization(
            organization_id,
            limit=page_limit(config, limit),
            offset=offset,
        )

    if as_json:
        console.print_json(data=[t.to_dict() for t in tenders])
        return
    if not tenders:
        console.print("[dim]No tenders yet.[/dim]")
        return
    console.print(_tender_table(tenders, f"Tenders of {escape(organization_id)}"))


@app.command("status")
def tender_status(
    tender_id: str = typer.Argument(..., help="Tender id"),
) -> None:
    """Show the status of a tender."""
    with handle_errors():
        bootstrap()
        status = TenderService().get_status(tender_id)
    console.print(status)


@app.command("set-status")
def set_tender_status(
    tender_id: str = typer.Argument(..., help="Tender id"),
    status: str = typer.Argument(..., help="Created, Published or Closed"),
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
) -> None:
    """Change the status of a tender."""
    with handle_errors():
        service = TenderService()
        _responsible_tender(service, tender_id, user)
        tender = service.change_status(tender_id, status)
    _show(tender, "Updated")


@app.command("edit")
def edit_tender(
    tender_id: str = typer.Argument(..., help="Tender id"),
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
    service_type: Optional[str] = typer.Option(None, "--service-type", "-s", help="New service type"),
) -> None:
    """Edit a tender; omitted fields keep their value."""
    with handle_errors():
        service = TenderService()
        _responsible_tender(service, tender_id, user)
        tender = service.edit(
            tender_id,
            TenderPatch(name=name, description=description, service_type=service_type),
        )
    _show(tender, "Edited")


@app.command("rollback")
def rollback_tender(
    tender_id: str = typer.Argument(..., help="Tender id"),
    version: int = typer.Argument(..., help="Version whose content to restore"),
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
) -> None:
    """Restore an earlier version of a tender as a new version."""
    with handle_errors():
        service = TenderService()
        _responsible_tender(service, tender_id, user)
        tender = service.rollback(tender_id, version)
    _show(tender, "Rolled back")


@app.command("history")
def tender_history(
    tender_id: str = typer.Argument(..., help="Tender id"),
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
) -> None:
    """Show the superseded versions of a tender."""
    with handle_errors():
        service = TenderService()
        tender = _responsible_tender(service, tender_id, user)
        entries: Sequence[TenderHistory] = service.history(tender_id)

    table = Table(title=f"History of {escape(tender.name)}", show_header=True, header_style="bold magenta")
    table.add_column("Version", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Service")
    table.add_column("Description")

    for entry in entries:
        table.add_row(
            str(entry.version),
            escape(entry.name),
            entry.service_type,
            escape(entry.description),
        )
    table.add_row(
        f"{tender.version} (current)",
        escape(tender.name),
        tender.service_type,
        escape(tender.description),
        style="bold",
    )
    console.print(table)
