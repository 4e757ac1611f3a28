"""
Bid commands.

Bids are placed by users or organizations on published tenders of other
organizations and decided on by members of the tender's organization.
"""

from __future__ import annotations

from typing import Optional, Sequence

import typer
from rich.markup import escape
from rich.table import Table

from tenderflow.core import (
    ApprovalService,
    AuthorType,
    BidPatch,
    BidService,
    Decision,
    TenderService,
)
from tenderflow.core.config import AppConfig
from tenderflow.core.guards import (
    ensure_bid_responsible,
    ensure_can_bid,
    ensure_can_decide,
    ensure_tender_responsible,
)
from tenderflow.core.schemas import Authorship, Verdict
from tenderflow.persistence.models import Bid

from ..common import USER_OPTION_HELP, bootstrap, console, directory_for, handle_errors, page_limit

app = typer.Typer(
    help="Create, edit, list and decide on bids",
    no_args_is_help=True,
)


def _bid_table(bids: Sequence[Bid], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Tender", no_wrap=True)
    table.add_column("Author")
    table.add_column("Status", justify="center")
    table.add_column("Version", justify="right")

    for bid in bids:
        table.add_row(
            bid.id,
            escape(bid.name),
            bid.tender_id,
            f"{bid.author_type} {escape(bid.author_id)}",
            bid.status,
            str(bid.version),
        )
    return table


def _show(bid: Bid, action: str) -> None:
    console.print(
        f"[green]OK[/green] {action} bid [cyan]{bid.id}[/cyan] "
        f"({bid.status}, version {bid.version})"
    )


def _responsible_bid(config: AppConfig, service: BidService, bid_id: str, user: str) -> Bid:
    directory = directory_for(config)
    organization_id = directory.organization_of(user)
    members = directory.members_of(organization_id) if organization_id else []

    bid = service.get(bid_id)
    ensure_bid_responsible(bid, user, organization_id, members)
    return bid


@app.command("create")
def create_bid(
    name: str = typer.Argument(..., help="Bid name"),
    description: str = typer.Option(..., "--description", "-d", help="Bid description"),
    tender_id: str = typer.Option(..., "--tender", "-t", help="Tender to bid on"),
    author_type: str = typer.Option(
        AuthorType.USER.value,
        "--author-type",
        "-a",
        help="User or Organization",
    ),
    author_id: str = typer.Option(..., "--author", help="Id of the authoring user or organization"),
) -> None:
    """Place a bid on a published tender."""
    with handle_errors():
        config = bootstrap()
        author = Authorship(author_type=author_type, author_id=author_id)

        author_organization_id = None
        if author.author_type is AuthorType.USER:
            author_organization_id = directory_for(config).organization_of(author.author_id)

        tender = TenderService().get(tender_id)
        ensure_can_bid(tender, author.author_type.value, author.author_id, author_organization_id)

        bid = BidService().create(
            name=name,
            description=description,
            tender_id=tender_id,
            author_type=author.author_type.value,
            author_id=author.author_id,
        )
    _show(bid, "Created")


@app.command("list")
def list_bids(
    tender_id: str = typer.Argument(..., help="Tender id"),
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Page size (0 = no limit)"),
    offset: int = typer.Option(0, "--offset", help="Rows to skip"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List the published bids of one of your organization's tenders."""
    with handle_errors():
        config = bootstrap()
        tender = TenderService().get(tender_id)
        ensure_tender_responsible(tender, directory_for(config).organization_of(user))
        bids = BidService().list_for_tender(
            tender_id,
            limit=page_limit(config, limit),
            offset=offset,
        )

    if as_json:
        console.print_json(data=[b.to_dict() for b in bids])
        return
    console.print(_bid_table(bids, f"Bids on {escape(tender.name)}"))


@app.command("mine")
def my_bids(
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Page size (0 = no limit)"),
    offset: int = typer.Option(0, "--offset", help="Rows to skip"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """List bids placed by you or by your organization."""
    with handle_errors():
        config = bootstrap()
        bids = BidService().list_mine(
            directory_for(config).organization_of(user),
            user,
            limit=page_limit(config, limit),
            offset=offset,
        )

    if as_json:
        console.print_json(data=[b.to_dict() for b in bids])
        return
    if not bids:
        console.print("[dim]No bids yet.[/dim]")
        return
    console.print(_bid_table(bids, "My Bids"))


@app.command("status")
def bid_status(
    bid_id: str = typer.Argument(..., help="Bid id"),
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
) -> None:
    """Show the status of one of your bids."""
    with handle_errors():
        config = bootstrap()
        bid = _responsible_bid(config, BidService(), bid_id, user)
    console.print(bid.status)


@app.command("set-status")
def set_bid_status(
    bid_id: str = typer.Argument(..., help="Bid id"),
    status: str = typer.Argument(..., help="Created, Published or Canceled"),
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
) -> None:
    """Change the status of one of your bids."""
    with handle_errors():
        config = bootstrap()
        service = BidService()
        _responsible_bid(config, service, bid_id, user)
        bid = service.change_status(bid_id, status)
    _show(bid, "Updated")


@app.command("edit")
def edit_bid(
    bid_id: str = typer.Argument(..., help="Bid id"),
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description"),
) -> None:
    """Edit a bid; omitted fields keep their value."""
    with handle_errors():
        config = bootstrap()
        service = BidService()
        _responsible_bid(config, service, bid_id, user)
        bid = service.edit(bid_id, BidPatch(name=name, description=description))
    _show(bid, "Edited")


@app.command("rollback")
def rollback_bid(
    bid_id: str = typer.Argument(..., help="Bid id"),
    version: int = typer.Argument(..., help="Version whose content to restore"),
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
) -> None:
    """Restore an earlier version of a bid as a new version."""
    with handle_errors():
        config = bootstrap()
        service = BidService()
        _responsible_bid(config, service, bid_id, user)
        bid = service.rollback(bid_id, version)
    _show(bid, "Rolled back")


@app.command("history")
def bid_history(
    bid_id: str = typer.Argument(..., help="Bid id"),
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
) -> None:
    """Show the superseded versions of a bid."""
    with handle_errors():
        config = bootstrap()
        service = BidService()
        bid = _responsible_bid(config, service, bid_id, user)
        entries = service.history(bid_id)

    table = Table(title=f"History of {escape(bid.name)}", show_header=True, header_style="bold magenta")
    table.add_column("Version", justify="right", style="cyan")
    table.add_column("Name")
    table.add_column("Description")

    for entry in entries:
        table.add_row(str(entry.version), escape(entry.name), escape(entry.description))
    table.add_row(f"{bid.version} (current)", escape(bid.name), escape(bid.description), style="bold")
    console.print(table)


@app.command("decide")
def decide_bid(
    bid_id: str = typer.Argument(..., help="Bid id"),
    decision: str = typer.Argument(..., help="Approved or Rejected"),
    user: str = typer.Option(..., "--user", "-u", help=USER_OPTION_HELP),
) -> None:
    """Approve or reject a bid on one of your organization's tenders."""
    with handle_errors():
        config = bootstrap()
        verdict = Verdict(decision=decision).decision
        directory = directory_for(config)

        bid = BidService().get(bid_id)
        tender = TenderService().get(bid.tender_id)
        ensure_can_decide(bid, tender, directory.organization_of(user))

        approvals = ApprovalService(directory, quorum=config.approvals.quorum)
        if verdict is Decision.REJECTED:
            bid = approvals.record_rejection(bid_id)
            _show(bid, "Rejected")
            return

        outcome = approvals.record_approval(bid_id, user)

    console.print(
        f"[green]OK[/green] Approved bid [cyan]{bid_id}[/cyan] "
        f"({outcome.approvals} approval{'s' if outcome.approvals != 1 else ''})"
    )
    if outcome.tender_closed:
        console.print(f"[bold]Tender [cyan]{tender.id}[/cyan] is now Closed[/bold]")
