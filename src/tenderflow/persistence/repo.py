"""
Repository pattern for database operations.

Tender and bid repositories build on the versioned repository; the
approval repository manages the approver set of each bid.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from .models import Bid, BidApproval, BidHistory, Tender, TenderHistory
from .versioning import VersionedRepository


def _paginate(stmt, limit: int, offset: int):
    """Apply limit/offset where a limit of 0 means no cap."""
    if limit:
        stmt = stmt.limit(limit)
    return stmt.offset(offset)


# =============================================================================
# Tender Repository
# =============================================================================


class TenderRepository(VersionedRepository[Tender, TenderHistory]):
    """Repository for Tender rows and their history."""

    model = Tender
    history_model = TenderHistory
    history_key = "tender_id"
    editable_fields = ("name", "description", "service_type")
    entity_label = "tender"

    def create(
        self,
        name: str,
        description: str,
        service_type: str,
        status: str,
        organization_id: str,
    ) -> Tender:
        """Create a new tender at version 1."""
        tender = Tender(
            name=name,
            description=description,
            service_type=service_type,
            status=status,
            organization_id=organization_id,
            version=1,
        )
        self.session.add(tender)
        self.session.flush()
        return tender

    def list_tenders(
        self,
        status: str | None = None,
        organization_id: str | None = None,
        service_types: Sequence[str] | None = None,
        limit: int = 5,
        offset: int = 0,
    ) -> Sequence[Tender]:
        """List tenders with filters, ordered by name."""
        stmt = select(Tender)

        if status is not None:
            stmt = stmt.where(Tender.status == status)
        if organization_id is not None:
            stmt = stmt.where(Tender.organization_id == organization_id)
        if service_types:
            stmt = stmt.where(Tender.service_type.in_(list(service_types)))

        stmt = stmt.order_by(Tender.name.asc())
        stmt = _paginate(stmt, limit, offset)

        return self.session.execute(stmt).scalars().all()


# =============================================================================
# Bid Repository
# =============================================================================


class BidRepository(VersionedRepository[Bid, BidHistory]):
    """Repository for Bid rows and their history."""

    model = Bid
    history_model = BidHistory
    history_key = "bid_id"
    editable_fields = ("name", "description")
    entity_label = "bid"

    def create(
        self,
        name: str,
        description: str,
        status: str,
        tender_id: str,
        author_type: str,
        author_id: str,
    ) -> Bid:
        """Create a new bid at version 1."""
        bid = Bid(
            name=name,
            description=description,
            status=status,
            tender_id=tender_id,
            author_type=author_type,
            author_id=author_id,
            version=1,
        )
        self.session.add(bid)
        self.session.flush()
        return bid

    def list_for_tender(
        self,
        tender_id: str,
        status: str,
        limit: int = 5,
        offset: int = 0,
    ) -> Sequence[Bid]:
        """List bids of a tender in a given status, ordered by name."""
        stmt = (
            select(Bid)
            .where(Bid.tender_id == tender_id, Bid.status == status)
            .order_by(Bid.name.asc())
        )
        stmt = _paginate(stmt, limit, offset)
        return self.session.execute(stmt).scalars().all()

    def list_by_authors(
        self,
        author_ids: Sequence[str],
        limit: int = 5,
        offset: int = 0,
    ) -> Sequence[Bid]:
        """List bids authored by any of the given ids, ordered by name."""
        stmt = (
            select(Bid)
            .where(or_(*(Bid.author_id == author_id for author_id in author_ids)))
            .order_by(Bid.name.asc())
        )
        stmt = _paginate(stmt, limit, offset)
        return self.session.execute(stmt).scalars().all()


# =============================================================================
# Approval Repository
# =============================================================================


class ApprovalRepository:
    """Repository for the approver set of each bid."""

    def __init__(self, session: Session):
        self.session = session

    def approvers(self, bid_id: str) -> list[str]:
        """Get the ids of every user who approved a bid."""
        stmt = select(BidApproval.user_id).where(BidApproval.bid_id == bid_id)
        return list(self.session.execute(stmt).scalars().all())

    def add(self, bid_id: str, user_id: str) -> BidApproval:
        """Record one approval. Callers check for duplicates first."""
        approval = BidApproval(bid_id=bid_id, user_id=user_id)
        self.session.add(approval)
        self.session.flush()
        return approval
