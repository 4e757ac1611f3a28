"""
Bid lifecycle.

Bids move through Created -> Published -> Canceled. Eligibility to bid
(published tender, author outside the owning organization) is checked by
the caller, see ``guards.ensure_can_bid``.
"""

from __future__ import annotations

from typing import Sequence

from tenderflow.errors import NotFoundError, translate_store_errors
from tenderflow.persistence.db import get_session
from tenderflow.persistence.models import Bid, BidHistory
from tenderflow.persistence.repo import BidRepository

from .logging import get_logger
from .tenders import SessionScope
from .schemas import BidCreate, BidPatch, BidStatusUpdate, Page, Rollback
from .types import DEFAULT_LIMIT, NIL_UUID, BidStatus

logger = get_logger("bids")


class BidService:
    """Create, list, edit, roll back and change the status of bids."""

    def __init__(self, session_scope: SessionScope = get_session):
        self._session_scope = session_scope

    def create(
        self,
        name: str,
        description: str,
        tender_id: str,
        author_type: str,
        author_id: str,
    ) -> Bid:
        """Create a bid in status Created at version 1.

        Raises:
            InvalidArgumentError: Missing field, too long, or unknown author type
        """
        request = BidCreate(
            name=name,
            description=description,
            tender_id=tender_id,
            author_type=author_type,
            author_id=author_id,
        )

        with translate_store_errors(), self._session_scope() as session:
            bid = BidRepository(session).create(
                name=request.name,
                description=request.description,
                status=BidStatus.CREATED.value,
                tender_id=request.tender_id,
                author_type=request.author_type.value,
                author_id=request.author_id,
            )

        logger.info(
            "Created bid %s on tender %s",
            bid.id,
            tender_id,
            extra={"operation": "create_bid", "bid_id": bid.id, "tender_id": tender_id},
        )
        return bid

    def get(self, bid_id: str) -> Bid:
        """Get a bid by id or raise NotFoundError."""
        with translate_store_errors(), self._session_scope() as session:
            return BidRepository(session).get(bid_id)

    def get_status(self, bid_id: str) -> str:
        return self.get(bid_id).status

    def history(self, bid_id: str) -> Sequence[BidHistory]:
        """Get every superseded version of a bid, oldest first."""
        with translate_store_errors(), self._session_scope() as session:
            repo = BidRepository(session)
            repo.get(bid_id)
            return repo.history(bid_id)

    def list_for_tender(
        self,
        tender_id: str,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> Sequence[Bid]:
        """List the published bids of a tender ordered by name.

        An empty page is reported as NotFoundError: the caller cannot tell a
        tender without published bids from an unknown tender.
        """
        page = Page(limit=limit, offset=offset)

        with translate_store_errors(), self._session_scope() as session:
            bids = BidRepository(session).list_for_tender(
                tender_id,
                status=BidStatus.PUBLISHED.value,
                limit=page.limit,
                offset=page.offset,
            )

        if not bids:
            raise NotFoundError(f"bid or tender {tender_id} does not exist")
        return bids

    def list_mine(
        self,
        organization_id: str | None,
        user_id: str,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> Sequence[Bid]:
        """List bids authored by the user or by the user's organization."""
        page = Page(limit=limit, offset=offset)
        authors = [user_id, organization_id or NIL_UUID]

        with translate_store_errors(), self._session_scope() as session:
            return BidRepository(session).list_by_authors(authors, limit=page.limit, offset=page.offset)

    def change_status(self, bid_id: str, status: str) -> Bid:
        """Overwrite the status of a bid.

        Raises:
            InvalidArgumentError: Unknown status
            NotFoundError: Unknown bid
        """
        status = BidStatusUpdate(status=status).status.value

        with translate_store_errors(), self._session_scope() as session:
            bid = BidRepository(session).change_status(bid_id, status)

        logger.info(
            "Bid %s is now %s",
            bid_id,
            status,
            extra={"operation": "change_bid_status", "bid_id": bid_id, "status": status},
        )
        return bid

    def edit(self, bid_id: str, patch: BidPatch) -> Bid:
        """Apply a partial update as a new version."""
        with translate_store_errors(), self._session_scope() as session:
            bid = BidRepository(session).edit(bid_id, patch.changes())

        logger.info(
            "Edited bid %s to version %d",
            bid_id,
            bid.version,
            extra={"operation": "edit_bid", "bid_id": bid_id, "version": bid.version},
        )
        return bid

    def rollback(self, bid_id: str, version: int) -> Bid:
        """Restore the content of a previous version as a new version.

        Raises:
            InvalidArgumentError: Version is not a positive integer
            NotFoundError: Unknown bid
            VersionNotFoundError: Bid never had that version in history
        """
        version = Rollback(version=version).version

        with translate_store_errors(), self._session_scope() as session:
            bid = BidRepository(session).rollback(bid_id, version)

        logger.info(
            "Rolled back bid %s to content of version %d (now version %d)",
            bid_id,
            version,
            bid.version,
            extra={"operation": "rollback_bid", "bid_id": bid_id, "version": bid.version},
        )
        return bid
