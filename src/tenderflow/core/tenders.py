"""
Tender lifecycle.

Tenders move through Created -> Published -> Closed, but status writes are
not restricted to that order: any of the three values may be written at
any time. Edits and rollbacks go through the versioned repository and
never touch the status.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Callable, Sequence

from sqlalchemy.orm import Session

from tenderflow.errors import ForbiddenError, translate_store_errors
from tenderflow.persistence.db import get_session
from tenderflow.persistence.models import Tender, TenderHistory
from tenderflow.persistence.repo import TenderRepository

from .logging import get_logger
from .schemas import Page, Rollback, TenderCreate, TenderFilter, TenderPatch, TenderStatusUpdate
from .types import DEFAULT_LIMIT, TenderStatus

logger = get_logger("tenders")

SessionScope = Callable[[], AbstractContextManager[Session]]


class TenderService:
    """Create, list, edit, roll back and change the status of tenders.

    Each public method is one store transaction.
    """

    def __init__(self, session_scope: SessionScope = get_session):
        self._session_scope = session_scope

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def create(
        self,
        name: str,
        description: str,
        service_type: str,
        organization_id: str,
        creator_organization_id: str | None,
    ) -> Tender:
        """Create a tender owned by organization_id.

        The creator must be responsible for the owning organization.

        Raises:
            InvalidArgumentError: Missing field, too long, or unknown service type
            ForbiddenError: Creator does not belong to the owning organization
        """
        request = TenderCreate(
            name=name,
            description=description,
            service_type=service_type,
            organization_id=organization_id,
        )

        if creator_organization_id != request.organization_id:
            logger.warning(
                "Refused tender creation for organization %s",
                organization_id,
                extra={"operation": "create_tender"},
            )
            raise ForbiddenError("User is not responsible for this organization")

        with translate_store_errors(), self._session_scope() as session:
            tender = TenderRepository(session).create(
                name=request.name,
                description=request.description,
                service_type=request.service_type.value,
                status=TenderStatus.CREATED.value,
                organization_id=request.organization_id,
            )

        logger.info(
            "Created tender %s",
            tender.id,
            extra={"operation": "create_tender", "tender_id": tender.id, "version": tender.version},
        )
        return tender

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, tender_id: str) -> Tender:
        """Get a tender by id or raise NotFoundError."""
        with translate_store_errors(), self._session_scope() as session:
            return TenderRepository(session).get(tender_id)

    def get_status(self, tender_id: str) -> str:
        """Get the current status of a tender."""
        return self.get(tender_id).status

    def history(self, tender_id: str) -> Sequence[TenderHistory]:
        """Get every superseded version of a tender, oldest first."""
        with translate_store_errors(), self._session_scope() as session:
            repo = TenderRepository(session)
            repo.get(tender_id)
            return repo.history(tender_id)

    def list_published(
        self,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        service_types: Sequence[str] | None = None,
    ) -> Sequence[Tender]:
        """List published tenders ordered by name.

        Args:
            limit: Page size, 0 for no cap
            offset: Rows to skip
            service_types: Only tenders of these service types (all if empty)
        """
        query = TenderFilter(limit=limit, offset=offset, service_types=list(service_types or []))

        with translate_store_errors(), self._session_scope() as session:
            return TenderRepository(session).list_tenders(
                status=TenderStatus.PUBLISHED.value,
                service_types=[t.value for t in query.service_types],
                limit=query.limit,
                offset=query.offset,
            )

    def list_by_organization(
        self,
        organization_id: str,
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
    ) -> Sequence[Tender]:
        """List every tender of an organization ordered by name."""
        page = Page(limit=limit, offset=offset)

        with translate_store_errors(), self._session_scope() as session:
            return TenderRepository(session).list_tenders(
                organization_id=organization_id,
                limit=page.limit,
                offset=page.offset,
            )

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def change_status(self, tender_id: str, status: str) -> Tender:
        """Overwrite the status of a tender.

        Raises:
            InvalidArgumentError: Unknown status
            NotFoundError: Unknown tender
        """
        status = TenderStatusUpdate(status=status).status.value

        with translate_store_errors(), self._session_scope() as session:
            tender = TenderRepository(session).change_status(tender_id, status)

        logger.info(
            "Tender %s is now %s",
            tender_id,
            status,
            extra={"operation": "change_tender_status", "tender_id": tender_id, "status": status},
        )
        return tender

    def edit(self, tender_id: str, patch: TenderPatch) -> Tender:
        """Apply a partial update as a new version.

        Empty fields in the patch leave the current values unchanged. The
        patch validated itself when it was built.

        Raises:
            NotFoundError: Unknown tender
        """
        with translate_store_errors(), self._session_scope() as session:
            tender = TenderRepository(session).edit(tender_id, patch.changes())

        logger.info(
            "Edited tender %s to version %d",
            tender_id,
            tender.version,
            extra={"operation": "edit_tender", "tender_id": tender_id, "version": tender.version},
        )
        return tender

    def rollback(self, tender_id: str, version: int) -> Tender:
        """Restore the content of a previous version as a new version.

        Raises:
            InvalidArgumentError: Version is not a positive integer
            NotFoundError: Unknown tender
            VersionNotFoundError: Tender never had that version in history
        """
        version = Rollback(version=version).version

        with translate_store_errors(), self._session_scope() as session:
            tender = TenderRepository(session).rollback(tender_id, version)

        logger.info(
            "Rolled back tender %s to content of version %d (now version %d)",
            tender_id,
            version,
            tender.version,
            extra={"operation": "rollback_tender", "tender_id": tender_id, "version": tender.version},
        )
        return tender
