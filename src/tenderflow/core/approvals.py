"""
Approval consensus.

Members of the organization that owns a tender approve or reject bids.
Each member counts once. The tender closes as soon as a bid collects the
quorum: ``quorum`` approvals, or every member of a smaller organization.

The duplicate check, the insert and the quorum decision share one
transaction, with the bid row locked, so concurrent approvals of the
same bid cannot both miss the quorum.
"""

from __future__ import annotations

from tenderflow.errors import ForbiddenError, translate_store_errors
from tenderflow.persistence.db import get_session
from tenderflow.persistence.models import Bid
from tenderflow.persistence.repo import ApprovalRepository, BidRepository, TenderRepository

from .directory import MemberDirectory
from .logging import get_contextual_logger
from .tenders import SessionScope
from .types import ApprovalOutcome, BidStatus, TenderStatus

DEFAULT_QUORUM = 3


def quorum_reached(approvals: int, members: int, quorum: int = DEFAULT_QUORUM) -> bool:
    """Whether ``approvals`` distinct approvals close the tender."""
    return approvals >= quorum or approvals >= members


class ApprovalService:
    """Record approvals and rejections of bids."""

    def __init__(
        self,
        directory: MemberDirectory,
        quorum: int = DEFAULT_QUORUM,
        session_scope: SessionScope = get_session,
    ):
        self.directory = directory
        self.quorum = quorum
        self._session_scope = session_scope

    def approvers(self, bid_id: str) -> list[str]:
        """Ids of the users who approved a bid."""
        with translate_store_errors(), self._session_scope() as session:
            BidRepository(session).get(bid_id)
            return ApprovalRepository(session).approvers(bid_id)

    def record_approval(self, bid_id: str, user_id: str) -> ApprovalOutcome:
        """Count one user's approval and close the tender on quorum.

        Raises:
            NotFoundError: Unknown bid or tender
            ForbiddenError: The user already approved this bid
        """
        log = get_contextual_logger("approvals", operation="record_approval", entity_id=bid_id)

        with translate_store_errors(), self._session_scope() as session:
            bid = BidRepository(session).lock(bid_id)
            approvals = ApprovalRepository(session)

            current = approvals.approvers(bid_id)
            if user_id in current:
                log.warning("User %s has already approved", user_id, extra={"user_id": user_id})
                raise ForbiddenError("User has already approved")

            approvals.add(bid_id, user_id)

            tenders = TenderRepository(session)
            tender = tenders.get(bid.tender_id)
            members = self.directory.members_of(tender.organization_id)

            count = len(current) + 1
            closed = quorum_reached(count, len(members), self.quorum)
            if closed:
                tenders.change_status(tender.id, TenderStatus.CLOSED.value)

        log.info(
            "Approval %d by %s recorded%s",
            count,
            user_id,
            ", tender closed" if closed else "",
            extra={"user_id": user_id, "tender_id": bid.tender_id},
        )
        return ApprovalOutcome(bid=bid, approvals=count, tender_closed=closed)

    def record_rejection(self, bid_id: str) -> Bid:
        """Cancel a bid. Approvals and the tender are left as they are.

        Raises:
            NotFoundError: Unknown bid
        """
        with translate_store_errors(), self._session_scope() as session:
            bid = BidRepository(session).change_status(bid_id, BidStatus.CANCELED.value)

        get_contextual_logger("approvals", operation="record_rejection", entity_id=bid_id).info(
            "Bid rejected and canceled"
        )
        return bid
