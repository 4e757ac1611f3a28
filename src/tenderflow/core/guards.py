"""
Authorization preconditions for the calling layer.

The services assume these checks already passed. Each guard raises
ForbiddenError when the rule is broken and returns nothing otherwise.
"""

from __future__ import annotations

from typing import Sequence

from tenderflow.errors import ForbiddenError
from tenderflow.persistence.models import Bid, Tender

from .types import AuthorType, BidStatus, TenderStatus


def ensure_tender_responsible(tender: Tender, organization_id: str | None) -> None:
    """Only members of the owning organization may manage a tender."""
    if organization_id is None or tender.organization_id != organization_id:
        raise ForbiddenError("User is not responsible for this tender")


def ensure_can_bid(
    tender: Tender,
    author_type: str,
    author_id: str,
    author_organization_id: str | None = None,
) -> None:
    """A bid needs a published tender owned by someone else.

    Args:
        tender: Tender being bid on
        author_type: User or Organization
        author_id: Id of the authoring user or organization
        author_organization_id: Organization of a User author, if any
    """
    if tender.status != TenderStatus.PUBLISHED.value:
        raise ForbiddenError("Tender is not published")

    if author_type == AuthorType.USER.value:
        owner = author_organization_id
    else:
        owner = author_id

    if owner is not None and owner == tender.organization_id:
        raise ForbiddenError("Cannot bid on your own tender")


def ensure_can_decide(bid: Bid, tender: Tender, decider_organization_id: str | None) -> None:
    """Decisions need a published bid on a published tender of the decider's organization."""
    if bid.status != BidStatus.PUBLISHED.value:
        raise ForbiddenError("Bid is not published")
    if tender.status != TenderStatus.PUBLISHED.value:
        raise ForbiddenError("Tender is not published")
    if decider_organization_id is None or tender.organization_id != decider_organization_id:
        raise ForbiddenError("User is not responsible for this tender")


def ensure_bid_responsible(
    bid: Bid,
    user_id: str,
    organization_id: str | None,
    members: Sequence[str] = (),
) -> None:
    """The bid's author must be the user, the user's organization, or a colleague."""
    allowed = {user_id}
    if organization_id is not None:
        allowed.add(organization_id)
        allowed.update(members)

    if bid.author_id not in allowed:
        raise ForbiddenError("User is not responsible for this bid")
