from __future__ import annotations

import pytest

from tenderflow.core import ApprovalService, quorum_reached
from tenderflow.errors import ForbiddenError, NotFoundError


@pytest.mark.parametrize(
    "approvals, members, expected",
    [
        (1, 2, False),
        (2, 2, True),
        (2, 10, False),
        (3, 10, True),
        (1, 0, True),
        (3, 3, True),
    ],
)
def test_quorum_reached(approvals, members, expected):
    assert quorum_reached(approvals, members) is expected


def test_duplicate_approval_is_forbidden(make_tender, make_bid, approvals, tenders):
    tender = make_tender(organization_id="initech")
    bid = make_bid(tender.id)

    approvals.record_approval(bid.id, "member-0")
    with pytest.raises(ForbiddenError):
        approvals.record_approval(bid.id, "member-0")

    assert approvals.approvers(bid.id) == ["member-0"]
    assert tenders.get_status(tender.id) == "Published"


def test_small_organization_needs_every_member(make_tender, make_bid, approvals, tenders):
    tender = make_tender(organization_id="acme")
    bid = make_bid(tender.id)

    first = approvals.record_approval(bid.id, "alice")
    assert first.approvals == 1
    assert not first.tender_closed
    assert tenders.get_status(tender.id) == "Published"

    second = approvals.record_approval(bid.id, "bob")
    assert second.approvals == 2
    assert second.tender_closed
    assert tenders.get_status(tender.id) == "Closed"


def test_large_organization_closes_at_three(make_tender, make_bid, approvals, tenders):
    tender = make_tender(organization_id="initech")
    bid = make_bid(tender.id)

    outcomes = [approvals.record_approval(bid.id, f"member-{i}") for i in range(3)]

    assert [o.tender_closed for o in outcomes] == [False, False, True]
    assert tenders.get_status(tender.id) == "Closed"
    assert sorted(approvals.approvers(bid.id)) == ["member-0", "member-1", "member-2"]


def test_approvals_count_per_bid(make_tender, make_bid, approvals, tenders):
    tender = make_tender(organization_id="initech")
    first = make_bid(tender.id, name="First")
    second = make_bid(tender.id, name="Second")

    approvals.record_approval(first.id, "member-0")
    approvals.record_approval(first.id, "member-1")
    outcome = approvals.record_approval(second.id, "member-2")

    assert outcome.approvals == 1
    assert tenders.get_status(tender.id) == "Published"


def test_organization_without_members_closes_on_first_approval(make_tender, make_bid, approvals, tenders):
    tender = make_tender(organization_id="ghost-org")
    bid = make_bid(tender.id)

    assert approvals.record_approval(bid.id, "anyone").tender_closed
    assert tenders.get_status(tender.id) == "Closed"


def test_configured_quorum(make_tender, make_bid, directory, tenders):
    tender = make_tender(organization_id="initech")
    bid = make_bid(tender.id)

    outcome = ApprovalService(directory, quorum=1).record_approval(bid.id, "member-4")

    assert outcome.tender_closed


def test_rejection_cancels_bid_only(make_tender, make_bid, approvals, tenders, bids):
    tender = make_tender(organization_id="initech")
    bid = make_bid(tender.id)
    approvals.record_approval(bid.id, "member-0")

    rejected = approvals.record_rejection(bid.id)

    assert rejected.status == "Canceled"
    assert bids.get_status(bid.id) == "Canceled"
    assert tenders.get_status(tender.id) == "Published"
    assert approvals.approvers(bid.id) == ["member-0"]


def test_unknown_bid(approvals):
    missing = "00000000-0000-0000-0000-000000000001"
    with pytest.raises(NotFoundError):
        approvals.record_approval(missing, "alice")
    with pytest.raises(NotFoundError):
        approvals.record_rejection(missing)
    with pytest.raises(NotFoundError):
        approvals.approvers(missing)
