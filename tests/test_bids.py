from __future__ import annotations

import pytest

from tenderflow.core import NIL_UUID, BidPatch
from tenderflow.errors import InvalidArgumentError, NotFoundError, VersionNotFoundError


def test_create_bid(make_tender, bids):
    tender = make_tender()
    bid = bids.create(
        name="Offer",
        description="Fixed price",
        tender_id=tender.id,
        author_type="Organization",
        author_id="globex",
    )
    assert bid.version == 1
    assert bid.status == "Created"
    assert bid.author_type == "Organization"
    assert bids.get_status(bid.id) == "Created"


@pytest.mark.parametrize(
    "overrides",
    [
        {"author_type": "Robot"},
        {"author_id": ""},
        {"name": "n" * 101},
        {"description": ""},
    ],
)
def test_create_rejects_invalid_input(make_tender, bids, overrides):
    tender = make_tender()
    kwargs = dict(
        name="Offer",
        description="Fixed price",
        tender_id=tender.id,
        author_type="User",
        author_id="gina",
    )
    kwargs.update(overrides)

    with pytest.raises(InvalidArgumentError):
        bids.create(**kwargs)
    assert bids.list_mine("globex", "gina", limit=0) == []


def test_list_for_tender_only_published(make_tender, make_bid, bids):
    tender = make_tender()
    make_bid(tender.id, name="Zulu")
    make_bid(tender.id, name="Alpha")
    make_bid(tender.id, name="Draft", publish=False)

    assert [b.name for b in bids.list_for_tender(tender.id)] == ["Alpha", "Zulu"]
    assert [b.name for b in bids.list_for_tender(tender.id, limit=1, offset=1)] == ["Zulu"]


def test_list_for_tender_empty_is_not_found(make_tender, make_bid, bids):
    tender = make_tender()
    make_bid(tender.id, publish=False)

    with pytest.raises(NotFoundError):
        bids.list_for_tender(tender.id)
    with pytest.raises(NotFoundError):
        bids.list_for_tender("00000000-0000-0000-0000-000000000001")


def test_list_mine_matches_user_or_organization(make_tender, make_bid, bids):
    tender = make_tender()
    make_bid(tender.id, name="By gina", author_id="gina")
    make_bid(tender.id, name="By globex", author_type="Organization", author_id="globex")
    make_bid(tender.id, name="By stranger", author_id="stranger")

    names = [b.name for b in bids.list_mine("globex", "gina", limit=0)]
    assert names == ["By gina", "By globex"]


def test_list_mine_without_organization_uses_sentinel(make_tender, make_bid, bids):
    tender = make_tender()
    make_bid(tender.id, name="Own", author_id="loner")
    make_bid(tender.id, name="Nil", author_type="Organization", author_id=NIL_UUID)
    make_bid(tender.id, name="Other", author_id="gina")

    names = [b.name for b in bids.list_mine(None, "loner", limit=0)]
    assert names == ["Nil", "Own"]


def test_list_mine_includes_drafts_and_paginates(make_tender, make_bid, bids):
    tender = make_tender()
    for name in ["a", "b", "c"]:
        make_bid(tender.id, name=name, publish=False)

    assert [b.name for b in bids.list_mine(None, "gina", limit=2)] == ["a", "b"]
    assert [b.name for b in bids.list_mine(None, "gina", limit=2, offset=2)] == ["c"]


def test_edit_and_rollback_bid(make_tender, make_bid, bids):
    bid = make_bid(make_tender().id, name="First")

    edited = bids.edit(bid.id, BidPatch(name="Second"))
    assert edited.version == 2
    assert edited.description == "First description"

    restored = bids.rollback(bid.id, 1)
    assert restored.version == 3
    assert restored.name == "First"
    assert restored.status == "Published"
    assert [h.name for h in bids.history(bid.id)] == ["First", "Second"]


def test_rollback_bid_errors(make_tender, make_bid, bids):
    bid = make_bid(make_tender().id)

    with pytest.raises(VersionNotFoundError):
        bids.rollback(bid.id, 2)
    with pytest.raises(NotFoundError):
        bids.rollback("00000000-0000-0000-0000-000000000001", 1)
    with pytest.raises(InvalidArgumentError):
        bids.rollback(bid.id, 0)


def test_edit_bid_rejects_long_description(make_tender, make_bid, bids):
    bid = make_bid(make_tender().id)
    with pytest.raises(InvalidArgumentError):
        bids.edit(bid.id, BidPatch(description="d" * 501))
    assert bids.get(bid.id).version == 1


def test_change_bid_status(make_tender, make_bid, bids):
    bid = make_bid(make_tender().id, publish=False)

    assert bids.change_status(bid.id, "Canceled").status == "Canceled"
    assert bids.change_status(bid.id, "Published").version == 1
    with pytest.raises(InvalidArgumentError):
        bids.change_status(bid.id, "Approved")
    with pytest.raises(NotFoundError):
        bids.change_status("00000000-0000-0000-0000-000000000001", "Published")
