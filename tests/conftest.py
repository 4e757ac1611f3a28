from __future__ import annotations

import logging

import pytest

from tenderflow.core import (
    ApprovalService,
    BidService,
    StaticDirectory,
    TenderService,
    TenderStatus,
    BidStatus,
)
from tenderflow.persistence.db import dispose_engines, init_db

ORGANIZATIONS = {
    "acme": ["alice", "bob"],
    "globex": ["gina"],
    "initech": [f"member-{i}" for i in range(10)],
    "ghost-org": [],
}


@pytest.fixture
def db_url(tmp_path):
    return f"sqlite:///{tmp_path}/test.db"


@pytest.fixture
def database(db_url):
    """Fresh SQLite schema per test."""
    init_db(db_url, timeout_seconds=5)
    yield db_url
    dispose_engines()


@pytest.fixture
def tenders(database):
    return TenderService()


@pytest.fixture
def bids(database):
    return BidService()


@pytest.fixture
def directory():
    return StaticDirectory(ORGANIZATIONS)


@pytest.fixture
def approvals(database, directory):
    return ApprovalService(directory, quorum=3)


@pytest.fixture
def make_tender(tenders):
    """Create a tender, published unless told otherwise."""

    def _make(name="Bridge repair", organization_id="acme", service_type="Construction", publish=True):
        tender = tenders.create(
            name=name,
            description=f"{name} description",
            service_type=service_type,
            organization_id=organization_id,
            creator_organization_id=organization_id,
        )
        if publish:
            tender = tenders.change_status(tender.id, TenderStatus.PUBLISHED.value)
        return tender

    return _make


@pytest.fixture
def make_bid(bids):
    """Create a bid, published unless told otherwise."""

    def _make(tender_id, name="Offer", author_type="User", author_id="gina", publish=True):
        bid = bids.create(
            name=name,
            description=f"{name} description",
            tender_id=tender_id,
            author_type=author_type,
            author_id=author_id,
        )
        if publish:
            bid = bids.change_status(bid.id, BidStatus.PUBLISHED.value)
        return bid

    return _make


@pytest.fixture
def clean_logging():
    """Drop handlers installed on the tenderflow logger during a test."""
    yield
    logger = logging.getLogger("tenderflow")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
