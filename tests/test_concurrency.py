from __future__ import annotations

import sqlite3
from concurrent.futures import ThreadPoolExecutor

import pytest

from tenderflow.core import TenderPatch, TenderService
from tenderflow.errors import OperationTimeoutError
from tenderflow.persistence.db import dispose_engines, init_db

WORKERS = 6


def test_concurrent_edits_get_distinct_versions(make_tender, tenders):
    tender = make_tender(name="Shared")

    def edit(i):
        return tenders.edit(tender.id, TenderPatch(description=f"writer {i}")).version

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        versions = list(pool.map(edit, range(WORKERS)))

    assert sorted(versions) == list(range(2, WORKERS + 2))
    assert tenders.get(tender.id).version == WORKERS + 1
    assert [h.version for h in tenders.history(tender.id)] == list(range(1, WORKERS + 1))


def test_concurrent_approvals_close_exactly_once(make_tender, make_bid, approvals, tenders):
    tender = make_tender(organization_id="initech")
    bid = make_bid(tender.id)

    def approve(i):
        return approvals.record_approval(bid.id, f"member-{i}")

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        outcomes = list(pool.map(approve, range(WORKERS)))

    assert sorted(o.approvals for o in outcomes) == list(range(1, WORKERS + 1))
    assert sum(o.approvals == 3 for o in outcomes) == 1
    assert tenders.get_status(tender.id) == "Closed"
    assert len(approvals.approvers(bid.id)) == WORKERS


def test_edit_times_out_while_another_writer_holds_the_lock(db_url, tmp_path):
    init_db(db_url, timeout_seconds=0.5)
    try:
        service = TenderService()
        tender = service.create(
            name="Locked",
            description="Waiting on a writer",
            service_type="Construction",
            organization_id="acme",
            creator_organization_id="acme",
        )

        blocker = sqlite3.connect(str(tmp_path / "test.db"), isolation_level=None)
        blocker.execute("BEGIN IMMEDIATE")
        try:
            with pytest.raises(OperationTimeoutError):
                service.edit(tender.id, TenderPatch(name="Never written"))
        finally:
            blocker.execute("ROLLBACK")
            blocker.close()

        current = service.get(tender.id)
        assert current.version == 1
        assert current.name == "Locked"
        assert service.history(tender.id) == []
    finally:
        dispose_engines()
