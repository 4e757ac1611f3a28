from __future__ import annotations

import pytest

from tenderflow.core import ServiceType, TenderPatch
from tenderflow.core.schemas import (
    Authorship,
    BidCreate,
    BidPatch,
    Page,
    Rollback,
    TenderCreate,
    TenderFilter,
    TenderStatusUpdate,
    Verdict,
)
from tenderflow.core.types import AuthorType, Decision, TenderStatus
from tenderflow.errors import InvalidArgumentError


def test_tender_create_coerces_enum_values():
    request = TenderCreate(
        name="Bridge",
        description="North bridge",
        service_type="Delivery",
        organization_id="acme",
    )
    assert request.service_type is ServiceType.DELIVERY


def test_invalid_input_raises_invalid_argument_with_every_field():
    with pytest.raises(InvalidArgumentError) as excinfo:
        TenderCreate(
            name="x" * 101,
            description="",
            service_type="Catering",
            organization_id="acme",
        )

    details = excinfo.value.details
    assert "name" in details
    assert "description" in details
    assert "service_type" in details
    assert excinfo.value.http_status == 400


def test_missing_field_is_invalid():
    with pytest.raises(InvalidArgumentError):
        BidCreate(name="Offer", description="Fixed price", author_type="User", author_id="gina")


def test_length_limits_are_inclusive():
    BidCreate(
        name="n" * 100,
        description="d" * 500,
        tender_id="t-1",
        author_type="Organization",
        author_id="globex",
    )
    with pytest.raises(InvalidArgumentError):
        BidPatch(description="d" * 501)


def test_patch_blank_fields_mean_unchanged():
    patch = TenderPatch(name="", description="Wider scope", service_type=None)
    assert patch.changes() == {"description": "Wider scope"}
    assert TenderPatch().changes() == {}


def test_patch_changes_use_enum_values():
    patch = TenderPatch(service_type=ServiceType.MANUFACTURE)
    assert patch.changes() == {"service_type": "Manufacture"}


def test_patch_rejects_unknown_service_type():
    with pytest.raises(InvalidArgumentError):
        TenderPatch(service_type="Catering")


def test_status_and_decision_enums():
    assert TenderStatusUpdate(status="Closed").status is TenderStatus.CLOSED
    assert Verdict(decision="Rejected").decision is Decision.REJECTED
    assert Authorship(author_type="User", author_id="gina").author_type is AuthorType.USER
    with pytest.raises(InvalidArgumentError):
        TenderStatusUpdate(status="Archived")
    with pytest.raises(InvalidArgumentError):
        Verdict(decision="Maybe")


@pytest.mark.parametrize("version", [0, -3, True, "2"])
def test_rollback_version_must_be_positive_int(version):
    with pytest.raises(InvalidArgumentError):
        Rollback(version=version)


def test_paging_defaults_and_bounds():
    assert Page() == Page(limit=5, offset=0)
    assert Page(limit=0).limit == 0
    with pytest.raises(InvalidArgumentError):
        Page(offset=-1)
    assert TenderFilter(service_types=["Construction"]).service_types == [ServiceType.CONSTRUCTION]
