"""Tender, bid and approval services."""

from .approvals import ApprovalService, quorum_reached
from .bids import BidService
from .directory import MemberDirectory, StaticDirectory
from .schemas import BidPatch, TenderPatch
from .tenders import TenderService
from .types import (
    NIL_UUID,
    ApprovalOutcome,
    AuthorType,
    BidStatus,
    Decision,
    ServiceType,
    TenderStatus,
)

__all__ = [
    # Services
    "TenderService",
    "BidService",
    "ApprovalService",
    "quorum_reached",
    # Directory
    "MemberDirectory",
    "StaticDirectory",
    # Types
    "NIL_UUID",
    "ApprovalOutcome",
    "AuthorType",
    "BidPatch",
    "BidStatus",
    "Decision",
    "ServiceType",
    "TenderPatch",
    "TenderStatus",
]
