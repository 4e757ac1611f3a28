"""Database persistence layer."""

from .db import dispose_engines, drop_db, get_engine, get_session, init_db
from .models import Base, Bid, BidApproval, BidHistory, Tender, TenderHistory
from .repo import ApprovalRepository, BidRepository, TenderRepository
from .versioning import VersionedRepository

__all__ = [
    "get_engine",
    "get_session",
    "init_db",
    "drop_db",
    "dispose_engines",
    "Base",
    "Tender",
    "TenderHistory",
    "Bid",
    "BidHistory",
    "BidApproval",
    "VersionedRepository",
    "TenderRepository",
    "BidRepository",
    "ApprovalRepository",
]
