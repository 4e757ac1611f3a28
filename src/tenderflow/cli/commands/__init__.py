"""CLI command modules."""

from . import bids, db, tenders

__all__ = [
    "bids",
    "db",
    "tenders",
]
