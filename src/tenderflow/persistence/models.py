"""
SQLAlchemy ORM models for TenderFlow.

Defines the five tables the services work against:
- tenders: live tender rows
- tenders_history: superseded tender snapshots, one per version
- bids: live bid rows
- bids_history: superseded bid snapshots, one per version
- bids_approvals: (bid, approver) pairs

History and approval tables carry no uniqueness constraint; the
repositories keep them free of duplicates.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def new_id() -> str:
    """Generate a fresh 128-bit random identifier rendered as text."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Base Class
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    def to_dict(self) -> dict[str, Any]:
        """Serialize column values, timestamps as ISO strings."""
        data: dict[str, Any] = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if isinstance(value, datetime):
                value = value.isoformat()
            data[column.key] = value
        return data


# =============================================================================
# Tender Models
# =============================================================================


class Tender(Base):
    """Procurement request an organization opens for bids."""

    __tablename__ = "tenders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    service_type: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    organization_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("version >= 1", name="tenders_version_check"),
    )

    def __repr__(self) -> str:
        return f"<Tender(id='{self.id}', name='{self.name}', version={self.version}, status='{self.status}')>"


class TenderHistory(Base):
    """Snapshot of a tender's editable fields at a superseded version."""

    __tablename__ = "tenders_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    tender_id: Mapped[str] = mapped_column(String(36), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    service_type: Mapped[str] = mapped_column(String(100), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_tenders_history_tender_version", "tender_id", "version"),
    )

    def __repr__(self) -> str:
        return f"<TenderHistory(tender_id='{self.tender_id}', version={self.version})>"


# =============================================================================
# Bid Models
# =============================================================================


class Bid(Base):
    """Proposal submitted by a user or organization against a tender."""

    __tablename__ = "bids"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False)
    tender_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    author_type: Mapped[str] = mapped_column(String(50), nullable=False)
    author_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("version >= 1", name="bids_version_check"),
        Index("ix_bids_tender_status", "tender_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Bid(id='{self.id}', name='{self.name}', version={self.version}, status='{self.status}')>"


class BidHistory(Base):
    """Snapshot of a bid's editable fields at a superseded version."""

    __tablename__ = "bids_history"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    bid_id: Mapped[str] = mapped_column(String(36), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_bids_history_bid_version", "bid_id", "version"),
    )

    def __repr__(self) -> str:
        return f"<BidHistory(bid_id='{self.bid_id}', version={self.version})>"


class BidApproval(Base):
    """One approver's approval of a bid."""

    __tablename__ = "bids_approvals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    bid_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<BidApproval(bid_id='{self.bid_id}', user_id='{self.user_id}')>"
