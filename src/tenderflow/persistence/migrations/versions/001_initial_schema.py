"""Initial schema

Revision ID: 001
Revises: 
Create Date: 2024-09-01 00:00:00.000000

"""
from __future__ import annotations

from typing import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create tenders, bids, their history tables and approvals."""

    # Tenders table
    op.create_table(
        "tenders",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("service_type", sa.String(length=100), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("organization_id", sa.String(length=100), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("version >= 1", name="tenders_version_check"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tenders_status", "tenders", ["status"])
    op.create_index("ix_tenders_organization_id", "tenders", ["organization_id"])

    # Tender history, no uniqueness on (tender_id, version)
    op.create_table(
        "tenders_history",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("tender_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("service_type", sa.String(length=100), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_tenders_history_tender_version", "tenders_history", ["tender_id", "version"])

    # Bids table
    op.create_table(
        "bids",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("tender_id", sa.String(length=36), nullable=False),
        sa.Column("author_type", sa.String(length=50), nullable=False),
        sa.Column("author_id", sa.String(length=100), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("version >= 1", name="bids_version_check"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_bids_tender_id", "bids", ["tender_id"])
    op.create_index("ix_bids_author_id", "bids", ["author_id"])
    op.create_index("ix_bids_tender_status", "bids", ["tender_id", "status"])

    # Bid history
    op.create_table(
        "bids_history",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("bid_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_bids_history_bid_version", "bids_history", ["bid_id", "version"])

    # Approvals, duplicates are prevented by the application
    op.create_table(
        "bids_approvals",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("bid_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_bids_approvals_bid_id", "bids_approvals", ["bid_id"])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("bids_approvals")
    op.drop_table("bids_history")
    op.drop_table("bids")
    op.drop_table("tenders_history")
    op.drop_table("tenders")
