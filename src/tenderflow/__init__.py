"""
TenderFlow - Versioned tenders, bids and approval consensus.

Tracks procurement tenders and the bids placed against them, keeps a full
edit history with rollback, and closes tenders once a bid gathers enough
approvals from the owning organization.
"""

__version__ = "0.1.0"
__app_name__ = "tenderflow"
