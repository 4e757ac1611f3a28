"""
Domain enums and value objects shared by the services.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tenderflow.persistence.models import Bid


# Stands in for "no organization" when listing a user's bids
NIL_UUID = "00000000-0000-0000-0000-000000000000"

DEFAULT_LIMIT = 5
NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500


# =============================================================================
# Enums
# =============================================================================


class ServiceType(str, Enum):
    """Kind of service a tender procures."""

    CONSTRUCTION = "Construction"
    DELIVERY = "Delivery"
    MANUFACTURE = "Manufacture"


class TenderStatus(str, Enum):
    """Tender lifecycle status."""

    CREATED = "Created"
    PUBLISHED = "Published"
    CLOSED = "Closed"


class BidStatus(str, Enum):
    """Bid lifecycle status."""

    CREATED = "Created"
    PUBLISHED = "Published"
    CANCELED = "Canceled"


class AuthorType(str, Enum):
    """Who placed a bid."""

    USER = "User"
    ORGANIZATION = "Organization"


class Decision(str, Enum):
    """Verdict of an organization member on a bid."""

    APPROVED = "Approved"
    REJECTED = "Rejected"


# =============================================================================
# Results
# =============================================================================


@dataclass
class ApprovalOutcome:
    """Result of recording an approval."""

    bid: "Bid"
    approvals: int
    tender_closed: bool
