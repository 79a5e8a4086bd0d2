"""
Domain Layer - Pure Python business logic following DDD.
Vehicle import ledger: sale status, investor shares.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType

VehicleId = NewType("VehicleId", int)
InvestorId = NewType("InvestorId", int)

LEGACY_SOLD_FLAG = "Yes"
LEGACY_UNSOLD_FLAG = "No"


class VehicleStatus(str, Enum):
    """Vehicle lifecycle from purchase at auction to sale."""
    PURCHASED = "Purchased"
    SHIPPED = "Shipped"
    LANDED = "Landed"
    DELIVERED = "Delivered"
    RESERVED = "Reserved"
    SOLD = "Sold"


class UserRole(str, Enum):
    ADMIN = "admin"
    READONLY = "readonly"


@dataclass(frozen=True, slots=True)
class ProfitShare:
    """Value Object - One investor's slice of a vehicle's profit."""
    investor_id: InvestorId
    invested: float
    percentage: float
    amount: float
