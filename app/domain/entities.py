"""
Domain Entities - Core business entities of the vehicle import ledger.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime

from .value_objects import InvestorId, VehicleId, VehicleStatus


@dataclass
class Vehicle:
    """
    Entity - Imported vehicle.
    Profit is set when the sale is recorded; it may be missing before that.
    """
    id: VehicleId
    chassis_no: str
    status: VehicleStatus = VehicleStatus.PURCHASED
    vehicle_type: str | None = None
    year: int | None = None
    total_cost: float | None = None
    sale_price: float | None = None
    profit: float | None = None

    def is_sold(self) -> bool:
        return self.status == VehicleStatus.SOLD

    def has_profit(self) -> bool:
        return self.profit is not None and self.profit > 0

    def mark_sold(self, sale_price: float, profit: float | None = None) -> "Vehicle":
        if profit is None and self.total_cost is not None:
            profit = sale_price - self.total_cost
        return replace(
            self,
            status=VehicleStatus.SOLD,
            sale_price=sale_price,
            profit=profit,
        )


@dataclass
class Investment:
    """
    Entity - Capital an investor contributed toward one vehicle.
    """
    vehicle_id: VehicleId
    investor_id: InvestorId
    amount: float
    id: int | None = None
    investment_date: date | None = None
    notes: str | None = None


@dataclass
class ProfitDistribution:
    """
    Entity - One investor's payout for a sold vehicle.
    Created only by ProfitDistributionService.
    """
    vehicle_id: VehicleId
    investor_id: InvestorId
    amount: float
    percentage: float
    distribution_date: date
    notes: str | None = None
    id: int | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class DistributionResult:
    """Outcome of one distribution run."""
    vehicle_id: VehicleId
    distributions: list[ProfitDistribution]
    total_distributed: float

    @property
    def distributions_count(self) -> int:
        return len(self.distributions)
