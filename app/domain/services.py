"""
Domain Services - Business logic that operates on multiple entities.
Profit distribution of sold vehicles to their investors.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date

from .entities import DistributionResult, Investment, ProfitDistribution, Vehicle
from .exceptions import (
    AlreadyDistributedError,
    InvalidInvestmentTotalError,
    NoInvestmentsError,
    NoProfitToDistributeError,
    VehicleNotFoundError,
    VehicleNotSoldError,
)
from .value_objects import ProfitShare, VehicleId

logger = logging.getLogger(__name__)


class IVehicleRepository(ABC):

    @abstractmethod
    def get_by_id(self, vehicle_id: VehicleId, for_update: bool = False) -> Vehicle | None:
        ...

    @abstractmethod
    def save(self, vehicle: Vehicle) -> Vehicle:
        ...


class IInvestmentRepository(ABC):

    @abstractmethod
    def list_by_vehicle(self, vehicle_id: VehicleId) -> list[Investment]:
        ...


class IProfitDistributionRepository(ABC):

    @abstractmethod
    def count_by_vehicle(self, vehicle_id: VehicleId) -> int:
        ...

    @abstractmethod
    def save_all(self, distributions: list[ProfitDistribution]) -> list[ProfitDistribution]:
        """
        Persist the whole batch in one transaction or raise DistributionPersistError.

        Raises AlreadyDistributedError when another writer stored rows for the
        same vehicle after the caller's duplicate check.
        """

    @abstractmethod
    def delete_by_vehicle(self, vehicle_id: VehicleId) -> int:
        ...


def calculate_profit_shares(profit: float, investments: list[Investment]) -> list[ProfitShare]:
    """
    Pro-rate profit over investments by contribution.

    percentage = amount / total * 100, share = percentage / 100 * profit.
    Float arithmetic: the shares may miss profit by a sub-cent epsilon.
    """
    total_investment = sum(inv.amount for inv in investments)
    if total_investment <= 0:
        raise InvalidInvestmentTotalError(total_investment)

    shares = []
    for inv in investments:
        percentage = (inv.amount / total_investment) * 100
        shares.append(
            ProfitShare(
                investor_id=inv.investor_id,
                invested=inv.amount,
                percentage=percentage,
                amount=(percentage / 100) * profit,
            )
        )
    return shares


class ProfitDistributionService:
    """
    Service - Distribute a sold vehicle's profit to its investors.
    One row per investment, written in a single transaction.
    """

    def __init__(
        self,
        vehicle_repo: IVehicleRepository,
        investment_repo: IInvestmentRepository,
        distribution_repo: IProfitDistributionRepository,
    ):
        self.vehicle_repo = vehicle_repo
        self.investment_repo = investment_repo
        self.distribution_repo = distribution_repo

    def distribute(
        self,
        vehicle_id: VehicleId,
        distribution_date: date | None = None,
    ) -> DistributionResult:
        logger.info("Profit distribution requested for vehicle %s", vehicle_id)

        investments = self.investment_repo.list_by_vehicle(vehicle_id)
        if not investments:
            raise NoInvestmentsError(vehicle_id)

        vehicle = self.vehicle_repo.get_by_id(vehicle_id, for_update=True)
        if vehicle is None:
            raise VehicleNotFoundError(vehicle_id)
        if not vehicle.is_sold():
            raise VehicleNotSoldError(vehicle_id)
        if not vehicle.has_profit():
            raise NoProfitToDistributeError(vehicle_id)

        if self.distribution_repo.count_by_vehicle(vehicle_id) > 0:
            raise AlreadyDistributedError(vehicle_id)

        shares = calculate_profit_shares(vehicle.profit, investments)
        distribution_date = distribution_date or date.today()
        distributions = [
            ProfitDistribution(
                vehicle_id=vehicle_id,
                investor_id=share.investor_id,
                amount=share.amount,
                percentage=share.percentage,
                distribution_date=distribution_date,
                notes=f"Profit distribution for vehicle {vehicle_id}",
            )
            for share in shares
        ]

        saved = self.distribution_repo.save_all(distributions)
        total_distributed = sum(d.amount for d in saved)
        logger.info(
            "Created %d profit distributions for vehicle %s, total %.2f",
            len(saved), vehicle_id, total_distributed,
        )
        return DistributionResult(
            vehicle_id=vehicle_id,
            distributions=saved,
            total_distributed=total_distributed,
        )

    def reset(self, vehicle_id: VehicleId) -> int:
        """Delete a vehicle's distributions so it can be distributed again."""
        deleted = self.distribution_repo.delete_by_vehicle(vehicle_id)
        logger.info("Deleted %d profit distribution records for vehicle %s", deleted, vehicle_id)
        return deleted
