"""
SQL implementations of the domain repository interfaces.

All repositories built for one request share that request's session, so the
reads and the distribution insert of ``ProfitDistributionService.distribute``
run inside one database transaction.
"""

import logging
from datetime import datetime

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import Investment, ProfitDistribution, Vehicle
from app.domain.exceptions import (
    AlreadyDistributedError,
    DistributionPersistError,
    VehicleNotFoundError,
)
from app.domain.services import (
    IInvestmentRepository,
    IProfitDistributionRepository,
    IVehicleRepository,
)
from app.domain.value_objects import (
    LEGACY_SOLD_FLAG,
    LEGACY_UNSOLD_FLAG,
    VehicleId,
    VehicleStatus,
)
from app.infrastructure.database.models import ProfitDistribution as DistributionModel
from app.infrastructure.database.models import Vehicle as VehicleModel
from app.infrastructure.database.models import VehicleInvestment as InvestmentModel

logger = logging.getLogger(__name__)


def resolve_vehicle_status(sold_flag: str | None, vehicle_status: str | None) -> VehicleStatus:
    """
    Collapse the legacy ``sold`` flag and the ``vehicle_status`` column into one status.

    Older rows only carry sold = "Yes"; newer rows only carry vehicle_status = "Sold".
    Either one means the vehicle is sold.
    """
    if sold_flag and sold_flag.strip().lower() == LEGACY_SOLD_FLAG.lower():
        return VehicleStatus.SOLD

    if vehicle_status:
        for status in VehicleStatus:
            if status.value.lower() == vehicle_status.strip().lower():
                return status
        logger.warning("Unknown vehicle_status %r, treating as %s", vehicle_status, VehicleStatus.PURCHASED.value)

    return VehicleStatus.PURCHASED


def vehicle_status_filter(status: VehicleStatus):
    """SQL condition selecting the rows ``resolve_vehicle_status`` maps to ``status``."""
    sold_flag_set = func.lower(func.trim(func.coalesce(VehicleModel.sold, ""))) == LEGACY_SOLD_FLAG.lower()
    stored_status = func.lower(func.trim(func.coalesce(VehicleModel.vehicle_status, "")))

    if status == VehicleStatus.SOLD:
        return or_(sold_flag_set, stored_status == status.value.lower())
    if status == VehicleStatus.PURCHASED:
        # unknown and missing statuses fall back to Purchased
        others = [s.value.lower() for s in VehicleStatus if s != VehicleStatus.PURCHASED]
        return and_(~sold_flag_set, stored_status.not_in(others))
    return and_(~sold_flag_set, stored_status == status.value.lower())


def legacy_sold_flag(status: VehicleStatus) -> str:
    return LEGACY_SOLD_FLAG if status == VehicleStatus.SOLD else LEGACY_UNSOLD_FLAG


def to_vehicle_entity(row: VehicleModel) -> Vehicle:
    return Vehicle(
        id=row.id,
        chassis_no=row.chassis_no,
        status=resolve_vehicle_status(row.sold, row.vehicle_status),
        vehicle_type=row.vehicle_type,
        year=row.year,
        total_cost=row.total_cost,
        sale_price=row.sale_price,
        profit=row.profit,
    )


class SqlVehicleRepository(IVehicleRepository):

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, vehicle_id: VehicleId, for_update: bool = False) -> Vehicle | None:
        stmt = select(VehicleModel).where(VehicleModel.id == vehicle_id)
        if for_update:
            stmt = stmt.with_for_update()
        row = self.db.execute(stmt).scalar_one_or_none()
        return to_vehicle_entity(row) if row is not None else None

    def save(self, vehicle: Vehicle) -> Vehicle:
        row = self.db.get(VehicleModel, vehicle.id)
        if row is None:
            raise VehicleNotFoundError(vehicle.id)

        row.vehicle_status = vehicle.status.value
        row.sold = legacy_sold_flag(vehicle.status)
        row.sale_price = vehicle.sale_price
        row.profit = vehicle.profit
        row.updated_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(row)
        return to_vehicle_entity(row)


class SqlInvestmentRepository(IInvestmentRepository):

    def __init__(self, db: Session):
        self.db = db

    def list_by_vehicle(self, vehicle_id: VehicleId) -> list[Investment]:
        rows = self.db.execute(
            select(InvestmentModel)
            .where(InvestmentModel.vehicle_id == vehicle_id)
            .order_by(InvestmentModel.id)
        ).scalars().all()
        return [
            Investment(
                id=row.id,
                vehicle_id=row.vehicle_id,
                investor_id=row.investor_id,
                amount=row.amount,
                investment_date=row.investment_date,
                notes=row.notes,
            )
            for row in rows
        ]


class SqlProfitDistributionRepository(IProfitDistributionRepository):

    def __init__(self, db: Session):
        self.db = db

    def count_by_vehicle(self, vehicle_id: VehicleId) -> int:
        return self.db.execute(
            select(func.count())
            .select_from(DistributionModel)
            .where(DistributionModel.vehicle_id == vehicle_id)
        ).scalar_one()

    def save_all(self, distributions: list[ProfitDistribution]) -> list[ProfitDistribution]:
        rows = [
            DistributionModel(
                vehicle_id=d.vehicle_id,
                investor_id=d.investor_id,
                amount=d.amount,
                percentage=d.percentage,
                distribution_date=d.distribution_date,
                notes=d.notes,
                created_at=d.created_at,
            )
            for d in distributions
        ]
        vehicle_ids = {row.vehicle_id for row in rows}
        try:
            self.db.add_all(rows)
            self.db.flush()
            # the flush holds the write lock; rows committed by another request
            # after the caller's guard are visible from here on
            for vehicle_id in vehicle_ids:
                batch = sum(1 for row in rows if row.vehicle_id == vehicle_id)
                if self.count_by_vehicle(vehicle_id) > batch:
                    self.db.rollback()
                    logger.warning("Concurrent profit distribution detected for vehicle %s", vehicle_id)
                    raise AlreadyDistributedError(vehicle_id)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Error inserting profit distributions, transaction rolled back")
            raise DistributionPersistError("Failed to create profit distributions") from exc

        return [
            ProfitDistribution(
                id=row.id,
                vehicle_id=row.vehicle_id,
                investor_id=row.investor_id,
                amount=row.amount,
                percentage=row.percentage,
                distribution_date=row.distribution_date,
                notes=row.notes,
                created_at=row.created_at,
            )
            for row in rows
        ]

    def delete_by_vehicle(self, vehicle_id: VehicleId) -> int:
        result = self.db.execute(
            delete(DistributionModel).where(DistributionModel.vehicle_id == vehicle_id)
        )
        self.db.commit()
        return result.rowcount
