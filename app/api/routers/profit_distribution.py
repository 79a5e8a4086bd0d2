"""
API Routers - Profit distribution endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.dependencies import require_permission
from app.application.dto.ledger_dto import (
    DistributionDeleteResultDTO,
    DistributionResponseDTO,
    DistributionResultDTO,
    DistributionSummaryDTO,
    InvestorDistributionsDTO,
)
from app.core.security import Permission
from app.domain.services import ProfitDistributionService
from app.infrastructure.database import get_db
from app.infrastructure.database.models import Investor, ProfitDistribution, Vehicle
from app.infrastructure.repositories import (
    SqlInvestmentRepository,
    SqlProfitDistributionRepository,
    SqlVehicleRepository,
)

router = APIRouter(prefix="/api", tags=["Profit distribution"])


def get_distribution_service(db: Session = Depends(get_db)) -> ProfitDistributionService:
    return ProfitDistributionService(
        vehicle_repo=SqlVehicleRepository(db),
        investment_repo=SqlInvestmentRepository(db),
        distribution_repo=SqlProfitDistributionRepository(db),
    )


@router.post(
    "/profit-distribution/calculate/{vehicle_id}",
    response_model=DistributionResultDTO,
    dependencies=[Depends(require_permission(Permission.PROFIT_DISTRIBUTE))],
)
def calculate_profit_distribution(
    vehicle_id: int,
    service: ProfitDistributionService = Depends(get_distribution_service),
):
    """
    Split a sold vehicle's profit across its investors.

    - Share of each investment = amount / total investment
    - Rejected when the vehicle already has distributions; delete them first to recalculate
    """
    result = service.distribute(vehicle_id)
    return DistributionResultDTO(
        message="Profit distributions created successfully",
        distributions_count=result.distributions_count,
        total_distributed=result.total_distributed,
    )


@router.get("/profit-distributions", response_model=list[DistributionResponseDTO])
def list_distributions(db: Session = Depends(get_db)):
    rows = db.query(ProfitDistribution, Vehicle.chassis_no, Investor.name).join(
        Vehicle, ProfitDistribution.vehicle_id == Vehicle.id
    ).join(
        Investor, ProfitDistribution.investor_id == Investor.id
    ).order_by(ProfitDistribution.id).all()

    return [
        DistributionResponseDTO.model_validate(dist).model_copy(
            update={"chassis_no": chassis_no, "investor_name": investor_name}
        )
        for dist, chassis_no, investor_name in rows
    ]


@router.get("/profit-distribution/vehicle/{vehicle_id}", response_model=list[DistributionResponseDTO])
def list_vehicle_distributions(vehicle_id: int, db: Session = Depends(get_db)):
    rows = db.query(ProfitDistribution, Investor.name).join(
        Investor, ProfitDistribution.investor_id == Investor.id
    ).filter(
        ProfitDistribution.vehicle_id == vehicle_id
    ).order_by(ProfitDistribution.id).all()

    return [
        DistributionResponseDTO.model_validate(dist).model_copy(update={"investor_name": investor_name})
        for dist, investor_name in rows
    ]


@router.delete(
    "/profit-distribution/vehicle/{vehicle_id}",
    response_model=DistributionDeleteResultDTO,
    dependencies=[Depends(require_permission(Permission.PROFIT_DISTRIBUTE))],
)
def delete_vehicle_distributions(
    vehicle_id: int,
    service: ProfitDistributionService = Depends(get_distribution_service),
):
    """Remove a vehicle's distributions so profit can be recalculated."""
    deleted = service.reset(vehicle_id)
    return DistributionDeleteResultDTO(
        message="Profit distributions deleted successfully",
        deleted_count=deleted,
    )


@router.get("/profit-distribution/investor/{investor_id}", response_model=InvestorDistributionsDTO)
def list_investor_distributions(investor_id: int, db: Session = Depends(get_db)):
    rows = db.query(ProfitDistribution, Vehicle.chassis_no, Vehicle.vehicle_type, Vehicle.year).join(
        Vehicle, ProfitDistribution.vehicle_id == Vehicle.id
    ).filter(
        ProfitDistribution.investor_id == investor_id
    ).order_by(ProfitDistribution.id).all()

    distributions = [
        DistributionResponseDTO.model_validate(dist).model_copy(
            update={"chassis_no": chassis_no, "vehicle_type": vehicle_type, "year": year}
        )
        for dist, chassis_no, vehicle_type, year in rows
    ]
    return InvestorDistributionsDTO(
        distributions=distributions,
        total_profit=sum(d.amount for d in distributions),
        total_vehicles=len(distributions),
    )


@router.get("/profit-distribution/summary", response_model=DistributionSummaryDTO)
def distribution_summary(db: Session = Depends(get_db)):
    total, vehicles, investors = db.query(
        func.coalesce(func.sum(ProfitDistribution.amount), 0.0),
        func.count(func.distinct(ProfitDistribution.vehicle_id)),
        func.count(func.distinct(ProfitDistribution.investor_id)),
    ).one()

    return DistributionSummaryDTO(
        total_distributed=total,
        vehicles_with_profit=vehicles,
        total_investors=investors,
    )


@router.get("/vehicles-with-profit")
def vehicles_with_profit(db: Session = Depends(get_db)):
    count = db.query(func.count(func.distinct(ProfitDistribution.vehicle_id))).scalar()
    return {"vehicles_with_profit": count or 0}
