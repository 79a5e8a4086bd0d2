"""
API Routers - Vehicle investment endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.api.dependencies import require_admin
from app.application.dto.ledger_dto import (
    InvestmentCreateDTO,
    InvestmentResponseDTO,
    InvestmentSummaryDTO,
    InvestmentUpdateDTO,
    InvestorInvestmentSummaryDTO,
    VehicleInvestmentSummaryDTO,
)
from app.infrastructure.database import get_db
from app.infrastructure.database.models import Investor, Vehicle, VehicleInvestment

router = APIRouter(prefix="/api/investments", tags=["Investments"])


def _with_names(rows) -> list[InvestmentResponseDTO]:
    return [
        InvestmentResponseDTO.model_validate(inv).model_copy(
            update={"investor_name": investor_name, "chassis_no": chassis_no}
        )
        for inv, investor_name, chassis_no in rows
    ]


def _joined_query(db: Session):
    return db.query(VehicleInvestment, Investor.name, Vehicle.chassis_no).join(
        Investor, VehicleInvestment.investor_id == Investor.id
    ).join(
        Vehicle, VehicleInvestment.vehicle_id == Vehicle.id
    )


@router.get("", response_model=list[InvestmentResponseDTO])
def list_investments(db: Session = Depends(get_db)):
    rows = _joined_query(db).order_by(VehicleInvestment.investment_date.desc(), VehicleInvestment.id).all()
    return _with_names(rows)


@router.get("/summary", response_model=InvestmentSummaryDTO)
def investment_summary(db: Session = Depends(get_db)):
    """Total capital invested, and per-vehicle breakdown."""
    total_investment = db.query(func.coalesce(func.sum(VehicleInvestment.amount), 0.0)).scalar()
    vehicles_with_investments = db.query(func.count(func.distinct(VehicleInvestment.vehicle_id))).scalar()

    per_vehicle = db.query(
        Vehicle.id,
        Vehicle.chassis_no,
        Vehicle.vehicle_type,
        Vehicle.year,
        func.coalesce(func.sum(VehicleInvestment.amount), 0.0).label("total_investment"),
        func.count(func.distinct(VehicleInvestment.investor_id)).label("investor_count"),
        func.count(VehicleInvestment.id).label("investment_rows"),
    ).outerjoin(
        VehicleInvestment, Vehicle.id == VehicleInvestment.vehicle_id
    ).group_by(
        Vehicle.id, Vehicle.chassis_no, Vehicle.vehicle_type, Vehicle.year
    ).all()

    vehicles = {
        r.id: VehicleInvestmentSummaryDTO(
            chassis_no=r.chassis_no,
            vehicle_type=r.vehicle_type,
            year=r.year,
            total_investment=r.total_investment,
            investor_count=r.investor_count,
            has_investments=r.investment_rows > 0,
        )
        for r in per_vehicle
    }

    return InvestmentSummaryDTO(
        total_investment=total_investment,
        vehicles_with_investments=vehicles_with_investments or 0,
        vehicles=vehicles,
    )


@router.get("/summary/investor/{investor_id}", response_model=InvestorInvestmentSummaryDTO)
def investor_investment_summary(investor_id: int, db: Session = Depends(get_db)):
    total_amount, total_vehicles = db.query(
        func.coalesce(func.sum(VehicleInvestment.amount), 0.0),
        func.count(func.distinct(VehicleInvestment.vehicle_id)),
    ).filter(VehicleInvestment.investor_id == investor_id).one()

    return InvestorInvestmentSummaryDTO(
        investor_id=investor_id,
        total_amount=total_amount,
        total_vehicles=total_vehicles,
    )


@router.get("/vehicle/{vehicle_id}", response_model=list[InvestmentResponseDTO])
def list_vehicle_investments(vehicle_id: int, db: Session = Depends(get_db)):
    rows = _joined_query(db).filter(
        VehicleInvestment.vehicle_id == vehicle_id
    ).order_by(VehicleInvestment.id).all()
    return _with_names(rows)


@router.get("/investor/{investor_id}", response_model=list[InvestmentResponseDTO])
def list_investor_investments(investor_id: int, db: Session = Depends(get_db)):
    rows = _joined_query(db).filter(
        VehicleInvestment.investor_id == investor_id
    ).order_by(VehicleInvestment.id).all()
    return _with_names(rows)


@router.post(
    "",
    response_model=InvestmentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_investment(dto: InvestmentCreateDTO, db: Session = Depends(get_db)):
    if not db.get(Vehicle, dto.vehicle_id):
        raise HTTPException(status_code=404, detail="Vehicle not found")
    if not db.get(Investor, dto.investor_id):
        raise HTTPException(status_code=404, detail="Investor not found")

    investment = VehicleInvestment(**dto.model_dump())
    db.add(investment)
    db.commit()
    db.refresh(investment)
    return InvestmentResponseDTO.model_validate(investment)


@router.put("/{investment_id}", response_model=InvestmentResponseDTO, dependencies=[Depends(require_admin)])
def update_investment(investment_id: int, dto: InvestmentUpdateDTO, db: Session = Depends(get_db)):
    investment = db.get(VehicleInvestment, investment_id)
    if not investment:
        raise HTTPException(status_code=404, detail="Investment not found")

    investment.amount = dto.amount
    investment.investment_date = dto.investment_date
    investment.notes = dto.notes
    db.commit()
    db.refresh(investment)
    return InvestmentResponseDTO.model_validate(investment)


@router.delete("/{investment_id}", dependencies=[Depends(require_admin)])
def delete_investment(investment_id: int, db: Session = Depends(get_db)):
    investment = db.get(VehicleInvestment, investment_id)
    if not investment:
        raise HTTPException(status_code=404, detail="Investment not found")

    db.delete(investment)
    db.commit()
    return {"message": "Investment deleted successfully"}
