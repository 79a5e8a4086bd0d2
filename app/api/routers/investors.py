"""
API Routers - Investor endpoints.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.dependencies import require_admin
from app.application.dto.ledger_dto import InvestorCreateDTO, InvestorResponseDTO
from app.infrastructure.database import get_db
from app.infrastructure.database.models import Investor, ProfitDistribution, VehicleInvestment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/investors", tags=["Investors"])


@router.get("", response_model=list[InvestorResponseDTO])
def list_investors(db: Session = Depends(get_db)):
    investors = db.query(Investor).order_by(Investor.name).all()
    return [InvestorResponseDTO.model_validate(i) for i in investors]


@router.get("/{investor_id}", response_model=InvestorResponseDTO)
def get_investor(investor_id: int, db: Session = Depends(get_db)):
    investor = db.get(Investor, investor_id)
    if not investor:
        raise HTTPException(status_code=404, detail="Investor not found")
    return InvestorResponseDTO.model_validate(investor)


@router.post(
    "",
    response_model=InvestorResponseDTO,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_investor(dto: InvestorCreateDTO, db: Session = Depends(get_db)):
    investor = Investor(**dto.model_dump())
    db.add(investor)
    db.commit()
    db.refresh(investor)
    return InvestorResponseDTO.model_validate(investor)


@router.put("/{investor_id}", response_model=InvestorResponseDTO, dependencies=[Depends(require_admin)])
def update_investor(investor_id: int, dto: InvestorCreateDTO, db: Session = Depends(get_db)):
    investor = db.get(Investor, investor_id)
    if not investor:
        raise HTTPException(status_code=404, detail="Investor not found")

    for key, value in dto.model_dump().items():
        setattr(investor, key, value)
    db.commit()
    db.refresh(investor)
    return InvestorResponseDTO.model_validate(investor)


@router.delete("/{investor_id}", dependencies=[Depends(require_admin)])
def delete_investor(investor_id: int, db: Session = Depends(get_db)):
    """
    Delete an investor together with their investments.

    Investors that already received profit distributions are kept.
    """
    investor = db.get(Investor, investor_id)
    if not investor:
        raise HTTPException(status_code=404, detail="Investor not found")

    has_distributions = db.query(ProfitDistribution).filter(
        ProfitDistribution.investor_id == investor_id
    ).count()
    if has_distributions:
        raise HTTPException(status_code=400, detail="Investor has profit distributions and cannot be deleted")

    removed = db.query(VehicleInvestment).filter(
        VehicleInvestment.investor_id == investor_id
    ).delete(synchronize_session=False)
    db.delete(investor)
    db.commit()

    logger.info("Deleted investor %s and %d investments", investor_id, removed)
    return {"message": "Investor deleted successfully"}
