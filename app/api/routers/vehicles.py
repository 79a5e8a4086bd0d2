"""
API Routers - Vehicle endpoints.
"""

from dataclasses import replace

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.dependencies import require_admin
from app.application.dto.ledger_dto import (
    VehicleCreateDTO,
    VehicleResponseDTO,
    VehicleStatusSummaryDTO,
    VehicleStatusUpdateDTO,
)
from app.domain.value_objects import VehicleStatus
from app.infrastructure.database import get_db
from app.infrastructure.database.models import Vehicle
from app.infrastructure.repositories import (
    SqlVehicleRepository,
    legacy_sold_flag,
    resolve_vehicle_status,
    vehicle_status_filter,
)

router = APIRouter(prefix="/api/vehicles", tags=["Vehicles"])


def to_response(vehicle: Vehicle) -> VehicleResponseDTO:
    data = vehicle.model_dump()
    data["vehicle_status"] = resolve_vehicle_status(vehicle.sold, vehicle.vehicle_status)
    return VehicleResponseDTO.model_validate(data)


@router.post(
    "",
    response_model=VehicleResponseDTO,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_vehicle(dto: VehicleCreateDTO, db: Session = Depends(get_db)):
    vehicle = Vehicle(
        **dto.model_dump(exclude={"vehicle_status"}),
        vehicle_status=dto.vehicle_status.value,
        sold=legacy_sold_flag(dto.vehicle_status),
    )
    db.add(vehicle)
    db.commit()
    db.refresh(vehicle)
    return to_response(vehicle)


@router.get("", response_model=list[VehicleResponseDTO])
def list_vehicles(
    vehicle_status: VehicleStatus | None = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
):
    query = db.query(Vehicle)
    if vehicle_status:
        query = query.filter(vehicle_status_filter(vehicle_status))
    vehicles = query.order_by(Vehicle.id.desc()).offset(skip).limit(limit).all()
    return [to_response(v) for v in vehicles]


@router.get("/status-summary", response_model=VehicleStatusSummaryDTO)
def vehicle_status_summary(db: Session = Depends(get_db)):
    """Vehicle counts per lifecycle status."""
    counts = {s.value: 0 for s in VehicleStatus}
    rows = db.query(Vehicle.sold, Vehicle.vehicle_status).all()
    for sold, vehicle_status in rows:
        counts[resolve_vehicle_status(sold, vehicle_status).value] += 1
    return VehicleStatusSummaryDTO(total=len(rows), by_status=counts)


@router.get("/{vehicle_id}", response_model=VehicleResponseDTO)
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    vehicle = db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return to_response(vehicle)


@router.put(
    "/{vehicle_id}/status",
    response_model=VehicleResponseDTO,
    dependencies=[Depends(require_admin)],
)
def update_vehicle_status(vehicle_id: int, dto: VehicleStatusUpdateDTO, db: Session = Depends(get_db)):
    """
    Change the lifecycle status of a vehicle.

    Marking a vehicle Sold records the sale price; profit defaults to
    sale price minus total cost when not given.
    """
    repo = SqlVehicleRepository(db)
    vehicle = repo.get_by_id(vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")

    if dto.vehicle_status == VehicleStatus.SOLD and dto.sale_price is not None:
        vehicle = vehicle.mark_sold(dto.sale_price, dto.profit)
    else:
        vehicle = replace(vehicle, status=dto.vehicle_status)
        if dto.profit is not None:
            vehicle = replace(vehicle, profit=dto.profit)

    repo.save(vehicle)
    return to_response(db.get(Vehicle, vehicle_id))


@router.delete("/{vehicle_id}", dependencies=[Depends(require_admin)])
def delete_vehicle(vehicle_id: int, db: Session = Depends(get_db)):
    """Delete a vehicle that has no investments or distributions."""
    vehicle = db.get(Vehicle, vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    if vehicle.investments or vehicle.distributions:
        raise HTTPException(status_code=400, detail="Vehicle has investments or profit distributions")

    db.delete(vehicle)
    db.commit()
    return {"message": "Vehicle deleted successfully"}
