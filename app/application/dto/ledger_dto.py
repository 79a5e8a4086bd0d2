"""
API DTOs - Data Transfer Objects for API requests/responses.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.value_objects import VehicleStatus


class LoginRequestDTO(BaseModel):
    username: str | None = None
    password: str | None = None


class LoginResponseDTO(BaseModel):
    message: str
    token: str
    username: str
    role: str


class VehicleCreateDTO(BaseModel):
    """DTO - Register an imported vehicle."""
    chassis_no: str = Field(..., min_length=1, description="Chassis number")
    vehicle_type: str | None = Field(None, description="Make and model")
    year: int | None = Field(None, ge=1900, le=2100)
    colour: str | None = None
    mileage: int | None = Field(None, ge=0)
    vessel_name: str | None = None
    etd: date | None = Field(None, description="Estimated departure")
    eta: date | None = Field(None, description="Estimated arrival")
    total_cost: float | None = Field(None, ge=0, description="Landed cost including duty and charges")
    vehicle_status: VehicleStatus = VehicleStatus.PURCHASED

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "chassis_no": "NZE141-9012345",
            "vehicle_type": "Toyota Axio",
            "year": 2018,
            "colour": "White",
            "mileage": 42000,
            "vessel_name": "Morning Cara",
            "total_cost": 6250000,
        }
    })


class VehicleStatusUpdateDTO(BaseModel):
    """DTO - Move a vehicle along its lifecycle. Sale price and profit apply to Sold."""
    vehicle_status: VehicleStatus
    sale_price: float | None = Field(None, ge=0)
    profit: float | None = None


class VehicleResponseDTO(BaseModel):
    id: int
    chassis_no: str
    vehicle_type: str | None
    year: int | None
    colour: str | None
    mileage: int | None
    vessel_name: str | None
    etd: date | None
    eta: date | None
    total_cost: float | None
    sale_price: float | None
    profit: float | None
    vehicle_status: VehicleStatus
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class VehicleStatusSummaryDTO(BaseModel):
    total: int
    by_status: dict[str, int]


class InvestorCreateDTO(BaseModel):
    """DTO - Create or update an investor."""
    name: str = Field(..., description="Investor name")
    contact_info: str | None = None
    email: str | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Investor name is required")
        return value.strip()


class InvestorResponseDTO(BaseModel):
    id: int
    name: str
    contact_info: str | None
    email: str | None
    notes: str | None

    model_config = ConfigDict(from_attributes=True)


class InvestmentCreateDTO(BaseModel):
    """DTO - Record capital put into a vehicle."""
    vehicle_id: int
    investor_id: int
    amount: float = Field(..., gt=0, description="Invested amount")
    investment_date: date | None = None
    notes: str | None = None


class InvestmentUpdateDTO(BaseModel):
    amount: float = Field(..., gt=0)
    investment_date: date | None = None
    notes: str | None = None


class InvestmentResponseDTO(BaseModel):
    id: int
    vehicle_id: int
    investor_id: int
    amount: float
    investment_date: date | None
    notes: str | None
    investor_name: str | None = None
    chassis_no: str | None = None

    model_config = ConfigDict(from_attributes=True)


class InvestorInvestmentSummaryDTO(BaseModel):
    investor_id: int
    total_amount: float
    total_vehicles: int


class VehicleInvestmentSummaryDTO(BaseModel):
    chassis_no: str
    vehicle_type: str | None
    year: int | None
    total_investment: float
    investor_count: int
    has_investments: bool


class InvestmentSummaryDTO(BaseModel):
    total_investment: float
    vehicles_with_investments: int
    vehicles: dict[int, VehicleInvestmentSummaryDTO]


class DistributionResultDTO(BaseModel):
    """DTO - Outcome of a profit distribution run."""
    success: bool = True
    message: str
    distributions_count: int = Field(..., alias="distributionsCount")
    total_distributed: float = Field(..., alias="totalDistributed")

    model_config = ConfigDict(populate_by_name=True)


class DistributionResponseDTO(BaseModel):
    id: int
    vehicle_id: int
    investor_id: int
    amount: float
    percentage: float
    distribution_date: date
    notes: str | None
    investor_name: str | None = None
    chassis_no: str | None = None
    vehicle_type: str | None = None
    year: int | None = None

    model_config = ConfigDict(from_attributes=True)


class DistributionDeleteResultDTO(BaseModel):
    message: str
    deleted_count: int = Field(..., alias="deletedCount")

    model_config = ConfigDict(populate_by_name=True)


class InvestorDistributionsDTO(BaseModel):
    distributions: list[DistributionResponseDTO]
    total_profit: float
    total_vehicles: int


class DistributionSummaryDTO(BaseModel):
    total_distributed: float
    vehicles_with_profit: int
    total_investors: int
