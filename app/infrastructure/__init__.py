"""Infrastructure layer."""

from app.infrastructure.database import Database, get_db, seed_default_admin
from app.infrastructure.database.models import (
    Investor,
    ProfitDistribution,
    User,
    Vehicle,
    VehicleInvestment,
)
from app.infrastructure.repositories import (
    SqlInvestmentRepository,
    SqlProfitDistributionRepository,
    SqlVehicleRepository,
    resolve_vehicle_status,
)
