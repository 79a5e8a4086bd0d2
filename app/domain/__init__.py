"""Domain layer - Pure Python business logic."""

from app.domain.entities import DistributionResult, Investment, ProfitDistribution, Vehicle
from app.domain.exceptions import (
    AlreadyDistributedError,
    DistributionPersistError,
    DistributionValidationError,
    InvalidInvestmentTotalError,
    NoInvestmentsError,
    NoProfitToDistributeError,
    VehicleNotFoundError,
    VehicleNotSoldError,
)
from app.domain.services import (
    IInvestmentRepository,
    IProfitDistributionRepository,
    IVehicleRepository,
    ProfitDistributionService,
    calculate_profit_shares,
)
from app.domain.value_objects import (
    InvestorId,
    ProfitShare,
    UserRole,
    VehicleId,
    VehicleStatus,
)
