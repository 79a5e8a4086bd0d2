"""Application layer - Use cases and DTOs."""

from app.application.dto.ledger_dto import (
    DistributionResponseDTO,
    DistributionResultDTO,
    DistributionSummaryDTO,
    InvestmentCreateDTO,
    InvestmentResponseDTO,
    InvestorCreateDTO,
    InvestorResponseDTO,
    VehicleCreateDTO,
    VehicleResponseDTO,
)
