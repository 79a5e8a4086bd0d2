"""
Domain exceptions raised by the profit distribution workflow.
"""


class DistributionValidationError(ValueError):
    """Vehicle or investment state does not allow a distribution. Not retryable."""


class NoInvestmentsError(DistributionValidationError):
    def __init__(self, vehicle_id: int):
        super().__init__(
            f"No investments found for vehicle {vehicle_id}. "
            "Add investments before distributing profit."
        )
        self.vehicle_id = vehicle_id


class VehicleNotSoldError(DistributionValidationError):
    def __init__(self, vehicle_id: int):
        super().__init__(f"Vehicle {vehicle_id} is not marked as sold")
        self.vehicle_id = vehicle_id


class NoProfitToDistributeError(DistributionValidationError):
    def __init__(self, vehicle_id: int):
        super().__init__(f"Vehicle {vehicle_id} does not have any profit to distribute")
        self.vehicle_id = vehicle_id


class InvalidInvestmentTotalError(DistributionValidationError):
    def __init__(self, total: float):
        super().__init__(f"Invalid total investment amount: {total}")
        self.total = total


class AlreadyDistributedError(DistributionValidationError):
    def __init__(self, vehicle_id: int):
        super().__init__(
            f"Profit has already been distributed for vehicle {vehicle_id}. "
            "Delete the existing distributions before recalculating."
        )
        self.vehicle_id = vehicle_id


class VehicleNotFoundError(LookupError):
    def __init__(self, vehicle_id: int):
        super().__init__(f"Vehicle {vehicle_id} not found")
        self.vehicle_id = vehicle_id


class DistributionPersistError(RuntimeError):
    """The distribution batch could not be written; nothing was committed."""
