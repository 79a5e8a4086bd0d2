"""
Pytest configuration and fixtures.
"""

from dataclasses import dataclass
from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.core.security import create_access_token, hash_password
from app.domain.entities import Investment, ProfitDistribution, Vehicle
from app.domain.exceptions import DistributionPersistError
from app.domain.services import (
    IInvestmentRepository,
    IProfitDistributionRepository,
    IVehicleRepository,
    ProfitDistributionService,
)
from app.domain.value_objects import VehicleStatus
from app.infrastructure.database import Database
from app.infrastructure.database.models import Investor as InvestorModel
from app.infrastructure.database.models import User as UserModel
from app.infrastructure.database.models import Vehicle as VehicleModel
from app.infrastructure.database.models import VehicleInvestment as InvestmentModel
from app.main import create_app


class InMemoryVehicleRepository(IVehicleRepository):
    def __init__(self, vehicles: list[Vehicle] | None = None):
        self.vehicles = {v.id: v for v in vehicles or []}

    def get_by_id(self, vehicle_id, for_update=False):
        return self.vehicles.get(vehicle_id)

    def save(self, vehicle):
        self.vehicles[vehicle.id] = vehicle
        return vehicle


class InMemoryInvestmentRepository(IInvestmentRepository):
    def __init__(self, investments: list[Investment] | None = None):
        self.investments = list(investments or [])

    def list_by_vehicle(self, vehicle_id):
        return [inv for inv in self.investments if inv.vehicle_id == vehicle_id]


class InMemoryDistributionRepository(IProfitDistributionRepository):
    def __init__(self, fail_on_insert: int | None = None):
        self.rows: list[ProfitDistribution] = []
        self.fail_on_insert = fail_on_insert

    def count_by_vehicle(self, vehicle_id):
        return sum(1 for d in self.rows if d.vehicle_id == vehicle_id)

    def save_all(self, distributions):
        staged = []
        for idx, dist in enumerate(distributions, start=1):
            if idx == self.fail_on_insert:
                raise DistributionPersistError("Failed to create profit distributions")
            staged.append(dist)
        self.rows.extend(staged)
        return staged

    def delete_by_vehicle(self, vehicle_id):
        before = len(self.rows)
        self.rows = [d for d in self.rows if d.vehicle_id != vehicle_id]
        return before - len(self.rows)


@pytest.fixture
def sold_vehicle() -> Vehicle:
    return Vehicle(
        id=1,
        chassis_no="NZE141-9012345",
        status=VehicleStatus.SOLD,
        vehicle_type="Toyota Axio",
        total_cost=6000.0,
        sale_price=7000.0,
        profit=1000.0,
    )


@pytest.fixture
def two_investments() -> list[Investment]:
    return [
        Investment(id=1, vehicle_id=1, investor_id=10, amount=300.0),
        Investment(id=2, vehicle_id=1, investor_id=20, amount=700.0),
    ]


@pytest.fixture
def failing_distribution_repo() -> InMemoryDistributionRepository:
    """Distribution repository that fails while writing the second row."""
    return InMemoryDistributionRepository(fail_on_insert=2)


@pytest.fixture
def make_service():
    def factory(vehicles=(), investments=(), distribution_repo=None):
        distribution_repo = distribution_repo or InMemoryDistributionRepository()
        service = ProfitDistributionService(
            vehicle_repo=InMemoryVehicleRepository(list(vehicles)),
            investment_repo=InMemoryInvestmentRepository(list(investments)),
            distribution_repo=distribution_repo,
        )
        return service, distribution_repo
    return factory


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.open()
    db.init_db()
    yield db
    db.close()


@dataclass
class SeededLedger:
    vehicle_id: int
    investor_a_id: int
    investor_b_id: int


@pytest.fixture
def ledger(database) -> SeededLedger:
    """Sold vehicle with profit 1000 and investments of 300 and 700."""
    return seed_ledger(database)


@pytest.fixture
def file_database(tmp_path):
    """SQLite file database; unlike the in-memory one, each session gets its own connection."""
    db = Database(f"sqlite:///{tmp_path / 'ledger.db'}")
    db.open()
    db.init_db()
    yield db
    db.close()


@pytest.fixture
def file_ledger(file_database) -> SeededLedger:
    return seed_ledger(file_database)


def seed_ledger(database) -> SeededLedger:
    session = database.session()
    try:
        investor_a = InvestorModel(name="Investor A")
        investor_b = InvestorModel(name="Investor B")
        vehicle = VehicleModel(
            chassis_no="NZE141-9012345",
            vehicle_type="Toyota Axio",
            total_cost=6000.0,
            sale_price=7000.0,
            profit=1000.0,
            vehicle_status="Sold",
            sold="Yes",
        )
        session.add_all([investor_a, investor_b, vehicle])
        session.flush()
        session.add_all([
            InvestmentModel(vehicle_id=vehicle.id, investor_id=investor_a.id, amount=300.0,
                            investment_date=date(2025, 1, 10)),
            InvestmentModel(vehicle_id=vehicle.id, investor_id=investor_b.id, amount=700.0,
                            investment_date=date(2025, 1, 12)),
        ])
        session.commit()
        return SeededLedger(vehicle.id, investor_a.id, investor_b.id)
    finally:
        session.close()


@pytest.fixture
def client(database):
    with TestClient(create_app(database)) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client) -> dict:
    response = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def readonly_headers(database) -> dict:
    session = database.session()
    try:
        pw_hash, salt = hash_password("readonly123")
        user = UserModel(username="viewer", password_hash=pw_hash, password_salt=salt.hex(), role="readonly")
        session.add(user)
        session.commit()
        token = create_access_token(user.id, user.username, user.role)
    finally:
        session.close()
    return {"Authorization": f"Bearer {token}"}
