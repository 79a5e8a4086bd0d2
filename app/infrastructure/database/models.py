"""
Infrastructure - SQLModel database models and configurations.
"""

import os
from datetime import date, datetime

from sqlmodel import Field, Relationship, SQLModel


class User(SQLModel, table=True):
    """Login account. Role is admin or readonly."""

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    password_hash: str
    password_salt: str
    role: str = "readonly"
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Vehicle(SQLModel, table=True):
    """Imported vehicle. `sold` is the legacy Yes/No flag kept next to `vehicle_status`."""

    id: int | None = Field(default=None, primary_key=True)
    chassis_no: str = Field(index=True)
    vehicle_type: str | None = None
    year: int | None = None
    colour: str | None = None
    mileage: int | None = None
    vessel_name: str | None = None
    etd: date | None = None
    eta: date | None = None

    total_cost: float | None = None
    sale_price: float | None = None
    profit: float | None = None

    sold: str | None = None
    vehicle_status: str | None = Field(default="Purchased", index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    investments: list["VehicleInvestment"] = Relationship(back_populates="vehicle")
    distributions: list["ProfitDistribution"] = Relationship(back_populates="vehicle")


class Investor(SQLModel, table=True):
    """Capital provider."""

    id: int | None = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    contact_info: str | None = None
    email: str | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    investments: list["VehicleInvestment"] = Relationship(back_populates="investor")
    distributions: list["ProfitDistribution"] = Relationship(back_populates="investor")


class VehicleInvestment(SQLModel, table=True):
    """Capital contributed by an investor toward one vehicle."""

    __tablename__ = "vehicle_investments"

    id: int | None = Field(default=None, primary_key=True)
    vehicle_id: int = Field(foreign_key="vehicle.id", index=True)
    investor_id: int = Field(foreign_key="investor.id", index=True)
    amount: float
    investment_date: date | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    vehicle: "Vehicle" = Relationship(back_populates="investments")
    investor: "Investor" = Relationship(back_populates="investments")


class ProfitDistribution(SQLModel, table=True):
    """Investor payout for a sold vehicle, written by the profit distributor."""

    __tablename__ = "profit_distribution"

    id: int | None = Field(default=None, primary_key=True)
    vehicle_id: int = Field(foreign_key="vehicle.id", index=True)
    investor_id: int = Field(foreign_key="investor.id", index=True)
    amount: float
    percentage: float
    distribution_date: date
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    vehicle: "Vehicle" = Relationship(back_populates="distributions")
    investor: "Investor" = Relationship(back_populates="distributions")


def get_engine_url(database_type: str | None = None) -> str:
    """Database URL from environment. DATABASE_URL wins when set."""
    explicit_url = os.getenv("DATABASE_URL")
    if explicit_url:
        return explicit_url

    db_type = database_type or os.getenv("DATABASE_TYPE", "sqlite")

    if db_type == "sqlite":
        db_path = os.getenv("DATABASE_PATH", "./data/ledger.db")
        return f"sqlite:///{db_path}"
    elif db_type == "postgresql":
        host = os.getenv("DB_HOST", "localhost")
        port = os.getenv("DB_PORT", "5432")
        dbname = os.getenv("DB_NAME", "ledger")
        user = os.getenv("DB_USER", "postgres")
        password = os.getenv("DB_PASSWORD", "postgres")
        return f"postgresql://{user}:{password}@{host}:{port}/{dbname}"
    else:
        raise ValueError(f"Unsupported database type: {db_type}")
