"""
Database lifecycle and session management.

One Database object is opened at application startup, stored on
``app.state.database`` and disposed at shutdown. Request handlers get a
session from it through ``get_db``.
"""

import logging
from collections.abc import Generator
from pathlib import Path

from fastapi import Request
from sqlalchemy import create_engine, event, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from app.infrastructure.database.models import (
    Investor,
    ProfitDistribution,
    User,
    Vehicle,
    VehicleInvestment,
    get_engine_url,
)

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the engine and session factory for one process."""

    def __init__(self, url: str | None = None, echo: bool = False):
        self.url = url or get_engine_url()
        self.echo = echo
        self.engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    def open(self) -> None:
        if self.engine is not None:
            return

        if self.is_sqlite:
            kwargs: dict = {"connect_args": {"check_same_thread": False}}
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
            else:
                Path(self.url.removeprefix("sqlite:///")).parent.mkdir(parents=True, exist_ok=True)
            self.engine = create_engine(self.url, echo=self.echo, **kwargs)
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_engine(self.url, echo=self.echo, pool_pre_ping=True)

        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        logger.info("Database engine opened (%s)", self.engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("Database engine disposed")

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    def init_db(self) -> None:
        """Create all tables."""
        SQLModel.metadata.create_all(bind=self.engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency - Get database session."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


def seed_default_admin(database: Database, username: str, password: str) -> bool:
    """Create the admin account on first start. Returns True when a user was created."""
    from app.core.security import hash_password

    db = database.session()
    try:
        existing = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
        if existing is not None:
            return False
        pw_hash, salt = hash_password(password)
        db.add(User(username=username, password_hash=pw_hash, password_salt=salt.hex(), role="admin"))
        db.commit()
        logger.info("Default admin user created (username: %s)", username)
        return True
    finally:
        db.close()
