"""
Main FastAPI application - Vehicle import ledger.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routers import auth, investments, investors, profit_distribution, vehicles
from app.core import config
from app.core.logging_config import configure_logging
from app.domain.exceptions import (
    DistributionPersistError,
    DistributionValidationError,
    VehicleNotFoundError,
)
from app.infrastructure.database import Database, seed_default_admin

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    database = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """Application lifespan - open the database at startup, dispose at shutdown."""
        database.open()
        database.init_db()
        seed_default_admin(database, config.DEFAULT_ADMIN_USERNAME, config.DEFAULT_ADMIN_PASSWORD)
        app.state.database = database
        yield
        database.close()

    app = FastAPI(
        title=config.APP_NAME,
        description="""
## Vehicle import ledger

### Features:
- **Vehicles**: imported units and their lifecycle, Purchased to Sold
- **Investors**: capital providers
- **Investments**: capital contributed per vehicle
- **Profit distribution**: pro-rata payout of a sold vehicle's profit

### Rules:
- Profit is distributed once per vehicle; delete the distribution to recalculate
- All distribution rows of a vehicle are written in one transaction
        """,
        version=config.APP_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s -> %d", request.method, request.url.path, response.status_code)
        return response

    app.include_router(auth.router)
    app.include_router(vehicles.router)
    app.include_router(investors.router)
    app.include_router(investments.router)
    app.include_router(profit_distribution.router)

    @app.get("/")
    def root():
        return {
            "name": config.APP_NAME,
            "version": config.APP_VERSION,
            "docs": "/docs",
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "database": "connected" if database.engine is not None else "closed"}

    @app.exception_handler(DistributionValidationError)
    async def distribution_error_handler(request: Request, exc: DistributionValidationError):
        """Handle rejected profit distributions."""
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(VehicleNotFoundError)
    async def vehicle_not_found_handler(request: Request, exc: VehicleNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(DistributionPersistError)
    async def persist_error_handler(request: Request, exc: DistributionPersistError):
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
