"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers, routes, and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from sportpro.adapters.repository.postgres import run_migrations, seed_demo_data
from sportpro.api.errors import setup_error_handlers
from sportpro.api.routers import router as api_router
from sportpro.config.settings import get_settings

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {"name": "auth", "description": "Registration, login and sessions"},
    {"name": "user", "description": "Premium activation with single-use codes"},
    {"name": "predictions", "description": "Match predictions for activated accounts"},
    {"name": "admin", "description": "Activation code issuance (X-Admin-Token)"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations and seeds demo data on startup
    - Closes connection pool on shutdown
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Every statement is bounded server-side; checkout waits are bounded by the pool
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
        timeout=settings.pool_timeout_seconds,
        kwargs={"options": f"-c statement_timeout={settings.statement_timeout_ms}"},
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    if settings.seed_demo_data:
        logger.info("Seeding demo data...")
        seed_demo_data(pool)

    # Store pool in app state for dependency injection
    app.state.pool = pool

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="sportpro",
    description="Sports predictions API with single-use premium activation codes",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

setup_error_handlers(app)
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}
