"""
CMDB Service - Main Application
===============================

Configuration management database with an incident/SLA service desk.

Modules:
- Inventory: Configuration items, relationships, topology map
- Service Desk: Tickets, SLA metrics, dashboard
- Identity: Operator accounts (data access only)

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities and topology layout
- Infrastructure: Database
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

# Configuration
from cmdb.config import settings

# Infrastructure
from cmdb.infrastructure.database import init_database, close_database, create_tables

# Module Routers
from cmdb.inventory.interfaces import inventory_router
from cmdb.service_desk.interfaces import service_desk_router

# Shared
from cmdb.shared.api.middleware import (
    CorrelationIDMiddleware,
    TimingMiddleware,
    LoggingMiddleware,
    register_exception_handlers,
)
from cmdb.shared.infrastructure.logging import setup_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Initialize database
    3. Create database tables

    SHUTDOWN:
    1. Close database connections
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting CMDB Service", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    logger.info("Initializing database")
    init_database()

    # Create tables (production schemas are managed separately)
    # If the database is not reachable the server still starts and
    # database-backed endpoints answer 500
    logger.info("Creating database tables")
    try:
        await create_tables()
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Database not available - running in degraded mode: {e}")

    logger.info("CMDB Service started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down CMDB Service")
    await close_database()
    logger.info("CMDB Service shutdown complete")


# Create FastAPI application
app = FastAPI(
    title="CMDB Service API",
    description="""
    ## Configuration Management Database

    Track infrastructure configuration items, raise tickets against them
    and record SLA measurements.

    ---

    ### Inventory

    - `GET /api/cis`, `POST /api/cis`, `GET|PUT|DELETE /api/cis/{id}`
    - `GET|POST /api/cis/{id}/relationships`
    - `GET /api/cis/{id}/topology` - layout of a CI and its neighbours
    - `GET /api/cis/{id}/topology.svg` - rendered topology map

    ### Service Desk

    - `GET /api/tickets?status=&priority=&ciId=`, `POST /api/tickets`
    - `GET|PUT /api/tickets/{id}`, `GET /api/cis/{id}/tickets`
    - `GET|POST /api/sla-metrics`
    - `GET /api/dashboard`

    ---

    All responses use the envelope `{"success": true, "data": ...}`;
    failures answer `{"success": false, "error": "..."}`.
    """,
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# === CORS Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# === Custom Middleware (from shared) ===
app.add_middleware(TimingMiddleware)
app.add_middleware(LoggingMiddleware)
app.add_middleware(CorrelationIDMiddleware)
register_exception_handlers(app)

# === Include Module Routers ===
app.include_router(inventory_router)
app.include_router(service_desk_router)


# === Health Check Endpoint ===

@app.get("/api/health", tags=["Health"], responses={
    200: {
        "description": "Service is up",
        "content": {
            "application/json": {
                "example": {"status": "OK", "timestamp": "2024-01-01T00:00:00+00:00"}
            }
        }
    }
})
async def health_check():
    """Liveness probe. Does not touch the database."""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/api/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cmdb.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
