"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, ValidationError, field_validator
from functools import lru_cache
from typing import List

from cmdb.core import ConfigurationException


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="cmdb-service", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/cmdb",
        description="Database connection URL (async driver)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)

    # ========== Topology ==========
    topology_center_x: float = Field(default=300.0, description="X coordinate of the central CI")
    topology_center_y: float = Field(default=200.0, description="Y coordinate of the central CI")
    topology_radius: float = Field(
        default=120.0,
        description="Radius of the ring holding related CIs",
        gt=0
    )

    # ========== Dashboard ==========
    dashboard_recent_limit: int = Field(
        default=10,
        description="Number of recent tickets and CIs on the dashboard",
        ge=1,
        le=100
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """
    Returns cached Settings instance.

    Raises:
        ConfigurationException: If the environment holds invalid values
    """
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationException(
            "Invalid settings",
            {"errors": exc.errors(include_url=False)},
        ) from exc


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class CIType(str):
    """Configuration item types. The list is open; these get dedicated icons."""
    SERVER = "Server"
    VM = "VM"
    DATABASE = "Database"
    NETWORK = "Network"
    STORAGE = "Storage"
    APPLICATION = "Application"


class CIStatus(str):
    """Configuration item lifecycle statuses."""
    ACTIVE = "Active"
    MAINTENANCE = "Maintenance"
    INACTIVE = "Inactive"
    DECOMMISSIONED = "Decommissioned"


class TicketStatus(str):
    """Ticket lifecycle statuses."""
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class Priority(str):
    """Ticket priority levels."""
    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class RelationshipType(str):
    """Directed CI relationship types."""
    DEPENDS_ON = "depends_on"
    CONNECTS_TO = "connects_to"
    HOSTED_ON = "hosted_on"
    RUNS_ON = "runs_on"


# ========== Status groupings ==========

CLOSED_TICKET_STATUSES = [TicketStatus.RESOLVED, TicketStatus.CLOSED]
