"""
Inventory Infrastructure Models
===============================

SQLAlchemy ORM models for configuration items and their relationships.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from sqlalchemy import String, DateTime, JSON, Uuid, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from cmdb.infrastructure.database import Base
from cmdb.config import CIStatus, RelationshipType


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConfigurationItemModel(Base):
    """
    Database model for ConfigurationItem entity.

    Maps to the 'configuration_items' table.
    """
    __tablename__ = "configuration_items"

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # Identity and classification
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, default=CIStatus.ACTIVE)

    # Placement
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    environment: Mapped[str] = mapped_column(String(50), nullable=False)
    hostname: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(45), nullable=True)

    # Ownership
    business_service: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    owner: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    operating_system: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # ``metadata`` is reserved on declarative classes
    ci_metadata: Mapped[Optional[Dict[str, Any]]] = mapped_column("metadata", JSON, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class CIRelationshipModel(Base):
    """
    Database model for a directed CI relationship.

    Maps to the 'ci_relationships' table. Both ends cascade on CI delete.
    """
    __tablename__ = "ci_relationships"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    source_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("configuration_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    target_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("configuration_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    relationship_type: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=RelationshipType.DEPENDS_ON
    )

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
