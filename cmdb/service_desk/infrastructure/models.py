"""
Service Desk Infrastructure Models
==================================

SQLAlchemy ORM models for tickets and SLA metrics.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from cmdb.config import Priority, TicketStatus
from cmdb.infrastructure.database import Base
from cmdb.inventory.infrastructure.models import utcnow


class TicketModel(Base):
    """
    Database model for Ticket entity.

    Maps to the 'tickets' table. Deleting the referenced CI leaves the
    ticket in place with ci_id cleared.
    """
    __tablename__ = "tickets"

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    # Ticket content
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Workflow
    status: Mapped[str] = mapped_column(String(50), nullable=False, default=TicketStatus.OPEN, index=True)
    priority: Mapped[str] = mapped_column(String(50), nullable=False, default=Priority.MEDIUM, index=True)
    assigned_to: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    ci_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid,
        ForeignKey("configuration_items.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class SLAMetricModel(Base):
    """
    Database model for an SLA measurement.

    Maps to the 'sla_metrics' table.
    """
    __tablename__ = "sla_metrics"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    ci_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid,
        ForeignKey("configuration_items.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    ticket_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid,
        ForeignKey("tickets.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Measurement
    metric_name: Mapped[str] = mapped_column(String(255), nullable=False)
    target_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    actual_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    breached: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    measured_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
