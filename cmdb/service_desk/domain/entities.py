"""
Service Desk Domain Entities
============================

Pure Python domain entities for tickets and SLA measurements.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from cmdb.config import CLOSED_TICKET_STATUSES, Priority, TicketStatus


def _optional_id(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


@dataclass
class Ticket:
    """
    A support ticket, optionally raised against a configuration item.

    Tickets are created and partially updated but never deleted.
    """

    id: str
    title: str
    status: str = TicketStatus.OPEN
    priority: str = Priority.MEDIUM
    description: Optional[str] = None
    ci_id: Optional[str] = None
    assigned_to: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        """Anything not yet Resolved or Closed counts as open."""
        return self.status not in CLOSED_TICKET_STATUSES

    @classmethod
    def from_model(cls, model: Any) -> "Ticket":
        return cls(
            id=str(model.id),
            title=model.title,
            status=model.status,
            priority=model.priority,
            description=model.description,
            ci_id=_optional_id(model.ci_id),
            assigned_to=model.assigned_to,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


@dataclass
class SLAMetric:
    """A single measurement against an SLA target."""

    id: str
    metric_name: str
    breached: bool = False
    ci_id: Optional[str] = None
    ticket_id: Optional[str] = None
    target_value: Optional[float] = None
    actual_value: Optional[float] = None

    measured_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, model: Any) -> "SLAMetric":
        return cls(
            id=str(model.id),
            metric_name=model.metric_name,
            breached=bool(model.breached),
            ci_id=_optional_id(model.ci_id),
            ticket_id=_optional_id(model.ticket_id),
            target_value=model.target_value,
            actual_value=model.actual_value,
            measured_at=model.measured_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
