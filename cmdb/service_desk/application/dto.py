"""
Service Desk Application DTOs
=============================

Pydantic models for tickets, SLA metrics and the dashboard.
"""

from datetime import datetime
from typing import Dict, List, Literal, Optional
from uuid import UUID

from pydantic import Field, model_validator

from cmdb.inventory.application import CIResponse
from cmdb.shared.api.responses import CamelModel


# ========== Type Aliases for Literals ==========
TicketStatusStr = Literal["Open", "In Progress", "Resolved", "Closed"]
PriorityStr = Literal["Low", "Medium", "High", "Critical"]


# ========== Request DTOs ==========

class TicketCreateDTO(CamelModel):
    """Payload for opening a ticket."""
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    status: TicketStatusStr = Field(default="Open")
    priority: PriorityStr = Field(default="Medium")
    ci_id: Optional[UUID] = Field(None, description="Affected configuration item")
    assigned_to: Optional[str] = Field(None, max_length=255)


class TicketUpdateDTO(CamelModel):
    """Partial ticket update."""
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[TicketStatusStr] = None
    priority: Optional[PriorityStr] = None
    ci_id: Optional[UUID] = None
    assigned_to: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "TicketUpdateDTO":
        for name in ("title", "status", "priority"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class SLAMetricCreateDTO(CamelModel):
    """
    Payload for recording an SLA measurement.

    ``breached`` also accepts the strings "true" and "false".
    """
    metric_name: str = Field(..., min_length=1, max_length=255, description="availability, response_time, ...")
    ci_id: Optional[UUID] = None
    ticket_id: Optional[UUID] = None
    target_value: Optional[float] = None
    actual_value: Optional[float] = None
    breached: bool = False
    measured_at: Optional[datetime] = None


# ========== Response DTOs ==========

class TicketResponse(CamelModel):
    id: UUID
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    ci_id: Optional[UUID] = None
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class SLAMetricResponse(CamelModel):
    id: UUID
    metric_name: str
    ci_id: Optional[UUID] = None
    ticket_id: Optional[UUID] = None
    target_value: Optional[float] = None
    actual_value: Optional[float] = None
    breached: bool
    measured_at: datetime
    created_at: datetime
    updated_at: datetime


class DashboardResponse(CamelModel):
    total_cis: int = Field(..., alias="totalCIs")
    total_tickets: int
    open_tickets: int
    breached_slas: int = Field(..., alias="breachedSLAs")
    tickets_by_status: Dict[str, int]
    tickets_by_priority: Dict[str, int]
    recent_tickets: List[TicketResponse]
    recent_cis: List[CIResponse] = Field(..., alias="recentCIs")
