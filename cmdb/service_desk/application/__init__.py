"""
Service Desk Application Layer
==============================

Contains:
- DTOs: Request/response models
- TicketFilters: explicit ticket query filters
- Repository interfaces and DashboardService
"""

from cmdb.service_desk.application.dto import (
    TicketCreateDTO,
    TicketUpdateDTO,
    TicketResponse,
    SLAMetricCreateDTO,
    SLAMetricResponse,
    DashboardResponse,
)
from cmdb.service_desk.application.services import (
    TicketFilters,
    ITicketRepository,
    ISLAMetricRepository,
    DashboardService,
)

__all__ = [
    "TicketCreateDTO",
    "TicketUpdateDTO",
    "TicketResponse",
    "SLAMetricCreateDTO",
    "SLAMetricResponse",
    "DashboardResponse",
    "TicketFilters",
    "ITicketRepository",
    "ISLAMetricRepository",
    "DashboardService",
]
