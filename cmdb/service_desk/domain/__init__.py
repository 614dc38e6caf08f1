"""
Service Desk Domain Layer
=========================

Contains:
- Entities: Ticket, SLAMetric
- Dashboard aggregation: DashboardSummary, summarize
"""

from cmdb.service_desk.domain.entities import Ticket, SLAMetric
from cmdb.service_desk.domain.dashboard import (
    DashboardSummary,
    most_recently_updated,
    summarize,
)

__all__ = [
    "Ticket",
    "SLAMetric",
    "DashboardSummary",
    "most_recently_updated",
    "summarize",
]
