"""
Service Desk Infrastructure Layer
=================================

- Models: SQLAlchemy ORM models
- Repositories: Data access layer
"""

from cmdb.service_desk.infrastructure.models import TicketModel, SLAMetricModel
from cmdb.service_desk.infrastructure.repositories import (
    SQLAlchemyTicketRepository,
    SQLAlchemySLAMetricRepository,
)

__all__ = [
    "TicketModel",
    "SLAMetricModel",
    "SQLAlchemyTicketRepository",
    "SQLAlchemySLAMetricRepository",
]
