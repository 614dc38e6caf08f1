"""
Service Desk Module
===================

Tickets raised against configuration items, recorded SLA measurements and
the dashboard that summarises both alongside the inventory.

Layers:
- domain: Ticket and SLAMetric entities, dashboard aggregation
- application: DTOs, repository interfaces, DashboardService
- infrastructure: SQLAlchemy models and repositories
- interfaces: FastAPI routes
"""

__version__ = "1.0.0"
