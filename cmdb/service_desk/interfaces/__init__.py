"""
Service Desk Interfaces Layer
=============================

HTTP routes for tickets, SLA metrics and the dashboard.
"""

from cmdb.service_desk.interfaces.controllers import service_desk_router

__all__ = ["service_desk_router"]
