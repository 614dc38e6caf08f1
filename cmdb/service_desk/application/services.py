"""
Service Desk Application Services
=================================

Repository interfaces, the ticket filter struct and the dashboard service.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncContextManager, Callable, List, Optional

from cmdb.inventory.application import IConfigurationItemRepository
from cmdb.inventory.domain import ConfigurationItem
from cmdb.service_desk.domain import DashboardSummary, SLAMetric, Ticket, summarize
from cmdb.service_desk.domain.dashboard import DEFAULT_RECENT_LIMIT
from cmdb.shared.infrastructure.logging import get_logger, log_latency

logger = get_logger(__name__)


@dataclass(frozen=True)
class TicketFilters:
    """Optional equality filters; the ones that are set combine with AND."""
    status: Optional[str] = None
    priority: Optional[str] = None
    ci_id: Optional[str] = None


# ========== Repository Interfaces (Dependency Inversion) ==========

class ITicketRepository(ABC):
    """Interface for ticket data access."""

    @abstractmethod
    async def list(self, filters: TicketFilters) -> List[Any]:
        """Tickets matching every set field of ``filters``."""

    @abstractmethod
    async def get_by_id(self, ticket_id: str) -> Optional[Any]:
        """Get a ticket, or None if absent."""

    @abstractmethod
    async def create(self, data: dict) -> Any:
        """Insert a ticket."""

    @abstractmethod
    async def update(self, ticket_id: str, changes: dict) -> Optional[Any]:
        """Apply ``changes``, bump updated_at, return the row or None."""


class ISLAMetricRepository(ABC):
    """Interface for SLA metric data access."""

    @abstractmethod
    async def list(self) -> List[Any]:
        """Every recorded metric."""

    @abstractmethod
    async def create(self, data: dict) -> Any:
        """Record a metric."""


# ========== Application Services ==========

class DashboardService:
    """
    Reads CIs, tickets and SLA metrics concurrently and summarises them.

    An AsyncSession cannot be shared between concurrent tasks, so each
    read opens its own session from ``session_factory`` and gets its own
    repository. If any read fails the whole summary fails.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncContextManager[Any]],
        ci_repository_factory: Callable[[Any], IConfigurationItemRepository],
        ticket_repository_factory: Callable[[Any], ITicketRepository],
        sla_repository_factory: Callable[[Any], ISLAMetricRepository],
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ):
        self._session_factory = session_factory
        self._ci_repository_factory = ci_repository_factory
        self._ticket_repository_factory = ticket_repository_factory
        self._sla_repository_factory = sla_repository_factory
        self._recent_limit = recent_limit

    async def _load_cis(self) -> List[ConfigurationItem]:
        async with self._session_factory() as session:
            rows = await self._ci_repository_factory(session).get_all()
            return [ConfigurationItem.from_model(row) for row in rows]

    async def _load_tickets(self) -> List[Ticket]:
        async with self._session_factory() as session:
            rows = await self._ticket_repository_factory(session).list(TicketFilters())
            return [Ticket.from_model(row) for row in rows]

    async def _load_metrics(self) -> List[SLAMetric]:
        async with self._session_factory() as session:
            rows = await self._sla_repository_factory(session).list()
            return [SLAMetric.from_model(row) for row in rows]

    async def get_summary(self) -> DashboardSummary:
        with log_latency(logger, "dashboard_reads"):
            cis, tickets, metrics = await asyncio.gather(
                self._load_cis(),
                self._load_tickets(),
                self._load_metrics(),
            )
        return summarize(cis, tickets, metrics, self._recent_limit)
