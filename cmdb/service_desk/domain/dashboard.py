"""
Dashboard Aggregation
=====================

Turns full listings of CIs, tickets and SLA metrics into the dashboard
summary. Pure computation; the reads happen in DashboardService.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, TypeVar

from cmdb.inventory.domain import ConfigurationItem
from cmdb.service_desk.domain.entities import SLAMetric, Ticket

DEFAULT_RECENT_LIMIT = 10

T = TypeVar("T")


@dataclass
class DashboardSummary:
    total_cis: int
    total_tickets: int
    open_tickets: int
    breached_slas: int
    tickets_by_status: Dict[str, int] = field(default_factory=dict)
    tickets_by_priority: Dict[str, int] = field(default_factory=dict)
    recent_tickets: List[Ticket] = field(default_factory=list)
    recent_cis: List[ConfigurationItem] = field(default_factory=list)


def most_recently_updated(items: Sequence[T], limit: int = DEFAULT_RECENT_LIMIT) -> List[T]:
    """The ``limit`` items with the latest updated_at, newest first."""
    return sorted(items, key=lambda item: item.updated_at, reverse=True)[:limit]


def summarize(
    cis: Sequence[ConfigurationItem],
    tickets: Sequence[Ticket],
    metrics: Sequence[SLAMetric],
    recent_limit: int = DEFAULT_RECENT_LIMIT,
) -> DashboardSummary:
    return DashboardSummary(
        total_cis=len(cis),
        total_tickets=len(tickets),
        open_tickets=sum(1 for ticket in tickets if ticket.is_open),
        breached_slas=sum(1 for metric in metrics if metric.breached),
        tickets_by_status=dict(Counter(ticket.status for ticket in tickets)),
        tickets_by_priority=dict(Counter(ticket.priority for ticket in tickets)),
        recent_tickets=most_recently_updated(tickets, recent_limit),
        recent_cis=most_recently_updated(cis, recent_limit),
    )
