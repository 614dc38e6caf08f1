from datetime import datetime, timedelta, timezone

from cmdb.core import RepositoryException
from cmdb.infrastructure.database import get_session_context
from cmdb.inventory.infrastructure import SQLAlchemyConfigurationItemRepository
from cmdb.main import app
from cmdb.service_desk.application import DashboardService
from cmdb.service_desk.infrastructure import SQLAlchemyTicketRepository
from cmdb.service_desk.interfaces.controllers import get_dashboard_service
from cmdb.service_desk.domain import SLAMetric, Ticket, most_recently_updated, summarize

from tests.conftest import make_ci


def test_dashboard_empty(client):
    response = client.get("/api/dashboard")
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "data": {
            "totalCIs": 0,
            "totalTickets": 0,
            "openTickets": 0,
            "breachedSLAs": 0,
            "ticketsByStatus": {},
            "ticketsByPriority": {},
            "recentTickets": [],
            "recentCIs": [],
        },
    }


def test_dashboard_counts(client, create_ci):
    create_ci()
    create_ci(name="DB-01")
    for status in ("Open", "In Progress", "Resolved", "Closed", "Open"):
        client.post("/api/tickets", json={"title": status, "status": status, "priority": "High"})
    client.post("/api/sla-metrics", json={"metricName": "availability", "breached": True})
    client.post("/api/sla-metrics", json={"metricName": "availability", "breached": "false"})

    data = client.get("/api/dashboard").json()["data"]
    assert data["totalCIs"] == 2
    assert data["totalTickets"] == 5
    assert data["openTickets"] == 3
    assert data["breachedSLAs"] == 1
    assert data["ticketsByStatus"] == {"Open": 2, "In Progress": 1, "Resolved": 1, "Closed": 1}
    assert data["ticketsByPriority"] == {"High": 5}


def test_dashboard_recent_items_are_newest_first(client, create_ci):
    created = [create_ci(name=f"SRV-{index:02d}") for index in range(12)]
    client.put(f"/api/cis/{created[0]['id']}", json={"owner": "infra"})

    recent = client.get("/api/dashboard").json()["data"]["recentCIs"]
    assert len(recent) == 10
    assert recent[0]["name"] == "SRV-00"
    assert recent[1]["name"] == "SRV-11"


def test_dashboard_fails_as_a_whole_when_one_read_fails(client, create_ci):
    create_ci()

    class FailingMetricRepository:
        def __init__(self, session):
            pass

        async def list(self):
            raise RepositoryException("Store failure during list SLA metrics: connection reset")

    app.dependency_overrides[get_dashboard_service] = lambda: DashboardService(
        session_factory=get_session_context,
        ci_repository_factory=SQLAlchemyConfigurationItemRepository,
        ticket_repository_factory=SQLAlchemyTicketRepository,
        sla_repository_factory=FailingMetricRepository,
    )
    try:
        response = client.get("/api/dashboard")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to fetch dashboard data"}


def _ticket(index, status="Open", updated_at=None):
    return Ticket(
        id=str(index),
        title=f"ticket {index}",
        status=status,
        updated_at=updated_at or datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def test_summarize_open_tickets_excludes_resolved_and_closed():
    tickets = [_ticket(1), _ticket(2, "In Progress"), _ticket(3, "Resolved"), _ticket(4, "Closed")]
    summary = summarize([], tickets, [])
    assert summary.open_tickets == 2
    assert summary.total_tickets - summary.open_tickets == 2


def test_summarize_counts_breached_metrics():
    metrics = [
        SLAMetric(id="1", metric_name="availability", breached=True),
        SLAMetric(id="2", metric_name="availability", breached=False),
        SLAMetric(id="3", metric_name="response_time", breached=True),
    ]
    assert summarize([], [], metrics).breached_slas == 2


def test_most_recently_updated_limits_and_orders():
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    cis = [make_ci(str(index), updated_at=base + timedelta(minutes=index)) for index in range(15)]

    recent = most_recently_updated(cis, limit=10)
    assert [ci.id for ci in recent] == [str(index) for index in range(14, 4, -1)]
