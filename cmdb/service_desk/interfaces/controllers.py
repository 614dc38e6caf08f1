"""
Service Desk Controllers (API Routes)
=====================================

FastAPI routes for tickets, SLA metrics and the dashboard.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.config import settings
from cmdb.core import ResourceNotFoundException
from cmdb.infrastructure.database import commit, get_session, get_session_context
from cmdb.inventory.application import CIResponse
from cmdb.inventory.infrastructure import SQLAlchemyConfigurationItemRepository
from cmdb.service_desk.application import (
    DashboardResponse,
    DashboardService,
    SLAMetricCreateDTO,
    SLAMetricResponse,
    TicketCreateDTO,
    TicketFilters,
    TicketResponse,
    TicketUpdateDTO,
)
from cmdb.service_desk.infrastructure import (
    SQLAlchemySLAMetricRepository,
    SQLAlchemyTicketRepository,
)
from cmdb.shared.api.responses import (
    DataEnvelope,
    ERROR_RESPONSES,
    NOT_FOUND_RESPONSE,
    translate_store_errors,
)
from cmdb.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["Service Desk"])


# ========== Dependencies ==========

def get_ticket_repository(
    session: AsyncSession = Depends(get_session)
) -> SQLAlchemyTicketRepository:
    return SQLAlchemyTicketRepository(session)


def get_sla_metric_repository(
    session: AsyncSession = Depends(get_session)
) -> SQLAlchemySLAMetricRepository:
    return SQLAlchemySLAMetricRepository(session)


def get_dashboard_service() -> DashboardService:
    return DashboardService(
        session_factory=get_session_context,
        ci_repository_factory=SQLAlchemyConfigurationItemRepository,
        ticket_repository_factory=SQLAlchemyTicketRepository,
        sla_repository_factory=SQLAlchemySLAMetricRepository,
        recent_limit=settings.dashboard_recent_limit,
    )


def _tickets(rows) -> List[TicketResponse]:
    return [TicketResponse.model_validate(row) for row in rows]


# ========== Tickets ==========

@router.get(
    "/tickets",
    response_model=DataEnvelope[List[TicketResponse]],
    summary="List tickets",
    description="""
    List tickets, newest first. Filters combine with AND.

    **Filters**:
    - status: Open, In Progress, Resolved, Closed
    - priority: Low, Medium, High, Critical
    - ciId: tickets raised against one configuration item
    """,
    tags=["Tickets"],
    responses=ERROR_RESPONSES,
)
async def list_tickets(
    ticket_status: Optional[str] = Query(None, alias="status", description="Filter by ticket status"),
    priority: Optional[str] = Query(None, description="Filter by priority"),
    ci_id: Optional[str] = Query(None, alias="ciId", description="Filter by configuration item"),
    repo: SQLAlchemyTicketRepository = Depends(get_ticket_repository)
):
    # Empty query values (`?status=`) mean the filter is absent
    filters = TicketFilters(
        status=ticket_status or None,
        priority=priority or None,
        ci_id=ci_id or None,
    )
    with translate_store_errors("Failed to fetch tickets"):
        tickets = await repo.list(filters)
    return DataEnvelope(data=_tickets(tickets))


@router.get(
    "/tickets/{ticket_id}",
    response_model=DataEnvelope[TicketResponse],
    summary="Get a ticket",
    tags=["Tickets"],
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
)
async def get_ticket(
    ticket_id: str,
    repo: SQLAlchemyTicketRepository = Depends(get_ticket_repository)
):
    with translate_store_errors("Failed to fetch ticket", ticket_id=ticket_id):
        ticket = await repo.get_by_id(ticket_id)
    if ticket is None:
        raise ResourceNotFoundException("Ticket", ticket_id)
    return DataEnvelope(data=TicketResponse.model_validate(ticket))


@router.post(
    "/tickets",
    response_model=DataEnvelope[TicketResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Open a ticket",
    tags=["Tickets"],
    responses=ERROR_RESPONSES,
)
async def create_ticket(
    payload: TicketCreateDTO,
    session: AsyncSession = Depends(get_session),
    repo: SQLAlchemyTicketRepository = Depends(get_ticket_repository)
):
    with translate_store_errors("Failed to create ticket"):
        ticket = await repo.create(payload.model_dump())
        await commit(session)

    logger.info(
        "Ticket created",
        extra={"ticket_id": str(ticket.id), "priority": ticket.priority},
    )
    return DataEnvelope(data=TicketResponse.model_validate(ticket))


@router.put(
    "/tickets/{ticket_id}",
    response_model=DataEnvelope[TicketResponse],
    summary="Update a ticket",
    description="Partial update: only the fields present in the body change.",
    tags=["Tickets"],
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
)
async def update_ticket(
    ticket_id: str,
    payload: TicketUpdateDTO,
    session: AsyncSession = Depends(get_session),
    repo: SQLAlchemyTicketRepository = Depends(get_ticket_repository)
):
    with translate_store_errors("Failed to update ticket", ticket_id=ticket_id):
        ticket = await repo.update(ticket_id, payload.model_dump(exclude_unset=True))
        if ticket is not None:
            await commit(session)

    if ticket is None:
        raise ResourceNotFoundException("Ticket", ticket_id)
    return DataEnvelope(data=TicketResponse.model_validate(ticket))


@router.get(
    "/cis/{ci_id}/tickets",
    response_model=DataEnvelope[List[TicketResponse]],
    summary="List tickets raised against a CI",
    tags=["Tickets"],
    responses=ERROR_RESPONSES,
)
async def list_tickets_for_ci(
    ci_id: str,
    repo: SQLAlchemyTicketRepository = Depends(get_ticket_repository)
):
    with translate_store_errors("Failed to fetch tickets for CI", ci_id=ci_id):
        tickets = await repo.list(TicketFilters(ci_id=ci_id))
    return DataEnvelope(data=_tickets(tickets))


# ========== SLA Metrics ==========

@router.get(
    "/sla-metrics",
    response_model=DataEnvelope[List[SLAMetricResponse]],
    summary="List SLA metrics",
    tags=["SLA Metrics"],
    responses=ERROR_RESPONSES,
)
async def list_sla_metrics(
    repo: SQLAlchemySLAMetricRepository = Depends(get_sla_metric_repository)
):
    with translate_store_errors("Failed to fetch SLA metrics"):
        metrics = await repo.list()
    return DataEnvelope(data=[SLAMetricResponse.model_validate(m) for m in metrics])


@router.post(
    "/sla-metrics",
    response_model=DataEnvelope[SLAMetricResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Record an SLA metric",
    tags=["SLA Metrics"],
    responses=ERROR_RESPONSES,
)
async def create_sla_metric(
    payload: SLAMetricCreateDTO,
    session: AsyncSession = Depends(get_session),
    repo: SQLAlchemySLAMetricRepository = Depends(get_sla_metric_repository)
):
    with translate_store_errors("Failed to create SLA metric"):
        metric = await repo.create(payload.model_dump())
        await commit(session)

    if metric.breached:
        logger.warning(
            "SLA metric recorded as breached",
            extra={"metric_name": metric.metric_name, "ci_id": str(metric.ci_id)},
        )
    return DataEnvelope(data=SLAMetricResponse.model_validate(metric))


# ========== Dashboard ==========

@router.get(
    "/dashboard",
    response_model=DataEnvelope[DashboardResponse],
    summary="Dashboard summary",
    description="""
    Counts and recent activity across CIs, tickets and SLA metrics.

    Open tickets are those not Resolved or Closed. Recent lists hold the
    most recently updated items, newest first.
    """,
    tags=["Dashboard"],
    responses=ERROR_RESPONSES,
)
async def get_dashboard(
    service: DashboardService = Depends(get_dashboard_service)
):
    with translate_store_errors("Failed to fetch dashboard data"):
        summary = await service.get_summary()

    return DataEnvelope(data=DashboardResponse(
        total_cis=summary.total_cis,
        total_tickets=summary.total_tickets,
        open_tickets=summary.open_tickets,
        breached_slas=summary.breached_slas,
        tickets_by_status=summary.tickets_by_status,
        tickets_by_priority=summary.tickets_by_priority,
        recent_tickets=_tickets(summary.recent_tickets),
        recent_cis=[CIResponse.model_validate(ci) for ci in summary.recent_cis],
    ))


# Export router for inclusion in main app
service_desk_router = router
