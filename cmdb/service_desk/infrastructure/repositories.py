"""
Service Desk Infrastructure Repositories
========================================

SQLAlchemy repositories for tickets and SLA metrics. One statement per
operation; driver errors surface as RepositoryException.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.infrastructure.database import repository_errors, to_uuid
from cmdb.service_desk.application import (
    ISLAMetricRepository,
    ITicketRepository,
    TicketFilters,
)
from cmdb.service_desk.infrastructure.models import SLAMetricModel, TicketModel

_REFERENCE_FIELDS = ("ci_id", "ticket_id")


def _with_uuid_references(data: dict) -> dict:
    values = dict(data)
    for name in _REFERENCE_FIELDS:
        if values.get(name) is not None:
            values[name] = to_uuid(values[name])
    return values


class SQLAlchemyTicketRepository(ITicketRepository):
    """
    SQLAlchemy implementation of ticket repository.

    Handles persistence of tickets using async SQLAlchemy.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def list(self, filters: TicketFilters) -> List[Any]:
        """List tickets, newest first, filtered by every set field."""
        stmt = select(TicketModel)

        # Apply filters
        conditions = []
        if filters.status is not None:
            conditions.append(TicketModel.status == filters.status)

        if filters.priority is not None:
            conditions.append(TicketModel.priority == filters.priority)

        if filters.ci_id is not None:
            ci_uuid = to_uuid(filters.ci_id)
            if ci_uuid is None:
                # Malformed id matches no CI
                return []
            conditions.append(TicketModel.ci_id == ci_uuid)

        if conditions:
            stmt = stmt.where(*conditions)
        stmt = stmt.order_by(TicketModel.created_at.desc())

        with repository_errors("list tickets"):
            result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, ticket_id: str) -> Optional[Any]:
        ticket_uuid = to_uuid(ticket_id)
        if ticket_uuid is None:
            return None

        stmt = select(TicketModel).where(TicketModel.id == ticket_uuid)
        with repository_errors("get ticket"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, data: dict) -> Any:
        now = datetime.now(timezone.utc)
        model = TicketModel(**_with_uuid_references(data), created_at=now, updated_at=now)

        with repository_errors("insert ticket"):
            self._session.add(model)
            await self._session.flush()

        return model

    async def update(self, ticket_id: str, changes: dict) -> Optional[Any]:
        ticket_uuid = to_uuid(ticket_id)
        if ticket_uuid is None:
            return None

        values = {
            getattr(TicketModel, name): value
            for name, value in _with_uuid_references(changes).items()
        }
        values[TicketModel.updated_at] = datetime.now(timezone.utc)

        stmt = (
            update(TicketModel)
            .where(TicketModel.id == ticket_uuid)
            .values(values)
            .returning(TicketModel)
            .execution_options(populate_existing=True)
        )
        with repository_errors("update ticket"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()


class SQLAlchemySLAMetricRepository(ISLAMetricRepository):
    """SQLAlchemy implementation for SLA metrics."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def list(self) -> List[Any]:
        stmt = select(SLAMetricModel).order_by(SLAMetricModel.measured_at.desc())
        with repository_errors("list SLA metrics"):
            result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, data: dict) -> Any:
        now = datetime.now(timezone.utc)
        values = _with_uuid_references(data)
        if values.get("measured_at") is None:
            values["measured_at"] = now

        model = SLAMetricModel(**values, created_at=now, updated_at=now)

        with repository_errors("insert SLA metric"):
            self._session.add(model)
            await self._session.flush()

        return model
