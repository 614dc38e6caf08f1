import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from cmdb.core import RepositoryException
from cmdb.inventory.infrastructure import (
    SQLAlchemyConfigurationItemRepository,
    SQLAlchemyRelationshipRepository,
)
from cmdb.service_desk.application import TicketFilters
from cmdb.service_desk.infrastructure import (
    SQLAlchemySLAMetricRepository,
    SQLAlchemyTicketRepository,
)

from tests.conftest import WEB_01


async def test_ci_create_sets_equal_timestamps(db_session):
    repo = SQLAlchemyConfigurationItemRepository(db_session)
    ci = await repo.create({**WEB_01, "metadata": {"rack": "R1"}})

    assert isinstance(ci.id, uuid.UUID)
    assert ci.created_at == ci.updated_at
    assert ci.ci_metadata == {"rack": "R1"}


async def test_ci_reads_treat_malformed_ids_as_missing(db_session):
    repo = SQLAlchemyConfigurationItemRepository(db_session)
    assert await repo.get_by_id("not-a-uuid") is None
    assert await repo.update("not-a-uuid", {"status": "Inactive"}) is None
    assert await repo.delete("not-a-uuid") is False
    assert await repo.get_many(["not-a-uuid"]) == []


async def test_ci_update_merges_fields(db_session):
    repo = SQLAlchemyConfigurationItemRepository(db_session)
    ci = await repo.create({**WEB_01, "owner": "Web Team"})
    created_at = ci.created_at

    updated = await repo.update(str(ci.id), {"status": "Maintenance"})
    assert updated.status == "Maintenance"
    assert updated.owner == "Web Team"
    assert updated.name == "WEB-01"
    assert updated.updated_at.replace(tzinfo=None) >= created_at.replace(tzinfo=None)


async def test_ci_delete(db_session):
    repo = SQLAlchemyConfigurationItemRepository(db_session)
    ci = await repo.create(WEB_01)

    assert await repo.delete(str(ci.id)) is True
    assert await repo.delete(str(ci.id)) is False
    assert await repo.get_all() == []


async def test_ci_get_many(db_session):
    repo = SQLAlchemyConfigurationItemRepository(db_session)
    web = await repo.create(WEB_01)
    db = await repo.create({**WEB_01, "name": "DB-01"})
    await repo.create({**WEB_01, "name": "LB-01"})

    found = await repo.get_many([str(web.id), str(db.id), str(uuid.uuid4())])
    assert {ci.name for ci in found} == {"WEB-01", "DB-01"}


async def test_relationships_for_source(db_session):
    cis = SQLAlchemyConfigurationItemRepository(db_session)
    web = await cis.create(WEB_01)
    db = await cis.create({**WEB_01, "name": "DB-01"})

    repo = SQLAlchemyRelationshipRepository(db_session)
    await repo.create({"source_id": str(web.id), "target_id": str(db.id), "relationship_type": "runs_on"})

    outgoing = await repo.list_for_source(str(web.id))
    assert [(rel.target_id, rel.relationship_type) for rel in outgoing] == [(db.id, "runs_on")]
    assert await repo.list_for_source(str(db.id)) == []
    assert await repo.list_for_source("bogus") == []


async def test_ticket_filters(db_session):
    repo = SQLAlchemyTicketRepository(db_session)
    await repo.create({"title": "a", "status": "Open", "priority": "High"})
    await repo.create({"title": "b", "status": "Open", "priority": "Low"})
    await repo.create({"title": "c", "status": "Resolved", "priority": "High"})

    assert len(await repo.list(TicketFilters())) == 3
    matched = await repo.list(TicketFilters(status="Open", priority="High"))
    assert [ticket.title for ticket in matched] == ["a"]
    assert await repo.list(TicketFilters(ci_id="bogus")) == []


async def test_ticket_update_unknown(db_session):
    repo = SQLAlchemyTicketRepository(db_session)
    assert await repo.update(str(uuid.uuid4()), {"status": "Closed"}) is None


async def test_sla_metric_defaults_measured_at(db_session):
    repo = SQLAlchemySLAMetricRepository(db_session)
    metric = await repo.create({"metric_name": "availability", "breached": True})

    assert metric.breached is True
    assert metric.measured_at == metric.created_at
    assert [m.id for m in await repo.list()] == [metric.id]


async def test_driver_errors_become_repository_exceptions():
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))
    repo = SQLAlchemyConfigurationItemRepository(session)

    with pytest.raises(RepositoryException) as exc_info:
        await repo.get_all()

    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert exc_info.value.details == {"operation": "list configuration items"}
