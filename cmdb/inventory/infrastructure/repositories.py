"""
Inventory Infrastructure Repositories
=====================================

Concrete implementations of the inventory repository interfaces using
SQLAlchemy. Every method runs exactly one statement; driver errors are
re-raised as RepositoryException.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.infrastructure.database import repository_errors, to_uuid
from cmdb.inventory.application import IConfigurationItemRepository, IRelationshipRepository
from cmdb.inventory.infrastructure.models import ConfigurationItemModel, CIRelationshipModel

# DTO field name -> ORM attribute name
_CI_ATTRIBUTE_NAMES = {"metadata": "ci_metadata"}


def _ci_values(data: dict) -> dict:
    return {_CI_ATTRIBUTE_NAMES.get(key, key): value for key, value in data.items()}


class SQLAlchemyConfigurationItemRepository(IConfigurationItemRepository):
    """
    SQLAlchemy implementation of configuration item repository.

    Handles persistence of configuration items using async SQLAlchemy.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_all(self) -> List[Any]:
        stmt = select(ConfigurationItemModel)
        with repository_errors("list configuration items"):
            result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, ci_id: str) -> Optional[Any]:
        ci_uuid = to_uuid(ci_id)
        if ci_uuid is None:
            return None

        stmt = select(ConfigurationItemModel).where(ConfigurationItemModel.id == ci_uuid)
        with repository_errors("get configuration item"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_many(self, ci_ids: Sequence[str]) -> List[Any]:
        uuids = [u for u in (to_uuid(ci_id) for ci_id in ci_ids) if u is not None]
        if not uuids:
            return []

        stmt = select(ConfigurationItemModel).where(ConfigurationItemModel.id.in_(uuids))
        with repository_errors("get configuration items"):
            result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, data: dict) -> Any:
        """Insert a CI. created_at and updated_at share one timestamp."""
        now = datetime.now(timezone.utc)
        model = ConfigurationItemModel(**_ci_values(data), created_at=now, updated_at=now)

        with repository_errors("insert configuration item"):
            self._session.add(model)
            await self._session.flush()

        return model

    async def update(self, ci_id: str, changes: dict) -> Optional[Any]:
        """Merge ``changes`` into the row and set updated_at to now."""
        ci_uuid = to_uuid(ci_id)
        if ci_uuid is None:
            return None

        values = {
            getattr(ConfigurationItemModel, name): value
            for name, value in _ci_values(changes).items()
        }
        values[ConfigurationItemModel.updated_at] = datetime.now(timezone.utc)

        stmt = (
            update(ConfigurationItemModel)
            .where(ConfigurationItemModel.id == ci_uuid)
            .values(values)
            .returning(ConfigurationItemModel)
            .execution_options(populate_existing=True)
        )
        with repository_errors("update configuration item"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete(self, ci_id: str) -> bool:
        ci_uuid = to_uuid(ci_id)
        if ci_uuid is None:
            return False

        stmt = delete(ConfigurationItemModel).where(ConfigurationItemModel.id == ci_uuid)
        with repository_errors("delete configuration item"):
            result = await self._session.execute(stmt)
        return result.rowcount > 0


class SQLAlchemyRelationshipRepository(IRelationshipRepository):
    """SQLAlchemy implementation for CI relationships."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def list_for_source(self, ci_id: str) -> List[Any]:
        ci_uuid = to_uuid(ci_id)
        if ci_uuid is None:
            return []

        stmt = (
            select(CIRelationshipModel)
            .where(CIRelationshipModel.source_id == ci_uuid)
            .order_by(CIRelationshipModel.created_at.asc())
        )
        with repository_errors("list CI relationships"):
            result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, data: dict) -> Any:
        model = CIRelationshipModel(
            source_id=to_uuid(data["source_id"]),
            target_id=to_uuid(data["target_id"]),
            relationship_type=data["relationship_type"],
            created_at=datetime.now(timezone.utc),
        )

        with repository_errors("insert CI relationship"):
            self._session.add(model)
            await self._session.flush()

        return model
