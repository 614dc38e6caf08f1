"""
Identity Infrastructure Repositories
====================================
"""

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.identity.application import IUserRepository
from cmdb.identity.domain import hash_password
from cmdb.identity.infrastructure.models import UserModel
from cmdb.infrastructure.database import repository_errors, to_uuid


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation of the user repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: str) -> Optional[Any]:
        user_uuid = to_uuid(user_id)
        if user_uuid is None:
            return None

        stmt = select(UserModel).where(UserModel.id == user_uuid)
        with repository_errors("get user"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[Any]:
        stmt = select(UserModel).where(UserModel.username == username)
        with repository_errors("get user by username"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, data: dict) -> Any:
        model = UserModel(
            username=data["username"],
            password_hash=hash_password(data["password"]),
        )

        with repository_errors("insert user"):
            self._session.add(model)
            await self._session.flush()

        return model
