"""
Identity Application Layer
==========================

Repository interface for user accounts.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class IUserRepository(ABC):
    """Interface for user data access."""

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[Any]:
        """Get a user, or None if absent."""

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[Any]:
        """Get a user by unique username, or None."""

    @abstractmethod
    async def create(self, data: dict) -> Any:
        """Insert a user. ``data["password"]`` is hashed before storage."""


__all__ = ["IUserRepository"]
