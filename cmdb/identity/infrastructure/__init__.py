"""
Identity Infrastructure Layer
=============================
"""

from cmdb.identity.infrastructure.models import UserModel
from cmdb.identity.infrastructure.repositories import SQLAlchemyUserRepository

__all__ = ["UserModel", "SQLAlchemyUserRepository"]
