"""
Inventory Infrastructure Layer
==============================

Infrastructure implementations for the inventory module:
- Models: SQLAlchemy ORM models
- Repositories: Data access layer
"""

from cmdb.inventory.infrastructure.models import ConfigurationItemModel, CIRelationshipModel
from cmdb.inventory.infrastructure.repositories import (
    SQLAlchemyConfigurationItemRepository,
    SQLAlchemyRelationshipRepository,
)

__all__ = [
    "ConfigurationItemModel",
    "CIRelationshipModel",
    "SQLAlchemyConfigurationItemRepository",
    "SQLAlchemyRelationshipRepository",
]
