"""
Inventory Application Services
==============================

Repository interfaces for the inventory module plus the topology service
that turns stored CIs and relationships into a layout.

Following SOLID principles:
- Single Responsibility: Each service has one clear purpose
- Dependency Inversion: Depend on abstractions (repositories), not concrete implementations
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Tuple

from cmdb.inventory.domain import (
    ConfigurationItem,
    CIRelationship,
    TopologyLayout,
    calculate_layout,
)
from cmdb.inventory.domain.topology import DEFAULT_CENTER, DEFAULT_RADIUS


# ========== Repository Interfaces (Dependency Inversion) ==========

class IConfigurationItemRepository(ABC):
    """Interface for configuration item data access."""

    @abstractmethod
    async def get_all(self) -> List[Any]:
        """Get every configuration item in store order."""

    @abstractmethod
    async def get_by_id(self, ci_id: str) -> Optional[Any]:
        """Get a configuration item, or None if absent."""

    @abstractmethod
    async def get_many(self, ci_ids: Sequence[str]) -> List[Any]:
        """Get the configuration items among ``ci_ids`` that exist."""

    @abstractmethod
    async def create(self, data: dict) -> Any:
        """Insert a configuration item and return the stored row."""

    @abstractmethod
    async def update(self, ci_id: str, changes: dict) -> Optional[Any]:
        """Apply ``changes``, bump updated_at, return the row or None."""

    @abstractmethod
    async def delete(self, ci_id: str) -> bool:
        """Delete a configuration item. True if a row was removed."""


class IRelationshipRepository(ABC):
    """Interface for CI relationship data access."""

    @abstractmethod
    async def list_for_source(self, ci_id: str) -> List[Any]:
        """Relationships whose source is ``ci_id``."""

    @abstractmethod
    async def create(self, data: dict) -> Any:
        """Record a relationship."""


# ========== Application Services ==========

class TopologyService:
    """
    Builds the topology of a CI from its outgoing relationships.

    Reads happen in sequence on one session: the central CI, its
    relationships, then the related CIs in a single query.
    """

    def __init__(
        self,
        ci_repository: IConfigurationItemRepository,
        relationship_repository: IRelationshipRepository,
        center: Tuple[float, float] = DEFAULT_CENTER,
        radius: float = DEFAULT_RADIUS,
    ):
        self._ci_repo = ci_repository
        self._relationship_repo = relationship_repository
        self._center = center
        self._radius = radius

    async def build_layout(self, ci_id: str) -> Optional[TopologyLayout]:
        """
        Compute the layout for ``ci_id``.

        Returns:
            TopologyLayout, or None if the central CI does not exist
        """
        central_row = await self._ci_repo.get_by_id(ci_id)
        if central_row is None:
            return None

        relationships = [
            CIRelationship.from_model(row)
            for row in await self._relationship_repo.list_for_source(ci_id)
        ]

        related_rows = []
        if relationships:
            related_rows = await self._ci_repo.get_many([rel.target_id for rel in relationships])
        by_id = {str(row.id): ConfigurationItem.from_model(row) for row in related_rows}

        # Neighbours follow relationship order
        related = [by_id[rel.target_id] for rel in relationships if rel.target_id in by_id]

        return calculate_layout(
            ConfigurationItem.from_model(central_row),
            related,
            relationships,
            center=self._center,
            radius=self._radius,
        )
