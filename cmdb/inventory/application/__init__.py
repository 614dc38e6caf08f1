"""
Inventory Application Layer
===========================

Contains:
- Services: Orchestrate business logic and coordinate with repositories
- DTOs: Data transfer objects for API serialization

This layer depends on the domain layer and repository interfaces,
but not on concrete infrastructure implementations.
"""

from cmdb.inventory.application.dto import (
    CICreateDTO,
    CIUpdateDTO,
    CIResponse,
    RelationshipCreateDTO,
    RelationshipResponse,
    TopologyNodeResponse,
    TopologyLinkResponse,
    TopologyResponse,
)
from cmdb.inventory.application.services import (
    TopologyService,
    IConfigurationItemRepository,
    IRelationshipRepository,
)

__all__ = [
    # DTOs
    "CICreateDTO",
    "CIUpdateDTO",
    "CIResponse",
    "RelationshipCreateDTO",
    "RelationshipResponse",
    "TopologyNodeResponse",
    "TopologyLinkResponse",
    "TopologyResponse",
    # Services
    "TopologyService",
    # Repository Interfaces
    "IConfigurationItemRepository",
    "IRelationshipRepository",
]
