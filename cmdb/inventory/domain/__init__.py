"""
Inventory Domain Layer
======================

Contains:
- Entities: ConfigurationItem, CIRelationship
- Topology: layout computation and view state for the topology map

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from cmdb.inventory.domain.entities import ConfigurationItem, CIRelationship
from cmdb.inventory.domain.topology import (
    TopologyNode,
    TopologyLink,
    TopologyLayout,
    TopologyView,
    calculate_layout,
)

__all__ = [
    # Entities
    "ConfigurationItem",
    "CIRelationship",
    # Topology
    "TopologyNode",
    "TopologyLink",
    "TopologyLayout",
    "TopologyView",
    "calculate_layout",
]
