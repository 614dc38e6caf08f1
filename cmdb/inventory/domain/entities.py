"""
Inventory Domain Entities
=========================

Pure Python domain entities for configuration items and their
relationships.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from cmdb.config import CIStatus, RelationshipType


@dataclass
class ConfigurationItem:
    """
    A tracked infrastructure entity (server, VM, database, network device,
    storage, ...).

    The store owns identity and timestamps; instances are built from rows
    when domain logic (topology, detail panels) needs plain objects.
    """

    id: str
    name: str
    type: str
    status: str
    location: str
    environment: str

    hostname: Optional[str] = None
    ip_address: Optional[str] = None
    business_service: Optional[str] = None
    owner: Optional[str] = None
    operating_system: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == CIStatus.ACTIVE

    @classmethod
    def from_model(cls, model: Any) -> "ConfigurationItem":
        """Build from an ORM row (or any object with the same attributes)."""
        return cls(
            id=str(model.id),
            name=model.name,
            type=model.type,
            status=model.status,
            location=model.location,
            environment=model.environment,
            hostname=model.hostname,
            ip_address=model.ip_address,
            business_service=model.business_service,
            owner=model.owner,
            operating_system=model.operating_system,
            metadata=model.ci_metadata,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )


@dataclass
class CIRelationship:
    """Directed edge between two configuration items."""

    source_id: str
    target_id: str
    relationship_type: str = RelationshipType.DEPENDS_ON
    id: Optional[str] = None
    created_at: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self):
        if not self.relationship_type:
            raise ValueError("relationship_type must not be empty")

    @classmethod
    def from_model(cls, model: Any) -> "CIRelationship":
        return cls(
            id=str(model.id),
            source_id=str(model.source_id),
            target_id=str(model.target_id),
            relationship_type=model.relationship_type,
            created_at=model.created_at,
        )
