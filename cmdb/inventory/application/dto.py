"""
Inventory Application DTOs
==========================

Pydantic models for the inventory API. Requests and responses use
camelCase keys (``ipAddress``, ``businessService``); Python code uses
snake_case.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import AliasChoices, Field, model_validator

from cmdb.config import RelationshipType
from cmdb.shared.api.responses import CamelModel


# ========== Type Aliases for Literals ==========
CIStatusStr = Literal["Active", "Maintenance", "Inactive", "Decommissioned"]


# ========== Request DTOs ==========

class CICreateDTO(CamelModel):
    """Payload for creating a configuration item."""
    name: str = Field(..., min_length=1, max_length=255, description="Unique display name")
    type: str = Field(..., min_length=1, max_length=50, description="Server, VM, Database, Network, Storage, ...")
    status: CIStatusStr = Field(..., description="Lifecycle status")
    location: str = Field(..., min_length=1, max_length=255, description="Site or data centre")
    environment: str = Field(..., min_length=1, max_length=50, description="Production, Staging, ...")
    hostname: Optional[str] = Field(None, max_length=255)
    ip_address: Optional[str] = Field(None, max_length=45)
    business_service: Optional[str] = Field(None, max_length=255)
    owner: Optional[str] = Field(None, max_length=255)
    operating_system: Optional[str] = Field(None, max_length=255)
    metadata: Optional[Dict[str, Any]] = Field(None, description="Free-form attributes")


_REQUIRED_CI_FIELDS = ("name", "type", "status", "location", "environment")


class CIUpdateDTO(CamelModel):
    """Partial update. Only fields present in the payload are applied."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = Field(None, min_length=1, max_length=50)
    status: Optional[CIStatusStr] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    environment: Optional[str] = Field(None, min_length=1, max_length=50)
    hostname: Optional[str] = Field(None, max_length=255)
    ip_address: Optional[str] = Field(None, max_length=45)
    business_service: Optional[str] = Field(None, max_length=255)
    owner: Optional[str] = Field(None, max_length=255)
    operating_system: Optional[str] = Field(None, max_length=255)
    metadata: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "CIUpdateDTO":
        for name in _REQUIRED_CI_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class RelationshipCreateDTO(CamelModel):
    """Payload for recording an edge from a CI to another CI."""
    target_id: UUID = Field(..., description="Target configuration item")
    relationship_type: str = Field(
        default=RelationshipType.DEPENDS_ON,
        min_length=1,
        max_length=50,
        description="depends_on, connects_to, hosted_on, runs_on, ..."
    )


# ========== Response DTOs ==========

class CIResponse(CamelModel):
    id: UUID
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
    # ORM rows expose the column as ``ci_metadata``; ``metadata`` is reserved there
    metadata: Optional[Dict[str, Any]] = Field(
        None,
        validation_alias=AliasChoices("ci_metadata", "metadata"),
        serialization_alias="metadata",
    )
    created_at: datetime
    updated_at: datetime


class RelationshipResponse(CamelModel):
    id: UUID
    source_id: UUID
    target_id: UUID
    relationship_type: str
    created_at: datetime


class TopologyNodeResponse(CamelModel):
    id: UUID
    ci: CIResponse
    x: float
    y: float
    level: int


class TopologyLinkResponse(CamelModel):
    source: UUID
    target: UUID
    type: str


class TopologyResponse(CamelModel):
    nodes: List[TopologyNodeResponse]
    links: List[TopologyLinkResponse]
