"""
Inventory Controllers (API Routes)
==================================

FastAPI routes for configuration items, their relationships and the
topology map.

Controllers are thin - they delegate to repositories and services and
translate store failures into client-safe messages.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from cmdb.config import settings
from cmdb.core import ResourceNotFoundException, ValidationException
from cmdb.infrastructure.database import commit, get_session, to_uuid
from cmdb.inventory.application import (
    CICreateDTO,
    CIUpdateDTO,
    CIResponse,
    RelationshipCreateDTO,
    RelationshipResponse,
    TopologyLinkResponse,
    TopologyNodeResponse,
    TopologyResponse,
    TopologyService,
)
from cmdb.inventory.domain import TopologyLayout, TopologyView
from cmdb.inventory.domain.topology import MAX_ZOOM, MIN_ZOOM
from cmdb.inventory.infrastructure import (
    SQLAlchemyConfigurationItemRepository,
    SQLAlchemyRelationshipRepository,
)
from cmdb.inventory.interfaces.rendering import render_topology_svg
from cmdb.shared.api.responses import (
    DataEnvelope,
    MessageEnvelope,
    ERROR_RESPONSES,
    NOT_FOUND_RESPONSE,
    translate_store_errors,
)
from cmdb.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api/cis", tags=["Configuration Items"])

CI_NOT_FOUND = "Configuration item"


# ========== Example payloads for Swagger ==========

CI_CREATE_EXAMPLE = {
    "name": "WEB-01",
    "type": "Server",
    "status": "Active",
    "location": "DC-East",
    "environment": "Production",
    "hostname": "web-01.company.com",
    "ipAddress": "192.168.1.11",
    "businessService": "E-commerce Platform",
    "owner": "Web Team",
    "operatingSystem": "Ubuntu 22.04"
}


# ========== Dependencies ==========

def get_ci_repository(
    session: AsyncSession = Depends(get_session)
) -> SQLAlchemyConfigurationItemRepository:
    return SQLAlchemyConfigurationItemRepository(session)


def get_relationship_repository(
    session: AsyncSession = Depends(get_session)
) -> SQLAlchemyRelationshipRepository:
    return SQLAlchemyRelationshipRepository(session)


def get_topology_service(
    ci_repo: SQLAlchemyConfigurationItemRepository = Depends(get_ci_repository),
    relationship_repo: SQLAlchemyRelationshipRepository = Depends(get_relationship_repository),
) -> TopologyService:
    return TopologyService(
        ci_repo,
        relationship_repo,
        center=(settings.topology_center_x, settings.topology_center_y),
        radius=settings.topology_radius,
    )


# ========== Configuration Items ==========

@router.get(
    "",
    response_model=DataEnvelope[List[CIResponse]],
    summary="List configuration items",
    responses=ERROR_RESPONSES,
)
async def list_configuration_items(
    repo: SQLAlchemyConfigurationItemRepository = Depends(get_ci_repository)
):
    with translate_store_errors("Failed to fetch configuration items"):
        cis = await repo.get_all()
    return DataEnvelope(data=[CIResponse.model_validate(ci) for ci in cis])


@router.get(
    "/{ci_id}",
    response_model=DataEnvelope[CIResponse],
    summary="Get a configuration item",
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
)
async def get_configuration_item(
    ci_id: str,
    repo: SQLAlchemyConfigurationItemRepository = Depends(get_ci_repository)
):
    with translate_store_errors("Failed to fetch configuration item", ci_id=ci_id):
        ci = await repo.get_by_id(ci_id)
    if ci is None:
        raise ResourceNotFoundException(CI_NOT_FOUND, ci_id)
    return DataEnvelope(data=CIResponse.model_validate(ci))


@router.post(
    "",
    response_model=DataEnvelope[CIResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a configuration item",
    description=f"""
    Register a new configuration item.

    **Status**: `Active`, `Maintenance`, `Inactive`, `Decommissioned`

    **Example Request**: `{CI_CREATE_EXAMPLE}`
    """,
    responses=ERROR_RESPONSES,
)
async def create_configuration_item(
    payload: CICreateDTO,
    session: AsyncSession = Depends(get_session),
    repo: SQLAlchemyConfigurationItemRepository = Depends(get_ci_repository)
):
    with translate_store_errors("Failed to create configuration item"):
        ci = await repo.create(payload.model_dump())
        await commit(session)

    logger.info("Configuration item created", extra={"ci_id": str(ci.id), "ci_name": ci.name})
    return DataEnvelope(data=CIResponse.model_validate(ci))


@router.put(
    "/{ci_id}",
    response_model=DataEnvelope[CIResponse],
    summary="Update a configuration item",
    description="Partial update: only the fields present in the body change.",
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
)
async def update_configuration_item(
    ci_id: str,
    payload: CIUpdateDTO,
    session: AsyncSession = Depends(get_session),
    repo: SQLAlchemyConfigurationItemRepository = Depends(get_ci_repository)
):
    with translate_store_errors("Failed to update configuration item", ci_id=ci_id):
        ci = await repo.update(ci_id, payload.model_dump(exclude_unset=True))
        if ci is not None:
            await commit(session)

    if ci is None:
        raise ResourceNotFoundException(CI_NOT_FOUND, ci_id)
    return DataEnvelope(data=CIResponse.model_validate(ci))


@router.delete(
    "/{ci_id}",
    response_model=MessageEnvelope,
    summary="Delete a configuration item",
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
)
async def delete_configuration_item(
    ci_id: str,
    session: AsyncSession = Depends(get_session),
    repo: SQLAlchemyConfigurationItemRepository = Depends(get_ci_repository)
):
    with translate_store_errors("Failed to delete configuration item", ci_id=ci_id):
        deleted = await repo.delete(ci_id)
        if deleted:
            await commit(session)

    if not deleted:
        raise ResourceNotFoundException(CI_NOT_FOUND, ci_id)

    logger.info("Configuration item deleted", extra={"ci_id": ci_id})
    return MessageEnvelope(message="Configuration item deleted")


# ========== Relationships ==========

@router.get(
    "/{ci_id}/relationships",
    response_model=DataEnvelope[List[RelationshipResponse]],
    summary="List relationships originating at a CI",
    responses=ERROR_RESPONSES,
)
async def list_relationships(
    ci_id: str,
    repo: SQLAlchemyRelationshipRepository = Depends(get_relationship_repository)
):
    with translate_store_errors("Failed to fetch CI relationships", ci_id=ci_id):
        relationships = await repo.list_for_source(ci_id)
    return DataEnvelope(data=[RelationshipResponse.model_validate(r) for r in relationships])


@router.post(
    "/{ci_id}/relationships",
    response_model=DataEnvelope[RelationshipResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Record a relationship from this CI to another",
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
)
async def create_relationship(
    ci_id: str,
    payload: RelationshipCreateDTO,
    session: AsyncSession = Depends(get_session),
    ci_repo: SQLAlchemyConfigurationItemRepository = Depends(get_ci_repository),
    relationship_repo: SQLAlchemyRelationshipRepository = Depends(get_relationship_repository)
):
    with translate_store_errors("Failed to create CI relationship", ci_id=ci_id):
        source = await ci_repo.get_by_id(ci_id)
        if source is None:
            raise ResourceNotFoundException(CI_NOT_FOUND, ci_id)

        target = await ci_repo.get_by_id(str(payload.target_id))
        if target is None:
            raise ValidationException(
                "Validation failed",
                [{"loc": ["body", "targetId"], "msg": "Target configuration item does not exist"}],
            )

        relationship = await relationship_repo.create({
            "source_id": ci_id,
            "target_id": payload.target_id,
            "relationship_type": payload.relationship_type,
        })
        await commit(session)

    return DataEnvelope(data=RelationshipResponse.model_validate(relationship))


# ========== Topology ==========

async def _load_layout(ci_id: str, service: TopologyService) -> TopologyLayout:
    with translate_store_errors("Failed to build CI topology", ci_id=ci_id):
        layout = await service.build_layout(ci_id)
    if layout is None:
        raise ResourceNotFoundException(CI_NOT_FOUND, ci_id)
    return layout


@router.get(
    "/{ci_id}/topology",
    response_model=DataEnvelope[TopologyResponse],
    summary="Topology layout of a CI and its direct neighbours",
    responses={**ERROR_RESPONSES, **NOT_FOUND_RESPONSE},
)
async def get_topology(
    ci_id: str,
    service: TopologyService = Depends(get_topology_service)
):
    layout = await _load_layout(ci_id, service)

    return DataEnvelope(data=TopologyResponse(
        nodes=[
            TopologyNodeResponse(
                id=node.id,
                ci=CIResponse.model_validate(node.ci),
                x=node.x,
                y=node.y,
                level=node.level,
            )
            for node in layout.nodes
        ],
        links=[
            TopologyLinkResponse(source=link.source, target=link.target, type=link.type)
            for link in layout.links
        ],
    ))


@router.get(
    "/{ci_id}/topology.svg",
    response_class=Response,
    summary="Rendered topology map",
    description="""
    SVG rendering of the topology map.

    - `zoom`: 0.5 to 2.0
    - `selected`: id of the node to highlight
    - `details`: show the detail panel for the selected node
    """,
    responses={200: {"content": {"image/svg+xml": {}}}, **NOT_FOUND_RESPONSE},
)
async def get_topology_svg(
    ci_id: str,
    zoom: float = Query(1.0, ge=MIN_ZOOM, le=MAX_ZOOM, description="Zoom level"),
    selected: Optional[str] = Query(None, description="Selected node id"),
    details: bool = Query(False, description="Show the detail panel"),
    service: TopologyService = Depends(get_topology_service)
):
    layout = await _load_layout(ci_id, service)

    view = TopologyView(
        layout,
        on_select=lambda ci: logger.debug("Topology node selected", extra={"ci_id": ci.id}),
        zoom_level=zoom,
    )
    if selected:
        selected_uuid = to_uuid(selected)
        try:
            view.select(str(selected_uuid) if selected_uuid else selected)
        except ValueError as exc:
            raise ValidationException(
                "Validation failed",
                [{"loc": ["query", "selected"], "msg": str(exc)}],
            ) from exc
    if details:
        view.toggle_details()

    return Response(content=render_topology_svg(view), media_type="image/svg+xml")


# Export router for inclusion in main app
inventory_router = router
