"""Layout and pricing payload endpoints."""

from fastapi import APIRouter

from encimeras.application import ProjectSession, to_pricing_payload
from encimeras.application.config import config_to_state, load_config_from_dict
from encimeras.domain.services.layout_engine import (
    SpatialLayoutService,
    check_layout_contract,
)
from encimeras.infrastructure import layout_to_dict
from encimeras.web.dependencies import LayoutServiceDep
from encimeras.web.schemas.requests import LayoutRequest, ProjectRequest
from encimeras.web.schemas.responses import LayoutResponseSchema, PricingPayloadSchema

router = APIRouter(tags=["layout"])


@router.post("/layout", response_model=LayoutResponseSchema)
async def compute_layout(
    request: LayoutRequest,
    layout_service: LayoutServiceDep,
) -> LayoutResponseSchema:
    """Build a project and compute the placement of its pieces.

    Raises:
        ConfigError: If the project cannot be loaded or built (handled by exception handler).
    """
    state = config_to_state(load_config_from_dict(request.config))
    if request.thickness is not None:
        layout_service = SpatialLayoutService(thickness=request.thickness)

    result = ProjectSession(state, layout_service=layout_service).layout()
    return LayoutResponseSchema(
        **layout_to_dict(result),
        warnings=check_layout_contract(state.pieces),
    )


@router.post("/payload", response_model=PricingPayloadSchema)
async def pricing_payload(request: ProjectRequest) -> PricingPayloadSchema:
    """Build a project and return the body of its pricing request."""
    state = config_to_state(load_config_from_dict(request.config))
    return PricingPayloadSchema(pieces=to_pricing_payload(state.pieces))
