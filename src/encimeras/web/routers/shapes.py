"""Shape catalog endpoints."""

from fastapi import APIRouter, Query

from encimeras.domain.shape_catalog import get_shape_variation, list_shape_variations
from encimeras.infrastructure import shape_to_dict
from encimeras.web.schemas.responses import ShapeListSchema, ShapeVariationSchema

router = APIRouter(prefix="/shapes", tags=["shapes"])


@router.get("", response_model=ShapeListSchema)
async def list_shapes(
    group: str | None = Query(default=None, description="Only shapes of this group"),
) -> ShapeListSchema:
    """List shape variations in catalog order."""
    return ShapeListSchema(
        shapes=[
            ShapeVariationSchema.model_validate(shape_to_dict(v))
            for v in list_shape_variations(group)
        ]
    )


@router.get("/{shape_id}", response_model=ShapeVariationSchema)
async def get_shape(shape_id: str) -> ShapeVariationSchema:
    """Get one shape variation.

    Raises:
        ShapeVariationNotFoundError: If the id is unknown (handled by exception handler).
    """
    return ShapeVariationSchema.model_validate(shape_to_dict(get_shape_variation(shape_id)))
