"""Pydantic schemas for the REST API."""

from encimeras.web.schemas.requests import LayoutRequest, ProjectRequest
from encimeras.web.schemas.responses import (
    BoxSizeSchema,
    ErrorResponseSchema,
    LayoutResponseSchema,
    MeasurementsSchema,
    PieceLayoutSchema,
    PlacementSchema,
    PricingPayloadSchema,
    ShapeListSchema,
    ShapeVariationSchema,
    ValidationResultSchema,
    Vector3Schema,
)

__all__ = [
    # Requests
    "LayoutRequest",
    "ProjectRequest",
    # Responses
    "BoxSizeSchema",
    "ErrorResponseSchema",
    "LayoutResponseSchema",
    "MeasurementsSchema",
    "PieceLayoutSchema",
    "PlacementSchema",
    "PricingPayloadSchema",
    "ShapeListSchema",
    "ShapeVariationSchema",
    "ValidationResultSchema",
    "Vector3Schema",
]
