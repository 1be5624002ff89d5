"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class Vector3Schema(BaseModel):
    x: float
    y: float
    z: float


class BoxSizeSchema(BaseModel):
    length: float = Field(..., description="Drawn length along the run in meters")
    thickness: float = Field(..., description="Slab thickness in meters")
    depth: float = Field(..., description="Depth away from the wall in meters")


class PlacementSchema(BaseModel):
    """Placement of one piece."""

    piece_id: str
    size: BoxSizeSchema
    center: Vector3Schema
    rotation_y: float = Field(..., description="Rotation about the vertical axis in radians")
    start_offset: float = Field(..., description="Corner trim applied at the start in meters")
    cursor_after: Vector3Schema


class LayoutResponseSchema(BaseModel):
    """Response for layout computation."""

    placements: list[PlacementSchema] = Field(default_factory=list)
    camera_target: Vector3Schema
    warnings: list[str] = Field(default_factory=list, description="Layout data warnings")


class MeasurementsSchema(BaseModel):
    length_mm: float
    width_mm: float


class PieceLayoutSchema(BaseModel):
    order: int
    rotation: int
    connection_type: str
    joint_type: str | None = None


class ShapeVariationSchema(BaseModel):
    """A shape variation from the catalog."""

    id: str
    group: str
    name: str
    required_count: int
    default_measurements: list[MeasurementsSchema]
    piece_layouts: list[PieceLayoutSchema | None] | None = None


class ShapeListSchema(BaseModel):
    shapes: list[ShapeVariationSchema]


class ValidationResultSchema(BaseModel):
    """Response for project validation."""

    is_valid: bool = Field(..., description="Whether the project is valid")
    errors: list[dict[str, Any]] = Field(default_factory=list)
    warnings: list[dict[str, Any]] = Field(default_factory=list)


class PricingPayloadSchema(BaseModel):
    """Pricing request body built from a project."""

    pieces: list[dict[str, Any]]


class ErrorResponseSchema(BaseModel):
    """Error body returned by the exception handlers."""

    error: str
    error_type: str
    details: Any = None
