"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field


class ProjectRequest(BaseModel):
    """Request carrying a full project configuration."""

    config: dict[str, Any] = Field(..., description="Project configuration JSON")


class LayoutRequest(ProjectRequest):
    """Request for computing the 3D layout of a project."""

    thickness: float | None = Field(
        default=None, gt=0, le=0.2, description="Slab thickness in meters"
    )
