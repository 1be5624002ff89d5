"""Pydantic schemas for countertop project configuration files.

A project file stages a material, picks a shape from the catalog (or
lists custom pieces), overrides measurements, applies addons and may
carry an inline addon/material catalog.

Example:
    {
        "schema_version": "1.0",
        "material": {"material_id": "HPL_RURAL", "selected_attributes": {"MAT_FINISH": "OAK"}},
        "shape_id": "L_LEFT",
        "pieces": [{}, {"addons": [{"code": "UNION_RECTA", "measurements": {"quantity": 1}}]}]
    }
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from encimeras.domain.value_objects import (
    AddonCategory,
    ConnectionType,
    JointType,
    MeasurementKey,
)

# Supported schema versions for project files
# Version 1.0: material, shape or custom pieces, addons, inline catalog
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


class MeasurementsConfig(BaseModel):
    """Nominal piece size in millimeters."""

    model_config = ConfigDict(extra="forbid")

    length_mm: float = Field(..., gt=0, description="Length along the wall in mm")
    width_mm: float = Field(..., gt=0, description="Depth away from the wall in mm")


class LayoutConfig(BaseModel):
    """Placement metadata for a custom piece, or an override for a shape piece."""

    model_config = ConfigDict(extra="forbid")

    order: int = Field(..., ge=0)
    rotation: Literal[0, 90, -90, 180] = 0
    connection_type: ConnectionType = ConnectionType.NONE
    joint_type: JointType | None = None


class AddonConfig(BaseModel):
    """An addon applied to a piece."""

    model_config = ConfigDict(extra="forbid")

    code: str = Field(..., min_length=1)
    measurements: dict[MeasurementKey, float] = Field(default_factory=dict)


class PieceConfig(BaseModel):
    """Per-piece overrides, or the full definition of a custom piece."""

    model_config = ConfigDict(extra="forbid")

    measurements: MeasurementsConfig | None = None
    layout: LayoutConfig | None = None
    selected_attributes: dict[str, str] = Field(default_factory=dict)
    addons: list[AddonConfig] = Field(default_factory=list)


class MaterialConfig(BaseModel):
    """Material staged for the whole project."""

    model_config = ConfigDict(extra="forbid")

    material_id: str = Field(..., min_length=1)
    material_name: str = ""
    material_image: str | None = None
    selected_attributes: dict[str, str] = Field(default_factory=dict)


class AddonDefinitionConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: str = Field(..., min_length=1)
    name: str = ""
    category: AddonCategory
    required_measurements: list[MeasurementKey] = Field(default_factory=list)
    allowed_material_categories: list[str] = Field(default_factory=list)


class MaterialDefinitionConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = ""
    category: str
    selectable_attributes: dict[str, list[str]] = Field(default_factory=dict)


class CatalogConfig(BaseModel):
    """Inline addon and material catalogs."""

    model_config = ConfigDict(extra="forbid")

    addons: list[AddonDefinitionConfig] = Field(default_factory=list)
    materials: list[MaterialDefinitionConfig] = Field(default_factory=list)


class ProjectConfiguration(BaseModel):
    """Root schema of a project configuration file.

    Either ``shape_id`` names a catalog shape (``pieces`` then holds
    optional per-piece overrides, by index), or ``pieces`` defines every
    piece with its measurements.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    material: MaterialConfig
    shape_id: str | None = None
    pieces: list[PieceConfig] = Field(default_factory=list)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    draft_id: str | None = None

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minors of a supported major."""
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )

    @model_validator(mode="after")
    def validate_shape_or_pieces(self) -> "ProjectConfiguration":
        """Custom projects must define every piece's measurements."""
        if self.shape_id is not None:
            return self
        if not self.pieces:
            raise ValueError("Specify either 'shape_id' or a non-empty 'pieces' list")
        missing = [i for i, p in enumerate(self.pieces) if p.measurements is None]
        if missing:
            raise ValueError(
                "Pieces without a shape_id need measurements "
                f"(missing for pieces {', '.join(str(i) for i in missing)})"
            )
        return self


class SnapshotPieceConfig(PieceConfig):
    """A piece as stored in a saved project snapshot."""

    id: str = Field(..., min_length=1)
    material_id: str | None = None


class ProjectSnapshotConfig(BaseModel):
    """Serialized project state used to restore a saved draft."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.0", pattern=r"^\d+\.\d+$")
    pending_material: MaterialConfig | None = None
    selected_shape_id: str | None = None
    draft_id: str | None = None
    pieces: list[SnapshotPieceConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_pieces(self) -> "ProjectSnapshotConfig":
        ids = [p.id for p in self.pieces]
        if len(ids) != len(set(ids)):
            raise ValueError("Snapshot piece ids must be unique")
        if any(p.measurements is None for p in self.pieces):
            raise ValueError("Snapshot pieces need measurements")
        return self
