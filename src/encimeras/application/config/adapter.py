"""Adapters between configuration schemas and domain objects.

Project state is always built by dispatching commands through the
reducer, so a configuration file is subject to the same rules as
interactive edits.
"""

from __future__ import annotations

from encimeras.application.config.loader import ConfigError
from encimeras.application.config.schemas import (
    AddonConfig,
    LayoutConfig,
    MaterialConfig,
    ProjectConfiguration,
    ProjectSnapshotConfig,
    SnapshotPieceConfig,
)
from encimeras.domain.catalogs import (
    AddonCatalog,
    AddonDefinition,
    MaterialCatalog,
    MaterialDefinition,
)
from encimeras.domain.commands import (
    AddAddonToPiece,
    CreatePiecesFromVariation,
    ProjectCommand,
    SetDraftId,
    SetPieceMeasurements,
    StageMaterial,
    UpdatePiece,
)
from encimeras.domain.entities import (
    AppliedAddon,
    MaterialSelection,
    Piece,
    ProjectSnapshot,
    ProjectState,
)
from encimeras.domain.reducer import apply_command
from encimeras.domain.shape_catalog import (
    ShapeVariation,
    ShapeVariationNotFoundError,
    get_shape_variation,
)
from encimeras.domain.value_objects import PieceLayout, PieceMeasurements

# Shape id recorded for projects defined piece by piece
CUSTOM_SHAPE_ID = "CUSTOM"


def config_to_material(config: MaterialConfig) -> MaterialSelection:
    return MaterialSelection(
        material_id=config.material_id,
        material_name=config.material_name,
        selected_attributes=dict(config.selected_attributes),
        material_image=config.material_image,
    )


def material_to_config(material: MaterialSelection) -> MaterialConfig:
    return MaterialConfig(
        material_id=material.material_id,
        material_name=material.material_name,
        material_image=material.material_image,
        selected_attributes=dict(material.selected_attributes),
    )


def config_to_layout(config: LayoutConfig | None) -> PieceLayout | None:
    if config is None:
        return None
    return PieceLayout(
        order=config.order,
        rotation=config.rotation,
        connection_type=config.connection_type,
        joint_type=config.joint_type,
    )


def layout_to_config(layout: PieceLayout | None) -> LayoutConfig | None:
    if layout is None:
        return None
    return LayoutConfig(
        order=layout.order,
        rotation=layout.rotation,  # type: ignore[arg-type]
        connection_type=layout.connection_type,
        joint_type=layout.joint_type,
    )


def config_to_addon(config: AddonConfig) -> AppliedAddon:
    return AppliedAddon(
        code=config.code,
        measurements={key.value: value for key, value in config.measurements.items()},
    )


def config_to_catalogs(config: ProjectConfiguration) -> tuple[AddonCatalog, MaterialCatalog]:
    """Build the addon and material catalogs declared inline in a project file."""
    addons = AddonCatalog(
        AddonDefinition(
            code=a.code,
            name=a.name or a.code,
            category=a.category,
            required_measurements=tuple(a.required_measurements),
            allowed_material_categories=frozenset(a.allowed_material_categories),
        )
        for a in config.catalog.addons
    )
    materials = MaterialCatalog(
        MaterialDefinition(
            id=m.id,
            name=m.name or m.id,
            category=m.category,
            selectable_attributes={k: tuple(v) for k, v in m.selectable_attributes.items()},
        )
        for m in config.catalog.materials
    )
    return addons, materials


def _custom_variation(config: ProjectConfiguration) -> ShapeVariation:
    layouts = [config_to_layout(p.layout) for p in config.pieces]
    return ShapeVariation(
        id=CUSTOM_SHAPE_ID,
        group="CUSTOM",
        name="Custom",
        required_count=len(config.pieces),
        default_measurements=tuple(
            PieceMeasurements(
                length_mm=p.measurements.length_mm,  # type: ignore[union-attr]
                width_mm=p.measurements.width_mm,  # type: ignore[union-attr]
            )
            for p in config.pieces
        ),
        piece_layouts=tuple(layouts) if any(layouts) else None,
    )


def _dispatch(state: ProjectState, command: ProjectCommand, path: str) -> ProjectState:
    result = apply_command(state, command)
    if result.rejection is not None:
        raise ConfigError(
            message=f"{path}: {result.rejection.message}",
            error_type="validation",
            details=[
                {
                    "path": path,
                    "message": result.rejection.message,
                    "error_type": result.rejection.reason.value,
                }
            ],
        )
    return result.state


def config_to_state(config: ProjectConfiguration) -> ProjectState:
    """Build a project state from a validated configuration.

    Raises:
        ConfigError: If the shape is unknown, there are more piece
            overrides than shape pieces, or a command is rejected.
    """
    if config.shape_id is not None:
        try:
            variation = get_shape_variation(config.shape_id)
        except ShapeVariationNotFoundError as e:
            raise ConfigError(
                message=str(e),
                error_type="validation",
                details=[{"path": "shape_id", "message": str(e), "value": config.shape_id}],
            ) from e
        if len(config.pieces) > variation.required_count:
            message = (
                f"Shape {variation.id} has {variation.required_count} pieces "
                f"but {len(config.pieces)} piece entries were given"
            )
            raise ConfigError(
                message=message,
                error_type="validation",
                details=[{"path": "pieces", "message": message}],
            )
        applies_overrides = True
    else:
        variation = _custom_variation(config)
        applies_overrides = False

    state = ProjectState.empty()
    state = _dispatch(state, StageMaterial(config_to_material(config.material)), "material")
    state = _dispatch(state, CreatePiecesFromVariation(variation), "shape_id")

    for i, piece_config in enumerate(config.pieces):
        path = f"pieces[{i}]"
        if applies_overrides and piece_config.measurements is not None:
            state = _dispatch(
                state,
                SetPieceMeasurements(
                    index=i,
                    measurements=PieceMeasurements(
                        length_mm=piece_config.measurements.length_mm,
                        width_mm=piece_config.measurements.width_mm,
                    ),
                ),
                f"{path}.measurements",
            )
        if applies_overrides and piece_config.layout is not None:
            state = _dispatch(
                state,
                UpdatePiece(index=i, changes={"layout": config_to_layout(piece_config.layout)}),
                f"{path}.layout",
            )
        if piece_config.selected_attributes:
            state = _dispatch(
                state,
                UpdatePiece(
                    index=i,
                    changes={"selected_attributes": dict(piece_config.selected_attributes)},
                ),
                f"{path}.selected_attributes",
            )
        for j, addon_config in enumerate(piece_config.addons):
            state = _dispatch(
                state,
                AddAddonToPiece(index=i, addon=config_to_addon(addon_config)),
                f"{path}.addons[{j}]",
            )

    if config.draft_id is not None:
        state = _dispatch(state, SetDraftId(config.draft_id), "draft_id")
    return state


def project_to_snapshot_config(state: ProjectState) -> ProjectSnapshotConfig:
    """Serialize the persistent part of a project state."""
    return ProjectSnapshotConfig(
        pending_material=(
            material_to_config(state.pending_material)
            if state.pending_material is not None
            else None
        ),
        selected_shape_id=state.selected_shape_id,
        draft_id=state.draft_id,
        pieces=[
            SnapshotPieceConfig(
                id=piece.id,
                material_id=piece.material_id,
                measurements={
                    "length_mm": piece.measurements.length_mm,
                    "width_mm": piece.measurements.width_mm,
                },
                layout=layout_to_config(piece.layout),
                selected_attributes=dict(piece.selected_attributes),
                addons=[
                    AddonConfig(code=a.code, measurements=dict(a.measurements))
                    for a in piece.applied_addons
                ],
            )
            for piece in state.pieces
        ],
    )


def snapshot_config_to_snapshot(config: ProjectSnapshotConfig) -> ProjectSnapshot:
    """Convert a validated snapshot schema into a domain snapshot."""
    return ProjectSnapshot(
        pieces=tuple(
            Piece(
                id=p.id,
                material_id=p.material_id,
                selected_attributes=dict(p.selected_attributes),
                measurements=PieceMeasurements(
                    length_mm=p.measurements.length_mm,  # type: ignore[union-attr]
                    width_mm=p.measurements.width_mm,  # type: ignore[union-attr]
                ),
                layout=config_to_layout(p.layout),
                applied_addons=tuple(config_to_addon(a) for a in p.addons),
            )
            for p in config.pieces
        ),
        pending_material=(
            config_to_material(config.pending_material)
            if config.pending_material is not None
            else None
        ),
        selected_shape_id=config.selected_shape_id,
        draft_id=config.draft_id,
    )


def project_to_snapshot(state: ProjectState) -> ProjectSnapshot:
    """Capture the persistent part of a project state."""
    return ProjectSnapshot(
        pieces=state.pieces,
        pending_material=state.pending_material,
        selected_shape_id=state.selected_shape_id,
        draft_id=state.draft_id,
    )
