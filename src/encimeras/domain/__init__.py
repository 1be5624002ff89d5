"""Domain layer - project model, reducer and layout."""

from .catalogs import (
    AddonCatalog,
    AddonDefinition,
    CategoryLookup,
    MaterialCatalog,
    MaterialDefinition,
    build_applied_addon,
    default_addon_measurements,
)
from .commands import (
    AddAddonToPiece,
    CalculationError,
    CalculationStart,
    CalculationSuccess,
    CreatePiecesForShape,
    CreatePiecesFromVariation,
    LoadProject,
    ProjectCommand,
    RemoveAddonFromPiece,
    ResetShape,
    SetActivePiece,
    SetDraftId,
    SetPieceMeasurements,
    StageMaterial,
    UpdateAddonInPiece,
    UpdatePiece,
)
from .entities import (
    AppliedAddon,
    CalculationState,
    CalculationStatus,
    MaterialSelection,
    Piece,
    ProjectSnapshot,
    ProjectState,
)
from .piece_factory import PieceCreationError, PieceIdFactory, create_pieces
from .reducer import (
    CommandRejection,
    CommandResult,
    RejectionReason,
    apply_command,
    reduce,
)
from .shape_catalog import (
    ShapeVariation,
    ShapeVariationNotFoundError,
    get_shape_variation,
    list_shape_variations,
)
from .value_objects import (
    AddonCategory,
    ConnectionType,
    JointType,
    LayoutResult,
    MeasurementKey,
    PieceLayout,
    PieceMeasurements,
    Placement,
    Vector3,
)

__all__ = [
    "AddAddonToPiece",
    "AddonCatalog",
    "AddonCategory",
    "AddonDefinition",
    "AppliedAddon",
    "CalculationError",
    "CalculationStart",
    "CalculationState",
    "CalculationStatus",
    "CalculationSuccess",
    "CategoryLookup",
    "CommandRejection",
    "CommandResult",
    "ConnectionType",
    "CreatePiecesForShape",
    "CreatePiecesFromVariation",
    "JointType",
    "LayoutResult",
    "LoadProject",
    "MaterialCatalog",
    "MaterialDefinition",
    "MaterialSelection",
    "MeasurementKey",
    "Piece",
    "PieceCreationError",
    "PieceIdFactory",
    "PieceLayout",
    "PieceMeasurements",
    "Placement",
    "ProjectCommand",
    "ProjectSnapshot",
    "ProjectState",
    "RejectionReason",
    "RemoveAddonFromPiece",
    "ResetShape",
    "SetActivePiece",
    "SetDraftId",
    "SetPieceMeasurements",
    "ShapeVariation",
    "ShapeVariationNotFoundError",
    "StageMaterial",
    "UpdateAddonInPiece",
    "UpdatePiece",
    "Vector3",
    "apply_command",
    "build_applied_addon",
    "create_pieces",
    "default_addon_measurements",
    "get_shape_variation",
    "list_shape_variations",
    "reduce",
]
