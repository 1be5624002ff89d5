"""Commands accepted by the project reducer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from .entities import AppliedAddon, MaterialSelection, ProjectSnapshot
from .shape_catalog import ShapeVariation
from .value_objects import PieceMeasurements


@dataclass(frozen=True)
class StageMaterial:
    """Stage a material; re-materializes every existing piece."""

    selection: MaterialSelection


@dataclass(frozen=True)
class CreatePiecesForShape:
    """Create ``count`` pieces with default measurements and no layout."""

    count: int


@dataclass(frozen=True)
class CreatePiecesFromVariation:
    """Create the pieces of a shape variation and remember the shape."""

    variation: ShapeVariation


@dataclass(frozen=True)
class ResetShape:
    """Drop all pieces, keeping the staged material."""


@dataclass(frozen=True)
class SetPieceMeasurements:
    index: int
    measurements: PieceMeasurements


@dataclass(frozen=True)
class UpdatePiece:
    """Partial update of a piece; ``selected_attributes`` is merged."""

    index: int
    changes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AddAddonToPiece:
    index: int
    addon: AppliedAddon


@dataclass(frozen=True)
class RemoveAddonFromPiece:
    index: int
    addon_index: int


@dataclass(frozen=True)
class UpdateAddonInPiece:
    """Partial update of an applied addon; ``measurements`` is merged."""

    index: int
    addon_index: int
    changes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SetActivePiece:
    index: int | None


@dataclass(frozen=True)
class CalculationStart:
    """Start a price calculation; the reducer issues the next token."""


@dataclass(frozen=True)
class CalculationSuccess:
    token: int
    result: Any


@dataclass(frozen=True)
class CalculationError:
    token: int
    message: str


@dataclass(frozen=True)
class LoadProject:
    """Replace the project with a previously saved snapshot."""

    snapshot: ProjectSnapshot


@dataclass(frozen=True)
class SetDraftId:
    draft_id: str | None


ProjectCommand = Union[
    StageMaterial,
    CreatePiecesForShape,
    CreatePiecesFromVariation,
    ResetShape,
    SetPieceMeasurements,
    UpdatePiece,
    AddAddonToPiece,
    RemoveAddonFromPiece,
    UpdateAddonInPiece,
    SetActivePiece,
    CalculationStart,
    CalculationSuccess,
    CalculationError,
    LoadProject,
    SetDraftId,
]
