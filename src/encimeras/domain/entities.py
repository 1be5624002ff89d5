"""Project, piece and addon entities.

All entities are immutable. Every project mutation produces a new
``ProjectState`` (see ``encimeras.domain.reducer``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .value_objects import (
    DEFAULT_PIECE_LAYOUT,
    MEASUREMENT_KEYS,
    PieceLayout,
    PieceMeasurements,
)


@dataclass(frozen=True)
class MaterialSelection:
    """Material and attribute choice made before pieces exist.

    Attributes:
        material_id: Identifier in the material catalog.
        material_name: Display name of the material.
        selected_attributes: Attribute type to chosen value
            (e.g. ``{"MAT_FINISH": "OAK"}``).
        material_image: Optional image URL of the material.
    """

    material_id: str
    material_name: str = ""
    selected_attributes: dict[str, str] = field(default_factory=dict)
    material_image: str | None = None

    def __post_init__(self) -> None:
        if not self.material_id:
            raise ValueError("material_id must not be empty")


@dataclass(frozen=True)
class AppliedAddon:
    """An accessory applied to a piece.

    The addon category is not stored; it is resolved through the addon
    catalog using ``code``. Codes missing from the catalog are allowed.
    """

    code: str
    measurements: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.code:
            raise ValueError("Addon code must not be empty")
        unknown = set(self.measurements) - MEASUREMENT_KEYS
        if unknown:
            raise ValueError(
                f"Unknown addon measurement keys: {', '.join(sorted(unknown))}"
            )

    @property
    def quantity(self) -> float:
        """Quantity for pricing, 1 when not given."""
        return self.measurements.get("quantity") or 1


@dataclass(frozen=True)
class Piece:
    """One physical countertop segment.

    Attributes:
        id: Identifier unique within the session, never reused.
        material_id: Material of the piece.
        selected_attributes: Attribute type to chosen value.
        measurements: Nominal length and width in millimeters.
        layout: Optional placement metadata from the shape template.
        applied_addons: Accessories in insertion order.
    """

    id: str
    material_id: str | None
    selected_attributes: dict[str, str] = field(default_factory=dict)
    measurements: PieceMeasurements = field(default_factory=PieceMeasurements.default)
    layout: PieceLayout | None = None
    applied_addons: tuple[AppliedAddon, ...] = ()

    @property
    def effective_layout(self) -> PieceLayout:
        """Layout used for placement, falling back to the default layout."""
        return self.layout if self.layout is not None else DEFAULT_PIECE_LAYOUT


class CalculationState(str, Enum):
    """Lifecycle of a price calculation request."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class CalculationStatus:
    """Mutually exclusive state of the price calculation.

    ``result`` is only set in SUCCESS and ``message`` only in ERROR.
    ``token`` identifies the latest started request; responses carrying
    any other token are stale.
    """

    state: CalculationState = CalculationState.IDLE
    result: Any = None
    message: str | None = None
    token: int = 0

    @property
    def is_pending(self) -> bool:
        return self.state is CalculationState.PENDING

    @property
    def is_success(self) -> bool:
        return self.state is CalculationState.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.state is CalculationState.ERROR


@dataclass(frozen=True)
class ProjectSnapshot:
    """Serializable subset of a project used to restore a saved draft."""

    pieces: tuple[Piece, ...] = ()
    pending_material: MaterialSelection | None = None
    selected_shape_id: str | None = None
    draft_id: str | None = None


@dataclass(frozen=True)
class ProjectState:
    """Root aggregate of a configuration session.

    Attributes:
        pieces: Pieces in insertion order; the index addresses pieces in
            commands and junction ``i`` joins pieces ``i`` and ``i + 1``.
        active_piece_index: Piece being edited, ``None`` when empty.
        selected_shape_id: Shape variation the pieces were created from.
        pending_material: Material staged before pieces exist.
        calculation: Price calculation status.
        draft_id: Identifier of the saved draft being edited, if any.
        next_piece_serial: Serial used for the next piece id.
    """

    pieces: tuple[Piece, ...] = ()
    active_piece_index: int | None = None
    selected_shape_id: str | None = None
    pending_material: MaterialSelection | None = None
    calculation: CalculationStatus = field(default_factory=CalculationStatus)
    draft_id: str | None = None
    next_piece_serial: int = 1

    @classmethod
    def empty(cls) -> "ProjectState":
        return cls()

    @property
    def has_pieces(self) -> bool:
        return len(self.pieces) > 0

    @property
    def active_piece(self) -> Piece | None:
        if self.active_piece_index is None:
            return None
        if 0 <= self.active_piece_index < len(self.pieces):
            return self.pieces[self.active_piece_index]
        return None

    @property
    def junction_count(self) -> int:
        return max(len(self.pieces) - 1, 0)
