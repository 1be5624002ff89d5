"""Shape variation catalog.

Each shape variation is a template for an overall countertop shape
(straight, L, U). It declares how many pieces the shape needs, their
default measurements and, optionally, how they are laid out along the
walls.
"""

from __future__ import annotations

from dataclasses import dataclass

from .value_objects import ConnectionType, JointType, PieceLayout, PieceMeasurements

__all__ = [
    "SHAPE_GROUPS",
    "SHAPE_VARIATIONS",
    "ShapeVariation",
    "ShapeVariationNotFoundError",
    "get_shape_variation",
    "list_shape_variations",
    "validate_shape_variation",
]


class ShapeVariationNotFoundError(Exception):
    """Raised when a shape variation id is not in the catalog."""

    def __init__(self, shape_id: str) -> None:
        self.shape_id = shape_id
        super().__init__(f"Shape variation not found: {shape_id}")


@dataclass(frozen=True)
class ShapeVariation:
    """Template describing the pieces of one countertop shape.

    Arity is not checked on construction: the piece factory rejects
    variations whose measurement list does not match ``required_count``.

    Attributes:
        id: Catalog identifier (e.g. ``"L_LEFT"``).
        group: Display group (``"LINEAL"``, ``"FORMA L"``, ``"FORMA U"``).
        name: Display name.
        required_count: Number of pieces the shape needs.
        default_measurements: Initial measurements, one per piece.
        piece_layouts: Optional layout per piece; entries may be ``None``.
    """

    id: str
    group: str
    name: str
    required_count: int
    default_measurements: tuple[PieceMeasurements, ...]
    piece_layouts: tuple[PieceLayout | None, ...] | None = None

    @property
    def has_layout(self) -> bool:
        return self.piece_layouts is not None

    def layout_for(self, index: int) -> PieceLayout | None:
        """Layout of piece ``index``, or None if the variation declares none."""
        if self.piece_layouts is None or index >= len(self.piece_layouts):
            return None
        return self.piece_layouts[index]


def _m(length_mm: float, width_mm: float) -> PieceMeasurements:
    return PieceMeasurements(length_mm=length_mm, width_mm=width_mm)


SHAPE_GROUPS: tuple[str, ...] = ("LINEAL", "FORMA L", "FORMA U")

SHAPE_VARIATIONS: tuple[ShapeVariation, ...] = (
    # Straight pieces and islands
    ShapeVariation(
        id="LINEAR_SQUARE",
        group="LINEAL",
        name="Pieza/Isla Recto",
        required_count=1,
        default_measurements=(_m(2000, 600),),
    ),
    ShapeVariation(
        id="LINEAR_RADIUS_CORNER",
        group="LINEAL",
        name="Pieza/Isla Redondo",
        required_count=1,
        default_measurements=(_m(2000, 600),),
    ),
    ShapeVariation(
        id="LINEAR_CIRCLE",
        group="LINEAL",
        name="Pieza/Isla Circular",
        required_count=1,
        default_measurements=(_m(1200, 1200),),
    ),
    # L shapes: the first piece anchors the run along the side wall
    ShapeVariation(
        id="L_LEFT",
        group="FORMA L",
        name="Al Tope pieza Derecha",
        required_count=2,
        default_measurements=(_m(2000, 600), _m(1200, 600)),
        piece_layouts=(
            PieceLayout(order=0, rotation=90, connection_type=ConnectionType.NONE),
            PieceLayout(
                order=1,
                rotation=0,
                connection_type=ConnectionType.CORNER_RIGHT,
                joint_type=JointType.BUTT,
            ),
        ),
    ),
    ShapeVariation(
        id="L_RIGHT",
        group="FORMA L",
        name="En la Esquina pieza derecha",
        required_count=2,
        default_measurements=(_m(1200, 600), _m(2000, 600)),
        piece_layouts=(
            PieceLayout(order=0, rotation=90, connection_type=ConnectionType.NONE),
            PieceLayout(
                order=1,
                rotation=0,
                connection_type=ConnectionType.CORNER_RIGHT,
                joint_type=JointType.OVERLAP,
            ),
        ),
    ),
    # U shapes
    ShapeVariation(
        id="U_SYMMETRIC_LARGE",
        group="FORMA U",
        name="Simétrica Larga",
        required_count=3,
        default_measurements=(_m(1200, 600), _m(1800, 600), _m(1200, 600)),
    ),
    ShapeVariation(
        id="U_SYMMETRIC_SHORT",
        group="FORMA U",
        name="Simétrica Corta",
        required_count=3,
        default_measurements=(_m(1800, 600), _m(1200, 600), _m(1800, 600)),
    ),
    ShapeVariation(
        id="U_ASYMMETRIC_LEFT",
        group="FORMA U",
        name="Asimétrica Izquierda",
        required_count=3,
        default_measurements=(_m(1800, 600), _m(1800, 600), _m(1200, 600)),
    ),
    ShapeVariation(
        id="U_ASYMMETRIC_RIGHT",
        group="FORMA U",
        name="Asimétrica Derecha",
        required_count=3,
        default_measurements=(_m(1200, 600), _m(1800, 600), _m(1800, 600)),
    ),
)

_BY_ID: dict[str, ShapeVariation] = {v.id: v for v in SHAPE_VARIATIONS}


def get_shape_variation(shape_id: str) -> ShapeVariation:
    """Look up a shape variation by id.

    Raises:
        ShapeVariationNotFoundError: If the id is not in the catalog.
    """
    try:
        return _BY_ID[shape_id]
    except KeyError:
        raise ShapeVariationNotFoundError(shape_id) from None


def list_shape_variations(group: str | None = None) -> list[ShapeVariation]:
    """List catalog entries in catalog order, optionally filtered by group."""
    if group is None:
        return list(SHAPE_VARIATIONS)
    return [v for v in SHAPE_VARIATIONS if v.group == group]


def validate_shape_variation(variation: ShapeVariation) -> list[str]:
    """Check a catalog entry against the authoring contract.

    The contract: one default measurement per piece, strictly positive
    measurements, and when layouts are declared, one per piece with
    ``order`` equal to the piece index, an anchor first piece
    (``NONE`` connection, no joint type).

    Returns:
        List of error messages, empty when the entry is well formed.
    """
    errors: list[str] = []
    prefix = f"Shape {variation.id}"

    if variation.required_count < 1:
        errors.append(f"{prefix}: required_count must be at least 1")

    if len(variation.default_measurements) != variation.required_count:
        errors.append(
            f"{prefix}: {len(variation.default_measurements)} default measurements "
            f"for {variation.required_count} pieces"
        )

    for i, measurements in enumerate(variation.default_measurements):
        if not measurements.is_valid:
            errors.append(f"{prefix}: piece {i + 1} measurements must be positive")

    if variation.piece_layouts is None:
        return errors

    if len(variation.piece_layouts) != variation.required_count:
        errors.append(
            f"{prefix}: {len(variation.piece_layouts)} layouts "
            f"for {variation.required_count} pieces"
        )

    for i, layout in enumerate(variation.piece_layouts):
        if layout is None:
            continue
        if layout.order != i:
            errors.append(
                f"{prefix}: piece {i + 1} has layout order {layout.order}, expected {i}"
            )
        if i == 0 and layout.connection_type is not ConnectionType.NONE:
            errors.append(f"{prefix}: first piece must have connection type NONE")
        if i == 0 and layout.joint_type is not None:
            errors.append(f"{prefix}: first piece must not declare a joint type")

    return errors
