"""Value objects for countertop pieces, layouts and placements."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class ConnectionType(str, Enum):
    """How a piece connects to the previous piece in the wall run.

    Attributes:
        NONE: Anchor piece, not connected to anything before it.
        LINEAR: Continues straight from the previous piece.
        CORNER_LEFT: Turns left at a corner.
        CORNER_RIGHT: Turns right at a corner.
    """

    NONE = "NONE"
    LINEAR = "LINEAR"
    CORNER_LEFT = "CORNER_LEFT"
    CORNER_RIGHT = "CORNER_RIGHT"

    @property
    def is_corner(self) -> bool:
        return self in (ConnectionType.CORNER_LEFT, ConnectionType.CORNER_RIGHT)


class JointType(str, Enum):
    """Which piece owns the corner square where two pieces meet.

    Attributes:
        OVERLAP: This piece runs into the corner at full length.
        BUTT: This piece starts after the depth of the previous piece.
    """

    OVERLAP = "OVERLAP"
    BUTT = "BUTT"


class AddonCategory(str, Enum):
    """Category of an addon in the external addon catalog."""

    TRABAJO = "TRABAJO"
    ENSAMBLAJE = "ENSAMBLAJE"
    COMPLEMENTO = "COMPLEMENTO"
    OTRO = "OTRO"


class MeasurementKey(str, Enum):
    """Measurement keys an applied addon may carry."""

    QUANTITY = "quantity"
    LENGTH_ML = "length_ml"
    WIDTH_MM = "width_mm"
    HEIGHT_MM = "height_mm"
    RADIO_MM = "radio_mm"


MEASUREMENT_KEYS: frozenset[str] = frozenset(key.value for key in MeasurementKey)

# Rotations (degrees) a piece layout may declare
VALID_ROTATIONS: frozenset[int] = frozenset({0, 90, -90, 180})

# Measurements given to pieces created without a shape template
DEFAULT_LENGTH_MM = 2000.0
DEFAULT_WIDTH_MM = 600.0


@dataclass(frozen=True)
class PieceMeasurements:
    """Nominal size of a countertop piece in millimeters.

    Positivity is not enforced here; callers check it with ``is_valid``
    before accepting user input.
    """

    length_mm: float
    width_mm: float

    @property
    def is_valid(self) -> bool:
        """True when both measurements are strictly positive."""
        return self.length_mm > 0 and self.width_mm > 0

    @property
    def length_m(self) -> float:
        return self.length_mm / 1000.0

    @property
    def width_m(self) -> float:
        return self.width_mm / 1000.0

    @property
    def area_m2(self) -> float:
        """Surface area in square meters."""
        return self.length_m * self.width_m

    @classmethod
    def default(cls) -> "PieceMeasurements":
        return cls(length_mm=DEFAULT_LENGTH_MM, width_mm=DEFAULT_WIDTH_MM)


@dataclass(frozen=True)
class PieceLayout:
    """Placement metadata for one piece of a shape.

    Attributes:
        order: Position of the piece in the wall run (0-based).
        rotation: Direction of the run in degrees, one of 0, 90, -90, 180.
        connection_type: How the piece connects to the previous one.
        joint_type: Corner ownership, meaningful only for corner pieces.
    """

    order: int
    rotation: int = 0
    connection_type: ConnectionType = ConnectionType.NONE
    joint_type: JointType | None = None

    def __post_init__(self) -> None:
        if self.order < 0:
            raise ValueError("Layout order must be non-negative")
        if self.rotation not in VALID_ROTATIONS:
            raise ValueError(
                f"Rotation must be one of {sorted(VALID_ROTATIONS)}, got {self.rotation}"
            )

    @property
    def rotation_rad(self) -> float:
        return math.radians(self.rotation)

    @property
    def is_corner(self) -> bool:
        return self.connection_type.is_corner

    @property
    def is_butt(self) -> bool:
        return self.joint_type is JointType.BUTT


# Layout assumed for pieces that carry none
DEFAULT_PIECE_LAYOUT = PieceLayout(
    order=0,
    rotation=0,
    connection_type=ConnectionType.NONE,
    joint_type=JointType.BUTT,
)


@dataclass(frozen=True)
class Vector3:
    """3D vector in meters. The y axis is vertical."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, factor: float) -> "Vector3":
        return Vector3(self.x * factor, self.y * factor, self.z * factor)

    def cross(self, other: "Vector3") -> "Vector3":
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    @property
    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self) -> "Vector3":
        """Unit vector in the same direction. The zero vector stays zero."""
        length = self.length
        if length == 0:
            return Vector3()
        return self.scale(1.0 / length)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)


ZERO = Vector3(0.0, 0.0, 0.0)
UP = Vector3(0.0, 1.0, 0.0)


@dataclass(frozen=True)
class BoxSize:
    """Size of a placed box in meters.

    Attributes:
        length: Extent along the wall run (visual length, after trimming).
        thickness: Vertical extent.
        depth: Extent away from the wall (the piece width).
    """

    length: float
    thickness: float
    depth: float


@dataclass(frozen=True)
class Placement:
    """Absolute placement of one piece in the assembled countertop.

    Attributes:
        piece_id: Identifier of the placed piece.
        size: Box size, with the trimmed visual length.
        center: Box center in meters.
        rotation_y: Rotation around the vertical axis in radians.
        start_offset: Length trimmed from the start of the piece, in meters.
        cursor_after: Wall cursor after this piece, advanced by the full
            nominal length of the piece.
    """

    piece_id: str
    size: BoxSize
    center: Vector3
    rotation_y: float
    start_offset: float
    cursor_after: Vector3


@dataclass(frozen=True)
class LayoutResult:
    """Placements for every piece plus the point a viewer should look at."""

    placements: tuple[Placement, ...]
    camera_target: Vector3

    def __len__(self) -> int:
        return len(self.placements)
