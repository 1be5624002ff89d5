"""Piece factory: turns a shape variation and a staged material into pieces."""

from __future__ import annotations

import logging
from typing import Callable

from .entities import MaterialSelection, Piece
from .shape_catalog import ShapeVariation
from .value_objects import PieceMeasurements

logger = logging.getLogger(__name__)

__all__ = [
    "PieceCreationError",
    "PieceIdFactory",
    "create_blank_pieces",
    "create_pieces",
]

PIECE_ID_PREFIX = "piece-"


class PieceCreationError(Exception):
    """Raised when pieces cannot be created from a shape variation.

    Attributes:
        shape_id: Identifier of the offending variation, if any.
        required_count: Number of pieces the variation declares.
        measurement_count: Number of default measurements it provides.
    """

    def __init__(
        self,
        message: str,
        shape_id: str | None = None,
        required_count: int | None = None,
        measurement_count: int | None = None,
    ) -> None:
        self.shape_id = shape_id
        self.required_count = required_count
        self.measurement_count = measurement_count
        super().__init__(message)


class PieceIdFactory:
    """Generates piece ids ``piece-1``, ``piece-2``... that are never reused."""

    def __init__(self, start: int = 1) -> None:
        self._next = start

    def __call__(self) -> str:
        piece_id = f"{PIECE_ID_PREFIX}{self._next}"
        self._next += 1
        return piece_id

    @property
    def next_serial(self) -> int:
        return self._next

    @staticmethod
    def serial_of(piece_id: str) -> int | None:
        """Serial number encoded in a generated id, or None for foreign ids."""
        if not piece_id.startswith(PIECE_ID_PREFIX):
            return None
        suffix = piece_id[len(PIECE_ID_PREFIX):]
        return int(suffix) if suffix.isdigit() else None


def create_pieces(
    variation: ShapeVariation,
    material: MaterialSelection,
    id_factory: Callable[[], str] | None = None,
) -> list[Piece]:
    """Create the pieces of a shape variation.

    Pieces come out in template order, each with the staged material, its
    default measurements, its layout (if the variation declares one) and no
    addons.

    Args:
        variation: Shape template to instantiate.
        material: Staged material copied onto every piece.
        id_factory: Callable returning fresh piece ids.

    Returns:
        Exactly ``variation.required_count`` pieces.

    Raises:
        PieceCreationError: If the number of default measurements does not
            match ``required_count``. No pieces are returned in that case.
    """
    measurement_count = len(variation.default_measurements)
    if measurement_count != variation.required_count:
        raise PieceCreationError(
            f"Shape {variation.id} declares {variation.required_count} pieces "
            f"but provides {measurement_count} default measurements",
            shape_id=variation.id,
            required_count=variation.required_count,
            measurement_count=measurement_count,
        )

    next_id = id_factory or PieceIdFactory()
    pieces = [
        Piece(
            id=next_id(),
            material_id=material.material_id,
            selected_attributes=dict(material.selected_attributes),
            measurements=variation.default_measurements[i],
            layout=variation.layout_for(i),
        )
        for i in range(variation.required_count)
    ]
    logger.debug(f"Created {len(pieces)} pieces for shape {variation.id}")
    return pieces


def create_blank_pieces(
    count: int,
    material: MaterialSelection,
    id_factory: Callable[[], str] | None = None,
) -> list[Piece]:
    """Create ``count`` pieces with default measurements and no layout.

    Raises:
        PieceCreationError: If ``count`` is less than 1.
    """
    if count < 1:
        raise PieceCreationError(
            f"Piece count must be at least 1, got {count}",
            required_count=count,
        )

    next_id = id_factory or PieceIdFactory()
    return [
        Piece(
            id=next_id(),
            material_id=material.material_id,
            selected_attributes=dict(material.selected_attributes),
            measurements=PieceMeasurements.default(),
        )
        for _ in range(count)
    ]
