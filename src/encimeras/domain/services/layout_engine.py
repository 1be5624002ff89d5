"""Spatial layout of countertop pieces.

Pieces are laid out in a single pass along the back walls. A running wall
cursor starts at the origin; each piece is drawn from the cursor in the
direction given by its rotation, growing inward by its width, and the
cursor then advances by the piece's full nominal length.

A corner piece meeting the previous piece with a BUTT joint must not
occupy the square formed by the previous piece's width, so its box is
shortened and pushed forward by exactly that width. An OVERLAP corner
piece owns the corner and is drawn at full length. The cursor always
advances by the nominal length, never by the trimmed visual length.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from ..entities import Piece
from ..value_objects import (
    UP,
    ZERO,
    BoxSize,
    LayoutResult,
    Placement,
    Vector3,
)

logger = logging.getLogger(__name__)

__all__ = [
    "MIN_VISUAL_LENGTH_M",
    "PIECE_THICKNESS_M",
    "SpatialLayoutService",
    "check_layout_contract",
    "compute_layout",
]

# Countertop slab thickness in meters
PIECE_THICKNESS_M = 0.04

# Shortest box drawn for a piece whose trim consumes its whole length
MIN_VISUAL_LENGTH_M = 0.01


def _sort_by_order(pieces: Sequence[Piece]) -> list[Piece]:
    # Stable: pieces without layout (order 0) keep their array order
    return sorted(pieces, key=lambda p: p.layout.order if p.layout is not None else 0)


class SpatialLayoutService:
    """Computes absolute placements for an ordered list of pieces.

    Coordinates are in meters with y vertical. A run at rotation 0 goes
    along +x and grows inward along +z; a run at rotation 90 goes along +z.
    """

    def __init__(
        self,
        thickness: float = PIECE_THICKNESS_M,
        min_visual_length: float = MIN_VISUAL_LENGTH_M,
    ) -> None:
        if thickness <= 0:
            raise ValueError("Thickness must be positive")
        if min_visual_length <= 0:
            raise ValueError("Minimum visual length must be positive")
        self.thickness = thickness
        self.min_visual_length = min_visual_length

    def compute_layout(self, pieces: Sequence[Piece]) -> LayoutResult:
        """Compute the placement of every piece.

        Args:
            pieces: Pieces in any array order; ``layout.order`` decides the
                wall sequence.

        Returns:
            LayoutResult with one placement per piece, in wall order, and
            the mean of all box centers as camera target.
        """
        placements: list[Placement] = []
        cursor = ZERO
        previous_width = 0.0

        for index, piece in enumerate(_sort_by_order(pieces)):
            layout = piece.effective_layout
            full_length = piece.measurements.length_m
            width = piece.measurements.width_m

            rotation = layout.rotation_rad
            direction = Vector3(math.cos(rotation), 0.0, math.sin(rotation))
            inward = direction.cross(UP).normalize()

            start_offset = 0.0
            if index > 0 and layout.is_corner and layout.is_butt:
                start_offset = previous_width

            if start_offset >= full_length:
                logger.warning(
                    f"Piece {piece.id}: corner trim of {start_offset:.3f} m consumes its "
                    f"full length of {full_length:.3f} m; clamping to {self.min_visual_length} m"
                )
            visual_length = max(self.min_visual_length, full_length - start_offset)

            visual_start = cursor + direction.scale(start_offset)
            center = (
                visual_start
                + direction.scale(visual_length / 2)
                + inward.scale(width / 2)
                + UP.scale(self.thickness / 2)
            )

            cursor = cursor + direction.scale(full_length)
            previous_width = width

            placements.append(
                Placement(
                    piece_id=piece.id,
                    size=BoxSize(
                        length=visual_length,
                        thickness=self.thickness,
                        depth=width,
                    ),
                    center=center,
                    rotation_y=-rotation,
                    start_offset=start_offset,
                    cursor_after=cursor,
                )
            )

        return LayoutResult(
            placements=tuple(placements),
            camera_target=self._camera_target(placements),
        )

    @staticmethod
    def _camera_target(placements: Sequence[Placement]) -> Vector3:
        if not placements:
            return ZERO
        count = len(placements)
        return Vector3(
            sum(p.center.x for p in placements) / count,
            sum(p.center.y for p in placements) / count,
            sum(p.center.z for p in placements) / count,
        )


def compute_layout(pieces: Sequence[Piece]) -> LayoutResult:
    """Compute placements with the default slab thickness."""
    return SpatialLayoutService().compute_layout(pieces)


def check_layout_contract(pieces: Sequence[Piece]) -> list[str]:
    """Report layout data the engine tolerates but should not receive.

    Checks that ``layout.order`` values form a dense 0..N-1 sequence, that
    the first piece in wall order is an anchor (connection NONE), and that
    no BUTT corner trim consumes a whole piece.

    Returns:
        List of warning messages, empty when the layout data is clean.
    """
    warnings: list[str] = []
    laid_out = [p for p in pieces if p.layout is not None]

    if laid_out:
        orders = sorted(p.layout.order for p in laid_out)  # type: ignore[union-attr]
        if len(laid_out) != len(pieces):
            warnings.append("Some pieces have a layout and others do not")
        if orders != list(range(len(orders))):
            warnings.append(
                f"Layout orders {orders} are not a dense sequence 0..{len(orders) - 1}"
            )

    ordered = _sort_by_order(pieces)
    if ordered and ordered[0].effective_layout.is_corner:
        warnings.append(f"First piece {ordered[0].id} is a corner piece")

    for previous, piece in zip(ordered, ordered[1:]):
        layout = piece.effective_layout
        if layout.is_corner and layout.is_butt:
            if previous.measurements.width_mm >= piece.measurements.length_mm:
                warnings.append(
                    f"Piece {piece.id} is shorter than the width of the piece it butts "
                    f"against ({piece.measurements.length_mm:g} mm <= "
                    f"{previous.measurements.width_mm:g} mm)"
                )

    return warnings
