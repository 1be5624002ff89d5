"""Unit tests for SpatialLayoutService.

These tests verify:
- Placement of a single straight piece
- Corner trimming for BUTT joints and none for OVERLAP or LINEAR
- Cursor advance by the nominal length
- Degenerate trims clamped to the minimum visual length
- Camera target and layout contract warnings
"""

import logging
import math

import pytest

from encimeras.domain.services.layout_engine import (
    MIN_VISUAL_LENGTH_M,
    PIECE_THICKNESS_M,
    SpatialLayoutService,
    check_layout_contract,
    compute_layout,
)
from encimeras.domain.value_objects import ConnectionType, JointType, PieceLayout

T = PIECE_THICKNESS_M


def _corner_pair(make_piece, joint_type: JointType | None):
    return [
        make_piece(
            "p0",
            2000,
            600,
            PieceLayout(order=0, rotation=90, connection_type=ConnectionType.NONE),
        ),
        make_piece(
            "p1",
            1200,
            600,
            PieceLayout(
                order=1,
                rotation=0,
                connection_type=ConnectionType.CORNER_RIGHT,
                joint_type=joint_type,
            ),
        ),
    ]


@pytest.fixture
def layout_service() -> SpatialLayoutService:
    return SpatialLayoutService()


class TestSinglePiece:
    """Tests for one straight piece."""

    def test_center_and_cursor(self, layout_service, make_piece) -> None:
        piece = make_piece(
            "p0", 2000, 600, PieceLayout(order=0, rotation=0, connection_type=ConnectionType.NONE)
        )

        result = layout_service.compute_layout([piece])
        placement = result.placements[0]

        assert placement.center.as_tuple() == pytest.approx((1.0, T / 2, 0.3))
        assert placement.cursor_after.as_tuple() == pytest.approx((2.0, 0.0, 0.0))
        assert placement.start_offset == 0.0
        assert placement.size.length == pytest.approx(2.0)
        assert placement.size.thickness == T
        assert placement.size.depth == pytest.approx(0.6)
        assert placement.rotation_y == pytest.approx(0.0)

    def test_missing_layout_uses_default(self, layout_service, make_piece) -> None:
        result = layout_service.compute_layout([make_piece("p0", 2000, 600)])

        assert result.placements[0].center.as_tuple() == pytest.approx((1.0, T / 2, 0.3))
        assert result.placements[0].start_offset == 0.0

    def test_single_corner_piece_has_no_offset(self, layout_service, make_piece) -> None:
        piece = make_piece(
            "p0",
            1200,
            600,
            PieceLayout(
                order=0,
                connection_type=ConnectionType.CORNER_LEFT,
                joint_type=JointType.BUTT,
            ),
        )

        placement = layout_service.compute_layout([piece]).placements[0]

        assert placement.start_offset == 0.0
        assert placement.size.length == pytest.approx(1.2)

    def test_rotation_about_vertical(self, layout_service, make_piece) -> None:
        piece = make_piece("p0", 1000, 500, PieceLayout(order=0, rotation=90))

        placement = layout_service.compute_layout([piece]).placements[0]

        assert placement.rotation_y == pytest.approx(-math.pi / 2)
        assert placement.cursor_after.as_tuple() == pytest.approx((0.0, 0.0, 1.0), abs=1e-12)


class TestCornerJoints:
    """Tests for corner trimming."""

    def test_butt_corner_is_trimmed(self, layout_service, make_piece) -> None:
        first, second = layout_service.compute_layout(
            _corner_pair(make_piece, JointType.BUTT)
        ).placements

        assert second.start_offset == pytest.approx(0.6)
        assert second.size.length == pytest.approx(0.6)
        expected_cursor = (
            first.cursor_after.x + 1.2,
            first.cursor_after.y,
            first.cursor_after.z,
        )
        assert second.cursor_after.as_tuple() == pytest.approx(expected_cursor, abs=1e-12)

    def test_butt_corner_center(self, layout_service, make_piece) -> None:
        first, second = layout_service.compute_layout(
            _corner_pair(make_piece, JointType.BUTT)
        ).placements

        assert first.cursor_after.as_tuple() == pytest.approx((0.0, 0.0, 2.0), abs=1e-12)
        assert first.center.as_tuple() == pytest.approx((-0.3, T / 2, 1.0), abs=1e-12)
        assert second.center.as_tuple() == pytest.approx((0.9, T / 2, 2.3), abs=1e-12)

    def test_overlap_corner_is_not_trimmed(self, layout_service, make_piece) -> None:
        _, second = layout_service.compute_layout(
            _corner_pair(make_piece, JointType.OVERLAP)
        ).placements

        assert second.start_offset == 0.0
        assert second.size.length == pytest.approx(1.2)

    def test_corner_without_joint_type_is_not_trimmed(self, layout_service, make_piece) -> None:
        _, second = layout_service.compute_layout(_corner_pair(make_piece, None)).placements
        assert second.start_offset == 0.0

    def test_linear_junction_never_trimmed(self, layout_service, make_piece) -> None:
        pieces = [
            make_piece("p0", 2000, 600, PieceLayout(order=0)),
            make_piece(
                "p1",
                1000,
                600,
                PieceLayout(
                    order=1,
                    connection_type=ConnectionType.LINEAR,
                    joint_type=JointType.BUTT,
                ),
            ),
        ]

        _, second = layout_service.compute_layout(pieces).placements

        assert second.start_offset == 0.0
        assert second.center.as_tuple() == pytest.approx((2.5, T / 2, 0.3))
        assert second.cursor_after.as_tuple() == pytest.approx((3.0, 0.0, 0.0))


class TestOrdering:
    def test_pieces_sorted_by_layout_order(self, layout_service, make_piece) -> None:
        pieces = [
            make_piece("second", 1000, 600, PieceLayout(order=1, connection_type=ConnectionType.LINEAR)),
            make_piece("first", 2000, 600, PieceLayout(order=0)),
        ]

        result = layout_service.compute_layout(pieces)

        assert [p.piece_id for p in result.placements] == ["first", "second"]
        assert result.placements[1].center.x == pytest.approx(2.5)

    def test_pieces_without_layout_keep_array_order(self, layout_service, make_piece) -> None:
        pieces = [make_piece("a", 1000), make_piece("b", 1000), make_piece("c", 1000)]

        result = layout_service.compute_layout(pieces)

        assert [p.piece_id for p in result.placements] == ["a", "b", "c"]
        assert result.placements[2].cursor_after.x == pytest.approx(3.0)


class TestDegenerateGeometry:
    def test_trim_consuming_piece_is_clamped(self, layout_service, make_piece, caplog) -> None:
        pieces = [
            make_piece("p0", 2000, 900, PieceLayout(order=0, rotation=90)),
            make_piece(
                "p1",
                800,
                600,
                PieceLayout(
                    order=1,
                    connection_type=ConnectionType.CORNER_RIGHT,
                    joint_type=JointType.BUTT,
                ),
            ),
        ]

        with caplog.at_level(logging.WARNING):
            _, second = layout_service.compute_layout(pieces).placements

        assert second.size.length == MIN_VISUAL_LENGTH_M
        assert second.start_offset == pytest.approx(0.9)
        assert second.cursor_after.x == pytest.approx(0.8)
        assert "p1" in caplog.text


class TestCameraTarget:
    def test_empty_layout(self, layout_service) -> None:
        result = layout_service.compute_layout([])

        assert len(result) == 0
        assert result.camera_target.as_tuple() == (0.0, 0.0, 0.0)

    def test_mean_of_centers(self, layout_service, make_piece) -> None:
        pieces = [
            make_piece("p0", 2000, 600, PieceLayout(order=0)),
            make_piece("p1", 1000, 600, PieceLayout(order=1, connection_type=ConnectionType.LINEAR)),
        ]

        result = layout_service.compute_layout(pieces)

        assert result.camera_target.as_tuple() == pytest.approx((1.75, T / 2, 0.3))


class TestServiceConfiguration:
    def test_custom_thickness(self, make_piece) -> None:
        service = SpatialLayoutService(thickness=0.012)
        placement = service.compute_layout([make_piece("p0")]).placements[0]

        assert placement.size.thickness == 0.012
        assert placement.center.y == pytest.approx(0.006)

    def test_invalid_thickness(self) -> None:
        with pytest.raises(ValueError, match="Thickness"):
            SpatialLayoutService(thickness=0)

    def test_module_function_uses_defaults(self, make_piece) -> None:
        placement = compute_layout([make_piece("p0")]).placements[0]
        assert placement.size.thickness == PIECE_THICKNESS_M


class TestCheckLayoutContract:
    """Tests for layout data warnings."""

    def test_clean_catalog_layout(self, make_piece) -> None:
        assert check_layout_contract(_corner_pair(make_piece, JointType.BUTT)) == []

    def test_no_layouts(self, make_piece) -> None:
        assert check_layout_contract([make_piece("a"), make_piece("b")]) == []

    def test_duplicate_orders(self, make_piece) -> None:
        pieces = [
            make_piece("a", layout=PieceLayout(order=0)),
            make_piece("b", layout=PieceLayout(order=0)),
        ]

        warnings = check_layout_contract(pieces)

        assert any("dense" in w for w in warnings)

    def test_mixed_layout_presence(self, make_piece) -> None:
        pieces = [make_piece("a", layout=PieceLayout(order=0)), make_piece("b")]
        assert any("others do not" in w for w in check_layout_contract(pieces))

    def test_corner_first(self, make_piece) -> None:
        pieces = [
            make_piece(
                "a", layout=PieceLayout(order=0, connection_type=ConnectionType.CORNER_LEFT)
            )
        ]
        assert check_layout_contract(pieces) == ["First piece a is a corner piece"]

    def test_trim_consumes_piece(self, make_piece) -> None:
        pieces = [
            make_piece("a", 2000, 600, PieceLayout(order=0, rotation=90)),
            make_piece(
                "b",
                600,
                600,
                PieceLayout(
                    order=1,
                    connection_type=ConnectionType.CORNER_RIGHT,
                    joint_type=JointType.BUTT,
                ),
            ),
        ]

        warnings = check_layout_contract(pieces)

        assert len(warnings) == 1
        assert "Piece b" in warnings[0]
