"""Unit tests for the project reducer.

These tests verify:
- Piece creation arity, guards and id allocation
- Material propagation onto existing pieces
- Piece and addon updates (replace vs merge)
- Calculation sequencing with request tokens
- Loading saved snapshots
"""

from dataclasses import replace

import pytest

from encimeras.domain.commands import (
    AddAddonToPiece,
    CalculationError,
    CalculationStart,
    CalculationSuccess,
    CreatePiecesForShape,
    CreatePiecesFromVariation,
    LoadProject,
    RemoveAddonFromPiece,
    ResetShape,
    SetActivePiece,
    SetDraftId,
    SetPieceMeasurements,
    StageMaterial,
    UpdateAddonInPiece,
    UpdatePiece,
)
from encimeras.domain.entities import (
    AppliedAddon,
    CalculationState,
    MaterialSelection,
    ProjectSnapshot,
    ProjectState,
)
from encimeras.domain.reducer import RejectionReason, apply_command, reduce
from encimeras.domain.shape_catalog import ShapeVariation, get_shape_variation
from encimeras.domain.services.layout_engine import compute_layout
from encimeras.domain.value_objects import (
    ConnectionType,
    JointType,
    PieceLayout,
    PieceMeasurements,
)


@pytest.fixture
def l_left_state(staged_state: ProjectState) -> ProjectState:
    return reduce(staged_state, CreatePiecesFromVariation(get_shape_variation("L_LEFT")))


@pytest.fixture
def u_state(staged_state: ProjectState) -> ProjectState:
    return reduce(
        staged_state, CreatePiecesFromVariation(get_shape_variation("U_SYMMETRIC_LARGE"))
    )


class TestCreatePiecesFromVariation:
    """Tests for creating pieces from a shape variation."""

    @pytest.mark.parametrize(
        "shape_id,count",
        [("LINEAR_SQUARE", 1), ("L_LEFT", 2), ("L_RIGHT", 2), ("U_ASYMMETRIC_RIGHT", 3)],
    )
    def test_creates_required_count(
        self, staged_state: ProjectState, shape_id: str, count: int
    ) -> None:
        result = apply_command(
            staged_state, CreatePiecesFromVariation(get_shape_variation(shape_id))
        )

        assert result.accepted
        assert len(result.state.pieces) == count
        assert result.state.active_piece_index == 0
        assert result.state.selected_shape_id == shape_id

    def test_pieces_follow_template(self, l_left_state: ProjectState) -> None:
        variation = get_shape_variation("L_LEFT")

        for i, piece in enumerate(l_left_state.pieces):
            assert piece.measurements == variation.default_measurements[i]
            assert piece.layout == variation.piece_layouts[i]
            assert piece.material_id == "HPL_RURAL"
            assert piece.selected_attributes == {"MAT_FINISH": "OAK"}
            assert piece.applied_addons == ()

    def test_shape_without_layout_leaves_layout_empty(self, u_state: ProjectState) -> None:
        assert all(p.layout is None for p in u_state.pieces)

    def test_piece_attributes_are_copies(self, l_left_state: ProjectState) -> None:
        first, second = l_left_state.pieces
        assert first.selected_attributes is not second.selected_attributes
        assert first.selected_attributes is not l_left_state.pending_material.selected_attributes

    def test_piece_ids_are_unique(self, u_state: ProjectState) -> None:
        ids = [p.id for p in u_state.pieces]
        assert ids == ["piece-1", "piece-2", "piece-3"]

    def test_ids_not_reused_after_reset(self, u_state: ProjectState) -> None:
        state = reduce(u_state, ResetShape())
        state = reduce(state, CreatePiecesFromVariation(get_shape_variation("L_LEFT")))

        assert [p.id for p in state.pieces] == ["piece-4", "piece-5"]

    def test_arity_mismatch_rejected(self, staged_state: ProjectState) -> None:
        broken = ShapeVariation(
            id="BROKEN",
            group="LINEAL",
            name="Broken",
            required_count=3,
            default_measurements=(PieceMeasurements(2000, 600),),
        )

        result = apply_command(staged_state, CreatePiecesFromVariation(broken))

        assert not result.accepted
        assert result.rejection.reason is RejectionReason.ARITY_MISMATCH
        assert "BROKEN" in result.rejection.message
        assert result.state is staged_state
        assert result.state.pieces == ()

    def test_rejected_without_material(self) -> None:
        state = ProjectState.empty()
        result = apply_command(
            state, CreatePiecesFromVariation(get_shape_variation("LINEAR_SQUARE"))
        )

        assert result.rejection.reason is RejectionReason.GUARD_VIOLATION
        assert result.state is state

    def test_rejected_when_pieces_exist(self, l_left_state: ProjectState) -> None:
        result = apply_command(
            l_left_state, CreatePiecesFromVariation(get_shape_variation("LINEAR_SQUARE"))
        )

        assert result.rejection.reason is RejectionReason.GUARD_VIOLATION
        assert result.state is l_left_state
        assert len(result.state.pieces) == 2


class TestCreatePiecesForShape:
    """Tests for creating blank pieces by count."""

    def test_creates_default_pieces(self, staged_state: ProjectState) -> None:
        result = apply_command(staged_state, CreatePiecesForShape(count=2))

        assert result.accepted
        assert len(result.state.pieces) == 2
        assert result.state.active_piece_index == 0
        assert result.state.selected_shape_id is None
        assert all(p.measurements == PieceMeasurements.default() for p in result.state.pieces)
        assert all(p.layout is None for p in result.state.pieces)

    def test_zero_count_rejected(self, staged_state: ProjectState) -> None:
        result = apply_command(staged_state, CreatePiecesForShape(count=0))

        assert result.rejection.reason is RejectionReason.ARITY_MISMATCH
        assert result.state is staged_state

    def test_guarded_like_variation_form(self, l_left_state: ProjectState) -> None:
        result = apply_command(l_left_state, CreatePiecesForShape(count=1))
        assert result.rejection.reason is RejectionReason.GUARD_VIOLATION


class TestStageMaterial:
    """Tests for staging a material."""

    def test_sets_pending_material(self, material: MaterialSelection) -> None:
        state = reduce(ProjectState.empty(), StageMaterial(material))
        assert state.pending_material == material
        assert state.pieces == ()

    def test_propagates_to_existing_pieces(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, AddAddonToPiece(1, AppliedAddon("UNION_RECTA")))
        new_material = MaterialSelection(
            material_id="COMPACT_BLACK", selected_attributes={"MAT_FINISH": "MATT"}
        )

        restaged = reduce(state, StageMaterial(new_material))

        assert restaged.pending_material == new_material
        for before, after in zip(state.pieces, restaged.pieces):
            assert after.material_id == "COMPACT_BLACK"
            assert after.selected_attributes == {"MAT_FINISH": "MATT"}
            assert after.measurements == before.measurements
            assert after.layout == before.layout
            assert after.applied_addons == before.applied_addons
            assert after.id == before.id


class TestResetShape:
    def test_clears_pieces_and_keeps_material(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, ResetShape())

        assert state.pieces == ()
        assert state.active_piece_index is None
        assert state.pending_material == l_left_state.pending_material


class TestPieceUpdates:
    """Tests for measurement and partial piece updates."""

    def test_set_measurements_replaces(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, SetPieceMeasurements(1, PieceMeasurements(900, 650)))

        assert state.pieces[1].measurements == PieceMeasurements(900, 650)
        assert state.pieces[0] == l_left_state.pieces[0]

    def test_set_measurements_out_of_range(self, l_left_state: ProjectState) -> None:
        result = apply_command(l_left_state, SetPieceMeasurements(5, PieceMeasurements(1, 1)))

        assert result.rejection.reason is RejectionReason.INDEX_OUT_OF_RANGE
        assert result.state is l_left_state

    def test_update_merges_selected_attributes(self, l_left_state: ProjectState) -> None:
        state = reduce(
            l_left_state,
            UpdatePiece(0, {"selected_attributes": {"EDGE": "ROUNDED"}}),
        )

        assert state.pieces[0].selected_attributes == {"MAT_FINISH": "OAK", "EDGE": "ROUNDED"}

    def test_update_overwrites_explicit_attribute(self, l_left_state: ProjectState) -> None:
        state = reduce(
            l_left_state,
            UpdatePiece(0, {"selected_attributes": {"MAT_FINISH": "WALNUT"}}),
        )
        assert state.pieces[0].selected_attributes == {"MAT_FINISH": "WALNUT"}

    def test_update_replaces_other_fields(self, l_left_state: ProjectState) -> None:
        state = reduce(
            l_left_state,
            UpdatePiece(0, {"measurements": {"length_mm": 3000, "width_mm": 700}}),
        )
        assert state.pieces[0].measurements == PieceMeasurements(3000, 700)

    def test_update_id_rejected(self, l_left_state: ProjectState) -> None:
        result = apply_command(l_left_state, UpdatePiece(0, {"id": "other"}))

        assert result.rejection.reason is RejectionReason.INVALID_UPDATE
        assert result.state is l_left_state

    def test_update_unknown_field_rejected(self, l_left_state: ProjectState) -> None:
        result = apply_command(l_left_state, UpdatePiece(0, {"colour": "red"}))
        assert result.rejection.reason is RejectionReason.INVALID_UPDATE

    def test_update_layout_mapping_converted(self, l_left_state: ProjectState) -> None:
        result = apply_command(
            l_left_state,
            UpdatePiece(
                1,
                {
                    "layout": {
                        "order": 1,
                        "rotation": 0,
                        "connection_type": "CORNER_RIGHT",
                        "joint_type": "OVERLAP",
                    }
                },
            ),
        )

        assert result.accepted
        assert result.state.pieces[1].layout == PieceLayout(
            order=1,
            rotation=0,
            connection_type=ConnectionType.CORNER_RIGHT,
            joint_type=JointType.OVERLAP,
        )
        placements = compute_layout(result.state.pieces).placements
        assert placements[1].start_offset == 0.0

    def test_update_layout_cleared(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, UpdatePiece(1, {"layout": None}))
        assert state.pieces[1].layout is None

    @pytest.mark.parametrize(
        "changes",
        [
            {"layout": "CORNER_RIGHT"},
            {"layout": {"order": 1, "rotation": 45}},
            {"layout": {"order": 1, "connection_type": "DIAGONAL"}},
            {"measurements": 2000},
            {"measurements": {"length_mm": 2000}},
            {"selected_attributes": None},
            {"selected_attributes": ["MAT_FINISH"]},
        ],
    )
    def test_update_with_bad_value_rejected(
        self, l_left_state: ProjectState, changes: dict
    ) -> None:
        result = apply_command(l_left_state, UpdatePiece(1, changes))

        assert result.rejection.reason is RejectionReason.INVALID_UPDATE
        assert result.state is l_left_state


class TestAddons:
    """Tests for adding, removing and updating addons."""

    def test_add_appends(self, l_left_state: ProjectState) -> None:
        first = AppliedAddon("FREGADERO", {"quantity": 1})
        second = AppliedAddon("UNION_RECTA", {"quantity": 1})

        state = reduce(l_left_state, AddAddonToPiece(1, first))
        state = reduce(state, AddAddonToPiece(1, second))

        assert state.pieces[1].applied_addons == (first, second)
        assert state.pieces[0].applied_addons == ()

    def test_add_then_remove_restores(self, l_left_state: ProjectState) -> None:
        existing = AppliedAddon("FREGADERO", {"quantity": 1})
        state = reduce(l_left_state, AddAddonToPiece(0, existing))
        before = state.pieces[0].applied_addons

        state = reduce(state, AddAddonToPiece(0, AppliedAddon("ZOCALO", {"length_ml": 2})))
        state = reduce(state, RemoveAddonFromPiece(0, len(state.pieces[0].applied_addons) - 1))

        assert state.pieces[0].applied_addons == before

    def test_remove_by_position(self, l_left_state: ProjectState) -> None:
        a, b, c = AppliedAddon("A"), AppliedAddon("B"), AppliedAddon("C")
        state = l_left_state
        for addon in (a, b, c):
            state = reduce(state, AddAddonToPiece(0, addon))

        state = reduce(state, RemoveAddonFromPiece(0, 1))

        assert state.pieces[0].applied_addons == (a, c)

    def test_remove_out_of_range(self, l_left_state: ProjectState) -> None:
        result = apply_command(l_left_state, RemoveAddonFromPiece(0, 0))

        assert result.rejection.reason is RejectionReason.INDEX_OUT_OF_RANGE
        assert result.state is l_left_state

    def test_update_merges_measurements(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, AddAddonToPiece(0, AppliedAddon("ZOCALO", {"length_ml": 5})))

        state = reduce(
            state, UpdateAddonInPiece(0, 0, {"measurements": {"width_mm": 10}})
        )

        assert state.pieces[0].applied_addons[0].measurements == {
            "length_ml": 5,
            "width_mm": 10,
        }

    def test_update_replaces_code(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, AddAddonToPiece(0, AppliedAddon("A", {"quantity": 2})))
        state = reduce(state, UpdateAddonInPiece(0, 0, {"code": "B"}))

        assert state.pieces[0].applied_addons[0] == AppliedAddon("B", {"quantity": 2})

    def test_update_unknown_measurement_key_rejected(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, AddAddonToPiece(0, AppliedAddon("A")))
        result = apply_command(state, UpdateAddonInPiece(0, 0, {"measurements": {"depth": 3}}))

        assert result.rejection.reason is RejectionReason.INVALID_UPDATE
        assert result.state is state


class TestSetActivePiece:
    def test_direct_assignment(self, l_left_state: ProjectState) -> None:
        assert reduce(l_left_state, SetActivePiece(1)).active_piece_index == 1
        assert reduce(l_left_state, SetActivePiece(None)).active_piece_index is None

    def test_no_validation(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, SetActivePiece(7))

        assert state.active_piece_index == 7
        assert state.active_piece is None


class TestCalculation:
    """Tests for the calculation tri-state and request tokens."""

    def test_start_sets_pending_and_clears(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, CalculationStart())
        state = reduce(state, CalculationSuccess(token=1, result={"total": 10}))

        state = reduce(state, CalculationStart())

        assert state.calculation.state is CalculationState.PENDING
        assert state.calculation.result is None
        assert state.calculation.message is None
        assert state.calculation.token == 2

    def test_success_sets_result(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, CalculationStart())
        state = reduce(state, CalculationSuccess(token=1, result={"total": 10}))

        assert state.calculation.is_success
        assert state.calculation.result == {"total": 10}
        assert state.calculation.message is None

    def test_error_sets_message(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, CalculationStart())
        state = reduce(state, CalculationError(token=1, message="boom"))

        assert state.calculation.is_error
        assert state.calculation.message == "boom"
        assert state.calculation.result is None

    def test_stale_response_ignored(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, CalculationStart())
        state = reduce(state, CalculationStart())

        result = apply_command(state, CalculationSuccess(token=1, result={"total": 1}))

        assert result.rejection.reason is RejectionReason.STALE_CALCULATION
        assert result.state is state
        assert result.state.calculation.is_pending

    def test_response_after_completion_ignored(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, CalculationStart())
        state = reduce(state, CalculationSuccess(token=1, result={"total": 1}))

        result = apply_command(state, CalculationError(token=1, message="late"))

        assert result.rejection.reason is RejectionReason.STALE_CALCULATION
        assert result.state.calculation.result == {"total": 1}

    def test_response_without_start_ignored(self, l_left_state: ProjectState) -> None:
        result = apply_command(l_left_state, CalculationSuccess(token=0, result={}))
        assert result.rejection.reason is RejectionReason.STALE_CALCULATION


class TestLoadProject:
    """Tests for restoring a saved snapshot."""

    def test_replaces_project(self, l_left_state: ProjectState, make_piece) -> None:
        material = MaterialSelection(material_id="COMPACT_BLACK")
        snapshot = ProjectSnapshot(
            pieces=(make_piece("piece-12", material_id="COMPACT_BLACK"),),
            pending_material=material,
            selected_shape_id="LINEAR_SQUARE",
            draft_id="draft-7",
        )
        state = reduce(l_left_state, CalculationStart())

        loaded = reduce(state, LoadProject(snapshot))

        assert loaded.pieces == snapshot.pieces
        assert loaded.pending_material == material
        assert loaded.selected_shape_id == "LINEAR_SQUARE"
        assert loaded.draft_id == "draft-7"
        assert loaded.active_piece_index == 0
        assert loaded.calculation.state is CalculationState.IDLE

    def test_new_ids_skip_loaded_ids(self, make_piece, material: MaterialSelection) -> None:
        snapshot = ProjectSnapshot(
            pieces=(make_piece("piece-12"), make_piece("legacy-id")),
            pending_material=material,
        )
        state = reduce(ProjectState.empty(), LoadProject(snapshot))
        state = reduce(state, ResetShape())
        state = reduce(state, CreatePiecesForShape(count=1))

        assert state.pieces[0].id == "piece-13"

    def test_stale_token_after_load(self, l_left_state: ProjectState) -> None:
        state = reduce(l_left_state, CalculationStart())
        state = reduce(state, LoadProject(ProjectSnapshot()))

        result = apply_command(state, CalculationSuccess(token=1, result={}))

        assert result.rejection.reason is RejectionReason.STALE_CALCULATION
        assert state.active_piece_index is None

    def test_set_draft_id(self, l_left_state: ProjectState) -> None:
        assert reduce(l_left_state, SetDraftId("d-1")).draft_id == "d-1"


class TestTotality:
    def test_unknown_command_leaves_state(self, l_left_state: ProjectState) -> None:
        result = apply_command(l_left_state, object())

        assert result.rejection.reason is RejectionReason.UNKNOWN_COMMAND
        assert result.state is l_left_state

    def test_reduce_never_mutates_input(self, l_left_state: ProjectState) -> None:
        snapshot = replace(l_left_state)
        reduce(l_left_state, AddAddonToPiece(0, AppliedAddon("A")))
        reduce(l_left_state, UpdatePiece(0, {"selected_attributes": {"X": "Y"}}))

        assert l_left_state == snapshot
        assert l_left_state.pieces[0].selected_attributes == {"MAT_FINISH": "OAK"}
