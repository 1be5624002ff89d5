"""Project reducer: the single place where project state changes.

``apply_command`` maps a state and a command to a ``CommandResult``
holding the next state and, when the command was refused, a
``CommandRejection`` explaining why. A refused command always returns the
previous state unchanged. ``reduce`` is the state-only form.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Mapping

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
    Piece,
    ProjectState,
)
from .merge import (
    ADDON_MERGE_FIELDS,
    ADDON_READ_ONLY_FIELDS,
    PIECE_MERGE_FIELDS,
    PIECE_READ_ONLY_FIELDS,
    merge_record,
)
from .piece_factory import (
    PieceCreationError,
    PieceIdFactory,
    create_blank_pieces,
    create_pieces,
)
from .value_objects import ConnectionType, JointType, PieceLayout, PieceMeasurements

logger = logging.getLogger(__name__)

__all__ = [
    "CommandRejection",
    "CommandResult",
    "RejectionReason",
    "apply_command",
    "reduce",
]


class RejectionReason(str, Enum):
    """Why a command left the state unchanged."""

    GUARD_VIOLATION = "guard_violation"
    ARITY_MISMATCH = "arity_mismatch"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    INVALID_UPDATE = "invalid_update"
    STALE_CALCULATION = "stale_calculation"
    UNKNOWN_COMMAND = "unknown_command"


@dataclass(frozen=True)
class CommandRejection:
    reason: RejectionReason
    message: str


@dataclass(frozen=True)
class CommandResult:
    """Outcome of applying one command.

    Attributes:
        state: Next state; the previous state when the command was rejected.
        rejection: Why the command was refused, None when accepted.
    """

    state: ProjectState
    rejection: CommandRejection | None = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None

    @classmethod
    def ok(cls, state: ProjectState) -> "CommandResult":
        return cls(state=state)

    @classmethod
    def rejected(
        cls, state: ProjectState, reason: RejectionReason, message: str
    ) -> "CommandResult":
        return cls(state=state, rejection=CommandRejection(reason=reason, message=message))


# =============================================================================
# Helpers
# =============================================================================


def _piece_index_error(state: ProjectState, index: int) -> CommandResult | None:
    if 0 <= index < len(state.pieces):
        return None
    return CommandResult.rejected(
        state,
        RejectionReason.INDEX_OUT_OF_RANGE,
        f"Piece index {index} is out of range ({len(state.pieces)} pieces)",
    )


def _replace_piece(state: ProjectState, index: int, piece: Piece) -> ProjectState:
    pieces = list(state.pieces)
    pieces[index] = piece
    return replace(state, pieces=tuple(pieces))


def _creation_guard(state: ProjectState) -> CommandResult | None:
    if state.has_pieces:
        return CommandResult.rejected(
            state,
            RejectionReason.GUARD_VIOLATION,
            "Pieces already exist; reset the shape before creating new pieces",
        )
    if state.pending_material is None:
        return CommandResult.rejected(
            state,
            RejectionReason.GUARD_VIOLATION,
            "A material must be staged before creating pieces",
        )
    return None


def _coerce_layout(layout: Any) -> PieceLayout | None:
    if layout is None or isinstance(layout, PieceLayout):
        return layout
    if not isinstance(layout, Mapping):
        raise TypeError(f"layout must be a PieceLayout or a mapping, got {type(layout).__name__}")
    values = dict(layout)
    if "connection_type" in values:
        values["connection_type"] = ConnectionType(values["connection_type"])
    if values.get("joint_type") is not None:
        values["joint_type"] = JointType(values["joint_type"])
    return PieceLayout(**values)


def _coerce_piece_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Convert plain mappings in a piece update to domain values.

    Raises:
        TypeError: If a field holds a value of the wrong kind.
        ValueError: If a converted value is out of range.
    """
    coerced = dict(changes)
    if "measurements" in coerced:
        measurements = coerced["measurements"]
        if isinstance(measurements, Mapping):
            coerced["measurements"] = PieceMeasurements(**measurements)
        elif not isinstance(measurements, PieceMeasurements):
            raise TypeError(
                "measurements must be PieceMeasurements or a mapping, "
                f"got {type(measurements).__name__}"
            )
    if "layout" in coerced:
        coerced["layout"] = _coerce_layout(coerced["layout"])
    if "selected_attributes" in coerced and not isinstance(
        coerced["selected_attributes"], Mapping
    ):
        raise TypeError(
            "selected_attributes must be a mapping, "
            f"got {type(coerced['selected_attributes']).__name__}"
        )
    if "applied_addons" in coerced:
        coerced["applied_addons"] = tuple(
            addon if isinstance(addon, AppliedAddon) else AppliedAddon(**addon)
            for addon in coerced["applied_addons"] or ()
        )
    return coerced


# =============================================================================
# Command handlers
# =============================================================================


def _stage_material(state: ProjectState, command: StageMaterial) -> CommandResult:
    selection = command.selection
    new_state = replace(state, pending_material=selection)
    if state.has_pieces:
        new_state = replace(
            new_state,
            pieces=tuple(
                replace(
                    piece,
                    material_id=selection.material_id,
                    selected_attributes=dict(selection.selected_attributes),
                )
                for piece in state.pieces
            ),
        )
    return CommandResult.ok(new_state)


def _create_pieces_for_shape(
    state: ProjectState, command: CreatePiecesForShape
) -> CommandResult:
    guard = _creation_guard(state)
    if guard is not None:
        return guard

    id_factory = PieceIdFactory(start=state.next_piece_serial)
    try:
        pieces = create_blank_pieces(command.count, state.pending_material, id_factory)  # type: ignore[arg-type]
    except PieceCreationError as e:
        return CommandResult.rejected(state, RejectionReason.ARITY_MISMATCH, str(e))

    return CommandResult.ok(
        replace(
            state,
            pieces=tuple(pieces),
            active_piece_index=0,
            next_piece_serial=id_factory.next_serial,
        )
    )


def _create_pieces_from_variation(
    state: ProjectState, command: CreatePiecesFromVariation
) -> CommandResult:
    guard = _creation_guard(state)
    if guard is not None:
        return guard

    id_factory = PieceIdFactory(start=state.next_piece_serial)
    try:
        pieces = create_pieces(command.variation, state.pending_material, id_factory)  # type: ignore[arg-type]
    except PieceCreationError as e:
        return CommandResult.rejected(state, RejectionReason.ARITY_MISMATCH, str(e))

    return CommandResult.ok(
        replace(
            state,
            pieces=tuple(pieces),
            active_piece_index=0,
            selected_shape_id=command.variation.id,
            next_piece_serial=id_factory.next_serial,
        )
    )


def _reset_shape(state: ProjectState, command: ResetShape) -> CommandResult:
    return CommandResult.ok(replace(state, pieces=(), active_piece_index=None))


def _set_piece_measurements(
    state: ProjectState, command: SetPieceMeasurements
) -> CommandResult:
    error = _piece_index_error(state, command.index)
    if error is not None:
        return error
    piece = replace(state.pieces[command.index], measurements=command.measurements)
    return CommandResult.ok(_replace_piece(state, command.index, piece))


def _update_piece(state: ProjectState, command: UpdatePiece) -> CommandResult:
    error = _piece_index_error(state, command.index)
    if error is not None:
        return error
    try:
        piece = merge_record(
            state.pieces[command.index],
            _coerce_piece_changes(command.changes),
            merge_fields=PIECE_MERGE_FIELDS,
            read_only_fields=PIECE_READ_ONLY_FIELDS,
        )
    except (TypeError, ValueError) as e:
        return CommandResult.rejected(state, RejectionReason.INVALID_UPDATE, str(e))
    return CommandResult.ok(_replace_piece(state, command.index, piece))


def _add_addon(state: ProjectState, command: AddAddonToPiece) -> CommandResult:
    error = _piece_index_error(state, command.index)
    if error is not None:
        return error
    piece = state.pieces[command.index]
    piece = replace(piece, applied_addons=piece.applied_addons + (command.addon,))
    return CommandResult.ok(_replace_piece(state, command.index, piece))


def _addon_index_error(
    state: ProjectState, index: int, addon_index: int
) -> CommandResult | None:
    error = _piece_index_error(state, index)
    if error is not None:
        return error
    addons = state.pieces[index].applied_addons
    if 0 <= addon_index < len(addons):
        return None
    return CommandResult.rejected(
        state,
        RejectionReason.INDEX_OUT_OF_RANGE,
        f"Addon index {addon_index} is out of range for piece {index} "
        f"({len(addons)} addons)",
    )


def _remove_addon(state: ProjectState, command: RemoveAddonFromPiece) -> CommandResult:
    error = _addon_index_error(state, command.index, command.addon_index)
    if error is not None:
        return error
    piece = state.pieces[command.index]
    addons = tuple(
        addon for i, addon in enumerate(piece.applied_addons) if i != command.addon_index
    )
    return CommandResult.ok(
        _replace_piece(state, command.index, replace(piece, applied_addons=addons))
    )


def _update_addon(state: ProjectState, command: UpdateAddonInPiece) -> CommandResult:
    error = _addon_index_error(state, command.index, command.addon_index)
    if error is not None:
        return error
    piece = state.pieces[command.index]
    addons = list(piece.applied_addons)
    try:
        addons[command.addon_index] = merge_record(
            addons[command.addon_index],
            command.changes,
            merge_fields=ADDON_MERGE_FIELDS,
            read_only_fields=ADDON_READ_ONLY_FIELDS,
        )
    except (TypeError, ValueError) as e:
        return CommandResult.rejected(state, RejectionReason.INVALID_UPDATE, str(e))
    return CommandResult.ok(
        _replace_piece(state, command.index, replace(piece, applied_addons=tuple(addons)))
    )


def _set_active_piece(state: ProjectState, command: SetActivePiece) -> CommandResult:
    return CommandResult.ok(replace(state, active_piece_index=command.index))


def _calculation_start(state: ProjectState, command: CalculationStart) -> CommandResult:
    return CommandResult.ok(
        replace(
            state,
            calculation=CalculationStatus(
                state=CalculationState.PENDING,
                token=state.calculation.token + 1,
            ),
        )
    )


def _stale_calculation(state: ProjectState, token: int) -> CommandResult | None:
    current = state.calculation
    if current.is_pending and token == current.token:
        return None
    return CommandResult.rejected(
        state,
        RejectionReason.STALE_CALCULATION,
        f"Ignoring response for calculation {token}; "
        f"current is {current.token} ({current.state.value})",
    )


def _calculation_success(
    state: ProjectState, command: CalculationSuccess
) -> CommandResult:
    stale = _stale_calculation(state, command.token)
    if stale is not None:
        return stale
    return CommandResult.ok(
        replace(
            state,
            calculation=CalculationStatus(
                state=CalculationState.SUCCESS,
                result=command.result,
                token=command.token,
            ),
        )
    )


def _calculation_error(state: ProjectState, command: CalculationError) -> CommandResult:
    stale = _stale_calculation(state, command.token)
    if stale is not None:
        return stale
    return CommandResult.ok(
        replace(
            state,
            calculation=CalculationStatus(
                state=CalculationState.ERROR,
                message=command.message,
                token=command.token,
            ),
        )
    )


def _load_project(state: ProjectState, command: LoadProject) -> CommandResult:
    snapshot = command.snapshot
    serials = [
        serial
        for serial in (PieceIdFactory.serial_of(p.id) for p in snapshot.pieces)
        if serial is not None
    ]
    next_serial = max([state.next_piece_serial, *(s + 1 for s in serials)])
    return CommandResult.ok(
        ProjectState(
            pieces=tuple(snapshot.pieces),
            active_piece_index=0 if snapshot.pieces else None,
            selected_shape_id=snapshot.selected_shape_id,
            pending_material=snapshot.pending_material,
            calculation=CalculationStatus(token=state.calculation.token),
            draft_id=snapshot.draft_id,
            next_piece_serial=next_serial,
        )
    )


def _set_draft_id(state: ProjectState, command: SetDraftId) -> CommandResult:
    return CommandResult.ok(replace(state, draft_id=command.draft_id))


_HANDLERS: dict[type, Callable[[ProjectState, Any], CommandResult]] = {
    StageMaterial: _stage_material,
    CreatePiecesForShape: _create_pieces_for_shape,
    CreatePiecesFromVariation: _create_pieces_from_variation,
    ResetShape: _reset_shape,
    SetPieceMeasurements: _set_piece_measurements,
    UpdatePiece: _update_piece,
    AddAddonToPiece: _add_addon,
    RemoveAddonFromPiece: _remove_addon,
    UpdateAddonInPiece: _update_addon,
    SetActivePiece: _set_active_piece,
    CalculationStart: _calculation_start,
    CalculationSuccess: _calculation_success,
    CalculationError: _calculation_error,
    LoadProject: _load_project,
    SetDraftId: _set_draft_id,
}


# =============================================================================
# Public API
# =============================================================================


def apply_command(state: ProjectState, command: ProjectCommand | Any) -> CommandResult:
    """Apply one command to a project state.

    Never raises for well-typed states: rejected and unrecognized commands
    return the previous state together with a ``CommandRejection``.

    Args:
        state: Current project state.
        command: One of the commands in ``encimeras.domain.commands``.

    Returns:
        CommandResult with the next state.
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        result = CommandResult.rejected(
            state,
            RejectionReason.UNKNOWN_COMMAND,
            f"Unrecognized command: {type(command).__name__}",
        )
    else:
        result = handler(state, command)

    name = type(command).__name__
    if result.rejection is not None:
        logger.warning(
            f"{name} rejected ({result.rejection.reason.value}): {result.rejection.message}"
        )
    else:
        logger.debug(f"{name} applied ({len(result.state.pieces)} pieces)")
    return result


def reduce(state: ProjectState, command: ProjectCommand | Any) -> ProjectState:
    """Return the state that follows ``command``; unchanged when rejected."""
    return apply_command(state, command).state
