"""Preconditions for moving between wizard steps."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Sequence

from ..catalogs import CategoryLookup
from ..entities import Piece, ProjectState
from .assembly_validator import validate_assemblies


class WizardStep(IntEnum):
    MATERIAL = 0
    SHAPE = 1
    ASSEMBLY = 2
    COMPLEMENTS = 3
    SUMMARY = 4


@dataclass(frozen=True)
class StepGateResult:
    allowed: bool
    message: str | None = None
    blocking_step: WizardStep | None = None


def validate_piece_measurements(pieces: Sequence[Piece]) -> list[int]:
    """Indices of pieces whose length or width is not strictly positive."""
    return [i for i, piece in enumerate(pieces) if not piece.measurements.is_valid]


def check_step_access(
    state: ProjectState, step: WizardStep, category_of: CategoryLookup
) -> StepGateResult:
    """Check whether the wizard may show ``step`` for the current project.

    Reaching the shape step needs a staged material; the assembly step
    and later need pieces with valid measurements; steps after assembly
    need every junction to have an assembly addon.
    """
    if step >= WizardStep.SHAPE and state.pending_material is None:
        return StepGateResult(
            allowed=False,
            message="A material must be selected first",
            blocking_step=WizardStep.MATERIAL,
        )

    if step >= WizardStep.ASSEMBLY:
        if not state.has_pieces:
            return StepGateResult(
                allowed=False,
                message="A shape must be chosen first",
                blocking_step=WizardStep.SHAPE,
            )
        invalid = validate_piece_measurements(state.pieces)
        if invalid:
            numbers = ", ".join(str(i + 1) for i in invalid)
            return StepGateResult(
                allowed=False,
                message=f"Pieces {numbers} need a positive length and width",
                blocking_step=WizardStep.SHAPE,
            )

    if step > WizardStep.ASSEMBLY:
        validation = validate_assemblies(state.pieces, category_of)
        if not validation.valid:
            return StepGateResult(
                allowed=False,
                message=validation.message,
                blocking_step=WizardStep.ASSEMBLY,
            )

    return StepGateResult(allowed=True)
