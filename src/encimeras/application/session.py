"""Explicit project state container.

A ``ProjectSession`` owns the current ``ProjectState`` and is the only
object that swaps it, always by applying commands through the reducer.
Interface layers (CLI, HTTP, pricing) hold a session instead of reaching
for a shared global store.
"""

from __future__ import annotations

import logging

from encimeras.domain.catalogs import AddonCatalog, CategoryLookup, build_applied_addon
from encimeras.domain.commands import (
    AddAddonToPiece,
    LoadProject,
    ProjectCommand,
    RemoveAddonFromPiece,
)
from encimeras.domain.entities import ProjectSnapshot, ProjectState
from encimeras.domain.reducer import (
    CommandResult,
    RejectionReason,
    apply_command,
)
from encimeras.domain.services.assembly_validator import (
    AssemblyValidation,
    find_assembly_addon_index,
    validate_assemblies,
)
from encimeras.domain.services.layout_engine import SpatialLayoutService
from encimeras.domain.services.wizard import StepGateResult, WizardStep, check_step_access
from encimeras.domain.value_objects import AddonCategory, LayoutResult

logger = logging.getLogger(__name__)


def assign_junction_assembly(
    state: ProjectState,
    junction_index: int,
    code: str | None,
    catalog: AddonCatalog,
) -> CommandResult:
    """Set the assembly method used at one junction.

    The assembly addon of junction ``i`` lives on piece ``i + 1``. Any
    assembly addon already on that piece is removed first; ``code=None``
    only clears it.

    Args:
        state: Current project state.
        junction_index: Junction between piece ``i`` and piece ``i + 1``.
        code: Addon code of an ENSAMBLAJE addon, or None to clear.
        catalog: Addon catalog used to resolve categories and defaults.

    Returns:
        CommandResult of the last command applied.
    """
    if not 0 <= junction_index < state.junction_count:
        return CommandResult.rejected(
            state,
            RejectionReason.INDEX_OUT_OF_RANGE,
            f"Junction index {junction_index} is out of range "
            f"({state.junction_count} junctions)",
        )

    definition = None
    if code is not None:
        definition = catalog.get(code)
        if definition is None or definition.category is not AddonCategory.ENSAMBLAJE:
            return CommandResult.rejected(
                state,
                RejectionReason.INVALID_UPDATE,
                f"Addon {code} is not an assembly addon",
            )

    piece_index = junction_index + 1
    result = CommandResult.ok(state)

    existing = find_assembly_addon_index(state.pieces[piece_index], catalog.category_of)
    if existing is not None:
        result = apply_command(
            result.state, RemoveAddonFromPiece(index=piece_index, addon_index=existing)
        )
        if not result.accepted:
            return CommandResult.rejected(state, result.rejection.reason, result.rejection.message)  # type: ignore[union-attr]

    if definition is not None:
        result = apply_command(
            result.state,
            AddAddonToPiece(index=piece_index, addon=build_applied_addon(definition)),
        )
        if not result.accepted:
            return CommandResult.rejected(state, result.rejection.reason, result.rejection.message)  # type: ignore[union-attr]

    return result


class ProjectSession:
    """Holds one project and applies commands to it.

    Attributes:
        state: Current project state.
        layout_service: Service used by ``layout``.
    """

    def __init__(
        self,
        state: ProjectState | None = None,
        layout_service: SpatialLayoutService | None = None,
    ) -> None:
        self.state = state if state is not None else ProjectState.empty()
        self.layout_service = layout_service or SpatialLayoutService()

    def dispatch(self, command: ProjectCommand) -> CommandResult:
        """Apply a command and keep the resulting state."""
        result = apply_command(self.state, command)
        self.state = result.state
        return result

    def reset(self) -> None:
        """Discard the project and start from an empty state."""
        logger.info("Project session reset")
        self.state = ProjectState.empty()

    def load(self, snapshot: ProjectSnapshot) -> CommandResult:
        logger.info(
            f"Loading project snapshot with {len(snapshot.pieces)} pieces "
            f"(draft {snapshot.draft_id or '-'})"
        )
        return self.dispatch(LoadProject(snapshot))

    def assign_junction_assembly(
        self, junction_index: int, code: str | None, catalog: AddonCatalog
    ) -> CommandResult:
        result = assign_junction_assembly(self.state, junction_index, code, catalog)
        self.state = result.state
        return result

    def layout(self) -> LayoutResult:
        return self.layout_service.compute_layout(self.state.pieces)

    def validate_assemblies(self, category_of: CategoryLookup) -> AssemblyValidation:
        return validate_assemblies(self.state.pieces, category_of)

    def can_enter(self, step: WizardStep, category_of: CategoryLookup) -> StepGateResult:
        return check_step_access(self.state, step, category_of)
