"""Domain services: assembly validation, spatial layout and wizard gates."""

from .assembly_validator import (
    AssemblyValidation,
    addons_in_category,
    find_assembly_addon_index,
    validate_assemblies,
)
from .layout_engine import (
    MIN_VISUAL_LENGTH_M,
    PIECE_THICKNESS_M,
    SpatialLayoutService,
    check_layout_contract,
    compute_layout,
)
from .wizard import (
    StepGateResult,
    WizardStep,
    check_step_access,
    validate_piece_measurements,
)

__all__ = [
    "AssemblyValidation",
    "MIN_VISUAL_LENGTH_M",
    "PIECE_THICKNESS_M",
    "SpatialLayoutService",
    "StepGateResult",
    "WizardStep",
    "addons_in_category",
    "check_layout_contract",
    "check_step_access",
    "compute_layout",
    "find_assembly_addon_index",
    "validate_assemblies",
    "validate_piece_measurements",
]
