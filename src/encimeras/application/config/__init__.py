"""Project file loading, validation and conversion to domain state."""

from .adapter import (
    CUSTOM_SHAPE_ID,
    config_to_catalogs,
    config_to_material,
    config_to_state,
    project_to_snapshot,
    project_to_snapshot_config,
    snapshot_config_to_snapshot,
)
from .loader import ConfigError, load_config, load_config_from_dict
from .schemas import (
    SUPPORTED_VERSIONS,
    ProjectConfiguration,
    ProjectSnapshotConfig,
)
from .validator import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    validate_config,
)

__all__ = [
    "CUSTOM_SHAPE_ID",
    "ConfigError",
    "ProjectConfiguration",
    "ProjectSnapshotConfig",
    "SUPPORTED_VERSIONS",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "config_to_catalogs",
    "config_to_material",
    "config_to_state",
    "load_config",
    "load_config_from_dict",
    "project_to_snapshot",
    "project_to_snapshot_config",
    "snapshot_config_to_snapshot",
    "validate_config",
]
