"""Validation of project configurations beyond schema checks.

Schema violations are reported by the loader. This module builds the
project through the reducer and reports what the schema cannot see:
rejected commands, layout data the engine would only tolerate, missing
assembly methods and catalog mismatches.
"""

from dataclasses import dataclass, field
from typing import Any

from encimeras.application.config.adapter import config_to_catalogs, config_to_state
from encimeras.application.config.loader import ConfigError
from encimeras.application.config.schemas import ProjectConfiguration
from encimeras.domain.entities import ProjectState
from encimeras.domain.services.assembly_validator import validate_assemblies
from encimeras.domain.services.layout_engine import check_layout_contract
from encimeras.domain.services.wizard import validate_piece_measurements
from encimeras.domain.value_objects import AddonCategory


@dataclass
class ValidationError:
    """A blocking problem: the project cannot be built or priced.

    Attributes:
        path: JSON path of the offending field (e.g. "pieces[1].addons[0]")
        message: Human-readable description of the error
        value: The offending value, if any
    """

    path: str
    message: str
    value: Any = None


@dataclass
class ValidationWarning:
    """A non-blocking concern about the project.

    Attributes:
        path: JSON path of the concerning field
        message: Human-readable description of the concern
        suggestion: Optional suggested remediation
    """

    path: str
    message: str
    suggestion: str | None = None


@dataclass
class ValidationResult:
    """Container for validation errors and warnings."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def exit_code(self) -> int:
        """CLI exit code: 0 clean, 1 errors, 2 warnings only."""
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    def add_error(self, path: str, message: str, value: Any = None) -> "ValidationResult":
        self.errors.append(ValidationError(path=path, message=message, value=value))
        return self

    def add_warning(
        self, path: str, message: str, suggestion: str | None = None
    ) -> "ValidationResult":
        self.warnings.append(ValidationWarning(path=path, message=message, suggestion=suggestion))
        return self

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


def check_catalog_advisories(
    config: ProjectConfiguration, state: ProjectState
) -> ValidationResult:
    """Compare the project against its inline catalog.

    Nothing is reported for an empty catalog section.
    """
    result = ValidationResult()
    addons, materials = config_to_catalogs(config)

    if len(materials):
        definition = materials.get(config.material.material_id)
        if definition is None:
            result.add_warning(
                "material.material_id",
                f"Material {config.material.material_id} is not in the catalog",
            )
        else:
            for attr_type in definition.invalid_attributes(config.material.selected_attributes):
                result.add_error(
                    f"material.selected_attributes.{attr_type}",
                    f"Value is not selectable for material {definition.id}",
                    config.material.selected_attributes[attr_type],
                )

    if not len(addons):
        return result

    material_category = materials.category_of(config.material.material_id)
    for i, piece in enumerate(state.pieces):
        for j, addon in enumerate(piece.applied_addons):
            path = f"pieces[{i}].addons[{j}]"
            definition = addons.get(addon.code)
            if definition is None:
                result.add_warning(
                    f"{path}.code",
                    f"Addon {addon.code} is not in the catalog and has no category",
                )
                continue
            if material_category is not None and not definition.allows_material(material_category):
                result.add_warning(
                    f"{path}.code",
                    f"Addon {addon.code} is not offered for {material_category} materials",
                )
            missing = [
                key.value
                for key in definition.required_measurements
                if not addon.measurements.get(key.value)
            ]
            if missing:
                result.add_warning(
                    f"{path}.measurements",
                    f"Addon {addon.code} needs values for {', '.join(missing)}",
                )

    validation = validate_assemblies(state.pieces, addons.category_of)
    if not validation.valid:
        junction = validation.failing_junction_index or 0
        choices = [d.code for d in addons.by_category(AddonCategory.ENSAMBLAJE)]
        result.add_warning(
            f"pieces[{junction + 1}].addons",
            validation.message or "Missing assembly method",
            suggestion=f"Add one of: {', '.join(choices)}" if choices else None,
        )
    return result


def validate_config(config: ProjectConfiguration) -> ValidationResult:
    """Perform full validation of a project configuration.

    Args:
        config: A ProjectConfiguration instance (already validated by Pydantic)

    Returns:
        ValidationResult containing any errors or warnings
    """
    result = ValidationResult()

    try:
        state = config_to_state(config)
    except ConfigError as e:
        for detail in e.details or [{"path": "", "message": e.message}]:
            result.add_error(detail.get("path", ""), detail["message"], detail.get("value"))
        return result

    for index in validate_piece_measurements(state.pieces):
        result.add_error(
            f"pieces[{index}].measurements",
            "Length and width must be positive",
        )

    for message in check_layout_contract(state.pieces):
        result.add_warning("pieces", message)

    result.merge(check_catalog_advisories(config, state))
    return result
