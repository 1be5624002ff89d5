"""Addon and material catalogs.

Both catalogs are supplied from outside the core (an admin backend, a
configuration file). The core only reads them; a code that is missing
from a catalog is never an error here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable

from .entities import AppliedAddon
from .value_objects import AddonCategory, MeasurementKey

# Resolves an addon code to its category, None for unknown codes
CategoryLookup = Callable[[str], "AddonCategory | None"]


@dataclass(frozen=True)
class AddonDefinition:
    """Catalog entry for an addon.

    Attributes:
        code: Unique addon code (e.g. ``"UNION_RECTA"``).
        name: Display name.
        category: Addon category.
        required_measurements: Measurement keys the user must fill in.
        allowed_material_categories: Material categories the addon can be
            applied to.
    """

    code: str
    name: str
    category: AddonCategory
    required_measurements: tuple[MeasurementKey, ...] = ()
    allowed_material_categories: frozenset[str] = field(default_factory=frozenset)

    def allows_material(self, material_category: str | None) -> bool:
        return (
            material_category is not None
            and material_category in self.allowed_material_categories
        )


def default_addon_measurements(definition: AddonDefinition) -> dict[str, float]:
    """Initial measurements for a newly applied addon.

    Quantity and linear meters start at 1; dimensions start at 0 so the
    user is forced to enter them.
    """
    measurements: dict[str, float] = {}
    for key in definition.required_measurements:
        if key in (MeasurementKey.QUANTITY, MeasurementKey.LENGTH_ML):
            measurements[key.value] = 1
        else:
            measurements[key.value] = 0
    return measurements


def build_applied_addon(definition: AddonDefinition) -> AppliedAddon:
    return AppliedAddon(
        code=definition.code,
        measurements=default_addon_measurements(definition),
    )


class AddonCatalog:
    """Read-only lookup of addon definitions by code."""

    def __init__(self, definitions: Iterable[AddonDefinition] = ()) -> None:
        self._by_code: dict[str, AddonDefinition] = {}
        for definition in definitions:
            self._by_code[definition.code] = definition

    def __len__(self) -> int:
        return len(self._by_code)

    def __contains__(self, code: object) -> bool:
        return code in self._by_code

    def get(self, code: str) -> AddonDefinition | None:
        return self._by_code.get(code)

    def category_of(self, code: str) -> AddonCategory | None:
        """Category of an addon code, None when the code is unknown."""
        definition = self._by_code.get(code)
        return definition.category if definition is not None else None

    def definitions(self) -> list[AddonDefinition]:
        return list(self._by_code.values())

    def by_category(self, category: AddonCategory) -> list[AddonDefinition]:
        return [d for d in self._by_code.values() if d.category is category]

    def compatible_with(
        self, category: AddonCategory, material_category: str | None
    ) -> list[AddonDefinition]:
        """Addons of ``category`` that can be applied to a material category."""
        return [d for d in self.by_category(category) if d.allows_material(material_category)]


@dataclass(frozen=True)
class MaterialDefinition:
    """Catalog entry for a countertop material.

    Attributes:
        id: Material identifier.
        name: Display name.
        category: Material category used for addon compatibility
            (e.g. ``"HPL"``, ``"COMPACTO"``).
        selectable_attributes: Attribute type to allowed values.
    """

    id: str
    name: str
    category: str
    selectable_attributes: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def invalid_attributes(self, selected: dict[str, str]) -> list[str]:
        """Attribute types in ``selected`` whose value is not selectable."""
        invalid: list[str] = []
        for attr_type, value in selected.items():
            allowed = self.selectable_attributes.get(attr_type)
            if allowed is None or value not in allowed:
                invalid.append(attr_type)
        return invalid


class MaterialCatalog:
    """Read-only lookup of material definitions by id."""

    def __init__(self, definitions: Iterable[MaterialDefinition] = ()) -> None:
        self._by_id: dict[str, MaterialDefinition] = {d.id: d for d in definitions}

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, material_id: str | None) -> MaterialDefinition | None:
        if material_id is None:
            return None
        return self._by_id.get(material_id)

    def category_of(self, material_id: str | None) -> str | None:
        definition = self.get(material_id)
        return definition.category if definition is not None else None
