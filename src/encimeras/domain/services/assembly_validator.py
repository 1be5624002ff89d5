"""Assembly validation.

Every junction between consecutive pieces needs a joining method: an
applied addon whose category is ENSAMBLAJE. The joining addon of junction
``i`` (between pieces ``i`` and ``i + 1``) is stored on piece ``i + 1``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ..catalogs import CategoryLookup
from ..entities import AppliedAddon, Piece
from ..value_objects import AddonCategory

__all__ = [
    "AssemblyValidation",
    "addons_in_category",
    "find_assembly_addon_index",
    "validate_assemblies",
]


@dataclass(frozen=True)
class AssemblyValidation:
    """Result of checking the junctions of a project.

    Attributes:
        valid: True when every junction has a joining method.
        failing_junction_index: 0-based index of the first junction
            without one.
        message: Human-readable description naming the junction 1-based.
    """

    valid: bool
    failing_junction_index: int | None = None
    message: str | None = None

    @classmethod
    def ok(cls) -> "AssemblyValidation":
        return cls(valid=True)

    @classmethod
    def missing_assembly(cls, junction_index: int) -> "AssemblyValidation":
        number = junction_index + 1
        return cls(
            valid=False,
            failing_junction_index=junction_index,
            message=(
                f"Junction {number} (between piece {number} and piece {number + 1}) "
                "has no assembly method selected"
            ),
        )


def addons_in_category(
    addons: Sequence[AppliedAddon],
    category: AddonCategory,
    category_of: CategoryLookup,
) -> list[AppliedAddon]:
    """Applied addons whose code resolves to ``category``.

    Codes unknown to the catalog match no category.
    """
    return [addon for addon in addons if category_of(addon.code) is category]


def find_assembly_addon_index(piece: Piece, category_of: CategoryLookup) -> int | None:
    """Index of the first assembly addon applied to ``piece``, if any."""
    for i, addon in enumerate(piece.applied_addons):
        if category_of(addon.code) is AddonCategory.ENSAMBLAJE:
            return i
    return None


def validate_assemblies(
    pieces: Sequence[Piece], category_of: CategoryLookup
) -> AssemblyValidation:
    """Check that every junction has an assembly addon.

    Args:
        pieces: Pieces in array order.
        category_of: Addon code to category lookup.

    Returns:
        AssemblyValidation; on failure it identifies the first junction
        lacking an assembly addon.
    """
    if len(pieces) <= 1:
        return AssemblyValidation.ok()

    for i in range(1, len(pieces)):
        if find_assembly_addon_index(pieces[i], category_of) is None:
            return AssemblyValidation.missing_assembly(i - 1)

    return AssemblyValidation.ok()
