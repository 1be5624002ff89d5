"""Partial updates of immutable records.

Each entity declares which fields are merged key by key and which are
read-only; every other field is replaced wholesale by a partial update.
"""

from __future__ import annotations

from dataclasses import fields, replace
from typing import Any, Mapping, TypeVar

T = TypeVar("T")

# Piece fields merged key by key in partial updates
PIECE_MERGE_FIELDS: frozenset[str] = frozenset({"selected_attributes"})
PIECE_READ_ONLY_FIELDS: frozenset[str] = frozenset({"id"})

# Applied addon fields merged key by key in partial updates
ADDON_MERGE_FIELDS: frozenset[str] = frozenset({"measurements"})
ADDON_READ_ONLY_FIELDS: frozenset[str] = frozenset()


def merge_record(
    record: T,
    changes: Mapping[str, Any],
    merge_fields: frozenset[str] = frozenset(),
    read_only_fields: frozenset[str] = frozenset(),
) -> T:
    """Return a copy of a dataclass record with ``changes`` applied.

    Fields listed in ``merge_fields`` hold mappings; their new value is the
    old mapping updated with the given keys. Other fields are replaced.

    Args:
        record: Frozen dataclass instance to update.
        changes: Field name to new value.
        merge_fields: Mapping fields merged key by key.
        read_only_fields: Fields that may not be changed.

    Returns:
        A new record; ``record`` is left untouched.

    Raises:
        ValueError: If ``changes`` names an unknown or read-only field.
    """
    known = {f.name for f in fields(record)}  # type: ignore[arg-type]
    unknown = set(changes) - known
    if unknown:
        raise ValueError(
            f"Unknown fields for {type(record).__name__}: {', '.join(sorted(unknown))}"
        )
    locked = set(changes) & read_only_fields
    if locked:
        raise ValueError(
            f"Read-only fields for {type(record).__name__}: {', '.join(sorted(locked))}"
        )

    updates: dict[str, Any] = {}
    for name, value in changes.items():
        if name in merge_fields and value is not None:
            updates[name] = {**getattr(record, name), **value}
        else:
            updates[name] = value
    return replace(record, **updates)  # type: ignore[type-var]
