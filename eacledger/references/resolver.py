"""Projection of UI payloads into stored rows and reference id arrays.

Pure functions, no I/O. Reference arrays are untyped id lists: nothing here
checks that an id names an existing row, in either direction.
"""

from collections.abc import Iterable, Mapping
from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel

_ID_KEYS = ("id", "docId", "doc_id")


def item_id(item: Any) -> Any:
    """Id carried by one UI item: ``id`` when present, else ``docId``.

    ``id`` wins whenever it is not None, even when it is empty; empty ids are
    dropped later by ``project_ids``.
    """
    if item is None or isinstance(item, str):
        return item

    if isinstance(item, Mapping):
        for key in _ID_KEYS:
            if item.get(key) is not None:
                return item[key]
        return None

    for attr in ("id", "doc_id"):
        value = getattr(item, attr, None)
        if value is not None:
            return value
    return None


def project_ids(items: Iterable[Any] | None) -> list[str] | None:
    """Project UI items down to a bare id array.

    Falsy ids are dropped and an empty result is stored as None, so "never
    set" and "explicitly cleared" both read back as no references.

    Examples:
        >>> project_ids([{"id": "a"}, {"id": ""}, {"docId": "b"}])
        ['a', 'b']
        >>> project_ids([]) is None
        True
    """
    if items is None:
        return None
    ids = [str(i) for i in (item_id(item) for item in items) if i]
    return ids or None


def to_column(value: Any) -> Any:
    """JSON-compatible column value for a payload field."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, list | tuple):
        return [to_column(v) for v in value]
    return value


def build_create_row(payload: BaseModel, *, id_fields: Iterable[str] = ()) -> dict[str, Any]:
    """Row for an insert: every payload field, reference lists projected."""
    return _build(payload, type(payload).model_fields.keys(), set(id_fields))


def build_update_patch(payload: BaseModel, *, id_fields: Iterable[str] = ()) -> dict[str, Any]:
    """Patch for a partial update.

    Only keys present in the payload are written (presence, not truthiness):
    an absent key leaves the column untouched, a present None clears it.
    """
    return _build(payload, payload.model_fields_set, set(id_fields))


def _build(payload: BaseModel, names: Iterable[str], id_fields: set[str]) -> dict[str, Any]:
    row: dict[str, Any] = {}
    for name in type(payload).model_fields:
        if name not in names:
            continue
        value = getattr(payload, name)
        row[name] = project_ids(value) if name in id_fields else to_column(value)
    return row


def merge_reference_ids(current: Iterable[str] | None, added: Iterable[str]) -> list[str] | None:
    """Append ids not already present, keeping order; None when empty."""
    merged = list(current or [])
    for ref in added:
        if ref and ref not in merged:
            merged.append(ref)
    return merged or None


def remove_reference_id(current: Iterable[str] | None, ref: str) -> list[str] | None:
    """Drop every occurrence of ``ref``; None when nothing is left."""
    remaining = [r for r in (current or []) if r != ref]
    return remaining or None
