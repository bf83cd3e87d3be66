"""In-memory implementation of the RecordStore protocol."""

import copy
import uuid
from datetime import datetime, timezone
from typing import Any

from eacledger.db.store import Row, Table
from eacledger.errors import NotFoundError


class InMemoryRecordStore:
    """In-memory implementation of RecordStore.

    Rows live in insertion order per table. ``calls`` records every operation
    as ``(op, table)`` so callers can assert which I/O happened.
    """

    def __init__(self) -> None:
        self._tables: dict[Table, dict[str, Row]] = {table: {} for table in Table}
        self.calls: list[tuple[str, Table]] = []

    async def insert(self, table: Table, row: Row) -> Row:
        """Insert one row and return it as stored."""
        self.calls.append(("insert", table))
        now = datetime.now(timezone.utc)
        stored = copy.deepcopy(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored["created_at"] = now
        stored["updated_at"] = now
        self._tables[table][stored["id"]] = stored
        return copy.deepcopy(stored)

    async def select(
        self,
        table: Table,
        *,
        filters: Row | None = None,
        order_by: str | None = None,
        descending: bool = True,
    ) -> list[Row]:
        """Select rows matching all equality filters."""
        self.calls.append(("select", table))
        rows = [r for r in self._tables[table].values() if _matches(r, filters)]

        if order_by is not None:
            rows.sort(key=lambda r: _sort_key(r.get(order_by)), reverse=descending)

        return copy.deepcopy(rows)

    async def select_in(
        self,
        table: Table,
        column: str,
        values: list[Any],
        *,
        filters: Row | None = None,
    ) -> list[Row]:
        """Select rows whose column is one of values."""
        self.calls.append(("select_in", table))
        wanted = set(values)
        rows = [
            r
            for r in self._tables[table].values()
            if r.get(column) in wanted and _matches(r, filters)
        ]
        return copy.deepcopy(rows)

    async def get_one(self, table: Table, row_id: str) -> Row:
        """Fetch exactly one row by id."""
        self.calls.append(("get_one", table))
        row = self._tables[table].get(row_id)

        if row is None:
            raise NotFoundError(f"No row in {table.value} with id {row_id}")

        return copy.deepcopy(row)

    async def update(self, table: Table, row_id: str, patch: Row) -> Row:
        """Write only the columns present in patch."""
        self.calls.append(("update", table))
        row = self._tables[table].get(row_id)

        if row is None:
            raise NotFoundError(f"No row in {table.value} with id {row_id}")

        row.update(copy.deepcopy(patch))
        row["updated_at"] = datetime.now(timezone.utc)
        return copy.deepcopy(row)

    async def delete(self, table: Table, row_id: str) -> None:
        """Delete one row by id."""
        self.calls.append(("delete", table))
        self._tables[table].pop(row_id, None)

    def ops(self) -> list[str]:
        """Operation names in call order."""
        return [op for op, _ in self.calls]


def _matches(row: Row, filters: Row | None) -> bool:
    if not filters:
        return True
    return all(row.get(column) == value for column, value in filters.items())


def _sort_key(value: Any) -> tuple[int, Any]:
    # None sorts below everything
    return (0, "") if value is None else (1, value)
