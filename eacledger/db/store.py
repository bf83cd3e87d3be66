"""Relational store protocol - the only seam services use for row I/O."""

from enum import Enum
from typing import Any, Protocol

Row = dict[str, Any]


class Table(str, Enum):
    """Tables the core reads and writes."""

    documents = "documents"
    certificates = "eacertificates"
    production_sources = "production_sources"
    organizations = "organizations"
    events = "events"


class RecordStore(Protocol):
    """Async row store with equality/set-membership filters.

    Every method raises ``PersistenceError`` on failure; single-row methods
    raise ``NotFoundError`` when no row matches. The store assigns ``id``
    (when absent), ``created_at`` and ``updated_at``.
    """

    async def insert(self, table: Table, row: Row) -> Row:
        """Insert one row and return it as stored.

        Args:
            table: Target table
            row: Column values (JSON-compatible)

        Returns:
            Stored row including generated columns
        """
        ...

    async def select(
        self,
        table: Table,
        *,
        filters: Row | None = None,
        order_by: str | None = None,
        descending: bool = True,
    ) -> list[Row]:
        """Select rows matching all equality filters.

        Args:
            table: Source table
            filters: Column -> required value
            order_by: Optional ordering column
            descending: Order direction

        Returns:
            Matching rows
        """
        ...

    async def select_in(
        self,
        table: Table,
        column: str,
        values: list[Any],
        *,
        filters: Row | None = None,
    ) -> list[Row]:
        """Select rows whose ``column`` is one of ``values``.

        Args:
            table: Source table
            column: Membership column
            values: Allowed values
            filters: Additional equality filters

        Returns:
            Matching rows
        """
        ...

    async def get_one(self, table: Table, row_id: str) -> Row:
        """Fetch exactly one row by id.

        Raises:
            NotFoundError: If no row has this id
        """
        ...

    async def update(self, table: Table, row_id: str, patch: Row) -> Row:
        """Write only the columns present in ``patch``.

        Raises:
            NotFoundError: If no row has this id
        """
        ...

    async def delete(self, table: Table, row_id: str) -> None:
        """Delete one row by id (no-op when absent)."""
        ...
