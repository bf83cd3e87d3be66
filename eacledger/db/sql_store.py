"""SQL implementation of the RecordStore protocol."""

import logging
from typing import Any

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from eacledger.db.models import ROW_MODELS, Base
from eacledger.db.store import Row, Table
from eacledger.errors import NotFoundError, PersistenceError, error_message

logger = logging.getLogger(__name__)


class SqlRecordStore:
    """SQL implementation of RecordStore.

    Each call runs in its own session and commits before returning, so a
    failed insert never leaves a half-written row behind.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def insert(self, table: Table, row: Row) -> Row:
        """Insert one row and return it as stored."""
        model = ROW_MODELS[table]
        try:
            async with self._session_factory() as session:
                obj = model(**_to_attrs(model, row))
                session.add(obj)
                await session.commit()
                await session.refresh(obj)
                return _to_row(obj)
        except SQLAlchemyError as exc:
            logger.warning("Insert into %s failed: %s", table.value, exc)
            raise PersistenceError(error_message(exc)) from exc

    async def select(
        self,
        table: Table,
        *,
        filters: Row | None = None,
        order_by: str | None = None,
        descending: bool = True,
    ) -> list[Row]:
        """Select rows matching all equality filters."""
        model = ROW_MODELS[table]
        query = select(model)

        for column, value in (filters or {}).items():
            query = query.where(_column(model, column) == value)

        if order_by is not None:
            col = _column(model, order_by)
            query = query.order_by(col.desc() if descending else col.asc())

        return await self._fetch(table, query)

    async def select_in(
        self,
        table: Table,
        column: str,
        values: list[Any],
        *,
        filters: Row | None = None,
    ) -> list[Row]:
        """Select rows whose column is one of values."""
        model = ROW_MODELS[table]
        query = select(model).where(_column(model, column).in_(values))

        for name, value in (filters or {}).items():
            query = query.where(_column(model, name) == value)

        return await self._fetch(table, query)

    async def get_one(self, table: Table, row_id: str) -> Row:
        """Fetch exactly one row by id."""
        model = ROW_MODELS[table]
        try:
            async with self._session_factory() as session:
                obj = await session.get(model, row_id)
        except SQLAlchemyError as exc:
            raise PersistenceError(error_message(exc)) from exc

        if obj is None:
            raise NotFoundError(f"No row in {table.value} with id {row_id}")

        return _to_row(obj)

    async def update(self, table: Table, row_id: str, patch: Row) -> Row:
        """Write only the columns present in patch."""
        model = ROW_MODELS[table]
        try:
            async with self._session_factory() as session:
                obj = await session.get(model, row_id)
                if obj is None:
                    raise NotFoundError(f"No row in {table.value} with id {row_id}")

                for attr, value in _to_attrs(model, patch).items():
                    setattr(obj, attr, value)

                await session.commit()
                await session.refresh(obj)
                return _to_row(obj)
        except SQLAlchemyError as exc:
            logger.warning("Update of %s/%s failed: %s", table.value, row_id, exc)
            raise PersistenceError(error_message(exc)) from exc

    async def delete(self, table: Table, row_id: str) -> None:
        """Delete one row by id."""
        model = ROW_MODELS[table]
        try:
            async with self._session_factory() as session:
                obj = await session.get(model, row_id)
                if obj is not None:
                    await session.delete(obj)
                    await session.commit()
        except SQLAlchemyError as exc:
            logger.warning("Delete of %s/%s failed: %s", table.value, row_id, exc)
            raise PersistenceError(error_message(exc)) from exc

    async def _fetch(self, table: Table, query: Any) -> list[Row]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return [_to_row(obj) for obj in result.scalars().all()]
        except SQLAlchemyError as exc:
            logger.warning("Select from %s failed: %s", table.value, exc)
            raise PersistenceError(error_message(exc)) from exc


def _column_attrs(model: type[Base]) -> dict[str, str]:
    """Map column name -> mapped attribute key (``metadata`` -> ``metadata_``)."""
    return {attr.columns[0].name: attr.key for attr in inspect(model).column_attrs}


def _column(model: type[Base], name: str) -> Any:
    attrs = _column_attrs(model)
    if name not in attrs:
        raise PersistenceError(f"Unknown column {name!r} on {model.__tablename__}")
    return getattr(model, attrs[name])


def _to_attrs(model: type[Base], row: Row) -> dict[str, Any]:
    attrs = _column_attrs(model)
    unknown = set(row) - set(attrs)
    if unknown:
        raise PersistenceError(
            f"Unknown columns for {model.__tablename__}: {', '.join(sorted(unknown))}"
        )
    return {attrs[name]: value for name, value in row.items()}


def _to_row(obj: Base) -> Row:
    return {
        attr.columns[0].name: getattr(obj, attr.key)
        for attr in inspect(type(obj)).column_attrs
    }
