"""Shared CRUD flow for owning-entity services."""

import logging
from collections.abc import Sequence
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from eacledger.db.store import RecordStore, Row, Table
from eacledger.identity import IdentityProvider, require_principal
from eacledger.models.validation import validate_payload
from eacledger.references.resolver import build_create_row, build_update_patch

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


class EntityService(Generic[R]):
    """Create/update/delete/read for one table.

    Mutations check the principal first and validate second, so neither an
    unauthenticated nor a malformed call reaches the store. Each mutation is
    then exactly one store call.
    """

    table: ClassVar[Table]
    record_model: ClassVar[type[BaseModel]]
    create_model: ClassVar[type[BaseModel]]
    update_model: ClassVar[type[BaseModel]]
    id_fields: ClassVar[tuple[str, ...]] = ("documents",)
    order_by: ClassVar[str] = "created_at"

    def __init__(self, records: RecordStore, identity: IdentityProvider) -> None:
        self._records = records
        self._identity = identity

    async def create(self, payload: BaseModel | dict[str, Any]) -> R:
        """Insert a new record from a form payload.

        Raises:
            AuthError: No principal
            ValidationError: Payload rejected
            PersistenceError: Insert failed
        """
        await require_principal(self._identity)
        data = validate_payload(self.create_model, payload)

        row = self._prepare_row(build_create_row(data, id_fields=self.id_fields))
        stored = await self._records.insert(self.table, row)

        logger.info("Created %s %s", self.table.value, stored.get("id"))
        return self._to_record(stored)

    async def update(self, record_id: str, payload: BaseModel | dict[str, Any]) -> R:
        """Write only the keys present in the payload.

        Raises:
            AuthError: No principal
            ValidationError: Payload rejected
            NotFoundError: No record with this id
        """
        await require_principal(self._identity)
        data = validate_payload(self.update_model, payload)

        patch = self._prepare_row(build_update_patch(data, id_fields=self.id_fields))
        stored = await self._records.update(self.table, record_id, patch)
        return self._to_record(stored)

    async def delete(self, record_id: str) -> None:
        """Delete one record; documents it references are left alone."""
        await require_principal(self._identity)
        await self._records.delete(self.table, record_id)
        logger.info("Deleted %s %s", self.table.value, record_id)

    async def get(self, record_id: str) -> R:
        """Single record by id (NotFoundError when absent)."""
        return self._to_record(await self._records.get_one(self.table, record_id))

    async def get_by_ids(self, ids: Sequence[str]) -> list[R]:
        """Records with the given ids; empty input makes no store call."""
        if not ids:
            return []
        rows = await self._records.select_in(self.table, "id", list(ids))
        return [self._to_record(row) for row in rows]

    def _prepare_row(self, row: Row) -> Row:
        return row

    def _to_record(self, row: Row) -> R:
        return self.record_model.model_validate(row)  # type: ignore[return-value]

    # Defined last: the name shadows the builtin inside the class body.
    async def list(self) -> list[R]:
        """All records, newest first."""
        rows = await self._records.select(self.table, order_by=self.order_by)
        return [self._to_record(row) for row in rows]
