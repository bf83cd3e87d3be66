"""Rewrites of an owning record's ``documents`` array."""

import logging

from eacledger.db.store import RecordStore, Table
from eacledger.errors import ValidationError
from eacledger.identity import IdentityProvider, require_principal
from eacledger.references.resolver import merge_reference_ids, remove_reference_id

logger = logging.getLogger(__name__)

OWNING_TABLES = frozenset(
    {Table.certificates, Table.production_sources, Table.organizations, Table.events}
)


class ReferenceUpdater:
    """Attach/detach document ids on certificates, sources, organizations and events.

    Only the named record changes. Other holders of the same ids are never
    scanned, and the documents themselves are not checked for existence.
    """

    def __init__(self, records: RecordStore, identity: IdentityProvider) -> None:
        self._records = records
        self._identity = identity

    async def attach_documents(
        self, table: Table, entity_id: str, doc_ids: list[str]
    ) -> list[str] | None:
        """Append document ids to a record; returns the stored array."""
        _check_owning(table)
        await require_principal(self._identity)

        row = await self._records.get_one(table, entity_id)
        documents = merge_reference_ids(row.get("documents"), doc_ids)
        updated = await self._records.update(table, entity_id, {"documents": documents})

        logger.info(
            "Attached %d document(s) to %s/%s", len(doc_ids), table.value, entity_id
        )
        return updated.get("documents")

    async def detach_document(self, table: Table, entity_id: str, doc_id: str) -> list[str] | None:
        """Remove one document id from a record; returns the stored array."""
        _check_owning(table)
        await require_principal(self._identity)

        row = await self._records.get_one(table, entity_id)
        documents = remove_reference_id(row.get("documents"), doc_id)
        updated = await self._records.update(table, entity_id, {"documents": documents})
        return updated.get("documents")

    async def replace_documents(
        self, table: Table, entity_id: str, doc_ids: list[str]
    ) -> list[str] | None:
        """Overwrite a record's document array (empty clears to None)."""
        _check_owning(table)
        await require_principal(self._identity)

        documents = merge_reference_ids(None, doc_ids)
        updated = await self._records.update(table, entity_id, {"documents": documents})
        return updated.get("documents")


def _check_owning(table: Table) -> None:
    if table not in OWNING_TABLES:
        raise ValidationError(f"{table.value} does not hold document references")
