"""Attachment manager - one logical document across two stores.

A document is a blob in the object store plus a metadata row in the
relational store. There is no shared transaction, so ``create_document`` runs
a two-step saga:

1. upload the blob (no overwrite) under ``{doc_id}/{sanitized name}``
2. insert the metadata row pointing at the blob's public URL

If step 2 fails, the blob from step 1 is deleted once, best effort. A failed
compensating delete is logged, counted and attached to the raised error as a
warning; the caller always sees the insert failure. A process crash between
the two steps leaves an orphaned blob with no row.
"""

import asyncio
import logging
import uuid
from collections.abc import Sequence
from typing import Any

from eacledger.config import Settings, get_settings
from eacledger.db.store import RecordStore, Table
from eacledger.documents.filenames import object_path, sanitize_file_name
from eacledger.errors import PersistenceError, StorageError, error_message
from eacledger.identity import IdentityProvider, require_principal
from eacledger.models.common import FileType, MetadataItem, OrganizationRole
from eacledger.models.documents import Document, DocumentUpdate, UploadFile
from eacledger.models.validation import validate_payload
from eacledger.references.resolver import build_update_patch, to_column
from eacledger.storage.base import ObjectStore
from eacledger.utils.logging import StructuredSagaLogger
from eacledger.utils.metrics import PrometheusDocumentMetrics

logger = logging.getLogger(__name__)

DEFAULT_FILE_TYPE = FileType.ORGANIZATION_DOCUMENT


class AttachmentManager:
    """Creates, reads, edits and deletes documents."""

    def __init__(
        self,
        records: RecordStore,
        objects: ObjectStore,
        *,
        identity: IdentityProvider | None = None,
        settings: Settings | None = None,
        metrics: PrometheusDocumentMetrics | None = None,
        saga_logger: StructuredSagaLogger | None = None,
    ) -> None:
        self._records = records
        self._objects = objects
        self._identity = identity
        self._settings = settings or get_settings()
        self._metrics = metrics or PrometheusDocumentMetrics()
        self._saga_logger = saga_logger or StructuredSagaLogger()

    async def create_document(
        self,
        file: UploadFile,
        file_name: str | None = None,
        file_type: FileType | str | None = None,
        title: str | None = None,
        description: str | None = None,
        metadata: Sequence[MetadataItem | dict[str, Any]] | None = None,
        organizations: Sequence[OrganizationRole | dict[str, Any]] | None = None,
    ) -> Document:
        """Upload a file and record its metadata as one document.

        Args:
            file: Binary content and the uploaded file name
            file_name: Name to store under (defaults to the upload's name)
            file_type: Document kind (defaults to ORGANIZATION_DOCUMENT)
            title: Optional title
            description: Optional description
            metadata: Ordered metadata entries
            organizations: Organizations and their roles on the document

        Returns:
            The inserted document

        Raises:
            ValidationError: Bad metadata/organizations/file type, before any I/O
            AuthError: No principal (when an identity provider is configured)
            StorageError: Upload failed; nothing to undo
            PersistenceError: Insert failed; the blob was deleted best effort
        """
        fields = validate_payload(
            DocumentUpdate,
            {
                "file_type": file_type or DEFAULT_FILE_TYPE,
                "metadata": list(metadata or []),
                "organizations": list(organizations) if organizations else None,
            },
        )
        await self._require_principal()

        name = sanitize_file_name(
            file_name or file.name,
            max_base_length=self._settings.upload_max_base_length,
            max_ext_length=self._settings.upload_max_ext_length,
        )
        doc_id = str(uuid.uuid4())
        path = object_path(doc_id, name)

        try:
            await self._objects.put(
                path, file.content, content_type=file.content_type, overwrite=False
            )
        except Exception as exc:
            reason = error_message(exc)
            self._saga_logger.log_step(doc_id, path, "upload", "error", reason)
            self._metrics.record_upload("storage_error")
            raise StorageError(reason) from exc

        self._saga_logger.log_step(doc_id, path, "upload", "success")
        url = self._objects.public_url(path)

        row = {
            "id": doc_id,
            "url": url,
            "file_type": to_column(fields.file_type),
            "title": title,
            "description": description,
            "metadata": to_column(fields.metadata or []),
            "organizations": to_column(fields.organizations) if fields.organizations else None,
        }

        try:
            inserted = await self._records.insert(Table.documents, row)
        except Exception as exc:
            reason = error_message(exc)
            self._saga_logger.log_step(doc_id, path, "insert", "error", reason)
            self._metrics.record_upload("insert_error")
            warnings = await asyncio.shield(self._compensate(doc_id, path))
            raise PersistenceError(reason, warnings=warnings) from exc

        self._saga_logger.log_step(doc_id, path, "insert", "success")
        self._metrics.record_upload("success")
        return Document.model_validate(inserted)

    async def _compensate(self, doc_id: str, path: str) -> list[str]:
        """Delete the uploaded blob once; never raises."""
        try:
            await self._objects.delete(path)
        except Exception as exc:
            reason = error_message(exc)
            self._saga_logger.log_step(doc_id, path, "compensate", "error", reason)
            self._metrics.record_compensation("failed")
            return [f"compensating delete of {path} failed: {reason}"]

        self._saga_logger.log_step(doc_id, path, "compensate", "success")
        self._metrics.record_compensation("success")
        return []

    async def get_documents_by_ids(self, ids: Sequence[str]) -> list[Document]:
        """Documents for the given ids, in request order.

        Empty input returns [] without touching the store; unknown ids are
        simply absent from the result.
        """
        wanted = [i for i in dict.fromkeys(ids) if i]
        if not wanted:
            return []

        rows = await self._records.select_in(Table.documents, "id", wanted)
        by_id = {row["id"]: Document.model_validate(row) for row in rows}
        return [by_id[i] for i in wanted if i in by_id]

    async def get_document(self, doc_id: str) -> Document:
        """Single document by id.

        Raises:
            NotFoundError: If no document has this id
        """
        row = await self._records.get_one(Table.documents, doc_id)
        return Document.model_validate(row)

    async def list_documents(self) -> list[Document]:
        """All documents, newest first."""
        rows = await self._records.select(Table.documents, order_by="created_at")
        return [Document.model_validate(row) for row in rows]

    async def update_document(
        self, doc_id: str, patch: DocumentUpdate | dict[str, Any]
    ) -> Document:
        """Edit metadata fields; the blob and URL never change."""
        update = validate_payload(DocumentUpdate, patch)
        await self._require_principal()

        row_patch = build_update_patch(update)
        if "metadata" in row_patch and row_patch["metadata"] is None:
            row_patch["metadata"] = []

        row = await self._records.update(Table.documents, doc_id, row_patch)
        return Document.model_validate(row)

    async def append_document_metadata(
        self, doc_id: str, items: Sequence[MetadataItem | dict[str, Any]]
    ) -> Document:
        """Append metadata entries after the document's existing ones."""
        current = await self.get_document(doc_id)
        added = validate_payload(DocumentUpdate, {"metadata": list(items)}).metadata or []
        return await self.update_document(doc_id, {"metadata": [*current.metadata, *added]})

    async def delete_document(self, doc_id: str) -> None:
        """Delete the metadata row only.

        The blob stays in the object store and records that still list this id
        in their ``documents`` array are left dangling.
        """
        await self._require_principal()
        await self._records.delete(Table.documents, doc_id)
        logger.info("Deleted document row %s (blob retained)", doc_id)

    async def _require_principal(self) -> None:
        if self._identity is not None:
            await require_principal(self._identity)
