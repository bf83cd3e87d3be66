"""Tests for the document upload saga and document reads/edits."""

import logging

import pytest

from eacledger.config import Settings
from eacledger.db.inmemory import InMemoryRecordStore
from eacledger.db.store import Table
from eacledger.documents.attachments import AttachmentManager
from eacledger.errors import (
    AuthError,
    NotFoundError,
    PersistenceError,
    StorageError,
    ValidationError,
)
from eacledger.identity import StaticIdentityProvider
from eacledger.models.common import FileType
from eacledger.models.documents import UploadFile
from eacledger.storage.inmemory import InMemoryObjectStore
from tests.doubles import (
    FailingDeleteObjectStore,
    FailingInsertRecordStore,
    FailingPutObjectStore,
    RecordingMetrics,
)


def _pdf(name: str = "Audit report.pdf") -> UploadFile:
    return UploadFile(name=name, content=b"%PDF-1.7", content_type="application/pdf")


@pytest.mark.asyncio
async def test_create_document_uploads_then_inserts(
    manager: AttachmentManager,
    records: InMemoryRecordStore,
    objects: InMemoryObjectStore,
    metrics: RecordingMetrics,
) -> None:
    """A successful create stores the blob under {id}/{name} and one row."""
    doc = await manager.create_document(_pdf(), title="Audit 2024")

    assert doc.file_type == FileType.ORGANIZATION_DOCUMENT
    assert doc.title == "Audit 2024"
    assert doc.metadata == []

    path = f"{doc.id}/Audit-report.pdf"
    assert objects.paths() == [path]
    assert objects.get(path).content_type == "application/pdf"
    assert doc.url == objects.public_url(path)

    assert records.ops() == ["insert"]
    assert metrics.uploads == ["success"]


@pytest.mark.asyncio
async def test_create_document_round_trips_through_get(manager: AttachmentManager) -> None:
    """Reading a created document by id returns the same fields."""
    created = await manager.create_document(
        _pdf(),
        file_type="AUDIT",
        description="Annual audit",
        metadata=[{"key": "auditor", "label": "Auditor", "value": "ACME"}],
        organizations=[{"orgId": "org-1", "role": "Auditor"}],
    )

    fetched = await manager.get_document(created.id)

    assert fetched == created
    assert fetched.file_type == FileType.AUDIT
    assert fetched.metadata[0].value == "ACME"
    assert fetched.organizations[0].org_id == "org-1"


@pytest.mark.asyncio
async def test_identical_uploads_produce_distinct_documents(
    manager: AttachmentManager, objects: InMemoryObjectStore
) -> None:
    """Two uploads of the same file never collide."""
    first = await manager.create_document(_pdf())
    second = await manager.create_document(_pdf())

    assert first.id != second.id
    assert len(objects.paths()) == 2


@pytest.mark.asyncio
async def test_file_name_override_is_sanitized(
    manager: AttachmentManager, objects: InMemoryObjectStore
) -> None:
    """An explicit file name replaces the upload's own name."""
    doc = await manager.create_document(_pdf(), file_name="../Contrat signé.PDF")

    assert objects.paths() == [f"{doc.id}/Contrat-signe.PDF"]


@pytest.mark.asyncio
async def test_insert_failure_compensates_exactly_once(
    identity: StaticIdentityProvider, settings: Settings, metrics: RecordingMetrics
) -> None:
    """A rejected insert deletes the uploaded blob once and re-raises."""
    records = FailingInsertRecordStore(message="duplicate key value")
    objects = InMemoryObjectStore()
    manager = AttachmentManager(
        records, objects, identity=identity, settings=settings, metrics=metrics
    )

    with pytest.raises(PersistenceError) as exc_info:
        await manager.create_document(_pdf("scan.png"))

    assert exc_info.value.message == "duplicate key value"
    assert exc_info.value.warnings == []
    assert len(objects.deleted) == 1
    assert objects.deleted[0].endswith("/scan.png")
    assert objects.paths() == []
    assert metrics.uploads == ["insert_error"]
    assert metrics.compensations == ["success"]


@pytest.mark.asyncio
async def test_failed_compensation_surfaces_as_warning(
    identity: StaticIdentityProvider,
    settings: Settings,
    metrics: RecordingMetrics,
    caplog: pytest.LogCaptureFixture,
) -> None:
    """The insert error still wins; the failed delete is reported, not raised."""
    records = FailingInsertRecordStore()
    objects = FailingDeleteObjectStore()
    manager = AttachmentManager(
        records, objects, identity=identity, settings=settings, metrics=metrics
    )

    with caplog.at_level(logging.WARNING):
        with pytest.raises(PersistenceError) as exc_info:
            await manager.create_document(_pdf())

    assert exc_info.value.message == "insert rejected"
    assert len(exc_info.value.warnings) == 1
    assert "delete forbidden" in exc_info.value.warnings[0]
    assert len(objects.deleted) == 1
    assert metrics.compensations == ["failed"]

    steps = [r.structured["step"] for r in caplog.records if hasattr(r, "structured")]
    assert "compensate" in steps


@pytest.mark.asyncio
async def test_upload_failure_skips_insert_and_compensation(
    identity: StaticIdentityProvider, settings: Settings, metrics: RecordingMetrics
) -> None:
    """Nothing is inserted or deleted when the upload itself fails."""
    records = InMemoryRecordStore()
    objects = FailingPutObjectStore()
    manager = AttachmentManager(
        records, objects, identity=identity, settings=settings, metrics=metrics
    )

    with pytest.raises(StorageError, match="bucket unavailable"):
        await manager.create_document(_pdf())

    assert records.calls == []
    assert objects.deleted == []
    assert metrics.uploads == ["storage_error"]


@pytest.mark.asyncio
async def test_create_requires_principal_before_any_io(
    records: InMemoryRecordStore,
    objects: InMemoryObjectStore,
    anonymous: StaticIdentityProvider,
    settings: Settings,
) -> None:
    """No principal means no upload and no insert."""
    manager = AttachmentManager(records, objects, identity=anonymous, settings=settings)

    with pytest.raises(AuthError, match="No user"):
        await manager.create_document(_pdf())

    assert records.calls == []
    assert objects.paths() == []


@pytest.mark.asyncio
async def test_invalid_file_type_rejected_before_upload(
    manager: AttachmentManager, objects: InMemoryObjectStore, records: InMemoryRecordStore
) -> None:
    """Unknown file types fail validation before touching either store."""
    with pytest.raises(ValidationError, match="file_type|fileType"):
        await manager.create_document(_pdf(), file_type="SPREADSHEET")

    assert objects.paths() == []
    assert records.calls == []


@pytest.mark.asyncio
async def test_get_documents_by_ids_empty_makes_no_call(
    manager: AttachmentManager, records: InMemoryRecordStore
) -> None:
    """Empty id lists short-circuit to []."""
    assert await manager.get_documents_by_ids([]) == []
    assert records.calls == []


@pytest.mark.asyncio
async def test_get_documents_by_ids_keeps_request_order(
    manager: AttachmentManager, records: InMemoryRecordStore
) -> None:
    """Results follow the requested order; unknown ids are skipped."""
    a = await manager.create_document(_pdf("a.pdf"))
    b = await manager.create_document(_pdf("b.pdf"))
    records.calls.clear()

    docs = await manager.get_documents_by_ids([b.id, "missing", a.id])

    assert [d.id for d in docs] == [b.id, a.id]
    assert records.ops() == ["select_in"]


@pytest.mark.asyncio
async def test_update_document_writes_only_present_fields(manager: AttachmentManager) -> None:
    """Absent fields are untouched; the URL never changes."""
    doc = await manager.create_document(_pdf(), title="Draft", description="keep me")

    updated = await manager.update_document(doc.id, {"title": "Final"})

    assert updated.title == "Final"
    assert updated.description == "keep me"
    assert updated.url == doc.url


@pytest.mark.asyncio
async def test_append_document_metadata_preserves_existing(manager: AttachmentManager) -> None:
    """Appended entries follow the existing ones in order."""
    doc = await manager.create_document(
        _pdf(), metadata=[{"key": "k1", "label": "First", "value": "1"}]
    )

    updated = await manager.append_document_metadata(
        doc.id, [{"key": "k2", "label": "Second", "value": "2"}]
    )

    assert [m.key for m in updated.metadata] == ["k1", "k2"]


@pytest.mark.asyncio
async def test_delete_document_keeps_blob_and_holders(
    manager: AttachmentManager,
    records: InMemoryRecordStore,
    objects: InMemoryObjectStore,
) -> None:
    """Deleting a document removes its row only; holders keep dangling ids."""
    doc = await manager.create_document(_pdf())
    cert = await records.insert(
        Table.certificates,
        {"type": "REC", "amounts": [{"amount": 1, "unit": "MWh"}], "documents": [doc.id]},
    )

    await manager.delete_document(doc.id)

    with pytest.raises(NotFoundError):
        await manager.get_document(doc.id)
    assert len(objects.paths()) == 1
    holder = await records.get_one(Table.certificates, cert["id"])
    assert holder["documents"] == [doc.id]


@pytest.mark.asyncio
async def test_list_documents_newest_first(manager: AttachmentManager) -> None:
    """Documents are listed by creation time, newest first."""
    first = await manager.create_document(_pdf("1.pdf"))
    second = await manager.create_document(_pdf("2.pdf"))

    docs = await manager.list_documents()

    assert {d.id for d in docs} == {first.id, second.id}
    assert docs[0].created_at >= docs[1].created_at
