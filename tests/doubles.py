"""Store and metrics doubles that inject failures or record calls."""

from eacledger.db.inmemory import InMemoryRecordStore
from eacledger.db.store import Row, Table
from eacledger.errors import PersistenceError, StorageError
from eacledger.storage.inmemory import InMemoryObjectStore


class RecordingMetrics:
    """Metrics double that keeps every recorded outcome."""

    def __init__(self) -> None:
        self.uploads: list[str] = []
        self.compensations: list[str] = []
        self.label_failures: list[str] = []

    def record_upload(self, outcome: str) -> None:
        self.uploads.append(outcome)

    def record_compensation(self, outcome: str) -> None:
        self.compensations.append(outcome)

    def record_label_failure(self, target: str) -> None:
        self.label_failures.append(target)


class FailingInsertRecordStore(InMemoryRecordStore):
    """Record store whose inserts into one table always fail."""

    def __init__(self, table: Table = Table.documents, message: str = "insert rejected") -> None:
        super().__init__()
        self.failing_table = table
        self.message = message

    async def insert(self, table: Table, row: Row) -> Row:
        if table == self.failing_table:
            self.calls.append(("insert", table))
            raise PersistenceError(self.message)
        return await super().insert(table, row)


class FailingSelectRecordStore(InMemoryRecordStore):
    """Record store whose selects on some tables always fail."""

    def __init__(self, *tables: Table) -> None:
        super().__init__()
        self.failing_tables = set(tables)

    async def select(self, table: Table, **kwargs) -> list[Row]:  # type: ignore[override]
        if table in self.failing_tables:
            self.calls.append(("select", table))
            raise PersistenceError(f"select on {table.value} failed")
        return await super().select(table, **kwargs)


class FailingPutObjectStore(InMemoryObjectStore):
    """Object store that rejects every upload."""

    async def put(self, path: str, data: bytes, **kwargs) -> None:  # type: ignore[override]
        raise StorageError("bucket unavailable")


class FailingDeleteObjectStore(InMemoryObjectStore):
    """Object store whose deletes always fail (uploads succeed)."""

    async def delete(self, path: str) -> None:
        self.deleted.append(path)
        raise StorageError("delete forbidden")
