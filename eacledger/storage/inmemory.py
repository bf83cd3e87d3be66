"""In-memory implementation of the ObjectStore protocol."""

from dataclasses import dataclass

from eacledger.errors import StorageError


@dataclass(frozen=True)
class StoredObject:
    """Object content plus its recorded MIME type."""

    data: bytes
    content_type: str


class InMemoryObjectStore:
    """In-memory implementation of ObjectStore."""

    def __init__(self, base_url: str = "memory://documents") -> None:
        self._base_url = base_url.rstrip("/")
        self._objects: dict[str, StoredObject] = {}
        self.deleted: list[str] = []

    async def put(
        self,
        path: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
        overwrite: bool = False,
    ) -> None:
        """Store data at path."""
        if not overwrite and path in self._objects:
            raise StorageError(f"The resource already exists: {path}")
        self._objects[path] = StoredObject(data=data, content_type=content_type)

    def public_url(self, path: str) -> str:
        """Durable public URL for an object path."""
        return f"{self._base_url}/{path}"

    async def delete(self, path: str) -> None:
        """Remove the object at path."""
        self.deleted.append(path)
        if self._objects.pop(path, None) is None:
            raise StorageError(f"Object not found: {path}")

    def get(self, path: str) -> StoredObject | None:
        """Stored object at path, if any."""
        return self._objects.get(path)

    def paths(self) -> list[str]:
        """All stored paths in upload order."""
        return list(self._objects)
