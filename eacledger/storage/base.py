"""Object store protocol for document binaries."""

from typing import Protocol


class ObjectStore(Protocol):
    """Binary object store addressed by slash-separated paths.

    Every method raises ``StorageError`` on failure.
    """

    async def put(
        self,
        path: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
        overwrite: bool = False,
    ) -> None:
        """Store ``data`` at ``path``.

        Args:
            path: Object path inside the bucket
            data: Object content
            content_type: MIME type recorded with the object
            overwrite: When False, fail if the path already exists
        """
        ...

    def public_url(self, path: str) -> str:
        """Durable public URL for an object path."""
        ...

    async def delete(self, path: str) -> None:
        """Remove the object at ``path``."""
        ...
