"""Object store adapter for a bucket-style storage REST API.

Speaks the storage API exposed by hosted Postgres platforms:
``POST /object/{bucket}/{path}`` uploads (``x-upsert`` controls overwrite),
``DELETE /object/{bucket}/{path}`` removes, and public objects are served from
``/object/public/{bucket}/{path}``.
"""

import logging
from urllib.parse import quote

import httpx

from eacledger.config import Settings
from eacledger.errors import StorageError, error_message

logger = logging.getLogger(__name__)


class HttpObjectStore:
    """ObjectStore backed by a storage REST endpoint."""

    def __init__(
        self,
        base_url: str,
        bucket: str,
        api_key: str = "",
        timeout_s: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Create the adapter.

        Args:
            base_url: Storage API root, e.g. ``https://x.example.co/storage/v1``
            bucket: Bucket holding document objects
            api_key: Service key sent as bearer token and ``apikey`` header
            timeout_s: Per-request timeout when no client is supplied
            client: Optional httpx client (for testing with mocks)
        """
        self._base_url = base_url.rstrip("/")
        self._bucket = bucket
        self._api_key = api_key
        self._timeout_s = timeout_s
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpObjectStore":
        """Build the adapter from library settings."""
        return cls(
            base_url=settings.storage_url,
            bucket=settings.storage_bucket,
            api_key=settings.storage_api_key,
            timeout_s=settings.storage_timeout_s,
        )

    async def put(
        self,
        path: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
        overwrite: bool = False,
    ) -> None:
        """Upload data to path; fails if it exists unless overwrite is set."""
        headers = {
            **self._auth_headers(),
            "content-type": content_type,
            "x-upsert": "true" if overwrite else "false",
        }
        await self._request("POST", self._object_url(path), headers=headers, content=data)

    def public_url(self, path: str) -> str:
        """Durable public URL for an object path."""
        return f"{self._base_url}/object/public/{self._bucket}/{quote(path, safe='/')}"

    async def delete(self, path: str) -> None:
        """Remove the object at path."""
        await self._request("DELETE", self._object_url(path), headers=self._auth_headers())

    def _object_url(self, path: str) -> str:
        return f"{self._base_url}/object/{self._bucket}/{quote(path, safe='/')}"

    def _auth_headers(self) -> dict[str, str]:
        if not self._api_key:
            return {}
        return {"authorization": f"Bearer {self._api_key}", "apikey": self._api_key}

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str],
        content: bytes | None = None,
    ) -> None:
        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout_s)
            close_client = True

        try:
            response = await client.request(method, url, headers=headers, content=content)
        except httpx.HTTPError as exc:
            logger.warning("Storage %s %s failed: %s", method, url, exc)
            raise StorageError(error_message(exc) or "storage request failed") from exc
        finally:
            if close_client:
                await client.aclose()

        if response.is_error:
            raise StorageError(_response_message(response))


def _response_message(response: httpx.Response) -> str:
    """Error text from a storage response (JSON ``message`` preferred)."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        if body.get("message"):
            return error_message(body)
        if body.get("error"):
            return str(body["error"])

    return f"storage request failed with status {response.status_code}"
