"""Tests for the HTTP object store adapter."""

import httpx
import pytest

from eacledger.config import Settings
from eacledger.errors import StorageError
from eacledger.storage.http import HttpObjectStore

BASE = "https://project.example.co/storage/v1"


def _store(handler, api_key: str = "service-key") -> tuple[HttpObjectStore, httpx.AsyncClient]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpObjectStore(BASE, "documents", api_key=api_key, client=client), client


@pytest.mark.asyncio
async def test_put_posts_without_upsert() -> None:
    """Uploads POST the bytes with x-upsert false and auth headers."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"Key": "documents/d1/a.pdf"})

    store, client = _store(handler)

    await store.put("d1/a.pdf", b"data", content_type="application/pdf")

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == f"{BASE}/object/documents/d1/a.pdf"
    assert request.headers["x-upsert"] == "false"
    assert request.headers["content-type"] == "application/pdf"
    assert request.headers["authorization"] == "Bearer service-key"
    assert request.headers["apikey"] == "service-key"
    assert request.content == b"data"

    await client.aclose()


@pytest.mark.asyncio
async def test_put_overwrite_sets_upsert() -> None:
    """Overwrite maps to x-upsert true."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    store, client = _store(handler)

    await store.put("d1/a.pdf", b"data", overwrite=True)

    assert seen[0].headers["x-upsert"] == "true"
    await client.aclose()


@pytest.mark.asyncio
async def test_put_conflict_raises_storage_error_with_message() -> None:
    """Error bodies surface their message."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            409,
            json={
                "statusCode": "409",
                "error": "Duplicate",
                "message": "The resource already exists",
            },
        )

    store, client = _store(handler)

    with pytest.raises(StorageError, match="The resource already exists"):
        await store.put("d1/a.pdf", b"data")

    await client.aclose()


@pytest.mark.asyncio
async def test_delete_error_without_json_uses_status() -> None:
    """Non-JSON error bodies fall back to the status code."""

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "DELETE"
        return httpx.Response(500, text="upstream exploded")

    store, client = _store(handler)

    with pytest.raises(StorageError, match="500"):
        await store.delete("d1/a.pdf")

    await client.aclose()


@pytest.mark.asyncio
async def test_transport_error_becomes_storage_error() -> None:
    """Network failures are wrapped."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store, client = _store(handler)

    with pytest.raises(StorageError, match="connection refused"):
        await store.delete("d1/a.pdf")

    await client.aclose()


def test_public_url_and_no_auth_headers() -> None:
    """Public URLs use the public object route; no key means no auth headers."""
    store = HttpObjectStore(BASE + "/", "documents")

    assert store.public_url("d1/My file.pdf") == (
        f"{BASE}/object/public/documents/d1/My%20file.pdf"
    )
    assert store._auth_headers() == {}


def test_from_settings() -> None:
    """The adapter is configured from settings."""
    settings = Settings(
        _env_file=None, storage_url=BASE, storage_bucket="evidence", storage_api_key="k"
    )

    store = HttpObjectStore.from_settings(settings)

    assert store.public_url("x/y.txt") == f"{BASE}/object/public/evidence/x/y.txt"
