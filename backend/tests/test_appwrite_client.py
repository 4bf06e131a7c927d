"""Tests for the Appwrite REST client: headers, errors, queries, chunked upload."""

import json

import httpx
import pytest

from app.services.appwrite_client import (
    AppwriteClient,
    AppwriteError,
    NoSessionError,
    create_session_client,
)

ENDPOINT = "https://appwrite.test/v1"


def _client(handler, **kwargs) -> AppwriteClient:
    return AppwriteClient(
        endpoint=ENDPOINT,
        project_id="proj-1",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestHeaders:
    @pytest.mark.asyncio
    async def test_admin_client_sends_api_key(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"$id": "acct-1"})

        await _client(handler, api_key="key-1").get_account()

        assert seen["url"] == f"{ENDPOINT}/account"
        assert seen["headers"]["X-Appwrite-Project"] == "proj-1"
        assert seen["headers"]["X-Appwrite-Key"] == "key-1"
        assert "X-Appwrite-Session" not in seen["headers"]

    @pytest.mark.asyncio
    async def test_session_client_sends_session(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["headers"] = request.headers
            return httpx.Response(200, json={"$id": "acct-1"})

        await _client(handler, session="secret-1").get_account()

        assert seen["headers"]["X-Appwrite-Session"] == "secret-1"
        assert "X-Appwrite-Key" not in seen["headers"]

    def test_session_client_requires_secret(self):
        with pytest.raises(NoSessionError):
            create_session_client(None)
        with pytest.raises(NoSessionError):
            create_session_client("")


class TestErrors:
    @pytest.mark.asyncio
    async def test_error_body_becomes_appwrite_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                404,
                json={"message": "Document not found", "code": 404, "type": "document_not_found"},
            )

        with pytest.raises(AppwriteError) as exc_info:
            await _client(handler).get_document("db", "users", "missing")

        assert exc_info.value.code == 404
        assert exc_info.value.type == "document_not_found"
        assert exc_info.value.message == "Document not found"

    @pytest.mark.asyncio
    async def test_non_json_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        with pytest.raises(AppwriteError) as exc_info:
            await _client(handler).get_account()
        assert exc_info.value.code == 500

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(AppwriteError) as exc_info:
            await _client(handler).get_account()
        assert exc_info.value.code == 0
        assert "unreachable" in exc_info.value.message


class TestDatabases:
    @pytest.mark.asyncio
    async def test_list_documents_sends_repeated_queries(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["queries"] = request.url.params.get_list("queries[]")
            return httpx.Response(200, json={"total": 0, "documents": []})

        queries = ['{"method":"limit","values":[1]}', '{"method":"orderAsc","attribute":"name"}']
        result = await _client(handler).list_documents("db", "files", queries)

        assert result == {"total": 0, "documents": []}
        assert seen["path"] == "/v1/databases/db/collections/files/documents"
        assert seen["queries"] == queries

    @pytest.mark.asyncio
    async def test_update_document_wraps_data(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"$id": "f1", "name": "b.txt"})

        await _client(handler).update_document("db", "files", "f1", {"name": "b.txt"})

        assert seen["method"] == "PATCH"
        assert seen["body"] == {"data": {"name": "b.txt"}}

    @pytest.mark.asyncio
    async def test_delete_returns_empty_on_204(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "DELETE"
            return httpx.Response(204)

        assert await _client(handler).delete_document("db", "files", "f1") is None


class TestStorage:
    @pytest.mark.asyncio
    async def test_small_file_single_request(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(201, json={"$id": "b1", "name": "a.txt", "sizeOriginal": 5})

        result = await _client(handler).create_file("bucket", "unique()", "a.txt", b"hello", "text/plain")

        assert result["$id"] == "b1"
        assert len(requests) == 1
        assert "Content-Range" not in requests[0].headers
        assert b'name="fileId"' in requests[0].content

    @pytest.mark.asyncio
    async def test_large_file_is_chunked(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(201, json={"$id": "b1", "name": "big.bin", "sizeOriginal": 10})

        result = await _client(handler).create_file(
            "bucket", "unique()", "big.bin", b"0123456789", chunk_size=4,
        )

        assert result["$id"] == "b1"
        assert [r.headers["Content-Range"] for r in requests] == [
            "bytes 0-3/10",
            "bytes 4-7/10",
            "bytes 8-9/10",
        ]
        assert "x-appwrite-id" not in requests[0].headers
        assert requests[1].headers["x-appwrite-id"] == "b1"
        assert requests[2].headers["x-appwrite-id"] == "b1"
