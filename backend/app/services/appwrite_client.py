"""Appwrite REST client: account, databases and storage over httpx."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

UNIQUE_ID = "unique()"  # server generates the id


class AppwriteError(Exception):
    """Non-2xx response (or transport failure) from the Appwrite backend."""

    def __init__(self, message: str, code: int = 0, type: str = ""):
        super().__init__(message)
        self.message = message
        self.code = code
        self.type = type

    def __str__(self) -> str:
        return f"[{self.code} {self.type}] {self.message}" if self.code else self.message


class NoSessionError(AppwriteError):
    """Session client requested without a session secret."""

    def __init__(self) -> None:
        super().__init__("No session", code=401, type="general_unauthorized_scope")


class AppwriteClient:
    """Minimal async Appwrite client.

    An admin client authenticates with the project API key, a session client
    with the user's session secret (the value kept in the session cookie).
    """

    def __init__(
        self,
        endpoint: str | None = None,
        project_id: str | None = None,
        api_key: str | None = None,
        session: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._endpoint = (endpoint or settings.appwrite_endpoint).rstrip("/")
        self._project_id = project_id if project_id is not None else settings.appwrite_project_id
        self._api_key = api_key
        self._session = session
        self._timeout = timeout or settings.request_timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"X-Appwrite-Project": self._project_id}
        if self._api_key:
            headers["X-Appwrite-Key"] = self._api_key
        if self._session:
            headers["X-Appwrite-Session"] = self._session
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._endpoint,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Send a request, raising AppwriteError on failure."""
        all_headers = self._headers()
        if headers:
            all_headers.update(headers)
        try:
            async with self._client() as client:
                resp = await client.request(method, path, headers=all_headers, **kwargs)
        except httpx.HTTPError as exc:
            raise AppwriteError(f"Appwrite unreachable: {exc}") from exc

        if resp.status_code >= 400:
            message = resp.reason_phrase or "Appwrite request failed"
            error_type = ""
            try:
                body = resp.json()
                message = body.get("message", message)
                error_type = body.get("type", "")
            except ValueError:
                pass
            raise AppwriteError(message, code=resp.status_code, type=error_type)

        if resp.status_code == 204 or not resp.content:
            return {}
        return resp.json()

    # --- Account ---

    async def create_email_token(self, user_id: str, email: str) -> dict[str, Any]:
        """Send an OTP email; returns the token (with ``userId``)."""
        return await self._request(
            "POST", "/account/tokens/email", json={"userId": user_id, "email": email},
        )

    async def create_session(self, user_id: str, secret: str) -> dict[str, Any]:
        """Exchange the OTP for a session; admin calls get ``secret`` back."""
        return await self._request(
            "POST", "/account/sessions/token", json={"userId": user_id, "secret": secret},
        )

    async def get_account(self) -> dict[str, Any]:
        return await self._request("GET", "/account")

    async def delete_session(self, session_id: str = "current") -> None:
        await self._request("DELETE", f"/account/sessions/{session_id}")

    # --- Databases ---

    @staticmethod
    def _collection_path(database_id: str, collection_id: str) -> str:
        return f"/databases/{database_id}/collections/{collection_id}"

    async def list_attributes(self, database_id: str, collection_id: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"{self._collection_path(database_id, collection_id)}/attributes",
        )

    async def create_string_attribute(
        self,
        database_id: str,
        collection_id: str,
        key: str,
        size: int = 255,
        required: bool = False,
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"{self._collection_path(database_id, collection_id)}/attributes/string",
            json={"key": key, "size": size, "required": required},
        )

    async def create_document(
        self,
        database_id: str,
        collection_id: str,
        document_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        return await self._request(
            "POST",
            f"{self._collection_path(database_id, collection_id)}/documents",
            json={"documentId": document_id, "data": data},
        )

    async def get_document(
        self, database_id: str, collection_id: str, document_id: str,
    ) -> dict[str, Any]:
        return await self._request(
            "GET", f"{self._collection_path(database_id, collection_id)}/documents/{document_id}",
        )

    async def list_documents(
        self,
        database_id: str,
        collection_id: str,
        queries: list[str] | None = None,
    ) -> dict[str, Any]:
        params = {"queries[]": queries} if queries else None
        return await self._request(
            "GET",
            f"{self._collection_path(database_id, collection_id)}/documents",
            params=params,
        )

    async def update_document(
        self,
        database_id: str,
        collection_id: str,
        document_id: str,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        return await self._request(
            "PATCH",
            f"{self._collection_path(database_id, collection_id)}/documents/{document_id}",
            json={"data": data},
        )

    async def delete_document(
        self, database_id: str, collection_id: str, document_id: str,
    ) -> None:
        await self._request(
            "DELETE",
            f"{self._collection_path(database_id, collection_id)}/documents/{document_id}",
        )

    # --- Storage ---

    async def create_file(
        self,
        bucket_id: str,
        file_id: str,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        chunk_size: int | None = None,
    ) -> dict[str, Any]:
        """Upload bytes to a bucket, chunked when larger than ``chunk_size``."""
        chunk_size = chunk_size or settings.upload_chunk_size
        path = f"/storage/buckets/{bucket_id}/files"
        total = len(content)

        if total <= chunk_size:
            return await self._request(
                "POST",
                path,
                data={"fileId": file_id},
                files={"file": (filename, content, content_type)},
            )

        result: dict[str, Any] = {}
        upload_id: str | None = None
        for start in range(0, total, chunk_size):
            end = min(start + chunk_size, total) - 1
            headers = {"Content-Range": f"bytes {start}-{end}/{total}"}
            if upload_id:
                headers["x-appwrite-id"] = upload_id
            result = await self._request(
                "POST",
                path,
                headers=headers,
                data={"fileId": file_id},
                files={"file": (filename, content[start:end + 1], content_type)},
            )
            upload_id = upload_id or result.get("$id")
            logger.debug("Uploaded chunk %d-%d/%d of %s", start, end, total, filename)
        return result

    async def delete_file(self, bucket_id: str, file_id: str) -> None:
        await self._request("DELETE", f"/storage/buckets/{bucket_id}/files/{file_id}")


def create_admin_client(transport: httpx.AsyncBaseTransport | None = None) -> AppwriteClient:
    """Client authenticated with the server API key."""
    return AppwriteClient(api_key=settings.appwrite_api_key, transport=transport)


def create_session_client(
    session: str | None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppwriteClient:
    """Client acting as the user behind ``session``."""
    if not session:
        raise NoSessionError()
    return AppwriteClient(session=session, transport=transport)
