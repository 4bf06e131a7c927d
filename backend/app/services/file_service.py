"""File handlers: bucket uploads, metadata documents, sharing and usage."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from app.config import settings
from app.services import query
from app.services.appwrite_client import UNIQUE_ID, AppwriteClient, AppwriteError
from app.services.revalidation import PageRevalidator
from app.services.schema_probe import list_attribute_keys, pick_key
from app.utils.file_types import FILE_TYPES, get_file_type
from app.utils.storage import construct_file_url

logger = logging.getLogger(__name__)

DEFAULT_SORT = "$createdAt-desc"

ACCOUNT_ID_KEYS = ("accountID", "accountId", "account_id")
BUCKET_FILE_KEYS = ("bucketFileId", "bucket_file_id", "bucketFile", "bucket_file", "bucketField")


class FileAccessError(AppwriteError):
    """The current user does not own the file document."""

    def __init__(self, file_id: str) -> None:
        super().__init__(f"Not allowed to modify file {file_id}", code=403, type="user_unauthorized")


def owner_id_of(file_doc: dict[str, Any] | None) -> str | None:
    """Owner reference of a file document: a plain id or an expanded document."""
    if not file_doc:
        return None
    owner = file_doc.get("owner")
    if isinstance(owner, str):
        return owner or None
    if isinstance(owner, dict):
        return owner.get("$id")
    return None


def bucket_file_id_of(file_doc: dict[str, Any]) -> str | None:
    """Bucket object id stored on a file document, under any known spelling."""
    key = pick_key(set(file_doc), *BUCKET_FILE_KEYS)
    return file_doc[key] if key else None


def build_queries(
    current_user: dict[str, Any],
    types: list[str] | None = None,
    search_text: str = "",
    sort: str = DEFAULT_SORT,
    limit: int | None = None,
) -> list[str]:
    """Queries for files the user owns or that were shared with them."""
    or_clauses = [query.equal("owner", [current_user["$id"]])]
    if current_user.get("email"):
        or_clauses.append(query.contains("users", [current_user["email"]]))

    queries = [query.or_(or_clauses)]
    if types:
        queries.append(query.equal("type", list(types)))
    if search_text:
        queries.append(query.contains("name", search_text))
    if limit:
        queries.append(query.limit(limit))

    if sort:
        sort_by, _, order_by = sort.rpartition("-")
        if not sort_by:
            sort_by, order_by = order_by, "desc"
        queries.append(query.order_asc(sort_by) if order_by == "asc" else query.order_desc(sort_by))

    return queries


def _as_utc(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    # naive timestamps are taken as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _is_later(a: str, b: str) -> bool:
    try:
        return _as_utc(a) > _as_utc(b)
    except ValueError:
        return a > b


def _latest(a: str, b: str) -> str:
    if not a or not b:
        return a or b
    return a if _is_later(a, b) else b


def empty_total_space(quota: int | None = None) -> dict[str, Any]:
    total: dict[str, Any] = {t: {"size": 0, "latestDate": ""} for t in FILE_TYPES}
    total["used"] = 0
    total["all"] = quota if quota is not None else settings.storage_quota_bytes
    return total


def fold_total_space(files: list[dict[str, Any]], quota: int | None = None) -> dict[str, Any]:
    """Per-type size totals and latest update timestamps."""
    total = empty_total_space(quota)
    for file_doc in files:
        file_type = file_doc.get("type")
        if file_type not in FILE_TYPES:
            file_type = "other"
        size = int(file_doc.get("size") or 0)
        bucket = total[file_type]
        bucket["size"] += size
        total["used"] += size

        updated_at = file_doc.get("$updatedAt") or ""
        if updated_at and (not bucket["latestDate"] or _is_later(updated_at, bucket["latestDate"])):
            bucket["latestDate"] = updated_at
    return total


def get_usage_summary(total_space: dict[str, Any]) -> list[dict[str, Any]]:
    """Dashboard categories; media combines video and audio."""
    video, audio = total_space["video"], total_space["audio"]
    return [
        {
            "title": "Documents",
            "size": total_space["document"]["size"],
            "latestDate": total_space["document"]["latestDate"],
            "url": "/documents",
        },
        {
            "title": "Images",
            "size": total_space["image"]["size"],
            "latestDate": total_space["image"]["latestDate"],
            "url": "/images",
        },
        {
            "title": "Media",
            "size": video["size"] + audio["size"],
            "latestDate": _latest(video["latestDate"], audio["latestDate"]),
            "url": "/media",
        },
        {
            "title": "Others",
            "size": total_space["other"]["size"],
            "latestDate": total_space["other"]["latestDate"],
            "url": "/others",
        },
    ]


class FileService:
    """Upload, list, rename, share, delete and usage for file documents."""

    def __init__(self, admin_client: AppwriteClient, revalidator: PageRevalidator):
        self._admin = admin_client
        self._revalidator = revalidator
        self._database_id = settings.appwrite_database_id
        self._files_collection_id = settings.appwrite_files_collection_id
        self._users_collection_id = settings.appwrite_users_collection_id
        self._bucket_id = settings.appwrite_bucket_id

    async def upload_file(
        self,
        content: bytes,
        filename: str,
        content_type: str | None,
        owner_id: str,
        account_id: str,
        path: str,
    ) -> dict[str, Any]:
        """Store bytes in the bucket, then create the metadata document."""
        try:
            bucket_file = await self._admin.create_file(
                self._bucket_id,
                UNIQUE_ID,
                filename,
                content,
                content_type or "application/octet-stream",
            )
        except Exception as exc:
            logger.error("Failed to upload file: %s", exc)
            raise

        try:
            document = await self._build_file_document(bucket_file, owner_id, account_id)
            new_file = await self._admin.create_document(
                self._database_id, self._files_collection_id, UNIQUE_ID, document,
            )
        except Exception as exc:
            logger.error("Failed to create file document: %s", exc)
            await self._admin.delete_file(self._bucket_id, bucket_file["$id"])
            raise

        logger.info("Uploaded %s (%s bytes) for %s", filename, bucket_file.get("sizeOriginal"), owner_id)
        self._revalidator.revalidate_path(path)
        return new_file

    async def _build_file_document(
        self, bucket_file: dict[str, Any], owner_id: str, account_id: str,
    ) -> dict[str, Any]:
        """Map file fields onto whichever attribute spellings the collection has."""
        existing = await list_attribute_keys(
            self._admin, self._database_id, self._files_collection_id,
        )
        file_type, extension = get_file_type(bucket_file["name"])

        document: dict[str, Any] = {}
        if "name" in existing:
            document["name"] = bucket_file["name"]
        if "url" in existing:
            document["url"] = construct_file_url(bucket_file["$id"])
        if "type" in existing:
            document["type"] = file_type
        if "extension" in existing:
            document["extension"] = extension
        if "size" in existing:
            document["size"] = bucket_file.get("sizeOriginal", 0)
        if "owner" in existing:
            document["owner"] = owner_id

        account_key = pick_key(existing, *ACCOUNT_ID_KEYS)
        if account_key:
            document[account_key] = account_id

        bucket_file_key = pick_key(existing, *BUCKET_FILE_KEYS)
        if bucket_file_key:
            document[bucket_file_key] = bucket_file["$id"]

        if "users" in existing:
            document["users"] = []
        return document

    async def get_files(
        self,
        current_user: dict[str, Any],
        types: list[str] | None = None,
        search_text: str = "",
        sort: str = DEFAULT_SORT,
        limit: int | None = None,
    ) -> dict[str, Any]:
        """Files visible to the user, with owners resolved to user documents."""
        try:
            queries = build_queries(current_user, types or [], search_text, sort, limit)
            files_resp = await self._admin.list_documents(
                self._database_id, self._files_collection_id, queries,
            )
            files = files_resp.get("documents") or []

            owner_ids = list(dict.fromkeys(oid for oid in map(owner_id_of, files) if oid))
            owner_map: dict[str, dict[str, Any]] = {}
            await asyncio.gather(*(self._resolve_owner(oid, owner_map) for oid in owner_ids))

            documents = []
            for file_doc in files:
                oid = owner_id_of(file_doc)
                resolved = owner_map.get(oid) if oid else None
                documents.append({**file_doc, "owner": resolved or file_doc.get("owner")})
        except Exception as exc:
            logger.error("Failed to get files: %s", exc)
            raise

        return {**files_resp, "documents": documents}

    async def _resolve_owner(self, owner_id: str, owner_map: dict[str, dict[str, Any]]) -> None:
        """Look up an owner by document id, then accountId, then email."""
        try:
            owner_map[owner_id] = await self._admin.get_document(
                self._database_id, self._users_collection_id, owner_id,
            )
            return
        except Exception as exc:
            logger.debug("Owner %s is not a user document id: %s", owner_id, exc)

        try:
            for attribute in ("accountId", "email"):
                result = await self._admin.list_documents(
                    self._database_id,
                    self._users_collection_id,
                    [query.equal(attribute, [owner_id]), query.limit(1)],
                )
                if result.get("total", 0) > 0 and result.get("documents"):
                    owner_map[owner_id] = result["documents"][0]
                    return
        except Exception as exc:
            logger.debug("Could not resolve owner %s: %s", owner_id, exc)

    async def _get_owned_file(self, file_id: str, current_user: dict[str, Any]) -> dict[str, Any]:
        """Fetch a file document, refusing it unless ``current_user`` owns it."""
        file_doc = await self._admin.get_document(
            self._database_id, self._files_collection_id, file_id,
        )
        if owner_id_of(file_doc) != current_user["$id"]:
            raise FileAccessError(file_id)
        return file_doc

    async def rename_file(
        self, current_user: dict[str, Any], file_id: str, name: str, extension: str, path: str,
    ) -> dict[str, Any]:
        new_name = f"{name}.{extension}" if extension else name
        try:
            await self._get_owned_file(file_id, current_user)
            updated = await self._admin.update_document(
                self._database_id, self._files_collection_id, file_id, {"name": new_name},
            )
        except Exception as exc:
            logger.error("Failed to rename file: %s", exc)
            raise
        self._revalidator.revalidate_path(path)
        return updated

    async def update_file_users(
        self, current_user: dict[str, Any], file_id: str, emails: list[str], path: str,
    ) -> dict[str, Any]:
        """Replace the collaborator email list of a file."""
        try:
            await self._get_owned_file(file_id, current_user)
            updated = await self._admin.update_document(
                self._database_id, self._files_collection_id, file_id, {"users": emails},
            )
        except Exception as exc:
            logger.error("Failed to update file users: %s", exc)
            raise
        self._revalidator.revalidate_path(path)
        return updated

    async def delete_file(
        self,
        current_user: dict[str, Any],
        file_id: str,
        path: str,
        bucket_file_id: str | None = None,
    ) -> dict[str, str]:
        """Delete the document, then the bucket object it references.

        The bucket id comes from the stored document. A ``bucket_file_id``
        from the caller must match it and is only used for documents that
        carry no bucket reference.
        """
        try:
            file_doc = await self._get_owned_file(file_id, current_user)
            stored_id = bucket_file_id_of(file_doc)
            if stored_id and bucket_file_id and bucket_file_id != stored_id:
                raise AppwriteError(
                    f"Bucket file {bucket_file_id} does not belong to file {file_id}",
                    code=400,
                    type="file_reference_mismatch",
                )
            target_id = stored_id or bucket_file_id
            if not target_id:
                raise AppwriteError(
                    f"File {file_id} has no bucket file reference",
                    code=400,
                    type="file_reference_missing",
                )

            await self._admin.delete_document(
                self._database_id, self._files_collection_id, file_id,
            )
            await self._admin.delete_file(self._bucket_id, target_id)
        except Exception as exc:
            logger.error("Failed to delete file: %s", exc)
            raise
        self._revalidator.revalidate_path(path)
        return {"status": "success"}

    async def get_total_space_used(
        self, session_client: AppwriteClient, current_user: dict[str, Any],
    ) -> dict[str, Any]:
        try:
            files = await session_client.list_documents(
                self._database_id,
                self._files_collection_id,
                [query.equal("owner", [current_user["$id"]])],
            )
        except Exception as exc:
            logger.error("Error calculating total space used: %s", exc)
            raise
        return fold_total_space(files.get("documents") or [])
