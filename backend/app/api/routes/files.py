"""File API routes: upload, list, rename, share, delete and usage."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile, status
from fastapi.responses import RedirectResponse

from app.api.deps import file_service, get_current_user, get_session_client
from app.config import settings
from app.schemas.files import RenameRequest, ShareRequest, UsageResponse
from app.services.appwrite_client import AppwriteClient
from app.services.file_service import DEFAULT_SORT, FileService, get_usage_summary
from app.utils.file_types import get_file_types_params
from app.utils.storage import calculate_percentage, construct_download_url, convert_file_size

logger = logging.getLogger(__name__)
router = APIRouter()

REVALIDATE_HEADER = "X-Revalidate-Path"


def _too_large() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"File exceeds {convert_file_size(settings.max_upload_bytes)}",
    )


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_file(
    response: Response,
    file: UploadFile = File(...),
    path: str = Form("/"),
    current_user: dict[str, Any] = Depends(get_current_user),
    files: FileService = Depends(file_service),
):
    """Store the file in the bucket and create its metadata document."""
    # size is filled in by the form parser and may be None
    if file.size is not None and file.size > settings.max_upload_bytes:
        raise _too_large()
    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise _too_large()

    new_file = await files.upload_file(
        content,
        file.filename or "untitled",
        file.content_type,
        owner_id=current_user["$id"],
        account_id=current_user.get("accountId", ""),
        path=path,
    )
    response.headers[REVALIDATE_HEADER] = path
    return new_file


@router.get("")
async def list_files(
    route_type: Optional[str] = Query(default=None, alias="type"),
    types: list[str] = Query(default=[]),
    search: str = "",
    sort: str = DEFAULT_SORT,
    limit: Optional[int] = Query(default=None, ge=1),
    current_user: dict[str, Any] = Depends(get_current_user),
    files: FileService = Depends(file_service),
):
    """Files the user owns or that were shared with them.

    ``type`` is a page segment (documents, images, media, others);
    ``types`` lists raw file types and wins when both are given.
    """
    if not types and route_type:
        types = get_file_types_params(route_type)
    return await files.get_files(current_user, types, search, sort, limit)


@router.get("/usage", response_model=UsageResponse)
async def usage(
    current_user: dict[str, Any] = Depends(get_current_user),
    session_client: AppwriteClient = Depends(get_session_client),
    files: FileService = Depends(file_service),
):
    """Storage used per file type against the quota."""
    total_space = await files.get_total_space_used(session_client, current_user)
    return {
        "totalSpace": total_space,
        "usedPercent": calculate_percentage(total_space["used"], total_space["all"]),
        "usedHuman": convert_file_size(total_space["used"]),
        "summary": get_usage_summary(total_space),
    }


@router.patch("/{file_id}/name")
async def rename_file(
    file_id: str,
    body: RenameRequest,
    response: Response,
    current_user: dict[str, Any] = Depends(get_current_user),
    files: FileService = Depends(file_service),
):
    updated = await files.rename_file(current_user, file_id, body.name, body.extension, body.path)
    response.headers[REVALIDATE_HEADER] = body.path
    return updated


@router.put("/{file_id}/users")
async def update_file_users(
    file_id: str,
    body: ShareRequest,
    response: Response,
    current_user: dict[str, Any] = Depends(get_current_user),
    files: FileService = Depends(file_service),
):
    """Replace the list of emails the file is shared with."""
    updated = await files.update_file_users(current_user, file_id, [str(e) for e in body.emails], body.path)
    response.headers[REVALIDATE_HEADER] = body.path
    return updated


@router.delete("/{file_id}")
async def delete_file(
    file_id: str,
    response: Response,
    bucket_file_id: Optional[str] = Query(default=None, alias="bucketFileId"),
    path: str = "/",
    current_user: dict[str, Any] = Depends(get_current_user),
    files: FileService = Depends(file_service),
):
    """Delete the metadata document and the bucket object it references."""
    result = await files.delete_file(current_user, file_id, path, bucket_file_id)
    response.headers[REVALIDATE_HEADER] = path
    return result


@router.get("/{bucket_file_id}/download")
async def download_file(
    bucket_file_id: str,
    current_user: dict[str, Any] = Depends(get_current_user),
):
    """Redirect to the bucket's download URL."""
    return RedirectResponse(
        url=construct_download_url(bucket_file_id),
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
    )
