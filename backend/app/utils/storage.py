"""Bucket URL and storage size helpers."""

from app.config import settings


def construct_file_url(bucket_file_id: str) -> str:
    """Public view URL of a bucket object."""
    return (
        f"{settings.appwrite_endpoint}/storage/buckets/{settings.appwrite_bucket_id}"
        f"/files/{bucket_file_id}/view?project={settings.appwrite_project_id}"
    )


def construct_download_url(bucket_file_id: str) -> str:
    """Download URL of a bucket object."""
    return (
        f"{settings.appwrite_endpoint}/storage/buckets/{settings.appwrite_bucket_id}"
        f"/files/{bucket_file_id}/download?project={settings.appwrite_project_id}"
    )


def convert_file_size(size_in_bytes: int, digits: int = 1) -> str:
    """Human-readable size, e.g. ``1.5 MB``."""
    if size_in_bytes < 1024:
        return f"{size_in_bytes} B"
    if size_in_bytes < 1024 * 1024:
        return f"{size_in_bytes / 1024:.{digits}f} KB"
    if size_in_bytes < 1024 * 1024 * 1024:
        return f"{size_in_bytes / (1024 * 1024):.{digits}f} MB"
    return f"{size_in_bytes / (1024 * 1024 * 1024):.{digits}f} GB"


def calculate_percentage(size_in_bytes: int, total: int | None = None) -> float:
    """Share of the storage quota used, in percent."""
    total = total or settings.storage_quota_bytes
    if total <= 0:
        return 0.0
    return round(size_in_bytes / total * 100, 2)
