"""File type classification by extension."""

from __future__ import annotations

FILE_TYPES = ("document", "image", "video", "audio", "other")

DOCUMENT_EXTENSIONS = {
    "pdf", "doc", "docx", "txt", "xls", "xlsx", "csv", "rtf", "ods", "ppt",
    "odp", "md", "html", "htm", "epub", "pages", "fig", "psd", "ai", "indd",
    "xd", "sketch", "afdesign", "afphoto",
}
IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "bmp", "svg", "webp"}
VIDEO_EXTENSIONS = {"mp4", "avi", "mov", "mkv", "webm"}
AUDIO_EXTENSIONS = {"mp3", "wav", "ogg", "flac"}

# Page route segment -> file types shown on that page
ROUTE_FILE_TYPES: dict[str, list[str]] = {
    "documents": ["document"],
    "images": ["image"],
    "media": ["video", "audio"],
    "others": ["other"],
}


def get_file_type(filename: str) -> tuple[str, str]:
    """Return ``(type, extension)`` for a file name."""
    if "." not in filename:
        return "other", ""
    extension = filename.rsplit(".", 1)[-1].lower()
    if not extension:
        return "other", ""

    if extension in DOCUMENT_EXTENSIONS:
        return "document", extension
    if extension in IMAGE_EXTENSIONS:
        return "image", extension
    if extension in VIDEO_EXTENSIONS:
        return "video", extension
    if extension in AUDIO_EXTENSIONS:
        return "audio", extension
    return "other", extension


def get_file_types_params(route_type: str) -> list[str]:
    return list(ROUTE_FILE_TYPES.get(route_type, ["document"]))
