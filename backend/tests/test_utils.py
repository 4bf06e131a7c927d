"""Tests for file type classification and storage helpers."""

from unittest.mock import patch

import pytest

from app.utils.file_types import get_file_type, get_file_types_params
from app.utils.storage import (
    calculate_percentage,
    construct_download_url,
    construct_file_url,
    convert_file_size,
)


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("report.PDF", ("document", "pdf")),
        ("photo.jpeg", ("image", "jpeg")),
        ("clip.mkv", ("video", "mkv")),
        ("song.flac", ("audio", "flac")),
        ("archive.tar.gz", ("other", "gz")),
        ("Makefile", ("other", "")),
        ("trailing.", ("other", "")),
    ],
)
def test_get_file_type(filename, expected):
    assert get_file_type(filename) == expected


def test_file_types_params():
    assert get_file_types_params("media") == ["video", "audio"]
    assert get_file_types_params("others") == ["other"]
    assert get_file_types_params("unknown") == ["document"]


@patch("app.utils.storage.settings")
def test_file_urls(mock_settings):
    mock_settings.appwrite_endpoint = "https://appwrite.test/v1"
    mock_settings.appwrite_bucket_id = "bucket"
    mock_settings.appwrite_project_id = "proj"

    assert construct_file_url("b1") == (
        "https://appwrite.test/v1/storage/buckets/bucket/files/b1/view?project=proj"
    )
    assert construct_download_url("b1").endswith("/files/b1/download?project=proj")


def test_convert_file_size():
    assert convert_file_size(512) == "512 B"
    assert convert_file_size(1536) == "1.5 KB"
    assert convert_file_size(5 * 1024 * 1024) == "5.0 MB"
    assert convert_file_size(3 * 1024 * 1024 * 1024) == "3.0 GB"


def test_calculate_percentage():
    assert calculate_percentage(50, 200) == 25.0
    assert calculate_percentage(1, 3) == 33.33
    assert calculate_percentage(0, 100) == 0.0
