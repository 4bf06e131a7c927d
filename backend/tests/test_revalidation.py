"""Tests for page revalidation tracking."""

from unittest.mock import patch

import pytest
from httpx import AsyncClient

from app.services.revalidation import PageRevalidator


def test_revalidate_records_path():
    revalidator = PageRevalidator()
    assert revalidator.last_revalidated("/documents") is None

    revalidator.revalidate_path("/documents")

    assert revalidator.last_revalidated("/documents") is not None
    assert list(revalidator.snapshot()) == ["/documents"]


def test_empty_path_is_ignored():
    revalidator = PageRevalidator()
    revalidator.revalidate_path("")
    revalidator.revalidate_path(None)
    assert revalidator.snapshot() == {}


@pytest.mark.asyncio
async def test_revalidations_route(client: AsyncClient):
    revalidator = PageRevalidator()
    revalidator.revalidate_path("/images")

    with patch("app.api.routes.cache.get_revalidator", return_value=revalidator):
        resp = await client.get("/api/cache/revalidations")

    assert resp.status_code == 200
    assert "/images" in resp.json()["paths"]
