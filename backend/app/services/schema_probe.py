"""Collection schema probing: tolerate attribute drift in the backend."""

from __future__ import annotations

import logging
from typing import Any

from app.services.appwrite_client import AppwriteClient

logger = logging.getLogger(__name__)


def normalize_attributes(response: Any) -> list[dict[str, Any]]:
    """Attribute list from a list-attributes response.

    Older server versions return a bare list instead of ``{"attributes": [...]}``.
    """
    if isinstance(response, dict) and isinstance(response.get("attributes"), list):
        return response["attributes"]
    if isinstance(response, list):
        return response
    return []


async def list_attribute_keys(
    client: AppwriteClient, database_id: str, collection_id: str,
) -> set[str]:
    """Existing attribute keys of a collection (case-sensitive)."""
    response = await client.list_attributes(database_id, collection_id)
    keys = set()
    for attr in normalize_attributes(response):
        key = attr.get("key") or attr.get("$id")
        if key:
            keys.add(key)
    return keys


def pick_key(existing: set[str], *candidates: str) -> str | None:
    """First candidate spelling present in ``existing``."""
    for key in candidates:
        if key in existing:
            return key
    return None


async def ensure_string_attribute(
    client: AppwriteClient,
    database_id: str,
    collection_id: str,
    key: str,
    size: int = 255,
    required: bool = False,
) -> bool:
    """Create a string attribute if missing. Returns True when created."""
    existing = await list_attribute_keys(client, database_id, collection_id)
    if key in existing:
        return False
    await client.create_string_attribute(database_id, collection_id, key, size, required)
    return True


async def ensure_attributes(
    client: AppwriteClient,
    database_id: str,
    collection_id: str,
    keys: list[str],
) -> list[str]:
    """Ensure each key exists as a string attribute; returns the created keys."""
    created: list[str] = []
    for key in keys:
        try:
            did_create = await ensure_string_attribute(client, database_id, collection_id, key)
        except Exception as exc:
            logger.error("Failed ensuring attribute %r: %s", key, exc)
            raise
        if did_create:
            logger.info("Attribute %r created in collection %s", key, collection_id)
            created.append(key)
        else:
            logger.info("Attribute %r already exists in collection %s", key, collection_id)
    return created
