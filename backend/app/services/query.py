"""Appwrite query expressions.

Appwrite (1.5+) takes queries as JSON objects of the form
``{"method": ..., "attribute": ..., "values": [...]}``, sent as repeated
``queries[]`` parameters. Each helper returns the serialized string.
"""

from __future__ import annotations

import json
from typing import Any


def _build(method: str, attribute: str | None = None, values: Any = None) -> str:
    query: dict[str, Any] = {"method": method}
    if attribute is not None:
        query["attribute"] = attribute
    if values is not None:
        if not isinstance(values, list):
            values = [values]
        query["values"] = values
    return json.dumps(query, separators=(",", ":"))


def equal(attribute: str, value: Any) -> str:
    return _build("equal", attribute, value)


def contains(attribute: str, value: Any) -> str:
    return _build("contains", attribute, value)


def limit(n: int) -> str:
    return _build("limit", values=n)


def order_asc(attribute: str) -> str:
    return _build("orderAsc", attribute)


def order_desc(attribute: str) -> str:
    return _build("orderDesc", attribute)


def or_(queries: list[str]) -> str:
    """Logical OR over already-serialized queries."""
    return _build("or", values=[json.loads(q) for q in queries])
