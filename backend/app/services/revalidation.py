"""Page revalidation: records which page paths hold stale data."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

logger = logging.getLogger(__name__)


class PageRevalidator:
    """Keeps the last revalidation time per page path."""

    def __init__(self) -> None:
        self._stamps: dict[str, datetime] = {}

    def revalidate_path(self, path: str | None) -> None:
        if not path:
            return
        self._stamps[path] = datetime.now(timezone.utc)
        logger.debug("Revalidated %s", path)

    def last_revalidated(self, path: str) -> datetime | None:
        return self._stamps.get(path)

    def snapshot(self) -> dict[str, str]:
        return {path: ts.isoformat() for path, ts in sorted(self._stamps.items())}
