"""
In-process cache of rendered pages, keyed by request path.

Rendered HTML is kept until its TTL runs out or the webhook purges the
path. ``purge`` is idempotent: purging a path that is not cached is a no-op.
"""

import logging
import time
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """``/en/about/`` and ``/en/about`` share one entry"""
    if len(path) > 1:
        path = path.rstrip("/")
    return path or "/"


class PageCache:
    def __init__(self, ttl: float = 3600.0, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[float, str]] = {}

    def get(self, path: str) -> Optional[str]:
        path = normalize_path(path)
        entry = self._entries.get(path)
        if entry is None:
            return None
        expires_at, html = entry
        if expires_at <= self._clock():
            del self._entries[path]
            return None
        return html

    def set(self, path: str, html: str) -> None:
        if self.ttl <= 0:
            return
        self._entries[normalize_path(path)] = (self._clock() + self.ttl, html)

    async def purge(self, path: str) -> None:
        if self._entries.pop(normalize_path(path), None) is not None:
            logger.debug(f"Purged cached page {path}")

    async def purge_all(self) -> None:
        """Drop every page; the shared header and footer changed"""
        count = len(self._entries)
        self._entries.clear()
        logger.info(f"Purged all {count} cached pages")

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, path: str) -> bool:
        return self.get(path) is not None

    def __len__(self) -> int:
        return len(self._entries)
