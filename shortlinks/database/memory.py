"""In-memory link index, for tests and throwaway deployments."""

import threading
from typing import Dict, List

from .base import URLIndex
from .models import LinkEntry
from ..exceptions import NotFound, StorageError


class MemoryIndex(URLIndex):
    """Link index kept in two dictionaries guarded by one lock.

    IDs are assigned sequentially starting at 1, like the SQL backends.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._ids: Dict[str, int] = {}
        self._urls: Dict[int, str] = {}
        self._next_id = 1
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise StorageError("in-memory index is closed")

    async def lookup_id(self, link_id: int) -> str:
        with self._lock:
            self._check_open()
            try:
                return self._urls[link_id]
            except KeyError:
                raise NotFound(link_id) from None

    async def add_url(self, long_url: str) -> int:
        with self._lock:
            self._check_open()
            link_id = self._ids.get(long_url)
            if link_id is None:
                link_id = self._next_id
                self._next_id += 1
                self._ids[long_url] = link_id
                self._urls[link_id] = long_url
            return link_id

    async def list_entries(self, limit: int = 100) -> List[LinkEntry]:
        with self._lock:
            self._check_open()
            newest = sorted(self._urls, reverse=True)[:limit]
            return [LinkEntry(id=link_id, long_url=self._urls[link_id]) for link_id in newest]

    async def health_check(self) -> bool:
        return not self._closed

    async def close(self) -> None:
        with self._lock:
            self._closed = True
