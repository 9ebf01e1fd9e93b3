"""
Read-through cache for classified entries and per-key async locks.
"""

import asyncio
import logging
from collections import OrderedDict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable, List, Optional, Tuple

from timeledger.domain.models.classified_entry import ClassifiedEntry

logger = logging.getLogger(__name__)


CacheKey = Tuple[Optional[int], Optional[int], Optional[int], bool]


class EntryCache:
    """
    Bounded LRU cache of classified entry lists keyed by list query.

    Any successful write invalidates every key: a single ledger change can
    show up in an employee's list, a month view and an all-users view.
    Write responses are never patched into cached lists.
    """

    def __init__(self, enabled: bool = True, maxsize: int = 256):
        if maxsize < 1:
            raise ValueError("maxsize must be >= 1")
        self.enabled = enabled
        self._maxsize = maxsize
        self._data: "OrderedDict[CacheKey, List[ClassifiedEntry]]" = OrderedDict()
        self._lock = asyncio.Lock()

    @staticmethod
    def key(
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        all_users: bool = False
    ) -> CacheKey:
        return (None if all_users else employee_id, month, year, all_users)

    async def get(self, key: CacheKey) -> Optional[List[ClassifiedEntry]]:
        if not self.enabled:
            return None
        async with self._lock:
            entries = self._data.get(key)
            if entries is None:
                return None
            self._data.move_to_end(key)
            return list(entries)

    async def put(self, key: CacheKey, entries: List[ClassifiedEntry]) -> None:
        if not self.enabled:
            return
        async with self._lock:
            if key in self._data:
                del self._data[key]
            elif len(self._data) >= self._maxsize:
                self._data.popitem(last=False)
            self._data[key] = list(entries)

    async def invalidate(self) -> None:
        async with self._lock:
            if self._data:
                logger.debug(f"Invalidating {len(self._data)} cached entry list(s)")
            self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


class KeyedLock:
    """One asyncio.Lock per key, created on first use and dropped once idle."""

    def __init__(self):
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        # holders plus waiters; the lock is dropped only when nobody needs it
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                self._locks.pop(key, None)

    def __len__(self) -> int:
        return len(self._locks)
