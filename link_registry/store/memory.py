"""In-process link store."""

import time
from typing import Callable, Dict, Optional

from ..models import LinkRecord
from .base import LinkStore


class MemoryLinkStore(LinkStore):
    """Dict-backed store for tests and single-process deployments.
    
    Retention deadlines are enforced lazily: an expired record is dropped the
    next time it is looked up.
    """
    
    def __init__(self, time_source: Callable[[], float] = time.monotonic):
        self._records: Dict[str, LinkRecord] = {}
        self._deadlines: Dict[str, float] = {}
        self._time = time_source
    
    def _evict_if_expired(self, short_key: str) -> None:
        deadline = self._deadlines.get(short_key)
        if deadline is not None and deadline <= self._time():
            self._records.pop(short_key, None)
            self._deadlines.pop(short_key, None)
    
    async def get(self, short_key: str) -> Optional[LinkRecord]:
        self._evict_if_expired(short_key)
        return self._records.get(short_key)
    
    async def insert(
        self, short_key: str, record: LinkRecord, retention: Optional[int] = None
    ) -> bool:
        self._evict_if_expired(short_key)
        if short_key in self._records:
            return False
        self._records[short_key] = record
        if retention is not None:
            self._deadlines[short_key] = self._time() + retention
        return True
    
    async def put(self, short_key: str, record: LinkRecord) -> bool:
        self._evict_if_expired(short_key)
        if short_key not in self._records:
            return False
        self._records[short_key] = record
        return True
    
    async def delete(self, short_key: str) -> bool:
        self._evict_if_expired(short_key)
        self._deadlines.pop(short_key, None)
        return self._records.pop(short_key, None) is not None
    
    async def extend_retention(self, short_key: str, min_horizon: int, max_horizon: int) -> None:
        if short_key not in self._records:
            return
        now = self._time()
        deadline = self._deadlines.get(short_key)
        if deadline is None or deadline - now < min_horizon:
            self._deadlines[short_key] = now + max_horizon
    
    def remaining_retention(self, short_key: str) -> Optional[float]:
        """Seconds until the record expires, or None if it has no deadline."""
        deadline = self._deadlines.get(short_key)
        if deadline is None:
            return None
        return deadline - self._time()
    
    def __len__(self) -> int:
        return len(self._records)
    
    async def health_check(self) -> bool:
        return True
    
    async def close(self) -> None:
        self._records.clear()
        self._deadlines.clear()
