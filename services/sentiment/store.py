"""In-memory TTL cache of per-ticker aggregation results."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from services.sentiment.types import AggregationResult

DEFAULT_TTL_SEC = 300.0


@dataclass(frozen=True, slots=True)
class CacheEntry:
    value: AggregationResult
    created_at: float


class ResultCache:
    """Process-wide cache keyed by upper-cased ticker.

    Entries expire lazily: a stale entry stays in the map but is never
    returned as a hit.
    """

    def __init__(self, ttl_sec: float = DEFAULT_TTL_SEC, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl = float(ttl_sec)
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    @staticmethod
    def _key(ticker: str) -> str:
        return ticker.strip().upper()

    def get(self, ticker: str) -> Optional[AggregationResult]:
        entry = self._entries.get(self._key(ticker))
        if entry is None:
            return None
        if self._clock() - entry.created_at >= self.ttl:
            return None
        return entry.value

    def put(self, ticker: str, result: AggregationResult) -> None:
        self._entries[self._key(ticker)] = CacheEntry(value=result, created_at=self._clock())

    def __len__(self) -> int:
        return len(self._entries)
