"""Bounded LRU cache for memoized move values."""

from collections import OrderedDict
from typing import Any, Hashable, Optional


class LRUCache:
    """
    Capacity-bounded mapping with least-recently-used eviction.

    A hit moves the entry to the newest position; inserting into a full cache
    drops the oldest entry. Hit/miss accounting lives in ScorerMetrics, not
    here, so a lookup has no side effects beyond recency.
    """

    def __init__(self, capacity: int = 200):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._entries: "OrderedDict[Hashable, Any]" = OrderedDict()
        self.evictions = 0

    def get(self, key: Hashable, default: Optional[Any] = None) -> Any:
        if key not in self._entries:
            return default
        self._entries.move_to_end(key)
        return self._entries[key]

    def put(self, key: Hashable, value: Any) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)
        elif len(self._entries) >= self.capacity:
            self._entries.popitem(last=False)
            self.evictions += 1
        self._entries[key] = value

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def keys(self):
        """Keys from oldest to newest."""
        return list(self._entries.keys())

    def clear(self) -> None:
        self._entries.clear()
        self.evictions = 0
