"""
Instrumentation for a MoveScorer: cache hits/misses and a rolling window of
calculation durations.
"""

from collections import deque
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class MetricsSnapshot:
    cache_hits: int
    cache_misses: int
    hit_rate: float  # percent
    average_time_ms: float
    cache_size: int
    samples: int

    def to_dict(self) -> Dict[str, object]:
        """Display form, with rate and time pre-formatted."""
        return {
            "cacheHitRate": f"{self.hit_rate:.2f}%",
            "cacheHits": self.cache_hits,
            "cacheMisses": self.cache_misses,
            "averageCalculationTime": f"{self.average_time_ms:.2f}ms",
            "cacheSize": self.cache_size,
        }


class ScorerMetrics:
    """
    Per-scorer counters.

    Durations are kept in a bounded deque; once `window` samples are stored the
    oldest one is dropped for every new sample.
    """

    def __init__(self, window: int = 100):
        self.window = window
        self.hits = 0
        self.misses = 0
        self.durations = deque(maxlen=window)

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def record_duration(self, ms: float) -> None:
        self.durations.append(float(ms))

    @property
    def lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Hit rate in percent, 0.0 before any lookup."""
        if self.lookups == 0:
            return 0.0
        return round(self.hits / self.lookups * 100, 2)

    @property
    def average_time_ms(self) -> float:
        if not self.durations:
            return 0.0
        return sum(self.durations) / len(self.durations)

    def snapshot(self, cache_size: int = 0) -> MetricsSnapshot:
        return MetricsSnapshot(
            cache_hits=self.hits,
            cache_misses=self.misses,
            hit_rate=self.hit_rate,
            average_time_ms=self.average_time_ms,
            cache_size=cache_size,
            samples=len(self.durations),
        )

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0
        self.durations.clear()
