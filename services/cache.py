"""Run-scoped memoization of eligibility windows."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict

from cachetools import LRUCache

from core.constants import ValidationDefaults
from core.models import EligibilityWindow


class WindowCache:
    """LRU cache of ``EligibilityWindow`` keyed by recharge instant.

    Windows are a pure function of the instant, so entries never go stale.
    One cache belongs to one validation run; it is never shared between runs.
    """

    def __init__(self, maxsize: int = ValidationDefaults.WINDOW_CACHE_SIZE) -> None:
        """Initialize window cache.

        Args:
            maxsize: Maximum number of cached windows
        """
        self._cache: LRUCache = LRUCache(maxsize=maxsize)
        self.hits = 0
        self.misses = 0

    def get_or_compute(
        self,
        instant: datetime,
        loader: Callable[[datetime], EligibilityWindow],
    ) -> EligibilityWindow:
        """Get window from cache or compute and cache it.

        Args:
            instant: Recharge instant (aware datetimes compare by absolute time)
            loader: Function computing the window on a miss

        Returns:
            Cached or computed window
        """
        window = self._cache.get(instant)
        if window is not None:
            self.hits += 1
            return window

        self.misses += 1
        window = loader(instant)
        self._cache[instant] = window
        return window

    def __len__(self) -> int:
        return len(self._cache)

    def stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with size, capacity, hits and misses
        """
        return {
            "size": len(self),
            "maxsize": self._cache.maxsize,
            "hits": self.hits,
            "misses": self.misses,
        }
