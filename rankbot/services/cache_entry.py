"""
Immutable cache entry shared by the report caches.

Caches replace their entry object in one assignment, so a reader sees
either the old (text, timestamp) pair or the new one, never a mix.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CacheEntry:
    text: Optional[str] = None
    updated_at: Optional[datetime] = None
    # time.monotonic() at render, used for TTL checks
    rendered_at: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.text is None

    def age_seconds(self, now_monotonic: float) -> Optional[float]:
        if self.rendered_at is None:
            return None
        return now_monotonic - self.rendered_at

    def is_fresh(self, now_monotonic: float, ttl_seconds: float) -> bool:
        age = self.age_seconds(now_monotonic)
        return self.text is not None and age is not None and age < ttl_seconds
