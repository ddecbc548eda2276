"""
Embedding cache entry model.
"""

from pydantic import BaseModel, ConfigDict


class CacheEntry(BaseModel):
    """
    A single memoized embedding.

    The vector is stored as a tuple and the entry is frozen, so cached
    state cannot be mutated through a reference handed out by the cache.
    Times are monotonic clock readings.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    value: tuple[float, ...]
    cached_at: float
    expires_at: float | None = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at
