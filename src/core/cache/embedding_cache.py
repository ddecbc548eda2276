"""
In-memory LRU cache for embedding vectors.

Keyed by the embedded text. Entries expire lazily: an expired entry is
treated as a miss on read and removed then.
"""

import time
from collections import OrderedDict

from src.models.cache import CacheEntry
from src.utils.exceptions import ValidationError
from src.utils.locks import ReadWriteLock
from src.utils.logger import get_logger

logger = get_logger(__name__)


class EmbeddingCache:
    """
    Capacity-bounded LRU cache of embedding vectors.

    Responsibilities:
    - Memoize text -> vector lookups
    - Evict exactly one least recently used entry per insert into a full cache
    - Hand out copies so callers cannot mutate cached vectors
    """

    def __init__(self, max_size: int = 10000, ttl_seconds: float | None = 86400.0):
        """
        Initialize the cache.

        Args:
            max_size: Maximum number of entries
            ttl_seconds: Default time-to-live; None or 0 disables expiry

        Raises:
            ValidationError: If max_size is not positive
        """
        if max_size <= 0:
            raise ValidationError(
                f"max_size must be positive, got {max_size}", context={"max_size": max_size}
            )

        self.max_size = max_size
        self.ttl_seconds = ttl_seconds or None
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = ReadWriteLock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    def get(self, key: str) -> tuple[list[float] | None, bool]:
        """
        Look up a vector.

        Recency is updated on hit, so this takes the write lock.

        Args:
            key: Cache key (the embedded text)

        Returns:
            (vector copy, True) on hit, (None, False) on miss or expiry
        """
        with self._lock.write():
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None, False

            if entry.is_expired(time.monotonic()):
                del self._entries[key]
                self._expirations += 1
                self._misses += 1
                return None, False

            self._entries.move_to_end(key)
            self._hits += 1
            return list(entry.value), True

    def put(self, key: str, vector: list[float], ttl: float | None = None) -> None:
        """
        Store a vector.

        Args:
            key: Cache key
            vector: Embedding vector (copied into an immutable tuple)
            ttl: Optional per-entry time-to-live overriding the default
        """
        now = time.monotonic()
        ttl = ttl if ttl is not None else self.ttl_seconds
        entry = CacheEntry(
            key=key,
            value=tuple(vector),
            cached_at=now,
            expires_at=now + ttl if ttl else None,
        )

        with self._lock.write():
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug("Evicted embedding cache entry", extra={"key_length": len(evicted)})
            self._entries[key] = entry

    def delete(self, key: str) -> bool:
        """
        Remove an entry.

        Returns:
            True if the key was present
        """
        with self._lock.write():
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Remove all entries. Counters are kept."""
        with self._lock.write():
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock.read():
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(time.monotonic())

    def stats(self) -> dict[str, float | int]:
        """
        Get cache statistics.

        Returns:
            Size, capacity, hit/miss/eviction/expiration counters and hit rate
        """
        with self._lock.read():
            lookups = self._hits + self._misses
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "expirations": self._expirations,
                "hit_rate": self._hits / lookups if lookups else 0.0,
            }
