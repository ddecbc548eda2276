"""
Embedder decorator backed by the embedding cache.

Concurrent misses for the same text share one provider call: the first
caller starts a load task, later callers await the same task.
"""

import asyncio

from src.core.cache.embedding_cache import EmbeddingCache
from src.core.embeddings.base import Embedder
from src.utils.logger import get_logger

logger = get_logger(__name__)


class CachedEmbedder(Embedder):
    """
    Memoizing embedder with single-flight miss coalescing.

    The load runs as its own task and callers await it through
    asyncio.shield, so a cancelled caller never cancels the load other
    callers are waiting on.
    """

    def __init__(self, embedder: Embedder, cache: EmbeddingCache | None = None):
        """
        Args:
            embedder: Provider embedder to call on cache misses
            cache: Cache instance (a default-sized cache when omitted)
        """
        self.embedder = embedder
        self.cache = cache or EmbeddingCache()
        self._inflight: dict[str, asyncio.Task] = {}

    async def embed(self, text: str, **kwargs) -> list[float]:
        vector, found = self.cache.get(text)
        if found:
            return vector

        task = self._inflight.get(text)
        if task is None:
            task = asyncio.create_task(self._load(text, **kwargs))
            self._inflight[text] = task
            task.add_done_callback(lambda done, key=text: self._finish(key, done))
        else:
            logger.debug("Joining in-flight embedding", extra={"text_length": len(text)})

        return list(await asyncio.shield(task))

    async def _load(self, text: str, **kwargs) -> tuple[float, ...]:
        vector = await self.embedder.embed(text, **kwargs)
        self.cache.put(text, vector)
        return tuple(vector)

    def _finish(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # Mark the exception retrieved when every waiter was cancelled
        if not task.cancelled():
            task.exception()

    async def batch_embed(
        self, texts: list[str], batch_size: int = 32, **kwargs
    ) -> list[list[float]]:
        """
        Serve cached texts and embed only the distinct misses in one batch.

        Returns:
            Vectors in input order
        """
        results: list[list[float] | None] = []
        misses: list[str] = []
        for text in texts:
            vector, found = self.cache.get(text)
            results.append(vector if found else None)
            if not found and text not in misses:
                misses.append(text)

        if misses:
            vectors = await self.embedder.batch_embed(misses, batch_size=batch_size, **kwargs)
            loaded = dict(zip(misses, vectors, strict=True))
            for text, vector in loaded.items():
                self.cache.put(text, vector)
            results = [
                result if result is not None else list(loaded[text])
                for text, result in zip(texts, results, strict=True)
            ]

        logger.debug(
            "Batch embedding served",
            extra={"requested": len(texts), "provider_calls": len(misses)},
        )
        return results

    async def get_dimension(self) -> int:
        return await self.embedder.get_dimension()

    async def close(self):
        """Close the wrapped provider."""
        await self.embedder.close()
