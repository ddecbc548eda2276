"""Embedding memo-cache."""

from src.core.cache.embedding_cache import EmbeddingCache

__all__ = [
    "EmbeddingCache",
]
