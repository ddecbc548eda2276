"""
Embedder abstraction layer for text embeddings.

Supported providers:
- Ollama (native SDK)
- OpenAI (official SDK)

CachedEmbedder wraps any provider with the embedding cache.
"""
from src.core.embeddings.base import Embedder
from src.core.embeddings.cached import CachedEmbedder
from src.core.embeddings.ollama import OllamaEmbedder
from src.core.embeddings.openai import OpenAIEmbedder

__all__ = [
    "Embedder",
    "CachedEmbedder",
    "OllamaEmbedder",
    "OpenAIEmbedder",
]
