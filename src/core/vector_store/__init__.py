"""
Vector store interface.

Backends live outside this package; the retriever writes through to any
VectorStore it is given.
"""

from src.core.vector_store.base import VectorStore

__all__ = [
    "VectorStore",
]
