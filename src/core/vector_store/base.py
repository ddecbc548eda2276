"""
Base interface for an external vector store.

The retriever keeps its own in-memory index; a configured store receives
written documents so another process can serve them.
"""

from abc import ABC, abstractmethod
from typing import Any

from src.models.document import Document
from src.models.retrieval import ScoredDocument


class VectorStore(ABC):
    """Abstract base class for vector storage backends."""

    @abstractmethod
    async def create_collection(self, name: str, dimension: int) -> None:
        """
        Create a collection if it does not exist.

        Args:
            name: Collection name
            dimension: Vector dimension
        """
        pass

    @abstractmethod
    async def delete_collection(self, name: str) -> None:
        """Delete a collection and everything in it."""
        pass

    @abstractmethod
    async def insert(self, collection: str, documents: list[Document]) -> None:
        """
        Insert or replace documents with their embeddings.

        Args:
            collection: Target collection
            documents: Documents carrying embeddings
        """
        pass

    @abstractmethod
    async def search(
        self,
        collection: str,
        vector: list[float],
        top_k: int = 10,
        filters: dict[str, Any] | None = None,
    ) -> list[ScoredDocument]:
        """
        Search for similar documents by vector.

        Args:
            collection: Collection to search
            vector: Query embedding vector
            top_k: Maximum results
            filters: Optional payload filters

        Returns:
            Documents with similarity scores, highest first
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the connection to the vector store."""
        pass
