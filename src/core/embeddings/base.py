"""
Abstract base class for embedding providers.
Turns query and document text into vectors for similarity search.
"""

from abc import ABC, abstractmethod


class Embedder(ABC):
    """
    Abstract base for embedding providers.

    Responsibilities:
    - Generate vector embeddings for text
    - Batch processing for ingestion
    - Consistent vector dimensions across calls
    """

    @abstractmethod
    async def embed(self, text: str, **kwargs) -> list[float]:
        """
        Generate embedding vector for text.

        Args:
            text: Text to embed
            **kwargs: Provider-specific parameters

        Returns:
            List of floats representing the embedding vector

        Raises:
            ValidationError: If text is empty
            EmbeddingError: If the provider call fails
        """
        pass

    async def batch_embed(
        self, texts: list[str], batch_size: int = 32, **kwargs
    ) -> list[list[float]]:
        """
        Generate embeddings for multiple texts.

        Default implementation embeds one text at a time.
        Override when the provider accepts batched input.

        Args:
            texts: List of texts to embed
            batch_size: Number of texts per provider request
            **kwargs: Provider-specific parameters

        Returns:
            List of embedding vectors (same order as input texts)
        """
        return [await self.embed(text, **kwargs) for text in texts]

    async def get_dimension(self) -> int:
        """
        Get the dimension of embeddings produced by this provider.

        Default implementation embeds a probe string.

        Returns:
            Embedding vector dimension
        """
        probe = await self.embed("dimension probe")
        return len(probe)

    @abstractmethod
    async def close(self):
        """Release provider connections."""
        pass
