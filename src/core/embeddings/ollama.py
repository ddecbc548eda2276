"""
Ollama embedder using native ollama-python SDK.
"""

import ollama

from src.core.embeddings.base import Embedder
from src.utils.exceptions import EmbeddingError, ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaEmbedder(Embedder):
    """
    Ollama embedder for query and chunk embeddings.

    Single texts go through the embeddings endpoint; batches use the
    embed endpoint, which accepts a list of inputs per request.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "nomic-embed-text",
        timeout: float = 120.0,
    ):
        """
        Initialize Ollama embedder.

        Args:
            host: Ollama server URL
            model: Embedding model name (e.g., "nomic-embed-text", "mxbai-embed-large")
            timeout: Request timeout in seconds
        """
        self.host = host
        self.model = model
        self.timeout = timeout
        self._dimension: int | None = None

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def embed(self, text: str, **kwargs) -> list[float]:
        """
        Generate embedding for text using Ollama.

        Raises:
            ValidationError: If text is empty
            EmbeddingError: If Ollama embedding fails
        """
        if not text or not text.strip():
            raise ValidationError("Text cannot be empty")

        try:
            response = await self.client.embeddings(model=self.model, prompt=text, **kwargs)

            if not response or "embedding" not in response:
                raise EmbeddingError("Ollama returned invalid embedding response")

            return list(response["embedding"])
        except (ValidationError, EmbeddingError):
            raise
        except Exception as e:
            logger.error(
                "Ollama embedding error: {}",
                e,
                extra={"model": self.model, "host": self.host, "error": str(e)},
            )
            raise EmbeddingError(f"Ollama embedding error: {e}") from e

    async def batch_embed(
        self, texts: list[str], batch_size: int = 32, **kwargs
    ) -> list[list[float]]:
        """
        Embed texts in batches of batch_size inputs per request.

        Args:
            texts: List of texts to embed
            batch_size: Inputs per request
            **kwargs: Additional options passed to Ollama

        Returns:
            List of embedding vectors in input order

        Raises:
            ValidationError: If any text is empty
            EmbeddingError: If a batch request fails or returns the wrong count
        """
        if any(not text or not text.strip() for text in texts):
            raise ValidationError("Texts cannot contain empty entries")

        embeddings: list[list[float]] = []
        for i in range(0, len(texts), batch_size):
            batch = texts[i : i + batch_size]
            try:
                response = await self.client.embed(model=self.model, input=batch, **kwargs)
            except Exception as e:
                logger.error(
                    "Ollama batch embedding error: {}",
                    e,
                    extra={"model": self.model, "batch_size": len(batch), "error": str(e)},
                )
                raise EmbeddingError(f"Ollama batch embedding error: {e}") from e

            vectors = response["embeddings"] if response else None
            if not vectors or len(vectors) != len(batch):
                raise EmbeddingError(
                    "Ollama returned a mismatched batch embedding response",
                    context={"expected": len(batch), "received": len(vectors or [])},
                )
            embeddings.extend(list(vector) for vector in vectors)

        return embeddings

    async def get_dimension(self) -> int:
        """Embedding dimension, probed once and cached."""
        if self._dimension is None:
            self._dimension = await super().get_dimension()
        return self._dimension

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
