"""
OpenAI embedder using official SDK.
"""

from openai import AsyncOpenAI

from src.core.embeddings.base import Embedder
from src.utils.exceptions import EmbeddingError, ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAIEmbedder(Embedder):
    """
    OpenAI embedder for query and chunk embeddings.

    Supports text-embedding-3-small, text-embedding-3-large, etc.
    An explicit dimension shortens text-embedding-3 vectors server side.
    """

    _MODEL_DIMENSIONS = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }

    # Per-request input limit of the embeddings endpoint
    MAX_BATCH_SIZE = 2048

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        base_url: str | None = None,
        timeout: float = 120.0,
        dimension: int | None = None,
    ):
        """
        Initialize OpenAI embedder.

        Args:
            api_key: OpenAI API key
            model: Embedding model name
            base_url: Optional custom base URL (Azure, proxies)
            timeout: Request timeout in seconds
            dimension: Optional reduced output dimension
        """
        self.model = model
        self.dimension = dimension

        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)

    def _request_params(self, kwargs: dict) -> dict:
        params = {"model": self.model, **kwargs}
        if self.dimension and "dimensions" not in params:
            params["dimensions"] = self.dimension
        return params

    async def embed(self, text: str, **kwargs) -> list[float]:
        """
        Generate embedding for text using OpenAI.

        Raises:
            ValidationError: If text is empty
            EmbeddingError: If OpenAI API call fails
        """
        if not text or not text.strip():
            raise ValidationError("Text cannot be empty")

        try:
            response = await self.client.embeddings.create(
                input=text, **self._request_params(kwargs)
            )

            if not response.data:
                raise EmbeddingError("OpenAI returned empty embedding response")

            return response.data[0].embedding
        except (ValidationError, EmbeddingError):
            raise
        except Exception as e:
            logger.error(
                "OpenAI embedding error: {}",
                e,
                extra={"model": self.model, "error": str(e), "error_type": type(e).__name__},
            )
            raise EmbeddingError(f"OpenAI embedding error: {e}") from e

    async def batch_embed(
        self, texts: list[str], batch_size: int = MAX_BATCH_SIZE, **kwargs
    ) -> list[list[float]]:
        """
        Batch embed using OpenAI's list input.

        Results are re-ordered by the index OpenAI reports for each item.

        Raises:
            EmbeddingError: If a batch request fails
        """
        if not texts:
            return []

        batch_size = min(batch_size, self.MAX_BATCH_SIZE)
        embeddings: list[list[float]] = []
        try:
            for i in range(0, len(texts), batch_size):
                batch = texts[i : i + batch_size]
                response = await self.client.embeddings.create(
                    input=batch, **self._request_params(kwargs)
                )

                if not response.data or len(response.data) != len(batch):
                    raise EmbeddingError("OpenAI returned a mismatched batch embedding response")

                ordered = sorted(response.data, key=lambda item: item.index)
                embeddings.extend(item.embedding for item in ordered)

            return embeddings
        except EmbeddingError:
            raise
        except Exception as e:
            logger.error(
                "OpenAI batch embedding error: {}",
                e,
                extra={"model": self.model, "num_texts": len(texts), "error": str(e)},
            )
            raise EmbeddingError(f"OpenAI batch embedding error: {e}") from e

    async def get_dimension(self) -> int:
        """
        Get embedding dimension.

        Uses the configured or known model dimension when available.
        """
        if self.dimension:
            return self.dimension
        if self.model in self._MODEL_DIMENSIONS:
            return self._MODEL_DIMENSIONS[self.model]
        return await super().get_dimension()

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
