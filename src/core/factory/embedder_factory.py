"""
Factory for creating embedder providers.
"""

from src.config import CacheConfig, EmbedderConfig
from src.core.cache.embedding_cache import EmbeddingCache
from src.core.embeddings.base import Embedder
from src.core.embeddings.cached import CachedEmbedder
from src.core.embeddings.ollama import OllamaEmbedder
from src.core.embeddings.openai import OpenAIEmbedder
from src.utils.exceptions import ConfigurationError


class EmbedderFactory:
    """Factory for creating embedder providers from configuration."""

    @staticmethod
    def create(config: EmbedderConfig, cache_config: CacheConfig | None = None) -> Embedder:
        """
        Create embedder from configuration.

        Args:
            config: Embedder configuration
            cache_config: When given and enabled, wrap the provider in a CachedEmbedder

        Returns:
            Embedder instance

        Raises:
            ConfigurationError: If provider is not supported or an API key is missing
        """
        if config.provider == "ollama":
            embedder: Embedder = OllamaEmbedder(
                host=config.base_url,
                model=config.model,
                timeout=config.timeout,
            )
        elif config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required")
            base_url = None if "localhost:11434" in config.base_url else config.base_url
            embedder = OpenAIEmbedder(
                api_key=config.api_key,
                model=config.model,
                base_url=base_url,
                timeout=config.timeout,
                dimension=config.dimension,
            )
        else:
            raise ConfigurationError(
                f"Unsupported embedder provider: {config.provider}",
                context={"provider": config.provider},
            )

        if cache_config is not None and cache_config.enabled:
            cache = EmbeddingCache(
                max_size=cache_config.max_size, ttl_seconds=cache_config.ttl_seconds
            )
            return CachedEmbedder(embedder, cache)
        return embedder

    @staticmethod
    async def get_dimension(embedder: Embedder, config: EmbedderConfig | None = None) -> int:
        """
        Get embedding dimension, preferring the configured value.

        Args:
            embedder: Embedder instance
            config: Optional embedder config with dimension hint

        Returns:
            Embedding dimension
        """
        if config and config.dimension:
            return config.dimension
        return await embedder.get_dimension()
