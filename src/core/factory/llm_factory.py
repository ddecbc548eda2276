"""
Factory for creating LLM providers.
"""

from src.config import LLMConfig
from src.core.llm.base import LLMProvider
from src.core.llm.ollama import OllamaLLM
from src.core.llm.openai import OpenAILLM
from src.utils.exceptions import ConfigurationError


class LLMFactory:
    """Factory for creating LLM providers from configuration."""

    @staticmethod
    def create(config: LLMConfig) -> LLMProvider:
        """
        Create LLM provider from configuration.

        Args:
            config: LLM configuration

        Returns:
            LLM provider instance

        Raises:
            ConfigurationError: If provider is not supported or an API key is missing
        """
        if config.provider == "ollama":
            return OllamaLLM(
                host=config.base_url,
                model=config.model,
                timeout=config.timeout,
            )
        elif config.provider == "openai":
            if not config.api_key:
                raise ConfigurationError("OpenAI API key is required")
            # The Ollama default URL is not an OpenAI endpoint
            base_url = None if "localhost:11434" in config.base_url else config.base_url
            return OpenAILLM(
                api_key=config.api_key,
                model=config.model,
                base_url=base_url,
                timeout=config.timeout,
            )
        else:
            raise ConfigurationError(
                f"Unsupported LLM provider: {config.provider}",
                context={"provider": config.provider},
            )
