"""
Ollama LLM provider using native ollama-python SDK.
"""

import ollama

from src.core.llm.base import LLMProvider, build_messages
from src.utils.exceptions import GenerationError, ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)


class OllamaLLM(LLMProvider):
    """
    Ollama LLM provider for answer generation.

    Uses the chat endpoint of the native ollama-python SDK.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        timeout: float = 120.0,
    ):
        """
        Initialize Ollama LLM provider.

        Args:
            host: Ollama server URL
            model: Model name for text generation (e.g., "llama3.1", "mistral")
            timeout: Request timeout in seconds
        """
        self.host = host
        self.model = model
        self.timeout = timeout

        self.client = ollama.AsyncClient(host=host, timeout=timeout)

    async def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int = 2000,
        temperature: float = 0.0,
        model: str | None = None,
        **kwargs,
    ) -> str:
        """
        Generate completion using Ollama.

        Raises:
            ValidationError: If prompt is empty
            GenerationError: If the Ollama call fails or returns no content
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        options = {
            "temperature": temperature,
            "num_predict": max_tokens,
            **kwargs.pop("options", {}),
        }

        try:
            response = await self.client.chat(
                model=model or self.model,
                messages=build_messages(prompt, system_prompt),
                options=options,
                **kwargs,
            )
            content = response["message"]["content"]
        except Exception as e:
            logger.error(
                "Ollama generation error: {}",
                e,
                extra={"model": model or self.model, "host": self.host, "error": str(e)},
            )
            raise GenerationError(f"Ollama generation error: {e}") from e

        if not content:
            raise GenerationError("Ollama returned empty content")

        return content

    async def close(self):
        """Close client (Ollama SDK handles cleanup internally)."""
        pass
