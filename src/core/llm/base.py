"""
Abstract base class for LLM providers.
Handles plain text generation for answer synthesis.
"""

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """
    Abstract base for LLM text generation providers.

    Responsibilities:
    - Text completion from a single prompt
    - Optional system prompt
    - Per-call model, temperature and token overrides
    """

    @abstractmethod
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
        Generate completion from prompt.

        Args:
            prompt: The input prompt
            system_prompt: Optional system message
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0 = deterministic, 1.0 = creative)
            model: Optional model override for this call
            **kwargs: Provider-specific parameters

        Returns:
            Generated text

        Raises:
            ValidationError: If prompt is empty
            GenerationError: If the provider call fails
        """
        pass

    @abstractmethod
    async def close(self):
        """
        Close any open connections.
        Optional to override if provider needs cleanup.
        """


def build_messages(prompt: str, system_prompt: str | None) -> list[dict[str, str]]:
    """Chat messages for a prompt with an optional system message."""
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages
