"""
OpenAI LLM provider using official SDK.
"""

from openai import AsyncOpenAI

from src.core.llm.base import LLMProvider, build_messages
from src.utils.exceptions import GenerationError, ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)


class OpenAILLM(LLMProvider):
    """
    OpenAI LLM provider for answer generation.

    Uses the chat completions API of the official OpenAI SDK.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o",
        organization: str | None = None,
        base_url: str | None = None,
        timeout: float = 120.0,
    ):
        """
        Initialize OpenAI LLM provider.

        Args:
            api_key: OpenAI API key
            model: Model name (e.g., "gpt-4o", "gpt-4o-mini")
            organization: Optional organization ID
            base_url: Optional custom base URL
            timeout: Request timeout in seconds
        """
        self.model = model

        self.client = AsyncOpenAI(
            api_key=api_key, organization=organization, base_url=base_url, timeout=timeout
        )

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
        Generate completion using OpenAI.

        Raises:
            ValidationError: If prompt is empty
            GenerationError: If OpenAI API call fails or returns no content
        """
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt cannot be empty")

        try:
            response = await self.client.chat.completions.create(
                model=model or self.model,
                messages=build_messages(prompt, system_prompt),
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            )
            content = response.choices[0].message.content
        except Exception as e:
            logger.error(
                "OpenAI API error: {}",
                e,
                extra={
                    "model": model or self.model,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            raise GenerationError(f"OpenAI API error: {e}") from e

        if not content:
            raise GenerationError("OpenAI returned empty content")

        return content

    async def close(self):
        """Close OpenAI client."""
        await self.client.close()
