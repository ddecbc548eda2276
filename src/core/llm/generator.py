"""
Response generation on top of an LLM provider.

The pipeline hands the generator the already-assembled context; the
generator wraps it in the answer prompt and calls the provider.
"""

from abc import ABC, abstractmethod

from src.core.llm.base import LLMProvider
from src.models.document import Document
from src.models.retrieval import GenerationOptions
from src.utils.exceptions import GenerationError, ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant that answers questions based on the provided context.\n"
    "Use only the information from the context to answer questions. If the context doesn't "
    "contain enough information to answer the question, say so clearly.\n"
    "Cite the documents you use as [Document N]. Be accurate, concise, and helpful."
)


class ResponseGenerator(ABC):
    """Produces answer text for a query and its retrieved context."""

    @abstractmethod
    async def generate(
        self,
        query: str,
        context: str,
        documents: list[Document],
        options: GenerationOptions | None = None,
    ) -> str:
        """
        Generate an answer.

        Args:
            query: User question
            context: Context block built from the retrieved documents
            documents: The retrieved documents, in context order
            options: Generation overrides

        Returns:
            Answer text

        Raises:
            GenerationError: If generation fails
        """
        pass


class LLMResponseGenerator(ResponseGenerator):
    """ResponseGenerator that prompts an LLMProvider."""

    def __init__(self, llm: LLMProvider, system_prompt: str = DEFAULT_SYSTEM_PROMPT):
        self.llm = llm
        self.system_prompt = system_prompt

    def build_prompt(self, query: str, context: str, options: GenerationOptions) -> str:
        instructions = ""
        if options.instructions:
            instructions = f"Additional Instructions: {options.instructions}\n\n"

        return f"{instructions}Context:\n{context}\n\nQuestion: {query}\n\nAnswer:"

    async def generate(
        self,
        query: str,
        context: str,
        documents: list[Document],
        options: GenerationOptions | None = None,
    ) -> str:
        options = options or GenerationOptions()
        prompt = self.build_prompt(query, context, options)

        try:
            text = await self.llm.complete(
                prompt,
                system_prompt=options.system_prompt or self.system_prompt,
                max_tokens=options.max_tokens,
                temperature=options.temperature,
                model=options.model,
            )
        except (GenerationError, ValidationError):
            raise
        except Exception as e:
            raise GenerationError(f"Response generation failed: {e}") from e

        logger.debug(
            "Response generated",
            extra={
                "documents": len(documents),
                "context_length": len(context),
                "response_length": len(text),
            },
        )
        return text
