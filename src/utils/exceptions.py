"""
Custom exception hierarchy for Ragraph.

Provides structured error types for the retrieval and graph core.
All exceptions inherit from RagraphError for easy catching.
"""


class RagraphError(Exception):
    """
    Base exception for all Ragraph errors.
    All custom exceptions should inherit from this class.
    """

    def __init__(self, message: str, context: dict | None = None):
        """
        Initialize Ragraph error.
        Args:
            message: Error message
            context: Optional context dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(RagraphError):
    """
    Validation errors.
    Raised for malformed chunk parameters, duplicate ids or invalid input.
    """

    pass


class NotFoundError(RagraphError):
    """
    Resource not found errors.
    Raised when a document, entity or relationship endpoint doesn't exist.
    """

    pass


class CapacityExceededError(RagraphError):
    """
    Capacity errors.
    Raised when a bounded cache or queue cannot accept more work.
    """

    pass


class ConfigurationError(RagraphError):
    """
    Configuration errors.
    Raised when configuration is invalid or missing required values.
    """

    pass


class ProviderError(RagraphError):
    """
    External provider errors.
    Base for failures of the embedding or generation collaborators.
    """

    pass


class EmbeddingError(ProviderError):
    """Raised when embedding generation fails."""

    pass


class GenerationError(ProviderError):
    """Raised when the language model fails to generate a response."""

    pass


class DeadlineExceededError(RagraphError):
    """
    Deadline errors.
    Raised when a retrieval or generation call outlives its time budget.
    """

    pass


class PipelineStageError(RagraphError):
    """
    Failure of a single pipeline stage.

    Wraps the underlying error and names the stage that failed
    (chunk, embed, index, retrieve, rerank, generate).
    """

    def __init__(self, stage: str, message: str, context: dict | None = None):
        super().__init__(f"{stage} stage failed: {message}", context)
        self.stage = stage
