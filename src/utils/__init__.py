"""Utility modules for Ragraph."""

from src.utils.exceptions import (
    CapacityExceededError,
    ConfigurationError,
    DeadlineExceededError,
    EmbeddingError,
    GenerationError,
    NotFoundError,
    PipelineStageError,
    ProviderError,
    RagraphError,
    ValidationError,
)
from src.utils.id_generator import (
    generate_chunk_id,
    generate_document_id,
    generate_entity_id,
    generate_relationship_id,
)
from src.utils.locks import ReadWriteLock
from src.utils.logger import get_logger, setup_logging

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    # Concurrency
    "ReadWriteLock",
    # ID Generators
    "generate_document_id",
    "generate_chunk_id",
    "generate_entity_id",
    "generate_relationship_id",
    # Exceptions
    "RagraphError",
    "ValidationError",
    "NotFoundError",
    "CapacityExceededError",
    "ConfigurationError",
    "ProviderError",
    "EmbeddingError",
    "GenerationError",
    "DeadlineExceededError",
    "PipelineStageError",
]
