"""
Data models for Ragraph.
"""

from src.models.cache import CacheEntry
from src.models.document import Document, DocumentChunk, DocumentStatus
from src.models.graph import (
    Entity,
    GraphQuery,
    GraphQueryType,
    GraphResult,
    Path,
    Relationship,
)
from src.models.ingestion import BatchIngestionResult, IngestionResult
from src.models.query import ProcessedQuery, QueryIntent
from src.models.retrieval import (
    Citation,
    GenerationOptions,
    PipelineTiming,
    RAGOptions,
    RAGResponse,
    RetrievalOptions,
    RetrievalResult,
    ScoredDocument,
)

__all__ = [
    # Documents
    "Document",
    "DocumentChunk",
    "DocumentStatus",
    # Cache
    "CacheEntry",
    # Graph
    "Entity",
    "Relationship",
    "Path",
    "GraphQuery",
    "GraphQueryType",
    "GraphResult",
    # Retrieval / RAG
    "ScoredDocument",
    "RetrievalOptions",
    "RetrievalResult",
    "GenerationOptions",
    "RAGOptions",
    "RAGResponse",
    "Citation",
    "PipelineTiming",
    # Query processing
    "ProcessedQuery",
    "QueryIntent",
    # Ingestion
    "IngestionResult",
    "BatchIngestionResult",
]
