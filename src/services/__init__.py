"""
Services for Ragraph.

High-level services composed from the core components:
- RAGPipeline: retrieve-then-generate orchestration
- DocumentIngestionService: chunk, embed and index documents in bounded batches
- QueryProcessor: query cleaning, keywords, embedding and intent
"""

from src.services.ingestion import DocumentIngestionService
from src.services.query_processor import QueryProcessor
from src.services.rag_pipeline import RAGPipeline, build_context, extract_citations

__all__ = [
    "RAGPipeline",
    "DocumentIngestionService",
    "QueryProcessor",
    "build_context",
    "extract_citations",
]
