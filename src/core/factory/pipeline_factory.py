"""
Factory wiring the retrieval and generation components from configuration.
"""

from src.config import Config
from src.core.factory.embedder_factory import EmbedderFactory
from src.core.factory.llm_factory import LLMFactory
from src.core.llm.generator import LLMResponseGenerator
from src.core.retrieval.reranker import DocumentReranker
from src.core.retrieval.retriever import DocumentRetriever
from src.core.vector_store.base import VectorStore
from src.services.ingestion import DocumentIngestionService
from src.services.rag_pipeline import RAGPipeline


class PipelineFactory:
    """Builds a RAG pipeline and a matching ingestion service sharing one index."""

    @staticmethod
    def create(
        config: Config, vector_store: VectorStore | None = None
    ) -> tuple[RAGPipeline, DocumentIngestionService]:
        """
        Create pipeline and ingestion service from configuration.

        Args:
            config: Main configuration object
            vector_store: Optional external store the retriever writes through to

        Returns:
            (pipeline, ingestion service)

        Raises:
            ConfigurationError: If a provider is misconfigured
        """
        embedder = EmbedderFactory.create(config.embedder, config.cache)
        retriever = DocumentRetriever(config=config.retrieval, vector_store=vector_store)
        reranker = (
            DocumentReranker.from_config(config.retrieval)
            if config.retrieval.reranking_enabled
            else None
        )

        pipeline = RAGPipeline(
            embedder=embedder,
            retriever=retriever,
            generator=LLMResponseGenerator(LLMFactory.create(config.llm)),
            reranker=reranker,
            config=config.pipeline,
            retrieval_config=config.retrieval,
        )
        ingestion = DocumentIngestionService(
            embedder=embedder,
            retriever=retriever,
            chunking_config=config.chunking,
            max_concurrency=config.ingestion.max_concurrency,
        )
        return pipeline, ingestion
