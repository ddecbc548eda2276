"""
Retrieval-augmented generation pipeline.

embed query -> retrieve (semantic, hybrid or MMR) -> rerank -> build
context -> generate -> citations and confidence.
"""

import asyncio
import re
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from src.config import PipelineConfig, RetrievalConfig
from src.core.embeddings.base import Embedder
from src.core.llm.generator import ResponseGenerator
from src.core.retrieval.reranker import DocumentReranker
from src.core.retrieval.retriever import DocumentRetriever
from src.models.document import Document
from src.models.retrieval import (
    Citation,
    PipelineTiming,
    RAGOptions,
    RAGResponse,
    RetrievalOptions,
    RetrievalResult,
    ScoredDocument,
)
from src.utils.exceptions import DeadlineExceededError, PipelineStageError, ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)

DOCUMENT_REFERENCE = re.compile(r"Document\s+(\d+)")

# Truncated blocks are only kept when more than this many characters remain
MIN_TRUNCATED_BLOCK = 100


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


@asynccontextmanager
async def deadline(seconds: float | None, operation: str) -> AsyncIterator[None]:
    """
    Bound a block by a wall-clock budget.

    Raises:
        DeadlineExceededError: If the block outlives the budget
    """
    try:
        async with asyncio.timeout(seconds):
            yield
    except TimeoutError as e:
        raise DeadlineExceededError(
            f"{operation} exceeded its {seconds}s deadline",
            context={"operation": operation, "timeout": seconds},
        ) from e


def build_context(documents: list[Document], max_length: int) -> str:
    """
    Concatenate titled document blocks within a character budget.

    Blocks are "[Document N: title]\\ncontent\\n" joined by newlines.
    Blocks that fit are kept whole. The first block that overflows is cut
    to the remaining budget and ends with "..." when more than 100
    characters remain; it and everything after it is otherwise dropped.
    The result never exceeds max_length.
    """
    parts: list[str] = []
    used = 0

    for number, doc in enumerate(documents, start=1):
        block = f"[Document {number}: {doc.title}]\n{doc.content}\n"
        separator = 1 if parts else 0

        if used + separator + len(block) > max_length:
            remaining = max_length - used - separator
            if remaining > MIN_TRUNCATED_BLOCK:
                parts.append(block[: remaining - 3] + "...")
            break

        parts.append(block)
        used += separator + len(block)

    return "\n".join(parts)


def extract_citations(text: str, documents: list[Document]) -> list[Citation]:
    """
    Map "Document N" references in generated text to sources.

    N is 1-based; out-of-range references are ignored. Each document is
    cited once, in order of first mention.
    """
    citations: list[Citation] = []
    seen: set[int] = set()

    for match in DOCUMENT_REFERENCE.finditer(text):
        number = int(match.group(1))
        if 1 <= number <= len(documents) and number not in seen:
            seen.add(number)
            doc = documents[number - 1]
            citations.append(Citation(document_id=doc.id, text=doc.title, confidence=0.8))

    return citations


def calculate_confidence(source_count: int, text: str) -> float:
    """0.5 base, +0.1 per source up to 0.4, +0.1 for answers over 100 characters."""
    if source_count == 0:
        return 0.0
    confidence = 0.5 + 0.1 * min(source_count, 4) + (0.1 if len(text) > 100 else 0.0)
    return min(confidence, 1.0)


class RAGPipeline:
    """
    Orchestrates retrieval and answer generation.

    Recoverable failures degrade instead of failing: a failed query
    embedding falls back to lexical retrieval, a failed rerank keeps
    retrieval order. Other failures are raised as PipelineStageError
    naming the stage. Cancellation propagates as asyncio.CancelledError.
    """

    def __init__(
        self,
        embedder: Embedder,
        retriever: DocumentRetriever,
        generator: ResponseGenerator,
        reranker: DocumentReranker | None = None,
        config: PipelineConfig | None = None,
        retrieval_config: RetrievalConfig | None = None,
    ):
        self.embedder = embedder
        self.retriever = retriever
        self.generator = generator
        self.reranker = reranker
        self.config = config or PipelineConfig()
        self.retrieval_config = retrieval_config or RetrievalConfig()

    def default_retrieval_options(self) -> RetrievalOptions:
        """Retrieval options built from the configured defaults."""
        return RetrievalOptions(
            top_k=self.retrieval_config.top_k,
            threshold=self.retrieval_config.threshold,
            reranking_enabled=self.retrieval_config.reranking_enabled,
            mmr_lambda=self.retrieval_config.mmr_lambda,
        )

    async def retrieve(
        self,
        query: str,
        options: RetrievalOptions | None = None,
        context_length: int | None = None,
        timeout: float | None = None,
    ) -> RetrievalResult:
        """
        Retrieve documents for a query and assemble their context.

        Args:
            query: Query text
            options: Retrieval options
            context_length: Context budget in characters (config default when None)
            timeout: Optional deadline in seconds

        Returns:
            Ranked documents, their scores, the context and stage timings

        Raises:
            ValidationError: If the query is empty
            PipelineStageError: If retrieval fails
            DeadlineExceededError: If the deadline expires
        """
        async with deadline(timeout, "retrieve"):
            return await self._retrieve(
                query, options or self.default_retrieval_options(), context_length
            )

    async def _retrieve(
        self, query: str, options: RetrievalOptions, context_length: int | None
    ) -> RetrievalResult:
        if not query or not query.strip():
            raise ValidationError("Query cannot be empty")

        timing = PipelineTiming()
        start = time.perf_counter()

        stage_start = time.perf_counter()
        query_embedding = await self._embed_query(query)
        timing.embed_ms = _elapsed_ms(stage_start)

        stage_start = time.perf_counter()
        try:
            scored = await self._search(query, query_embedding, options)
        except Exception as e:
            raise PipelineStageError("retrieve", str(e), {"query": query}) from e
        timing.retrieve_ms = _elapsed_ms(stage_start)

        reranked = False
        if options.reranking_enabled and self.reranker is not None and len(scored) > 1:
            stage_start = time.perf_counter()
            try:
                scored = await self.reranker.rerank(
                    query, query_embedding, [item.document for item in scored]
                )
                reranked = True
            except Exception as e:
                logger.warning(
                    "Failed to rerank documents, using retrieval order: {}",
                    e,
                    extra={"error": str(e), "documents": len(scored)},
                )
            timing.rerank_ms = _elapsed_ms(stage_start)

        documents = [item.document for item in scored]
        context = build_context(documents, context_length or self.config.max_context_length)
        timing.total_ms = _elapsed_ms(start)

        logger.debug(
            "Documents retrieved",
            extra={
                "retrieved_count": len(documents),
                "context_length": len(context),
                "reranked": reranked,
                "lexical_only": query_embedding is None,
                "processing_time_ms": timing.total_ms,
            },
        )
        return RetrievalResult(
            documents=documents,
            scores=[item.score for item in scored],
            context=context,
            query=query,
            timing=timing,
            metadata={
                "retrieved_count": len(documents),
                "context_length": len(context),
                "reranked": reranked,
                "lexical_only": query_embedding is None,
            },
        )

    async def _embed_query(self, query: str) -> list[float] | None:
        try:
            return await self.embedder.embed(query)
        except Exception as e:
            logger.warning(
                "Query embedding failed, degrading to lexical retrieval: {}",
                e,
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return None

    async def _search(
        self, query: str, query_embedding: list[float] | None, options: RetrievalOptions
    ) -> list[ScoredDocument]:
        if query_embedding is None:
            return await self.retriever.lexical_retrieve(
                query, top_k=options.top_k, filters=options.filters
            )
        if options.use_mmr:
            return await self.retriever.mmr_retrieve(
                query_embedding,
                top_k=options.top_k,
                fetch_k=options.fetch_k,
                lambda_mult=options.mmr_lambda,
                threshold=options.threshold,
                filters=options.filters,
            )
        if options.hybrid_search:
            return await self.retriever.hybrid_retrieve(
                query,
                query_embedding,
                top_k=options.top_k,
                threshold=options.threshold,
                filters=options.filters,
            )
        return await self.retriever.retrieve_by_embedding(
            query_embedding,
            top_k=options.top_k,
            threshold=options.threshold,
            filters=options.filters,
        )

    async def pipeline(self, query: str, options: RAGOptions | None = None) -> RAGResponse:
        """
        Retrieve, generate and annotate an answer.

        Args:
            query: User question
            options: Retrieval, generation, context and deadline options

        Returns:
            Answer with sources, citations, confidence and timing

        Raises:
            ValidationError: If the query is empty
            PipelineStageError: If retrieval or generation fails
            DeadlineExceededError: If options.timeout (or the configured timeout) expires
        """
        options = options or RAGOptions(
            retrieval=self.default_retrieval_options(),
            include_sources=self.config.include_sources,
        )
        timeout = options.timeout if options.timeout is not None else self.config.timeout

        async with deadline(timeout, "pipeline"):
            return await self._pipeline(query, options)

    async def _pipeline(self, query: str, options: RAGOptions) -> RAGResponse:
        start = time.perf_counter()

        retrieval = await self._retrieve(query, options.retrieval, options.context_length)
        timing = retrieval.timing

        stage_start = time.perf_counter()
        try:
            text = await self.generator.generate(
                query, retrieval.context, retrieval.documents, options.generation
            )
        except Exception as e:
            raise PipelineStageError("generate", str(e), {"query": query}) from e
        timing.generate_ms = _elapsed_ms(stage_start)
        timing.total_ms = _elapsed_ms(start)

        citations = (
            extract_citations(text, retrieval.documents) if self.config.citation_enabled else []
        )
        response = RAGResponse(
            text=text,
            query=query,
            context=retrieval.context,
            sources=retrieval.documents if options.include_sources else [],
            citations=citations,
            confidence=calculate_confidence(len(retrieval.documents), text),
            timing=timing,
            metadata={**retrieval.metadata, "model": options.generation.model},
        )

        logger.info(
            "RAG pipeline completed",
            extra={
                "sources_count": len(retrieval.documents),
                "citations_count": len(citations),
                "confidence": response.confidence,
                "processing_time_ms": timing.total_ms,
            },
        )
        return response
