"""
Document ingestion: chunk, embed and index.

Batch ingestion runs documents concurrently through a bounded pool and
reports per-document outcomes instead of failing the whole batch.
"""

import asyncio
import time

from src.config import ChunkingConfig
from src.core.chunking import chunk_document
from src.core.embeddings.base import Embedder
from src.core.retrieval.retriever import DocumentRetriever
from src.models.document import Document, DocumentChunk, DocumentStatus
from src.models.ingestion import BatchIngestionResult, IngestionResult
from src.utils.exceptions import PipelineStageError, ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)


class DocumentIngestionService:
    """
    Ingests documents into a DocumentRetriever.

    Per document:
    1. Chunk with the configured strategy
    2. Embed the chunks in one batch
    3. Embed the document itself when it has no embedding
    4. Index it as active (and, optionally, each chunk as its own document)
    """

    def __init__(
        self,
        embedder: Embedder,
        retriever: DocumentRetriever,
        chunking_config: ChunkingConfig | None = None,
        max_concurrency: int = 8,
        index_chunks: bool = False,
    ):
        """
        Args:
            embedder: Embedding provider
            retriever: Index receiving the documents
            chunking_config: Chunking strategy and window
            max_concurrency: Documents processed at once in a batch
            index_chunks: Also index every chunk as a standalone document

        Raises:
            ValidationError: If max_concurrency is not positive
        """
        if max_concurrency < 1:
            raise ValidationError(
                f"max_concurrency must be at least 1, got {max_concurrency}",
                context={"max_concurrency": max_concurrency},
            )

        self.embedder = embedder
        self.retriever = retriever
        self.chunking_config = chunking_config or ChunkingConfig()
        self.max_concurrency = max_concurrency
        self.index_chunks = index_chunks

    async def ingest_document(self, document: Document) -> IngestionResult:
        """
        Chunk, embed and index one document.

        Returns:
            Result with the embedded chunks

        Raises:
            ValidationError: If the document content is empty
            PipelineStageError: If chunking, embedding or indexing fails
        """
        start = time.perf_counter()
        if not document.content.strip():
            raise ValidationError(
                f"Document {document.id} has no content", context={"document_id": document.id}
            )

        try:
            chunks = chunk_document(document, config=self.chunking_config)
        except Exception as e:
            raise PipelineStageError("chunk", str(e), {"document_id": document.id}) from e

        try:
            vectors = await self.embedder.batch_embed([chunk.content for chunk in chunks])
            chunks = [
                chunk.model_copy(update={"embedding": vector})
                for chunk, vector in zip(chunks, vectors, strict=True)
            ]
            embedding = document.embedding or await self.embedder.embed(document.content)
        except Exception as e:
            raise PipelineStageError("embed", str(e), {"document_id": document.id}) from e

        indexed = document.model_copy(
            update={
                "embedding": embedding,
                "status": DocumentStatus.ACTIVE,
                "metadata": {**document.metadata, "chunk_count": len(chunks)},
            }
        )

        try:
            await self.retriever.add_document(indexed)
            if self.index_chunks:
                await self.retriever.add_documents(
                    [self._chunk_document(indexed, chunk) for chunk in chunks]
                )
        except Exception as e:
            raise PipelineStageError("index", str(e), {"document_id": document.id}) from e

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "Document {} ingested",
            document.id,
            extra={
                "document_id": document.id,
                "title": document.title,
                "content_length": len(document.content),
                "chunks": len(chunks),
                "processing_time_ms": elapsed_ms,
            },
        )
        return IngestionResult(document_id=document.id, chunks=chunks, processing_time_ms=elapsed_ms)

    @staticmethod
    def _chunk_document(parent: Document, chunk: DocumentChunk) -> Document:
        return Document(
            id=chunk.id,
            title=parent.title,
            content=chunk.content,
            language=parent.language,
            embedding=chunk.embedding,
            source=parent.source,
            tags=list(parent.tags),
            metadata={
                **parent.metadata,
                "parent_id": parent.id,
                "chunk_index": chunk.chunk_index,
                "start_offset": chunk.start_offset,
                "end_offset": chunk.end_offset,
            },
        )

    async def ingest_documents(self, documents: list[Document]) -> BatchIngestionResult:
        """
        Ingest documents concurrently, at most max_concurrency at a time.

        A failing document is recorded in the result; the rest of the
        batch still runs.

        Returns:
            Per-document results in input order
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run(document: Document) -> IngestionResult:
            async with semaphore:
                return await self.ingest_document(document)

        outcomes = await asyncio.gather(
            *(run(document) for document in documents), return_exceptions=True
        )

        results = []
        for document, outcome in zip(documents, outcomes, strict=True):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                logger.warning(
                    "Failed to ingest document {}: {}",
                    document.id,
                    outcome,
                    extra={"document_id": document.id, "error_type": type(outcome).__name__},
                )
                results.append(
                    IngestionResult(document_id=document.id, success=False, error=str(outcome))
                )
            else:
                results.append(outcome)

        batch = BatchIngestionResult(results=results)
        logger.info(
            "Batch ingestion finished: {}",
            batch.summary(),
            extra={"documents": len(documents), "succeeded": batch.succeeded, "failed": batch.failed},
        )
        return batch
