"""
In-memory document retriever.

Holds the indexed documents and serves brute-force semantic, lexical,
hybrid and MMR retrieval over them. Deletion is logical: deleted
documents stay indexed but are never returned.
"""

from datetime import datetime
from typing import Any

from src.config import RetrievalConfig
from src.core.retrieval.mmr import MMRSelector, validate_lambda
from src.core.retrieval.similarity import cosine_similarity, keyword_score, relevance_score
from src.core.vector_store.base import VectorStore
from src.models.document import Document, DocumentStatus
from src.models.retrieval import ScoredDocument
from src.utils.exceptions import NotFoundError, ValidationError
from src.utils.locks import ReadWriteLock
from src.utils.logger import get_logger

logger = get_logger(__name__)


def matches_filters(document: Document, filters: dict[str, Any] | None) -> bool:
    """
    Check a document against retrieval filters.

    "language" and "tags" match the document fields; any other key matches
    metadata. A list value means membership (for tags: any overlap).
    """
    if not filters:
        return True

    for key, expected in filters.items():
        many = isinstance(expected, list | tuple | set)

        if key == "tags":
            wanted = set(expected) if many else {expected}
            if not wanted & set(document.tags):
                return False
            continue

        if key == "language":
            actual = document.language
        elif key in document.metadata:
            actual = document.metadata[key]
        else:
            return False

        if (actual not in expected) if many else (actual != expected):
            return False

    return True


def _validate_top_k(top_k: int) -> None:
    if top_k < 1:
        raise ValidationError(f"top_k must be at least 1, got {top_k}", context={"top_k": top_k})


class DocumentRetriever:
    """
    Thread-safe in-memory retriever.

    Responsibilities:
    - Own the document index (add, update, logical delete)
    - Rank active documents by cosine similarity, keyword overlap or both
    - Diversify results with MMR
    - Write through to an optional external VectorStore
    """

    def __init__(
        self,
        config: RetrievalConfig | None = None,
        vector_store: VectorStore | None = None,
        collection: str = "documents",
        mmr_selector: MMRSelector | None = None,
    ):
        """
        Args:
            config: Retrieval defaults and hybrid weights
            vector_store: Optional store receiving every written document
            collection: Store collection name
            mmr_selector: MMR implementation
        """
        self.config = config or RetrievalConfig()
        self.vector_store = vector_store
        self.collection = collection
        self.mmr_selector = mmr_selector or MMRSelector()

        self._documents: dict[str, Document] = {}
        self._lock = ReadWriteLock()

    # Index management

    async def add_document(self, document: Document) -> None:
        """
        Index a document, replacing any document with the same ID.

        Raises:
            ValidationError: If the document has no ID
        """
        if not document.id:
            raise ValidationError("Document ID cannot be empty")

        with self._lock.write():
            self._documents[document.id] = document

        if self.vector_store is not None and document.has_embedding():
            await self.vector_store.insert(self.collection, [document])

        logger.debug(
            "Indexed document {}",
            document.id,
            extra={"document_id": document.id, "has_embedding": document.has_embedding()},
        )

    async def add_documents(self, documents: list[Document]) -> None:
        if any(not doc.id for doc in documents):
            raise ValidationError("Document ID cannot be empty")

        with self._lock.write():
            for doc in documents:
                self._documents[doc.id] = doc

        embedded = [doc for doc in documents if doc.has_embedding()]
        if self.vector_store is not None and embedded:
            await self.vector_store.insert(self.collection, embedded)

        logger.debug("Indexed documents", extra={"count": len(documents)})

    async def get_document(self, document_id: str) -> Document | None:
        with self._lock.read():
            return self._documents.get(document_id)

    async def update_document(self, document: Document) -> Document:
        """
        Replace an indexed document and bump its version.

        Returns:
            The stored document

        Raises:
            NotFoundError: If the document is not indexed
        """
        with self._lock.write():
            current = self._documents.get(document.id)
            if current is None:
                raise NotFoundError(
                    f"Document not found: {document.id}", context={"document_id": document.id}
                )
            updated = document.model_copy(
                update={"version": current.version + 1, "updated_at": datetime.now()}
            )
            self._documents[document.id] = updated

        if self.vector_store is not None and updated.has_embedding():
            await self.vector_store.insert(self.collection, [updated])

        return updated

    async def delete_document(self, document_id: str) -> None:
        """
        Logically delete a document.

        Raises:
            NotFoundError: If the document is not indexed
        """
        with self._lock.write():
            current = self._documents.get(document_id)
            if current is None:
                raise NotFoundError(
                    f"Document not found: {document_id}", context={"document_id": document_id}
                )
            self._documents[document_id] = current.model_copy(
                update={"status": DocumentStatus.DELETED, "updated_at": datetime.now()}
            )

        logger.debug("Deleted document {}", document_id, extra={"document_id": document_id})

    def count(self, include_inactive: bool = False) -> int:
        with self._lock.read():
            if include_inactive:
                return len(self._documents)
            return sum(1 for doc in self._documents.values() if doc.is_active())

    def _candidates(self, filters: dict[str, Any] | None) -> list[Document]:
        with self._lock.read():
            return [
                doc
                for doc in self._documents.values()
                if doc.is_active() and matches_filters(doc, filters)
            ]

    # Retrieval

    async def retrieve_by_embedding(
        self,
        query_embedding: list[float],
        top_k: int = 10,
        threshold: float = 0.7,
        filters: dict[str, Any] | None = None,
    ) -> list[ScoredDocument]:
        """
        Rank active, embedded documents by cosine similarity.

        Args:
            query_embedding: Query vector
            top_k: Maximum results
            threshold: Minimum similarity
            filters: Optional metadata filters

        Returns:
            At most top_k documents scoring >= threshold, highest first
        """
        _validate_top_k(top_k)

        scored = [
            ScoredDocument(document=doc, score=cosine_similarity(query_embedding, doc.embedding))
            for doc in self._candidates(filters)
            if doc.has_embedding()
        ]
        results = self._rank(scored, top_k, threshold)

        logger.debug(
            "Semantic retrieval complete",
            extra={"candidates": len(scored), "results": len(results), "top_k": top_k},
        )
        return results

    async def lexical_retrieve(
        self,
        query: str,
        top_k: int = 10,
        filters: dict[str, Any] | None = None,
    ) -> list[ScoredDocument]:
        """
        Rank active documents by keyword overlap with the query.

        Terms are matched against the title and the content together.
        Documents without embeddings are eligible. Documents matching no
        query term are excluded.
        """
        _validate_top_k(top_k)

        scored = [
            ScoredDocument(
                document=doc, score=keyword_score(query, f"{doc.title}\n{doc.content}")
            )
            for doc in self._candidates(filters)
        ]
        results = [item for item in self._rank(scored, top_k, 0.0) if item.score > 0.0]

        logger.debug("Lexical retrieval complete", extra={"results": len(results)})
        return results

    async def hybrid_retrieve(
        self,
        query: str,
        query_embedding: list[float] | None,
        top_k: int = 10,
        threshold: float = 0.0,
        filters: dict[str, Any] | None = None,
    ) -> list[ScoredDocument]:
        """
        Rank by the weighted semantic / body keyword / title keyword mix.

        Without a query embedding this is lexical_retrieve. The threshold
        applies to the combined score.
        """
        if not query_embedding:
            logger.debug("Hybrid retrieval without query embedding, using lexical scoring")
            return await self.lexical_retrieve(query, top_k=top_k, filters=filters)

        _validate_top_k(top_k)

        scored = [
            ScoredDocument(
                document=doc,
                score=relevance_score(
                    query,
                    query_embedding,
                    doc,
                    semantic_weight=self.config.semantic_weight,
                    keyword_weight=self.config.keyword_weight,
                    title_weight=self.config.title_weight,
                ),
            )
            for doc in self._candidates(filters)
        ]
        results = self._rank(scored, top_k, threshold)

        logger.debug("Hybrid retrieval complete", extra={"results": len(results)})
        return results

    async def mmr_retrieve(
        self,
        query_embedding: list[float],
        top_k: int = 10,
        fetch_k: int | None = None,
        lambda_mult: float = 0.5,
        threshold: float = 0.0,
        filters: dict[str, Any] | None = None,
    ) -> list[ScoredDocument]:
        """
        Fetch fetch_k candidates by similarity, then re-select top_k with MMR.

        Args:
            query_embedding: Query vector
            top_k: Maximum results
            fetch_k: Candidate pool size (default 2 * top_k)
            lambda_mult: Relevance/diversity trade-off in [0, 1]
            threshold: Minimum similarity for candidates
            filters: Optional metadata filters

        Raises:
            ValidationError: If lambda_mult is outside [0, 1] or top_k < 1
        """
        validate_lambda(lambda_mult)
        _validate_top_k(top_k)

        pool = max(fetch_k or 2 * top_k, top_k)
        candidates = await self.retrieve_by_embedding(
            query_embedding, top_k=pool, threshold=threshold, filters=filters
        )
        return self.mmr_selector.select(query_embedding, candidates, top_k, lambda_mult)

    @staticmethod
    def _rank(scored: list[ScoredDocument], top_k: int, threshold: float) -> list[ScoredDocument]:
        kept = [item for item in scored if item.score >= threshold]
        kept.sort(key=lambda item: item.score, reverse=True)
        return kept[:top_k]
