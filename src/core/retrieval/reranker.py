"""
Relevance reranking of retrieved documents.
"""

from src.config import RetrievalConfig
from src.core.retrieval.similarity import relevance_score
from src.models.document import Document
from src.models.retrieval import ScoredDocument
from src.utils.logger import get_logger

logger = get_logger(__name__)


class DocumentReranker:
    """
    Re-scores documents by the semantic / body keyword / title keyword mix.

    Sorting is stable: equal scores keep their retrieval order.
    """

    def __init__(
        self,
        semantic_weight: float = 0.7,
        keyword_weight: float = 0.2,
        title_weight: float = 0.1,
    ):
        self.semantic_weight = semantic_weight
        self.keyword_weight = keyword_weight
        self.title_weight = title_weight

    @classmethod
    def from_config(cls, config: RetrievalConfig) -> "DocumentReranker":
        return cls(
            semantic_weight=config.semantic_weight,
            keyword_weight=config.keyword_weight,
            title_weight=config.title_weight,
        )

    def relevance_score(
        self, query: str, query_embedding: list[float] | None, document: Document
    ) -> float:
        return relevance_score(
            query,
            query_embedding,
            document,
            semantic_weight=self.semantic_weight,
            keyword_weight=self.keyword_weight,
            title_weight=self.title_weight,
        )

    async def rerank(
        self,
        query: str,
        query_embedding: list[float] | None,
        documents: list[Document],
    ) -> list[ScoredDocument]:
        """
        Rerank documents for a query.

        Args:
            query: Query text
            query_embedding: Query vector, or None to score lexically only
            documents: Documents in retrieval order

        Returns:
            Documents with relevance scores, highest first
        """
        scored = [
            ScoredDocument(document=doc, score=self.relevance_score(query, query_embedding, doc))
            for doc in documents
        ]
        scored.sort(key=lambda item: item.score, reverse=True)

        logger.debug("Reranked documents", extra={"documents": len(scored)})
        return scored
