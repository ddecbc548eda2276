"""
Query preprocessing: cleaning, keyword extraction, embedding and intent.
"""

import re

from src.core.embeddings.base import Embedder
from src.models.query import ProcessedQuery, QueryIntent
from src.utils.exceptions import ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
        "with", "by", "is", "are", "was", "were", "be", "been", "being", "have",
        "has", "had", "do", "does", "did", "will", "would", "could", "should",
        "what", "where", "when", "why", "how",
    }
)  # fmt: skip

# (intent type, category, action, confidence, prefixes, substrings), first match wins
INTENT_RULES: list[tuple[str, str, str, float, tuple[str, ...], tuple[str, ...]]] = [
    ("informational", "question", "explain", 0.8, ("what is", "what are"), ("explain", "describe")),
    ("instructional", "how_to", "guide", 0.8, ("how to", "how do"), ("tutorial", "guide")),
    ("comparative", "comparison", "compare", 0.8, (), ("compare", "vs", "versus", "difference")),
    ("search", "retrieval", "find", 0.7, (), ("find", "search", "look for")),
]


class QueryProcessor:
    """
    Prepares raw user queries for retrieval.

    Embedding failures do not fail processing: the query comes back
    without an embedding and retrieval falls back to lexical scoring.
    """

    def __init__(self, embedder: Embedder):
        self.embedder = embedder

    @staticmethod
    def clean(query: str) -> str:
        """Trim and collapse internal whitespace."""
        return re.sub(r"\s+", " ", query).strip()

    @staticmethod
    def extract_keywords(query: str) -> list[str]:
        """Lower-cased words longer than two characters that are not stop words."""
        return [
            word
            for word in query.lower().split()
            if word not in STOP_WORDS and len(word) > 2
        ]

    async def process_query(self, query: str) -> ProcessedQuery:
        """
        Clean, tokenize, embed and classify a query.

        Raises:
            ValidationError: If the query is empty
        """
        cleaned = self.clean(query)
        if not cleaned:
            raise ValidationError("Query cannot be empty")

        embedding: list[float] | None
        try:
            embedding = await self.embedder.embed(cleaned)
        except Exception as e:
            logger.warning(
                "Failed to generate query embedding: {}",
                e,
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            embedding = None

        processed = ProcessedQuery(
            original_query=query,
            cleaned_query=cleaned,
            keywords=self.extract_keywords(cleaned),
            embedding=embedding,
            intent=await self.extract_intent(cleaned),
        )

        logger.debug(
            "Query processed",
            extra={
                "keywords": len(processed.keywords),
                "embedding_available": embedding is not None,
                "intent": processed.intent.type,
            },
        )
        return processed

    async def extract_intent(self, query: str) -> QueryIntent:
        """Classify a query with prefix/keyword rules; informational/general when none match."""
        normalized = query.lower().strip()

        for intent_type, category, action, confidence, prefixes, substrings in INTENT_RULES:
            if normalized.startswith(prefixes) or any(s in normalized for s in substrings):
                return QueryIntent(
                    type=intent_type, category=category, action=action, confidence=confidence
                )

        return QueryIntent(type="informational", category="general", action="retrieve", confidence=0.5)
