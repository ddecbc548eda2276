"""
Document retrieval: similarity search, lexical scoring, reranking and MMR.
"""

from src.core.retrieval.mmr import MMRSelector
from src.core.retrieval.reranker import DocumentReranker
from src.core.retrieval.retriever import DocumentRetriever, matches_filters
from src.core.retrieval.similarity import (
    cosine_similarity,
    keyword_score,
    relevance_score,
    similarity_matrix,
)

__all__ = [
    "DocumentRetriever",
    "DocumentReranker",
    "MMRSelector",
    "matches_filters",
    "cosine_similarity",
    "keyword_score",
    "relevance_score",
    "similarity_matrix",
]
