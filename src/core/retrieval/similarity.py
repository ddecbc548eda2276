"""
Similarity and lexical scoring helpers shared by retrieval and reranking.
"""

import math

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as pairwise_cosine

from src.models.document import Document


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """
    Cosine similarity of two vectors.

    Returns 0.0 for empty vectors, mismatched lengths or a zero-norm vector.
    Identical non-zero vectors score exactly 1.0: both vectors are scaled
    to a max-abs of 1 and the dot products are correctly rounded sums, so
    both norms equal the numerator.
    """
    if not a or len(a) != len(b):
        return 0.0

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    scale_a = np.max(np.abs(va))
    scale_b = np.max(np.abs(vb))
    if scale_a == 0.0 or scale_b == 0.0:
        return 0.0
    va = va / scale_a
    vb = vb / scale_b

    aa = math.fsum(va * va)
    bb = math.fsum(vb * vb)
    return float(np.clip(math.fsum(va * vb) / math.sqrt(aa * bb), -1.0, 1.0))


def similarity_matrix(rows: list[list[float]], columns: list[list[float]]) -> np.ndarray:
    """
    Pairwise cosine similarities, shape (len(rows), len(columns)).

    Uniform-dimension input goes through scikit-learn, which maps zero
    vectors to 0. Mixed dimensions fall back to pair-by-pair scoring.
    """
    if not rows or not columns:
        return np.zeros((len(rows), len(columns)))

    dimensions = {len(v) for v in rows} | {len(v) for v in columns}
    if len(dimensions) == 1 and 0 not in dimensions:
        return pairwise_cosine(np.asarray(rows, dtype=np.float64), np.asarray(columns, dtype=np.float64))

    return np.array([[cosine_similarity(r, c) for c in columns] for r in rows])


def keyword_score(query: str, text: str) -> float:
    """
    Fraction of query terms found in text.

    Terms are the lower-cased whitespace-split query words; a term matches
    when it occurs as a substring of the lower-cased text.
    """
    terms = query.lower().split()
    if not terms:
        return 0.0

    haystack = text.lower()
    return sum(1 for term in terms if term in haystack) / len(terms)


def relevance_score(
    query: str,
    query_embedding: list[float] | None,
    document: Document,
    semantic_weight: float = 0.7,
    keyword_weight: float = 0.2,
    title_weight: float = 0.1,
) -> float:
    """
    Weighted mix of semantic, body keyword and title keyword scores.

    The semantic term is 0 when either side has no embedding.
    """
    semantic = 0.0
    if query_embedding and document.has_embedding():
        semantic = cosine_similarity(query_embedding, document.embedding)

    return (
        semantic_weight * semantic
        + keyword_weight * keyword_score(query, document.content)
        + title_weight * keyword_score(query, document.title)
    )
