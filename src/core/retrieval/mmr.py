"""
Maximal Marginal Relevance selection.

Re-selects a diverse subset from similarity-ranked candidates: each
round picks the candidate maximizing
lambda * relevance - (1 - lambda) * max similarity to anything selected.
"""

from src.core.retrieval.similarity import cosine_similarity, similarity_matrix
from src.models.retrieval import ScoredDocument
from src.utils.exceptions import ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)


def validate_lambda(lambda_mult: float) -> None:
    if not 0.0 <= lambda_mult <= 1.0:
        raise ValidationError(
            f"lambda_mult must be within [0, 1], got {lambda_mult}",
            context={"lambda_mult": lambda_mult},
        )


class MMRSelector:
    """
    Greedy MMR over a candidate list.

    lambda_mult = 1 reduces to top-k by relevance; lambda_mult = 0 picks
    for maximal diversity. Ties go to the earlier candidate.
    """

    def select(
        self,
        query_embedding: list[float],
        candidates: list[ScoredDocument],
        top_k: int,
        lambda_mult: float = 0.5,
    ) -> list[ScoredDocument]:
        """
        Select up to top_k diverse candidates.

        Args:
            query_embedding: Query vector
            candidates: Candidates with embeddings, in first-seen order
            top_k: Maximum number to select
            lambda_mult: Relevance/diversity trade-off in [0, 1]

        Returns:
            Selected candidates in selection order, each scored by its
            relevance to the query

        Raises:
            ValidationError: If lambda_mult is outside [0, 1]
        """
        validate_lambda(lambda_mult)
        if top_k <= 0 or not candidates:
            return []

        vectors = [c.document.embedding for c in candidates]
        # Same scorer as similarity retrieval so lambda = 1 keeps its order
        relevance = [cosine_similarity(query_embedding, v) for v in vectors]
        pairwise = similarity_matrix(vectors, vectors)

        selected: list[int] = []
        remaining = list(range(len(candidates)))

        while remaining and len(selected) < top_k:
            best_index = remaining[0]
            best_score = float("-inf")
            for index in remaining:
                redundancy = max(pairwise[index, s] for s in selected) if selected else 0.0
                score = lambda_mult * relevance[index] - (1.0 - lambda_mult) * redundancy
                if score > best_score:
                    best_index, best_score = index, score
            selected.append(best_index)
            remaining.remove(best_index)

        logger.debug(
            "MMR selection complete",
            extra={"candidates": len(candidates), "selected": len(selected), "lambda": lambda_mult},
        )
        return [
            ScoredDocument(document=candidates[i].document, score=float(relevance[i]))
            for i in selected
        ]
