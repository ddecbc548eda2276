"""Semantic chunking placeholder."""

from src.core.chunking.base import ChunkingStrategy, Span
from src.core.chunking.sentence import SentenceChunker
from src.utils.logger import get_logger

logger = get_logger(__name__)


class SemanticChunker(SentenceChunker):
    """
    Semantic boundary chunking.

    No embedding-similarity boundary detector is wired in, so this
    strategy uses sentence accumulation.
    """

    strategy = ChunkingStrategy.SEMANTIC

    def _split(self, text: str, chunk_size: int, overlap: int) -> list[Span]:
        logger.debug("Semantic chunking uses sentence boundaries", extra={"length": len(text)})
        return super()._split(text, chunk_size, overlap)
