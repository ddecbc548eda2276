"""
Text chunking strategies.

Strategies:
- fixed: sliding character window
- sentence: whole-sentence accumulation
- paragraph: whole-paragraph accumulation
- recursive: separator hierarchy down to raw characters
- semantic: sentence accumulation until a boundary detector exists
"""

from src.config import ChunkingConfig
from src.core.chunking.base import ChunkingStrategy, TextChunker, validate_chunk_params
from src.core.chunking.fixed import FixedSizeChunker
from src.core.chunking.paragraph import ParagraphChunker
from src.core.chunking.recursive import RecursiveChunker
from src.core.chunking.semantic import SemanticChunker
from src.core.chunking.sentence import SentenceChunker
from src.models.document import Document, DocumentChunk
from src.utils.exceptions import ValidationError
from src.utils.logger import get_logger

logger = get_logger(__name__)

_CHUNKERS: dict[ChunkingStrategy, type[TextChunker]] = {
    ChunkingStrategy.FIXED: FixedSizeChunker,
    ChunkingStrategy.SENTENCE: SentenceChunker,
    ChunkingStrategy.PARAGRAPH: ParagraphChunker,
    ChunkingStrategy.RECURSIVE: RecursiveChunker,
    ChunkingStrategy.SEMANTIC: SemanticChunker,
}


def create_chunker(strategy: ChunkingStrategy | str) -> TextChunker:
    """
    Create a chunker for a strategy tag.

    Args:
        strategy: Strategy enum member or its string value

    Returns:
        TextChunker instance

    Raises:
        ValidationError: If the strategy is unknown
    """
    try:
        strategy = ChunkingStrategy(strategy)
    except ValueError as e:
        raise ValidationError(
            f"Unknown chunking strategy: {strategy}", context={"strategy": str(strategy)}
        ) from e
    return _CHUNKERS[strategy]()


def chunk_document(
    document: Document,
    strategy: ChunkingStrategy | str | None = None,
    chunk_size: int | None = None,
    overlap: int | None = None,
    config: ChunkingConfig | None = None,
) -> list[DocumentChunk]:
    """
    Chunk a document's content.

    Unset arguments fall back to the chunking configuration
    (recursive, 1000 characters, 200 overlap by default).

    Args:
        document: Document to split
        strategy: Chunking strategy
        chunk_size: Target chunk size in characters
        overlap: Overlap between consecutive chunks
        config: Chunking defaults

    Returns:
        Chunks whose IDs are scoped to the document

    Raises:
        ValidationError: If the strategy or window parameters are invalid
    """
    config = config or ChunkingConfig()
    chunker = create_chunker(strategy or config.strategy)
    size = chunk_size if chunk_size is not None else config.chunk_size
    window_overlap = overlap if overlap is not None else config.chunk_overlap

    chunks = chunker.chunk(document.content, size, window_overlap, document_id=document.id)

    logger.debug(
        "Chunked document {} into {} chunks",
        document.id,
        len(chunks),
        extra={
            "document_id": document.id,
            "strategy": chunker.strategy.value,
            "chunk_size": size,
            "overlap": window_overlap,
            "chunks": len(chunks),
        },
    )
    return chunks


__all__ = [
    "ChunkingStrategy",
    "TextChunker",
    "FixedSizeChunker",
    "SentenceChunker",
    "ParagraphChunker",
    "RecursiveChunker",
    "SemanticChunker",
    "create_chunker",
    "chunk_document",
    "validate_chunk_params",
]
