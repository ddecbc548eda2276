"""
Abstract base class for text chunkers.

Every strategy splits text into ordered (start, end) character spans;
the base class validates parameters, handles the short-text case and
turns spans into DocumentChunk records with contiguous indexes.
"""

from abc import ABC, abstractmethod
from enum import Enum

from src.models.document import DocumentChunk
from src.utils.exceptions import ValidationError
from src.utils.id_generator import generate_chunk_id

Span = tuple[int, int]


class ChunkingStrategy(str, Enum):
    """Interchangeable chunking strategies."""

    FIXED = "fixed"
    SENTENCE = "sentence"
    PARAGRAPH = "paragraph"
    RECURSIVE = "recursive"
    SEMANTIC = "semantic"


def validate_chunk_params(chunk_size: int, overlap: int) -> None:
    """
    Check the chunk window parameters.

    Raises:
        ValidationError: If chunk_size is not positive, overlap is negative,
            or overlap is not strictly smaller than chunk_size
    """
    if chunk_size <= 0:
        raise ValidationError(
            f"chunk_size must be positive, got {chunk_size}",
            context={"chunk_size": chunk_size},
        )
    if overlap < 0:
        raise ValidationError(
            f"overlap cannot be negative, got {overlap}", context={"overlap": overlap}
        )
    if overlap >= chunk_size:
        raise ValidationError(
            f"overlap ({overlap}) must be smaller than chunk_size ({chunk_size})",
            context={"chunk_size": chunk_size, "overlap": overlap},
        )


class TextChunker(ABC):
    """
    Abstract base for chunking strategies.

    Responsibilities:
    - Split text into ordered, possibly overlapping segments
    - Keep chunk indexes contiguous from zero
    - Never loop forever: parameters are validated up front
    """

    strategy: ChunkingStrategy

    def chunk(
        self,
        text: str,
        chunk_size: int,
        overlap: int = 0,
        document_id: str | None = None,
    ) -> list[DocumentChunk]:
        """
        Split text into chunks.

        Args:
            text: Text to split
            chunk_size: Target chunk size in characters
            overlap: Characters (or units, per strategy) shared with the previous chunk
            document_id: Optional parent document ID used to scope chunk IDs

        Returns:
            Ordered list of chunks (empty for empty text)

        Raises:
            ValidationError: If chunk_size/overlap are invalid
        """
        validate_chunk_params(chunk_size, overlap)

        if not text:
            return []

        if len(text) <= chunk_size:
            spans = [(0, len(text))]
        else:
            spans = [(s, e) for s, e in self._split(text, chunk_size, overlap) if e > s]

        return self._build_chunks(text, spans, document_id)

    @abstractmethod
    def _split(self, text: str, chunk_size: int, overlap: int) -> list[Span]:
        """
        Compute chunk spans for text longer than chunk_size.

        Args:
            text: Text to split
            chunk_size: Target chunk size in characters
            overlap: Overlap parameter

        Returns:
            Ordered list of (start, end) character offsets
        """
        pass

    def _build_chunks(
        self, text: str, spans: list[Span], document_id: str | None
    ) -> list[DocumentChunk]:
        return [
            DocumentChunk(
                id=generate_chunk_id(document_id, index),
                document_id=document_id,
                content=text[start:end],
                chunk_index=index,
                start_offset=start,
                end_offset=end,
                metadata={"strategy": self.strategy.value},
            )
            for index, (start, end) in enumerate(spans)
        ]


def sliding_windows(start: int, end: int, chunk_size: int, overlap: int) -> list[Span]:
    """
    Fixed windows over [start, end) advancing by chunk_size - overlap.

    The last window is clipped to end.
    """
    step = chunk_size - overlap
    spans = []
    position = start
    while True:
        window_end = min(position + chunk_size, end)
        spans.append((position, window_end))
        if window_end >= end:
            break
        position += step
    return spans


def accumulate_units(units: list[Span], chunk_size: int, carry) -> list[Span]:
    """
    Greedily pack whole units (sentences, paragraphs) into chunks.

    A unit is added while the chunk spanning first..candidate stays within
    chunk_size. When it would not, the current chunk is emitted and the
    next chunk starts from the tail units selected by carry.

    Args:
        units: Ordered unit spans
        chunk_size: Maximum chunk span in characters
        carry: Callable taking the emitted units and returning how many
            trailing units to carry into the next chunk

    Returns:
        Chunk spans
    """
    spans: list[Span] = []
    current: list[Span] = []

    for unit in units:
        if current and unit[1] - current[0][0] > chunk_size:
            spans.append((current[0][0], current[-1][1]))
            keep = carry(current)
            current = current[len(current) - keep :] if keep else []
        current.append(unit)

    if current:
        spans.append((current[0][0], current[-1][1]))

    return spans
