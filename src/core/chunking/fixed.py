"""Fixed-size sliding window chunking."""

from src.core.chunking.base import ChunkingStrategy, Span, TextChunker, sliding_windows


class FixedSizeChunker(TextChunker):
    """
    Slides a chunk_size window over the text, advancing by chunk_size - overlap.

    For text longer than chunk_size the chunk count is
    ceil((len(text) - overlap) / (chunk_size - overlap)).
    """

    strategy = ChunkingStrategy.FIXED

    def _split(self, text: str, chunk_size: int, overlap: int) -> list[Span]:
        return sliding_windows(0, len(text), chunk_size, overlap)
