"""Paragraph-based chunking."""

import re

from src.core.chunking.base import ChunkingStrategy, Span, TextChunker, accumulate_units
from src.core.chunking.sentence import _strip

PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n")


def paragraph_spans(text: str) -> list[Span]:
    """Locate blank-line separated paragraphs, trimmed, skipping empty ones."""
    spans: list[Span] = []
    cursor = 0
    for match in PARAGRAPH_BREAK.finditer(text):
        spans.append((cursor, match.start()))
        cursor = match.end()
    spans.append((cursor, len(text)))
    return [_strip(text, s, e) for s, e in spans if text[s:e].strip()]


class ParagraphChunker(TextChunker):
    """
    Same accumulation as SentenceChunker at paragraph boundaries.

    With a positive overlap, exactly one paragraph is carried into the
    next chunk when the emitted chunk held more than one.
    """

    strategy = ChunkingStrategy.PARAGRAPH

    def _split(self, text: str, chunk_size: int, overlap: int) -> list[Span]:
        def carry(current: list[Span]) -> int:
            return 1 if overlap > 0 and len(current) > 1 else 0

        return accumulate_units(paragraph_spans(text), chunk_size, carry)
