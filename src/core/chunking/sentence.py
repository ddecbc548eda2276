"""Sentence-based chunking."""

import re

from src.core.chunking.base import ChunkingStrategy, Span, TextChunker, accumulate_units

# Sentence terminator run followed by whitespace
SENTENCE_BOUNDARY = re.compile(r"([.!?]+)\s+")


def sentence_spans(text: str) -> list[Span]:
    """
    Locate sentences in text.

    Terminal punctuation stays with its sentence; the whitespace after it
    and leading whitespace of each sentence are excluded.

    Returns:
        Non-empty sentence spans in text order
    """
    spans: list[Span] = []
    cursor = 0
    for match in SENTENCE_BOUNDARY.finditer(text):
        spans.append((cursor, match.end(1)))
        cursor = match.end()
    spans.append((cursor, len(text)))
    return [_strip(text, s, e) for s, e in spans if text[s:e].strip()]


def _strip(text: str, start: int, end: int) -> Span:
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return start, end


class SentenceChunker(TextChunker):
    """
    Accumulates whole sentences until the next one would exceed chunk_size.

    Each new chunk carries min(n - 1, overlap // 100) trailing sentences of
    the previous one, so small overlaps carry nothing.
    """

    strategy = ChunkingStrategy.SENTENCE

    def _split(self, text: str, chunk_size: int, overlap: int) -> list[Span]:
        def carry(current: list[Span]) -> int:
            if overlap > 0 and len(current) > 1:
                return min(len(current) - 1, overlap // 100)
            return 0

        return accumulate_units(sentence_spans(text), chunk_size, carry)
