"""Recursive separator-based chunking."""

from src.core.chunking.base import ChunkingStrategy, Span, TextChunker, sliding_windows

# Tried in order; the empty separator means raw character windows
DEFAULT_SEPARATORS = ["\n\n", "\n", ". ", " ", ""]


class RecursiveChunker(TextChunker):
    """
    Splits on the highest-priority separator present in the text.

    Pieces are packed up to chunk_size; a packed chunk that is still too
    large is split again with the remaining separators. The list ends with
    raw character windows, so recursion always terminates. After each
    emitted chunk the next one starts overlap characters before its end.
    """

    strategy = ChunkingStrategy.RECURSIVE

    def __init__(self, separators: list[str] | None = None):
        self.separators = separators or DEFAULT_SEPARATORS
        if self.separators[-1] != "":
            self.separators = [*self.separators, ""]

    def _split(self, text: str, chunk_size: int, overlap: int) -> list[Span]:
        return self._split_range(text, 0, len(text), chunk_size, overlap, self.separators)

    def _split_range(
        self,
        text: str,
        start: int,
        end: int,
        chunk_size: int,
        overlap: int,
        separators: list[str],
    ) -> list[Span]:
        if end - start <= chunk_size:
            return [(start, end)]

        segment = text[start:end]
        for position, separator in enumerate(separators):
            if separator == "":
                return sliding_windows(start, end, chunk_size, overlap)
            if separator in segment:
                return self._pack(
                    text,
                    self._pieces(segment, separator, start),
                    chunk_size,
                    overlap,
                    separators[position + 1 :],
                )

        return sliding_windows(start, end, chunk_size, overlap)

    def _pieces(self, segment: str, separator: str, base: int) -> list[Span]:
        pieces = []
        cursor = 0
        for part in segment.split(separator):
            pieces.append((base + cursor, base + cursor + len(part)))
            cursor += len(part) + len(separator)
        return pieces

    def _pack(
        self,
        text: str,
        pieces: list[Span],
        chunk_size: int,
        overlap: int,
        remaining: list[str],
    ) -> list[Span]:
        spans: list[Span] = []
        current: Span | None = None

        for piece_start, piece_end in pieces:
            if current is None:
                current = (piece_start, piece_end)
                continue

            cur_start, cur_end = current
            if piece_end - cur_start > chunk_size and cur_end > cur_start:
                spans.extend(self._emit(text, cur_start, cur_end, chunk_size, overlap, remaining))
                if overlap > 0 and cur_end - cur_start > overlap:
                    current = (cur_end - overlap, piece_end)
                else:
                    current = (piece_start, piece_end)
            else:
                current = (cur_start, piece_end)

        if current is not None:
            spans.extend(self._emit(text, *current, chunk_size, overlap, remaining))

        return spans

    def _emit(
        self,
        text: str,
        start: int,
        end: int,
        chunk_size: int,
        overlap: int,
        remaining: list[str],
    ) -> list[Span]:
        if end <= start:
            return []
        if end - start > chunk_size:
            return self._split_range(text, start, end, chunk_size, overlap, remaining)
        return [(start, end)]
