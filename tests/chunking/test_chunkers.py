"""
Tests for text chunking strategies.

Tests cover:
1. Parameter validation for every strategy
2. Short and empty text
3. Fixed window counts
4. Sentence and paragraph accumulation with overlap carry
5. Recursive separator fallback down to characters
6. chunk_document defaults and ID scoping
"""

import math

import pytest

from src.config import ChunkingConfig
from src.core.chunking import (
    ChunkingStrategy,
    FixedSizeChunker,
    ParagraphChunker,
    RecursiveChunker,
    SemanticChunker,
    SentenceChunker,
    chunk_document,
    create_chunker,
)
from src.models.document import Document
from src.utils.exceptions import ValidationError

ALL_CHUNKERS = [
    FixedSizeChunker,
    SentenceChunker,
    ParagraphChunker,
    RecursiveChunker,
    SemanticChunker,
]


def assert_well_formed(chunks, text):
    """Offsets valid, content matches offsets, indexes contiguous."""
    assert [c.chunk_index for c in chunks] == list(range(len(chunks)))
    for chunk in chunks:
        assert 0 <= chunk.start_offset < chunk.end_offset <= len(text)
        assert chunk.content == text[chunk.start_offset : chunk.end_offset]


@pytest.mark.unit
class TestChunkValidation:
    """Window parameter validation."""

    @pytest.mark.parametrize("chunker_cls", ALL_CHUNKERS)
    @pytest.mark.parametrize(
        "chunk_size,overlap",
        [(0, 0), (-5, 0), (100, -1), (100, 100), (100, 150)],
    )
    def test_invalid_parameters_rejected(self, chunker_cls, chunk_size, overlap):
        """Invalid windows raise instead of looping."""
        with pytest.raises(ValidationError):
            chunker_cls().chunk("some text " * 50, chunk_size, overlap)

    @pytest.mark.parametrize("chunker_cls", ALL_CHUNKERS)
    def test_short_text_single_chunk(self, chunker_cls):
        """Text no longer than chunk_size comes back whole."""
        text = "A short piece of text. It has two sentences."
        chunks = chunker_cls().chunk(text, chunk_size=200, overlap=20)

        assert len(chunks) == 1
        assert chunks[0].content == text
        assert chunks[0].start_offset == 0
        assert chunks[0].end_offset == len(text)

    @pytest.mark.parametrize("chunker_cls", ALL_CHUNKERS)
    def test_empty_text(self, chunker_cls):
        """Empty text yields no chunks."""
        assert chunker_cls().chunk("", chunk_size=100, overlap=0) == []


@pytest.mark.unit
class TestFixedSizeChunker:
    """Sliding window chunking."""

    @pytest.mark.parametrize(
        "length,chunk_size,overlap",
        [(250, 100, 20), (1000, 100, 0), (101, 100, 50), (999, 128, 64), (5000, 1000, 200)],
    )
    def test_chunk_count(self, length, chunk_size, overlap):
        """Count is ceil((len - overlap) / (chunk_size - overlap))."""
        text = "x" * length
        chunks = FixedSizeChunker().chunk(text, chunk_size, overlap)

        assert len(chunks) == math.ceil((length - overlap) / (chunk_size - overlap))
        assert_well_formed(chunks, text)

    def test_windows_and_clipping(self):
        """Windows advance by chunk_size - overlap and the last one is clipped."""
        text = "abcdefghij" * 25  # 250 chars
        chunks = FixedSizeChunker().chunk(text, chunk_size=100, overlap=20)

        assert [(c.start_offset, c.end_offset) for c in chunks] == [
            (0, 100),
            (80, 180),
            (160, 250),
        ]

    def test_chunk_metadata_and_ids(self):
        """Chunks record their strategy; free-standing chunks get random IDs."""
        chunks = FixedSizeChunker().chunk("y" * 300, chunk_size=100, overlap=0)

        assert all(c.metadata["strategy"] == "fixed" for c in chunks)
        assert all(c.id.startswith("chunk_") for c in chunks)
        assert len({c.id for c in chunks}) == len(chunks)
        assert all(c.document_id is None for c in chunks)


@pytest.mark.unit
class TestSentenceChunker:
    """Sentence accumulation."""

    TEXT = "First sentence here. Second sentence here. Third sentence here."

    def test_accumulates_whole_sentences(self):
        """Sentences are packed until the next would overflow."""
        chunks = SentenceChunker().chunk(self.TEXT, chunk_size=45, overlap=0)

        assert [c.content for c in chunks] == [
            "First sentence here. Second sentence here.",
            "Third sentence here.",
        ]
        assert_well_formed(chunks, self.TEXT)

    def test_small_overlap_carries_nothing(self):
        """overlap // 100 == 0 carries no sentences."""
        text = " ".join(f"Sentence number {i} has a handful of words." for i in range(12))
        chunks = SentenceChunker().chunk(text, chunk_size=150, overlap=50)

        assert len(chunks) > 1
        for previous, current in zip(chunks, chunks[1:]):
            assert current.start_offset > previous.end_offset

    def test_large_overlap_carries_sentences(self):
        """overlap >= 100 carries trailing sentences into the next chunk."""
        text = " ".join(f"Sentence number {i} has a handful of words." for i in range(12))
        chunks = SentenceChunker().chunk(text, chunk_size=150, overlap=100)

        assert len(chunks) > 1
        for previous, current in zip(chunks, chunks[1:]):
            assert current.start_offset < previous.end_offset
            assert previous.content.endswith(text[current.start_offset : previous.end_offset])
        assert_well_formed(chunks, text)

    def test_other_terminators(self):
        """Question and exclamation marks end sentences."""
        text = "Is this a question? Yes it is! And this is a statement."
        chunks = SentenceChunker().chunk(text, chunk_size=25, overlap=0)

        assert [c.content for c in chunks] == [
            "Is this a question?",
            "Yes it is!",
            "And this is a statement.",
        ]

    def test_oversized_sentence_kept_whole(self):
        """A single sentence longer than chunk_size becomes its own chunk."""
        long_sentence = "word " * 40 + "end."
        text = f"Short one. {long_sentence} Short two."
        chunks = SentenceChunker().chunk(text, chunk_size=50, overlap=0)

        assert long_sentence.strip() in [c.content for c in chunks]


@pytest.mark.unit
class TestParagraphChunker:
    """Paragraph accumulation."""

    TEXT = "Para one text.\n\nPara two text.\n\nPara three text."

    def test_accumulates_paragraphs(self):
        """Paragraphs are packed with their separating blank lines."""
        chunks = ParagraphChunker().chunk(self.TEXT, chunk_size=35, overlap=0)

        assert [c.content for c in chunks] == [
            "Para one text.\n\nPara two text.",
            "Para three text.",
        ]

    def test_overlap_carries_one_paragraph(self):
        """Any positive overlap carries exactly one paragraph."""
        chunks = ParagraphChunker().chunk(self.TEXT, chunk_size=35, overlap=10)

        assert [c.content for c in chunks] == [
            "Para one text.\n\nPara two text.",
            "Para two text.\n\nPara three text.",
        ]
        assert_well_formed(chunks, self.TEXT)


@pytest.mark.unit
class TestRecursiveChunker:
    """Separator hierarchy chunking."""

    def test_splits_on_paragraphs_first(self):
        """Paragraph breaks are preferred over smaller separators."""
        text = "A" * 30 + "\n\n" + "B" * 30 + "\n\n" + "C" * 30
        chunks = RecursiveChunker().chunk(text, chunk_size=70, overlap=0)

        assert [c.content for c in chunks] == ["A" * 30 + "\n\n" + "B" * 30, "C" * 30]

    def test_falls_back_to_characters(self):
        """Text without separators is cut into character windows."""
        text = "x" * 250
        chunks = RecursiveChunker().chunk(text, chunk_size=100, overlap=10)

        assert [(c.start_offset, c.end_offset) for c in chunks] == [
            (0, 100),
            (90, 190),
            (180, 250),
        ]

    def test_word_level_chunks_respect_size_and_cover_text(self):
        """Every chunk fits and every word character lands in some chunk."""
        text = " ".join(["word"] * 60)
        chunks = RecursiveChunker().chunk(text, chunk_size=50, overlap=10)

        assert_well_formed(chunks, text)
        assert all(c.length <= 50 for c in chunks)

        covered = set()
        for chunk in chunks:
            covered.update(range(chunk.start_offset, chunk.end_offset))
        assert all(i in covered for i, ch in enumerate(text) if ch != " ")

    def test_overlap_shares_characters(self):
        """Consecutive chunks share the configured overlap."""
        text = " ".join(["word"] * 60)
        chunks = RecursiveChunker().chunk(text, chunk_size=50, overlap=10)

        for previous, current in zip(chunks, chunks[1:]):
            assert previous.end_offset - current.start_offset == 10

    def test_oversized_line_recurses(self):
        """A line too long for one chunk is split by smaller separators."""
        long_line = " ".join(["token"] * 40)
        text = "Intro line.\n" + long_line + "\nOutro line."
        chunks = RecursiveChunker().chunk(text, chunk_size=60, overlap=0)

        assert_well_formed(chunks, text)
        assert all(c.length <= 60 for c in chunks)
        assert len(chunks) > 3

    def test_custom_separators_end_with_characters(self):
        """Custom separator lists always get the character fallback."""
        chunker = RecursiveChunker(separators=["|"])
        assert chunker.separators == ["|", ""]


@pytest.mark.unit
class TestSemanticChunker:
    """Semantic strategy placeholder."""

    def test_matches_sentence_chunker(self):
        """Semantic chunking produces sentence chunks."""
        text = " ".join(f"Sentence number {i} has a handful of words." for i in range(12))

        semantic = SemanticChunker().chunk(text, chunk_size=150, overlap=100)
        sentence = SentenceChunker().chunk(text, chunk_size=150, overlap=100)

        assert [c.content for c in semantic] == [c.content for c in sentence]
        assert all(c.metadata["strategy"] == "semantic" for c in semantic)


@pytest.mark.unit
class TestChunkDocument:
    """Chunker selection and document chunking."""

    def test_create_chunker_by_name(self):
        """Strategy tags map to chunker classes."""
        assert isinstance(create_chunker("fixed"), FixedSizeChunker)
        assert isinstance(create_chunker(ChunkingStrategy.PARAGRAPH), ParagraphChunker)
        assert isinstance(create_chunker("semantic"), SemanticChunker)

    def test_create_chunker_unknown_strategy(self):
        """Unknown strategies are rejected."""
        with pytest.raises(ValidationError, match="Unknown chunking strategy"):
            create_chunker("bogus")

    def test_default_configuration(self):
        """Defaults are recursive, 1000 characters, 200 overlap."""
        document = Document(id="doc_abc123def456", content="x" * 2500)
        chunks = chunk_document(document)

        assert [(c.start_offset, c.end_offset) for c in chunks] == [
            (0, 1000),
            (800, 1800),
            (1600, 2500),
        ]
        assert [c.id for c in chunks] == [
            "doc_abc123def456_chunk_0",
            "doc_abc123def456_chunk_1",
            "doc_abc123def456_chunk_2",
        ]
        assert all(c.document_id == document.id for c in chunks)
        assert all(c.metadata["strategy"] == "recursive" for c in chunks)

    def test_document_id_with_braces(self):
        document = Document(id="doc_{x}", content="z" * 30)

        chunks = chunk_document(document, strategy="fixed", chunk_size=20, overlap=0)

        assert [c.id for c in chunks] == ["doc_{x}_chunk_0", "doc_{x}_chunk_1"]

    def test_arguments_override_config(self):
        """Explicit arguments win over the configuration."""
        document = Document(content="y" * 300)
        config = ChunkingConfig(strategy="sentence", chunk_size=1000, chunk_overlap=200)

        chunks = chunk_document(document, strategy="fixed", chunk_size=100, overlap=0, config=config)

        assert len(chunks) == 3
        assert chunks[0].metadata["strategy"] == "fixed"
