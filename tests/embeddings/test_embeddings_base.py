"""
Tests for embeddings base class.
"""

import pytest

from src.core.embeddings.base import Embedder


class MockEmbedder(Embedder):
    """Mock embedder for testing."""

    def __init__(self):
        self.calls = []

    async def embed(self, text: str, **kwargs):
        self.calls.append(text)
        return [0.1, 0.2, 0.3, 0.4, float(len(text))]

    async def close(self):
        """Mock close implementation."""
        pass


@pytest.mark.unit
@pytest.mark.asyncio
class TestEmbedderBase:
    """Test base Embedder functionality."""

    async def test_abstract_instantiation(self):
        """Test that abstract class cannot be instantiated."""
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            Embedder()

    async def test_embed_interface(self):
        """Test embed method interface."""
        embedder = MockEmbedder()
        result = await embedder.embed("test text")
        assert isinstance(result, list)
        assert len(result) == 5
        assert all(isinstance(x, float) for x in result)

    async def test_batch_embed_default_preserves_order(self):
        """Default batch_embed embeds one text at a time, in order."""
        embedder = MockEmbedder()
        texts = ["a", "bb", "ccc"]
        results = await embedder.batch_embed(texts)

        assert [r[-1] for r in results] == [1.0, 2.0, 3.0]
        assert embedder.calls == texts

    async def test_batch_embed_with_batch_size(self):
        """Batch size does not change the result count."""
        embedder = MockEmbedder()
        results = await embedder.batch_embed(["t1", "t2", "t3", "t4", "t5"], batch_size=2)

        assert len(results) == 5

    async def test_get_dimension_default(self):
        """Default get_dimension embeds a probe."""
        embedder = MockEmbedder()
        dimension = await embedder.get_dimension()

        assert dimension == 5
        assert embedder.calls == ["dimension probe"]

    async def test_close_default(self):
        """Test close implementation."""
        embedder = MockEmbedder()
        await embedder.close()  # Should not raise
