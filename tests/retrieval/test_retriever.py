"""
Tests for the in-memory document retriever.

Tests cover:
1. Index management (add, update, logical delete, count)
2. Semantic retrieval with threshold and top_k
3. Lexical and hybrid retrieval
4. MMR retrieval
5. Filters
6. Vector store write-through
"""

from unittest.mock import AsyncMock

import pytest

from src.core.retrieval.retriever import DocumentRetriever, matches_filters
from src.core.vector_store.base import VectorStore
from src.models.document import Document, DocumentStatus
from src.utils.exceptions import NotFoundError, ValidationError


@pytest.fixture
def documents():
    return [
        Document(
            id="doc_python",
            title="Python",
            content="python programming language",
            embedding=[1.0, 0.0, 0.0],
            tags=["code"],
            metadata={"team": "platform"},
        ),
        Document(
            id="doc_snake",
            title="Snakes",
            content="python is also a snake",
            embedding=[0.9, 0.1, 0.0],
            tags=["animals"],
            language="fr",
        ),
        Document(
            id="doc_cooking",
            title="Cooking",
            content="pasta recipes",
            embedding=[0.0, 1.0, 0.0],
            tags=["food"],
        ),
        Document(id="doc_plain", title="Snippets", content="python snippets without vectors"),
    ]


@pytest.fixture
async def retriever(documents):
    retriever = DocumentRetriever()
    await retriever.add_documents(documents)
    return retriever


@pytest.mark.unit
@pytest.mark.asyncio
class TestIndexManagement:
    """Adding, updating and deleting documents."""

    async def test_add_and_get(self, retriever):
        document = await retriever.get_document("doc_python")

        assert document is not None
        assert document.title == "Python"
        assert await retriever.get_document("missing") is None

    async def test_add_replaces_same_id(self, retriever):
        await retriever.add_document(Document(id="doc_python", content="replaced"))

        assert (await retriever.get_document("doc_python")).content == "replaced"
        assert retriever.count() == 4

    async def test_empty_id_rejected(self, retriever):
        with pytest.raises(ValidationError):
            await retriever.add_document(Document(id="", content="x"))

    async def test_update_bumps_version(self, retriever):
        document = await retriever.get_document("doc_cooking")

        updated = await retriever.update_document(document.model_copy(update={"content": "soup"}))

        assert updated.version == 2
        assert (await retriever.get_document("doc_cooking")).content == "soup"

    async def test_update_unknown_document(self, retriever):
        with pytest.raises(NotFoundError):
            await retriever.update_document(Document(id="doc_unknown", content="x"))

    async def test_delete_is_logical(self, retriever):
        await retriever.delete_document("doc_python")

        stored = await retriever.get_document("doc_python")
        assert stored.status == DocumentStatus.DELETED
        assert retriever.count() == 3
        assert retriever.count(include_inactive=True) == 4

    async def test_ids_with_braces(self, retriever):
        await retriever.add_document(Document(id="doc_{0}", content="x", embedding=[1.0, 0.0, 0.0]))
        await retriever.delete_document("doc_{0}")

        assert (await retriever.get_document("doc_{0}")).status == DocumentStatus.DELETED

    async def test_delete_unknown_document(self, retriever):
        with pytest.raises(NotFoundError):
            await retriever.delete_document("doc_unknown")


@pytest.mark.unit
@pytest.mark.asyncio
class TestSemanticRetrieval:
    """Cosine similarity retrieval."""

    async def test_threshold_and_order(self, retriever):
        results = await retriever.retrieve_by_embedding([1.0, 0.0, 0.0], top_k=10, threshold=0.7)

        assert [r.document.id for r in results] == ["doc_python", "doc_snake"]
        assert results[0].score == pytest.approx(1.0)
        assert results[0].score >= results[1].score >= 0.7

    async def test_top_k_limits_results(self, retriever):
        results = await retriever.retrieve_by_embedding([1.0, 0.0, 0.0], top_k=1, threshold=0.0)

        assert [r.document.id for r in results] == ["doc_python"]

    async def test_deleted_documents_excluded(self, retriever):
        await retriever.delete_document("doc_python")

        results = await retriever.retrieve_by_embedding([1.0, 0.0, 0.0], threshold=0.0)

        assert "doc_python" not in [r.document.id for r in results]

    async def test_documents_without_embedding_skipped(self, retriever):
        results = await retriever.retrieve_by_embedding([1.0, 0.0, 0.0], threshold=-1.0)

        assert "doc_plain" not in [r.document.id for r in results]

    async def test_invalid_top_k(self, retriever):
        with pytest.raises(ValidationError):
            await retriever.retrieve_by_embedding([1.0, 0.0, 0.0], top_k=0)

    async def test_filters_applied(self, retriever):
        results = await retriever.retrieve_by_embedding(
            [1.0, 0.0, 0.0], threshold=0.0, filters={"tags": ["animals", "food"]}
        )

        assert {r.document.id for r in results} == {"doc_snake", "doc_cooking"}


@pytest.mark.unit
@pytest.mark.asyncio
class TestLexicalAndHybridRetrieval:
    """Keyword and weighted retrieval."""

    async def test_lexical_includes_unembedded_documents(self, retriever):
        results = await retriever.lexical_retrieve("python snippets")

        ids = [r.document.id for r in results]
        assert ids[0] == "doc_plain"
        assert set(ids) == {"doc_plain", "doc_python", "doc_snake"}

    async def test_lexical_matches_title(self, retriever):
        """A term found only in the title still retrieves the document."""
        await retriever.add_document(
            Document(id="doc_k8s", title="Kubernetes guide", content="clusters and pods")
        )

        results = await retriever.lexical_retrieve("kubernetes")

        assert [r.document.id for r in results] == ["doc_k8s"]
        assert results[0].score == 1.0

    async def test_lexical_terms_do_not_span_title_and_content(self, retriever):
        await retriever.add_document(
            Document(id="doc_split", title="Kubernetes guide", content="clusters and pods")
        )

        assert await retriever.lexical_retrieve("guideclusters") == []

    async def test_degraded_hybrid_matches_title(self, retriever):
        await retriever.add_document(
            Document(id="doc_k8s", title="Kubernetes guide", content="clusters and pods")
        )

        results = await retriever.hybrid_retrieve("kubernetes", None)

        assert [r.document.id for r in results] == ["doc_k8s"]

    async def test_lexical_excludes_non_matching(self, retriever):
        results = await retriever.lexical_retrieve("quantum")

        assert results == []

    async def test_hybrid_without_embedding_is_lexical(self, retriever):
        hybrid = await retriever.hybrid_retrieve("python snippets", None)
        lexical = await retriever.lexical_retrieve("python snippets")

        assert [r.document.id for r in hybrid] == [r.document.id for r in lexical]

    async def test_hybrid_combines_scores(self, retriever):
        results = await retriever.hybrid_retrieve("python", [1.0, 0.0, 0.0], top_k=2)

        assert results[0].document.id == "doc_python"
        assert results[0].score == pytest.approx(1.0)

    async def test_hybrid_threshold_on_combined_score(self, retriever):
        results = await retriever.hybrid_retrieve("python", [1.0, 0.0, 0.0], threshold=0.5)

        assert all(r.score >= 0.5 for r in results)
        assert "doc_cooking" not in [r.document.id for r in results]


@pytest.mark.unit
@pytest.mark.asyncio
class TestMMRRetrieval:
    """Diversified retrieval."""

    async def test_mmr_diversifies(self, retriever):
        results = await retriever.mmr_retrieve(
            [1.0, 0.0, 0.0], top_k=2, fetch_k=3, lambda_mult=0.0
        )

        assert [r.document.id for r in results] == ["doc_python", "doc_cooking"]

    async def test_mmr_respects_top_k(self, retriever):
        results = await retriever.mmr_retrieve([1.0, 0.0, 0.0], top_k=1)

        assert len(results) == 1

    async def test_mmr_invalid_lambda(self, retriever):
        with pytest.raises(ValidationError):
            await retriever.mmr_retrieve([1.0, 0.0, 0.0], lambda_mult=2.0)


@pytest.mark.unit
@pytest.mark.asyncio
class TestVectorStoreWriteThrough:
    """External vector store mirroring."""

    async def test_embedded_documents_are_written(self, documents):
        store = AsyncMock(spec=VectorStore)
        retriever = DocumentRetriever(vector_store=store, collection="kb")

        await retriever.add_documents(documents)

        store.insert.assert_awaited_once()
        collection, written = store.insert.call_args.args
        assert collection == "kb"
        assert [d.id for d in written] == ["doc_python", "doc_snake", "doc_cooking"]

    async def test_unembedded_document_not_written(self):
        store = AsyncMock(spec=VectorStore)
        retriever = DocumentRetriever(vector_store=store)

        await retriever.add_document(Document(id="doc_plain", content="text"))

        store.insert.assert_not_called()


@pytest.mark.unit
class TestMatchesFilters:
    """Filter matching."""

    def test_no_filters(self, documents):
        assert matches_filters(documents[0], None)
        assert matches_filters(documents[0], {})

    def test_language_field(self, documents):
        assert matches_filters(documents[1], {"language": "fr"})
        assert not matches_filters(documents[0], {"language": "fr"})

    def test_metadata_value_and_membership(self, documents):
        assert matches_filters(documents[0], {"team": "platform"})
        assert matches_filters(documents[0], {"team": ["platform", "data"]})
        assert not matches_filters(documents[0], {"team": "data"})

    def test_missing_metadata_key(self, documents):
        assert not matches_filters(documents[2], {"team": "platform"})

    def test_single_tag(self, documents):
        assert matches_filters(documents[0], {"tags": "code"})
        assert not matches_filters(documents[0], {"tags": "food"})
