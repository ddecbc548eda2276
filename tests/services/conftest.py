"""Fixtures for service tests.

Unit tests run against a deterministic keyword embedder and a scripted
generator. The live fixture builds real providers from configuration
and skips when they are not reachable.

Configuration is loaded from:
1. .env.test file (if exists)
2. Environment variables
3. Default test values
"""

import asyncio
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from src.config import Config
from src.core.embeddings.base import Embedder
from src.core.factory import PipelineFactory
from src.core.llm.generator import ResponseGenerator
from src.core.retrieval import DocumentReranker, DocumentRetriever
from src.models.document import Document
from src.services.rag_pipeline import RAGPipeline
from src.utils.exceptions import EmbeddingError

VOCABULARY = ["python", "programming", "graph", "database", "cooking", "pasta"]
PROVIDER_ERROR = 'provider said {"error": "model not found"}'


class KeywordEmbedder(Embedder):
    """Bag-of-words vectors over a fixed vocabulary."""

    def __init__(
        self,
        fail: bool = False,
        delay: float = 0.0,
        embed_delay: float = 0.0,
        error_message: str = "embedding service unavailable",
    ):
        self.fail = fail
        self.error_message = error_message
        self.delay = delay
        self.embed_delay = embed_delay
        self.embed_calls = 0
        self.active = 0
        self.peak = 0

    async def embed(self, text: str, **kwargs) -> list[float]:
        self.embed_calls += 1
        if self.embed_delay:
            await asyncio.sleep(self.embed_delay)
        if self.fail:
            raise EmbeddingError(self.error_message)
        words = text.lower().split()
        return [float(words.count(term)) for term in VOCABULARY]

    async def batch_embed(self, texts, batch_size=32, **kwargs):
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            return [await self.embed(text) for text in texts]
        finally:
            self.active -= 1

    async def close(self):
        pass


class ScriptedGenerator(ResponseGenerator):
    """Returns a fixed answer, optionally after a delay or with an error."""

    def __init__(self, answer: str = "Python is covered in [Document 1].", delay: float = 0.0):
        self.answer = answer
        self.delay = delay
        self.error: Exception | None = None
        self.calls: list[tuple[str, str]] = []

    async def generate(self, query, context, documents, options=None):
        self.calls.append((query, context))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.answer


def get_test_config() -> Config:
    """
    Get test configuration from environment or defaults.

    Loads from .env.test if exists, otherwise uses environment variables or defaults.
    """
    env_test_path = Path(".env.test")
    if env_test_path.exists():
        return Config.from_env(env_file=env_test_path)
    return Config.from_env()


@pytest.fixture
def embedder() -> KeywordEmbedder:
    return KeywordEmbedder()


@pytest.fixture
def generator() -> ScriptedGenerator:
    return ScriptedGenerator()


@pytest.fixture
def failing_embedder() -> KeywordEmbedder:
    return KeywordEmbedder(fail=True)


@pytest.fixture
def json_error_embedder() -> KeywordEmbedder:
    """Fails with a provider error body containing braces."""
    return KeywordEmbedder(fail=True, error_message=PROVIDER_ERROR)


@pytest.fixture
def slow_embedder() -> KeywordEmbedder:
    return KeywordEmbedder(embed_delay=1.0)


@pytest.fixture
def throttled_embedder() -> KeywordEmbedder:
    return KeywordEmbedder(delay=0.02)


@pytest.fixture
def slow_generator() -> ScriptedGenerator:
    return ScriptedGenerator(delay=1.0)


@pytest.fixture
async def corpus(embedder) -> list[Document]:
    documents = [
        Document(id="doc_python", title="Python Basics", content="python programming language"),
        Document(id="doc_graph", title="Graph Databases", content="a graph database stores nodes"),
        Document(id="doc_cooking", title="Cooking", content="cooking pasta at home"),
    ]
    return [
        doc.model_copy(update={"embedding": await embedder.embed(doc.content)})
        for doc in documents
    ]


@pytest.fixture
async def retriever(corpus) -> DocumentRetriever:
    retriever = DocumentRetriever()
    await retriever.add_documents(corpus)
    return retriever


@pytest.fixture
def pipeline(embedder, retriever, generator) -> RAGPipeline:
    return RAGPipeline(embedder, retriever, generator, reranker=DocumentReranker())


@pytest.fixture
async def live_services() -> AsyncGenerator:
    """
    Build the pipeline and ingestion service from configuration.

    Tests will skip if the providers are not available.
    """
    test_config = get_test_config()
    rag, ingestion = PipelineFactory.create(test_config)

    try:
        await rag.embedder.embed("test")
        yield rag, ingestion
    except Exception as e:
        pytest.skip(f"Providers not available: {e}")
    finally:
        await rag.embedder.close()
