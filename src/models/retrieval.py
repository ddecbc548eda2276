"""
Retrieval and RAG pipeline models.

Options carry per-call overrides; results carry the ranked documents,
the assembled context and per-stage timing.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.document import Document


class ScoredDocument(BaseModel):
    """A document paired with the score that ranked it."""

    document: Document
    score: float


class RetrievalOptions(BaseModel):
    """Retrieval options."""

    top_k: int = Field(default=10, ge=1)
    threshold: float = 0.7
    reranking_enabled: bool = True
    hybrid_search: bool = False
    use_mmr: bool = False
    fetch_k: int | None = None
    mmr_lambda: float = 0.5
    filters: dict[str, Any] = Field(default_factory=dict)

    @field_validator("mmr_lambda")
    @classmethod
    def _lambda_in_range(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise ValueError("mmr_lambda must be within [0, 1]")
        return value


class GenerationOptions(BaseModel):
    """Options forwarded to the response generator."""

    model: str | None = None
    temperature: float = 0.7
    max_tokens: int = 2000
    system_prompt: str | None = None
    instructions: str | None = None


class RAGOptions(BaseModel):
    """Options for a full retrieve-then-generate run."""

    retrieval: RetrievalOptions = Field(default_factory=RetrievalOptions)
    generation: GenerationOptions = Field(default_factory=GenerationOptions)
    context_length: int | None = None
    include_sources: bool = True
    timeout: float | None = None  # seconds for the whole pipeline call


class PipelineTiming(BaseModel):
    """Per-stage wall time in milliseconds."""

    embed_ms: float = 0.0
    retrieve_ms: float = 0.0
    rerank_ms: float = 0.0
    generate_ms: float = 0.0
    total_ms: float = 0.0


class RetrievalResult(BaseModel):
    """Retrieval results."""

    documents: list[Document] = Field(default_factory=list)
    scores: list[float] = Field(default_factory=list)
    context: str = ""
    query: str = ""
    timing: PipelineTiming = Field(default_factory=PipelineTiming)
    metadata: dict[str, Any] = Field(default_factory=dict)


class Citation(BaseModel):
    """Reference from generated text back to a source document."""

    document_id: str
    text: str
    confidence: float = 0.8


class RAGResponse(BaseModel):
    """Final answer with sources, citations and a confidence estimate."""

    model_config = ConfigDict(json_encoders={datetime: lambda v: v.isoformat()})

    text: str
    query: str
    context: str = ""
    sources: list[Document] = Field(default_factory=list)
    citations: list[Citation] = Field(default_factory=list)
    confidence: float = 0.0
    timing: PipelineTiming = Field(default_factory=PipelineTiming)
    metadata: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)
