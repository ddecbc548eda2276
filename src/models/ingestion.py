"""
Ingestion result models.

Batch ingestion reports a per-document outcome and a summary rather
than failing atomically.
"""

from pydantic import BaseModel, Field

from src.models.document import DocumentChunk


class IngestionResult(BaseModel):
    """Outcome of ingesting a single document."""

    document_id: str
    success: bool = True
    chunks: list[DocumentChunk] = Field(default_factory=list)
    error: str | None = None
    processing_time_ms: float = 0.0

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)


class BatchIngestionResult(BaseModel):
    """Summary of a batch ingestion run."""

    results: list[IngestionResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def errors(self) -> dict[str, str]:
        return {r.document_id: r.error or "" for r in self.results if not r.success}

    def summary(self) -> str:
        return f"{self.succeeded} succeeded, {self.failed} failed of {len(self.results)}"
