"""Processed query models."""

from datetime import datetime

from pydantic import BaseModel, Field


class QueryIntent(BaseModel):
    """Coarse intent classification of a user query."""

    type: str = "informational"
    category: str = "general"
    action: str = "retrieve"
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class ProcessedQuery(BaseModel):
    """Query after cleaning, keyword extraction and embedding."""

    original_query: str
    cleaned_query: str
    keywords: list[str] = Field(default_factory=list)
    embedding: list[float] | None = None
    intent: QueryIntent = Field(default_factory=QueryIntent)
    language: str = "en"
    processed_at: datetime = Field(default_factory=datetime.now)
