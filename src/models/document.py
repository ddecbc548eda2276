"""
Document and DocumentChunk models for source content.

Documents are owned by the caller; the embedding is attached once
computed. Chunks are produced only by the chunkers and carry offsets
into the text they were cut from.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.utils.id_generator import generate_document_id


class DocumentStatus(str, Enum):
    """Document lifecycle status."""

    DRAFT = "draft"
    PROCESSING = "processing"
    ACTIVE = "active"
    ARCHIVED = "archived"
    DELETED = "deleted"


class DocumentChunk(BaseModel):
    """
    A bounded, possibly-overlapping segment of a document's text.

    Offsets index into the chunked text: content == text[start_offset:end_offset].
    """

    model_config = ConfigDict(json_encoders={datetime: lambda v: v.isoformat()})

    id: str = Field(..., description="Unique chunk ID (doc_xxx_chunk_0)")
    document_id: str | None = Field(default=None, description="Parent document ID")
    content: str = Field(..., description="Chunk text")
    chunk_index: int = Field(..., ge=0, description="Zero-based index within document")
    start_offset: int = Field(..., ge=0, description="Start character offset")
    end_offset: int = Field(..., ge=0, description="End character offset (exclusive)")
    embedding: list[float] = Field(default_factory=list, description="Vector embedding")
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def length(self) -> int:
        return len(self.content)


class Document(BaseModel):
    """
    Knowledge document indexed for retrieval.

    Re-embedding or updating mutates the record in place; deletion is
    logical (status flag) and the index keeps the entry.
    """

    model_config = ConfigDict(json_encoders={datetime: lambda v: v.isoformat()})

    # Core identity
    id: str = Field(default_factory=generate_document_id, description="Unique document ID")
    title: str = Field(default="", description="Document title")
    content: str = Field(..., description="Full document text")
    language: str = Field(default="en", description="ISO language code")
    embedding: list[float] = Field(default_factory=list, description="Vector embedding")

    # Metadata
    source: str = Field(default="", description="Where the document came from")
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    # Lifecycle
    status: DocumentStatus = Field(default=DocumentStatus.ACTIVE)
    version: int = Field(default=1, ge=1)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def is_active(self) -> bool:
        """
        Check if document is currently active.

        Returns:
            True if document status is ACTIVE
        """
        return self.status == DocumentStatus.ACTIVE

    def has_embedding(self) -> bool:
        return len(self.embedding) > 0
