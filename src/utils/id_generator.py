"""
ID generation utilities for Ragraph.

Provides consistent ID generation for all record types:
- Documents: doc_xxx
- Chunks: doc_xxx_chunk_N (or chunk_xxx without a parent document)
- Entities: ent_xxx
- Relationships: rel_xxx
"""

from uuid import uuid4


def generate_document_id() -> str:
    """
    Generate unique Document ID.

    Returns:
        ID in format "doc_xxx" where xxx is 12 hex characters
    """
    return f"doc_{uuid4().hex[:12]}"


def generate_chunk_id(document_id: str | None, chunk_index: int) -> str:
    """
    Generate Chunk ID based on parent document.

    Args:
        document_id: Parent document ID, or None for free-standing text
        chunk_index: Zero-based chunk index

    Returns:
        ID in format "doc_xxx_chunk_N", or "chunk_xxx" without a document
    """
    if not document_id:
        return f"chunk_{uuid4().hex[:12]}"
    return f"{document_id}_chunk_{chunk_index}"


def generate_entity_id() -> str:
    """Generate unique Entity ID ("ent_" + 12 hex characters)."""
    return f"ent_{uuid4().hex[:12]}"


def generate_relationship_id() -> str:
    """Generate unique Relationship ID ("rel_" + 12 hex characters)."""
    return f"rel_{uuid4().hex[:12]}"
