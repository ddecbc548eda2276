"""In-memory knowledge graph."""

from src.core.graph.knowledge_graph import KnowledgeGraph

__all__ = [
    "KnowledgeGraph",
]
