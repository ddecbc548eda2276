"""Knowledge graph models: entities, relationships, paths and queries."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.utils.id_generator import generate_entity_id, generate_relationship_id


class Entity(BaseModel):
    """Named entity stored in the knowledge graph."""

    model_config = ConfigDict(json_encoders={datetime: lambda v: v.isoformat()})

    id: str = Field(default_factory=generate_entity_id)
    name: str
    type: str
    description: str = ""
    aliases: list[str] = Field(default_factory=list)
    properties: dict[str, Any] = Field(default_factory=dict)
    embedding: list[float] = Field(default_factory=list)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    source: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Relationship(BaseModel):
    """
    Directed, typed relationship between two entities.

    Direction (from_entity -> to_entity) is kept for semantic queries;
    traversal treats the link as undirected.
    """

    model_config = ConfigDict(json_encoders={datetime: lambda v: v.isoformat()})

    id: str = Field(default_factory=generate_relationship_id)
    from_entity: str
    to_entity: str
    type: str
    properties: dict[str, Any] = Field(default_factory=dict)
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    source: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def connects(self, a: str, b: str) -> bool:
        """True if this relationship links a and b in either direction."""
        return (self.from_entity == a and self.to_entity == b) or (
            self.from_entity == b and self.to_entity == a
        )

    def other_end(self, entity_id: str) -> str:
        return self.to_entity if self.from_entity == entity_id else self.from_entity


class Path(BaseModel):
    """Read-only view of a route through the graph."""

    entities: list[Entity] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    length: int = 0
    weight: float = 0.0  # mean relationship confidence

    @property
    def entity_ids(self) -> list[str]:
        return [e.id for e in self.entities]


class GraphQueryType(str, Enum):
    """Request kinds understood by KnowledgeGraph.query_graph."""

    FIND_PATH = "find_path"
    NEIGHBORS = "neighbors"
    SUBGRAPH = "subgraph"


class GraphQuery(BaseModel):
    """Graph query request."""

    type: str
    entity_id: str | None = None
    from_entity: str | None = None
    to_entity: str | None = None
    max_depth: int = 0
    filters: dict[str, Any] = Field(default_factory=dict)
    limit: int = 0


class GraphResult(BaseModel):
    """Graph query results."""

    entities: list[Entity] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    paths: list[Path] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    processing_time_ms: float = 0.0
