"""
In-memory knowledge graph.

Entities and directed relationships are stored by ID; traversal uses a
symmetric adjacency list with one entry per relationship, so parallel
relationships count separately toward degree centrality.
"""

import time
from collections import deque
from datetime import datetime

from src.config import GraphConfig
from src.models.graph import (
    Entity,
    GraphQuery,
    GraphQueryType,
    GraphResult,
    Path,
    Relationship,
)
from src.utils.exceptions import CapacityExceededError, NotFoundError, ValidationError
from src.utils.locks import ReadWriteLock
from src.utils.logger import get_logger

logger = get_logger(__name__)


class KnowledgeGraph:
    """
    Thread-safe entity/relationship graph.

    Responsibilities:
    - Upsert entities and index them by type
    - Store relationships and keep traversal adjacency symmetric
    - Path finding, neighbor expansion, subgraph extraction
    - Degree centrality

    Methods are async to sit alongside the other awaited collaborators;
    the lock is only held inside synchronous sections.
    """

    def __init__(self, config: GraphConfig | None = None):
        self.config = config or GraphConfig()

        self._entities: dict[str, Entity] = {}
        self._relationships: dict[str, Relationship] = {}
        self._adjacency: dict[str, list[str]] = {}
        self._incident: dict[str, list[str]] = {}  # entity id -> relationship ids
        self._by_type: dict[str, list[str]] = {}
        self._lock = ReadWriteLock()

    # Mutations

    async def add_entity(self, entity: Entity) -> Entity:
        """
        Insert or update an entity.

        An update keeps the original created_at; both paths set updated_at.

        Returns:
            The stored entity

        Raises:
            ValidationError: If the entity has no ID
            CapacityExceededError: If a new entity would exceed max_entities
        """
        if not entity.id:
            raise ValidationError("Entity ID cannot be empty")

        with self._lock.write():
            existing = self._entities.get(entity.id)

            if existing is None:
                if len(self._entities) >= self.config.max_entities:
                    raise CapacityExceededError(
                        f"Graph entity capacity reached ({self.config.max_entities})",
                        context={"max_entities": self.config.max_entities},
                    )
                stored = entity.model_copy(update={"updated_at": datetime.now()})
                self._adjacency[stored.id] = []
                self._incident[stored.id] = []
            else:
                stored = entity.model_copy(
                    update={"created_at": existing.created_at, "updated_at": datetime.now()}
                )
                if existing.type != stored.type:
                    self._by_type[existing.type].remove(existing.id)

            if existing is None or existing.type != stored.type:
                self._by_type.setdefault(stored.type, []).append(stored.id)

            self._entities[stored.id] = stored

        logger.debug(
            "{} entity {}",
            "Added" if existing is None else "Updated",
            stored.id,
            extra={"entity_id": stored.id, "entity_type": stored.type, "name": stored.name},
        )
        return stored

    async def add_relationship(self, relationship: Relationship) -> Relationship:
        """
        Store a relationship between two existing entities.

        Returns:
            The stored relationship

        Raises:
            NotFoundError: If either endpoint is missing
            ValidationError: If the relationship ID is already used
            CapacityExceededError: If max_relationships would be exceeded
        """
        with self._lock.write():
            for endpoint in (relationship.from_entity, relationship.to_entity):
                if endpoint not in self._entities:
                    raise NotFoundError(
                        f"Entity not found: {endpoint}",
                        context={"entity_id": endpoint, "relationship_id": relationship.id},
                    )
            if relationship.id in self._relationships:
                raise ValidationError(
                    f"Duplicate relationship ID: {relationship.id}",
                    context={"relationship_id": relationship.id},
                )
            if len(self._relationships) >= self.config.max_relationships:
                raise CapacityExceededError(
                    f"Graph relationship capacity reached ({self.config.max_relationships})",
                    context={"max_relationships": self.config.max_relationships},
                )

            stored = relationship.model_copy(update={"updated_at": datetime.now()})
            self._relationships[stored.id] = stored

            self._adjacency[stored.from_entity].append(stored.to_entity)
            self._adjacency[stored.to_entity].append(stored.from_entity)
            self._incident[stored.from_entity].append(stored.id)
            if stored.to_entity != stored.from_entity:
                self._incident[stored.to_entity].append(stored.id)

        logger.debug(
            "Added relationship {}",
            stored.id,
            extra={
                "relationship_id": stored.id,
                "relationship_type": stored.type,
                "from_entity": stored.from_entity,
                "to_entity": stored.to_entity,
            },
        )
        return stored

    # Lookups

    async def get_entity(self, entity_id: str) -> Entity:
        """
        Raises:
            NotFoundError: If the entity does not exist
        """
        with self._lock.read():
            entity = self._entities.get(entity_id)
        if entity is None:
            raise NotFoundError(f"Entity not found: {entity_id}", context={"entity_id": entity_id})
        return entity

    async def get_relationships(self, entity_id: str) -> list[Relationship]:
        """All relationships touching an entity, in insertion order."""
        with self._lock.read():
            return [self._relationships[rid] for rid in self._incident.get(entity_id, [])]

    async def find_entities_by_type(self, entity_type: str) -> list[Entity]:
        with self._lock.read():
            return [self._entities[eid] for eid in self._by_type.get(entity_type, [])]

    # Traversal

    async def find_path(self, from_id: str, to_id: str, max_depth: int = 0) -> list[Path]:
        """
        Enumerate all simple paths between two entities.

        Breadth-first, so shorter paths come first. An entity appears at
        most once per path.

        Args:
            from_id: Start entity
            to_id: Target entity
            max_depth: Maximum hops; <= 0 uses the configured default

        Returns:
            Paths weighted by mean relationship confidence; empty when
            from_id == to_id or nothing connects within max_depth

        Raises:
            NotFoundError: If either endpoint is missing
        """
        if max_depth <= 0:
            max_depth = self.config.default_max_depth

        with self._lock.read():
            for endpoint in (from_id, to_id):
                if endpoint not in self._entities:
                    raise NotFoundError(
                        f"Entity not found: {endpoint}", context={"entity_id": endpoint}
                    )
            paths = [] if from_id == to_id else self._paths_bfs(from_id, to_id, max_depth)

        logger.debug(
            "Path search completed",
            extra={
                "from_entity": from_id,
                "to_entity": to_id,
                "max_depth": max_depth,
                "paths_found": len(paths),
            },
        )
        return paths

    def _paths_bfs(self, from_id: str, to_id: str, max_depth: int) -> list[Path]:
        found: list[Path] = []
        queue: deque[list[str]] = deque([[from_id]])

        while queue:
            route = queue.popleft()
            current = route[-1]

            if current == to_id:
                found.append(self._build_path(route))
                continue
            if len(route) - 1 >= max_depth:
                continue

            # Parallel relationships yield the same route once
            for neighbor in dict.fromkeys(self._adjacency[current]):
                if neighbor not in route:
                    queue.append([*route, neighbor])

        return found

    def _build_path(self, route: list[str]) -> Path:
        relationships = []
        for a, b in zip(route, route[1:]):
            for rid in self._incident[a]:
                rel = self._relationships[rid]
                if rel.connects(a, b):
                    relationships.append(rel)
                    break

        weight = (
            sum(r.confidence for r in relationships) / len(relationships) if relationships else 0.0
        )
        return Path(
            entities=[self._entities[eid] for eid in route],
            relationships=relationships,
            length=len(route) - 1,
            weight=weight,
        )

    async def get_neighbors(self, entity_id: str, depth: int = 1) -> list[Entity]:
        """
        Entities reachable within depth hops, excluding the start.

        Each entity is visited once (BFS with a global visited set), so
        results come in nondecreasing hop distance.

        Raises:
            NotFoundError: If the entity does not exist
        """
        with self._lock.read():
            if entity_id not in self._entities:
                raise NotFoundError(
                    f"Entity not found: {entity_id}", context={"entity_id": entity_id}
                )
            return [self._entities[eid] for eid in self._bfs(entity_id, depth) if eid != entity_id]

    async def get_subgraph(
        self, entity_id: str, depth: int = 1
    ) -> tuple[list[Entity], list[Relationship]]:
        """
        Entities within depth hops of an entity and the relationships among them.

        Returns:
            (entities including the start, relationships with both ends inside)

        Raises:
            NotFoundError: If the entity does not exist
        """
        with self._lock.read():
            if entity_id not in self._entities:
                raise NotFoundError(
                    f"Entity not found: {entity_id}", context={"entity_id": entity_id}
                )
            visited = self._bfs(entity_id, max(depth, 0))
            inside = set(visited)

            relationship_ids: dict[str, None] = {}
            for eid in visited:
                for rid in self._incident[eid]:
                    if self._relationships[rid].other_end(eid) in inside:
                        relationship_ids[rid] = None

            entities = [self._entities[eid] for eid in visited]
            relationships = [self._relationships[rid] for rid in relationship_ids]

        return entities, relationships

    def _bfs(self, start: str, depth: int) -> list[str]:
        """Entity IDs within depth hops of start, start first."""
        visited = {start: None}
        queue = deque([(start, 0)])
        while queue:
            current, distance = queue.popleft()
            if distance >= depth:
                continue
            for neighbor in self._adjacency[current]:
                if neighbor not in visited:
                    visited[neighbor] = None
                    queue.append((neighbor, distance + 1))
        return list(visited)

    async def calculate_centrality(self, entity_id: str) -> float:
        """
        Degree centrality: adjacency entries / (entity count - 1), clamped to [0, 1].

        Returns 0.0 when the graph has at most one entity.
        """
        with self._lock.read():
            total = len(self._entities)
            degree = len(self._adjacency.get(entity_id, []))

        if total <= 1:
            return 0.0
        return min(max(degree / (total - 1), 0.0), 1.0)

    # Queries

    async def query_graph(self, query: GraphQuery) -> GraphResult:
        """
        Dispatch a graph query.

        find_path uses max_depth as the hop limit (<= 0 means default);
        neighbors and subgraph treat max_depth <= 0 as one hop. Entity
        filters match the entity type or its properties; limit > 0
        truncates entity and path lists.

        Raises:
            ValidationError: If the query type is unknown or required IDs are missing
            NotFoundError: If a referenced entity does not exist
        """
        start = time.perf_counter()

        try:
            kind = GraphQueryType(query.type)
        except ValueError as e:
            raise ValidationError(
                f"unsupported query type: {query.type}", context={"type": query.type}
            ) from e

        result = GraphResult(metadata={"type": kind.value})
        hops = query.max_depth if query.max_depth > 0 else 1

        if kind is GraphQueryType.FIND_PATH:
            if not query.from_entity or not query.to_entity:
                raise ValidationError("find_path requires from_entity and to_entity")
            result.paths = await self.find_path(
                query.from_entity, query.to_entity, query.max_depth
            )
        elif kind is GraphQueryType.NEIGHBORS:
            result.entities = await self.get_neighbors(self._require_entity_id(query), hops)
        else:
            entities, relationships = await self.get_subgraph(
                self._require_entity_id(query), hops
            )
            result.entities = entities
            result.relationships = relationships

        if query.filters:
            result.entities = [e for e in result.entities if _entity_matches(e, query.filters)]
        if query.limit > 0:
            result.entities = result.entities[: query.limit]
            result.paths = result.paths[: query.limit]

        result.processing_time_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            "Graph query completed",
            extra={
                "type": kind.value,
                "entities": len(result.entities),
                "paths": len(result.paths),
                "processing_time_ms": result.processing_time_ms,
            },
        )
        return result

    @staticmethod
    def _require_entity_id(query: GraphQuery) -> str:
        if not query.entity_id:
            raise ValidationError(f"{query.type} query requires entity_id")
        return query.entity_id

    def stats(self) -> dict[str, int | float | dict[str, int]]:
        """Entity and relationship counts, per-type entity counts and average degree."""
        with self._lock.read():
            entity_count = len(self._entities)
            return {
                "entities": entity_count,
                "relationships": len(self._relationships),
                "entity_types": {t: len(ids) for t, ids in self._by_type.items() if ids},
                "average_degree": (
                    sum(len(adj) for adj in self._adjacency.values()) / entity_count
                    if entity_count
                    else 0.0
                ),
            }


def _entity_matches(entity: Entity, filters: dict) -> bool:
    for key, expected in filters.items():
        actual = entity.type if key == "type" else entity.properties.get(key)
        if isinstance(expected, list | tuple | set):
            if actual not in expected:
                return False
        elif actual != expected:
            return False
    return True
