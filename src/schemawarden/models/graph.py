"""Frozen dataclass models for dependency graphs and impact analysis."""

from __future__ import annotations

from dataclasses import dataclass, field

from schemawarden.models.enums import ImpactLevel, NodeType, RelationType


@dataclass(frozen=True, slots=True)
class GraphNode:
    """A model or endpoint node."""

    id: str
    node_type: NodeType
    label: str
    name: str
    field_count: int | None = None
    method: str | None = None
    path: str | None = None


@dataclass(frozen=True, slots=True)
class GraphEdge:
    """A directed dependency edge."""

    id: str
    source: str
    target: str
    label: str
    relation: RelationType
    required: bool = False


@dataclass(frozen=True, slots=True)
class GraphStats:
    """Aggregate counts for a dependency graph."""

    total_models: int = 0
    total_endpoints: int = 0
    total_edges: int = 0
    isolated_nodes: int = 0


@dataclass(frozen=True, slots=True)
class DependencyGraph:
    """Nodes, edges and the model adjacency they were built from."""

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    stats: GraphStats = field(default_factory=GraphStats)
    model_deps: dict[str, tuple[str, ...]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ImpactAnalysis:
    """Who is affected if ``source_model`` changes."""

    source_model: str
    affected_models: tuple[str, ...] = ()
    affected_endpoints: tuple[str, ...] = ()
    impact_level: ImpactLevel = ImpactLevel.LOW
    direct_dependents: tuple[str, ...] = ()
    indirect_dependents: tuple[str, ...] = ()

    @property
    def endpoint_count(self) -> int:
        return len(self.affected_endpoints)
