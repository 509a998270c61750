"""Domain models for SchemaWarden."""

from schemawarden.models.changes import (
    AttributeChange,
    ChangeStats,
    EndpointChange,
    ModelChange,
)
from schemawarden.models.diff import (
    BreakingChange,
    BreakingChangeSummary,
    DeploymentVerdict,
    DiffSummary,
    DtoDiff,
    FieldDiff,
    FieldSnapshot,
)
from schemawarden.models.enums import (
    BreakingChangeCategory,
    ChangeKind,
    ImpactLevel,
    NodeType,
    RelationType,
    Severity,
    VersionChangeKind,
)
from schemawarden.models.graph import (
    DependencyGraph,
    GraphEdge,
    GraphNode,
    GraphStats,
    ImpactAnalysis,
)
from schemawarden.models.schema import (
    EndpointContract,
    EndpointDescriptor,
    ExtractionResult,
    FieldDescriptor,
    ModelDescriptor,
    Snapshot,
)

__all__ = [
    "AttributeChange",
    "BreakingChange",
    "BreakingChangeCategory",
    "BreakingChangeSummary",
    "ChangeKind",
    "ChangeStats",
    "DependencyGraph",
    "DeploymentVerdict",
    "DiffSummary",
    "DtoDiff",
    "EndpointChange",
    "EndpointContract",
    "EndpointDescriptor",
    "ExtractionResult",
    "FieldDescriptor",
    "FieldDiff",
    "FieldSnapshot",
    "GraphEdge",
    "GraphNode",
    "GraphStats",
    "ImpactAnalysis",
    "ImpactLevel",
    "ModelChange",
    "ModelDescriptor",
    "NodeType",
    "RelationType",
    "Severity",
    "Snapshot",
    "VersionChangeKind",
]
