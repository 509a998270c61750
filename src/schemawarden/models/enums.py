"""Enumerations for the SchemaWarden domain model."""

from __future__ import annotations

from enum import Enum


class ChangeKind(str, Enum):
    """Kind of change detected at a single field path."""

    ADD = "add"
    DELETE = "delete"
    MODIFY = "modify"
    TYPE_CHANGE = "type_change"


class Severity(str, Enum):
    """Compatibility severity of a field-level change."""

    BREAKING = "breaking"
    MINOR = "minor"
    PATCH = "patch"


class BreakingChangeCategory(str, Enum):
    """Reporting category of a breaking change."""

    REQUIRED_FIELD_REMOVED = "REQUIRED_FIELD_REMOVED"
    REQUIRED_FIELD_ADDED = "REQUIRED_FIELD_ADDED"
    TYPE_INCOMPATIBLE = "TYPE_INCOMPATIBLE"
    FIELD_MADE_REQUIRED = "FIELD_MADE_REQUIRED"
    DTO_REMOVED = "DTO_REMOVED"


class ImpactLevel(str, Enum):
    """Estimated blast radius of a change."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class NodeType(str, Enum):
    """Type of a dependency graph node."""

    MODEL = "model"
    ENDPOINT = "endpoint"


class RelationType(str, Enum):
    """Type of a dependency graph edge."""

    REFERENCE = "reference"
    REQUEST = "request"
    RESPONSE = "response"


class VersionChangeKind(str, Enum):
    """Change of an endpoint or model between two snapshots."""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"
