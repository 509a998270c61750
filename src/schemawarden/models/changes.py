"""Frozen dataclass models for endpoint and model version comparison."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from schemawarden.models.enums import VersionChangeKind
from schemawarden.models.schema import EndpointDescriptor, ModelDescriptor


@dataclass(frozen=True, slots=True)
class AttributeChange:
    """A single attribute that differs between two versions."""

    attribute: str
    before: Any
    after: Any


@dataclass(frozen=True, slots=True)
class EndpointChange:
    """How one endpoint changed between two snapshots."""

    kind: VersionChangeKind
    method: str
    path: str
    current: EndpointDescriptor | None = None
    previous: EndpointDescriptor | None = None
    attribute_changes: tuple[AttributeChange, ...] = ()


@dataclass(frozen=True, slots=True)
class ModelChange:
    """How one model changed between two snapshots."""

    kind: VersionChangeKind
    name: str
    current: ModelDescriptor | None = None
    previous: ModelDescriptor | None = None
    attribute_changes: tuple[AttributeChange, ...] = ()


@dataclass(frozen=True, slots=True)
class ChangeStats:
    """Counts of endpoint changes; ``change_rate`` is a percentage."""

    added: int = 0
    deleted: int = 0
    modified: int = 0
    unchanged: int = 0
    total: int = 0
    change_rate: float = 0.0
