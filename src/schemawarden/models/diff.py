"""Frozen dataclass models for schema diffs and breaking-change reports."""

from __future__ import annotations

from dataclasses import dataclass, field

from schemawarden.models.enums import (
    BreakingChangeCategory,
    ChangeKind,
    Severity,
)


@dataclass(frozen=True, slots=True)
class FieldSnapshot:
    """The state of a field on one side of a diff."""

    field_type: str
    required: bool = False
    description: str | None = None
    complex: bool = False


@dataclass(frozen=True, slots=True)
class FieldDiff:
    """One detected change at a specific field path.

    ``model_level`` marks the synthetic diffs emitted when a whole model was
    added or removed between snapshots.
    """

    path: tuple[str, ...]
    change_kind: ChangeKind
    severity: Severity
    message: str
    before: FieldSnapshot | None = None
    after: FieldSnapshot | None = None
    model_level: bool = False

    @property
    def field_name(self) -> str:
        return self.path[-1] if self.path else ""

    @property
    def dotted_path(self) -> str:
        return ".".join(self.path)


@dataclass(frozen=True, slots=True)
class DiffSummary:
    """Severity tally for a set of field diffs."""

    breaking: int = 0
    minor: int = 0
    patch: int = 0
    total: int = 0


@dataclass(frozen=True, slots=True)
class DtoDiff:
    """All field diffs for one named model between two versions."""

    dto_name: str
    fields: tuple[FieldDiff, ...] = ()
    summary: DiffSummary = field(default_factory=DiffSummary)


@dataclass(frozen=True, slots=True)
class BreakingChange:
    """A categorized breaking change, addressed by a dotted field path."""

    field_path: str
    category: BreakingChangeCategory
    message: str
    diff: FieldDiff


@dataclass(frozen=True, slots=True)
class BreakingChangeSummary:
    """Cross-model aggregation of diffs with recommendations."""

    total_breaking: int = 0
    total_minor: int = 0
    total_patch: int = 0
    affected_dtos: tuple[str, ...] = ()
    breaking_changes: tuple[FieldDiff, ...] = ()
    categories: dict[BreakingChangeCategory, int] = field(default_factory=dict)
    recommendations: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DeploymentVerdict:
    """Whether a set of diffs is safe to deploy."""

    safe: bool
    breaking_count: int = 0
    reason: str | None = None
