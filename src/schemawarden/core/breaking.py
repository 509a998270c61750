"""Breaking-change classifier: categories, summaries and deployment verdicts.

The classifier's ``is_breaking_change`` predicate follows the same policy as
``get_change_severity``: deleting an optional field and widening a type
compatibly are not breaking. ``severity == BREAKING`` and "has a category"
are therefore equivalent signals.
"""

from __future__ import annotations

from collections.abc import Sequence

from schemawarden.core.differ import MAX_DEPTH, compare_dto_fields, is_type_change_breaking
from schemawarden.core.types import extract_base_type
from schemawarden.models.diff import (
    BreakingChange,
    BreakingChangeSummary,
    DeploymentVerdict,
    DiffSummary,
    DtoDiff,
    FieldDiff,
)
from schemawarden.models.enums import BreakingChangeCategory, ChangeKind, ImpactLevel, Severity
from schemawarden.models.schema import (
    EndpointContract,
    EndpointDescriptor,
    ModelDescriptor,
    Snapshot,
)

_RULE = "=" * 51
_THIN_RULE = "-" * 51


def is_breaking_change(change: FieldDiff) -> bool:
    """Decide whether a change breaks existing clients under strict contract rules."""
    before, after = change.before, change.after

    if change.change_kind == ChangeKind.ADD:
        return after is not None and after.required

    if change.change_kind == ChangeKind.DELETE:
        return before is not None and before.required

    if change.change_kind == ChangeKind.TYPE_CHANGE:
        if before is None or after is None or before.complex != after.complex:
            return True
        return is_type_change_breaking(before.field_type, after.field_type)

    if change.change_kind == ChangeKind.MODIFY:
        return (
            before is not None and after is not None
            and not before.required and after.required
        )

    return False


def categorize_breaking_change(change: FieldDiff) -> BreakingChangeCategory | None:
    """Map a breaking change to its reporting category; None if not breaking."""
    if not is_breaking_change(change):
        return None

    if change.change_kind == ChangeKind.ADD:
        return BreakingChangeCategory.REQUIRED_FIELD_ADDED
    if change.change_kind == ChangeKind.DELETE:
        if change.model_level:
            return BreakingChangeCategory.DTO_REMOVED
        return BreakingChangeCategory.REQUIRED_FIELD_REMOVED
    if change.change_kind == ChangeKind.TYPE_CHANGE:
        return BreakingChangeCategory.TYPE_INCOMPATIBLE
    if change.change_kind == ChangeKind.MODIFY:
        return BreakingChangeCategory.FIELD_MADE_REQUIRED
    return None


def format_breaking_change_message(change: FieldDiff, field_path: str | None = None) -> str:
    """Format a change as a human-readable message, category-specific when breaking."""
    category = categorize_breaking_change(change)
    path = field_path or change.dotted_path

    if category is None:
        return change.message

    if category == BreakingChangeCategory.REQUIRED_FIELD_REMOVED:
        return (
            f"BREAKING: Required field '{path}' was removed. "
            "Clients expecting this field will fail."
        )
    if category == BreakingChangeCategory.REQUIRED_FIELD_ADDED:
        field_type = change.after.field_type if change.after else "unknown"
        return (
            f"BREAKING: Required field '{path}' ({field_type}) was added. "
            "Existing clients not sending this field will be rejected."
        )
    if category == BreakingChangeCategory.TYPE_INCOMPATIBLE:
        old_type = change.before.field_type if change.before else "unknown"
        new_type = change.after.field_type if change.after else "unknown"
        return (
            f"BREAKING: Field '{path}' type changed from {old_type} to {new_type}. "
            "This may cause data parsing errors."
        )
    if category == BreakingChangeCategory.FIELD_MADE_REQUIRED:
        return (
            f"BREAKING: Field '{path}' is now required (was optional). "
            "Clients not sending this field will be rejected."
        )
    return (
        f"BREAKING: DTO '{path}' was completely removed. "
        "All endpoints using this type will fail."
    )


def _recommendations(
    total_breaking: int, categories: dict[BreakingChangeCategory, int]
) -> list[str]:
    if total_breaking == 0:
        return []

    recommendations = [
        "Consider versioning your API (e.g., /v2/) to maintain backward compatibility",
    ]
    if categories[BreakingChangeCategory.REQUIRED_FIELD_ADDED]:
        recommendations.append(
            "For new required fields, consider making them optional initially "
            "or provide default values"
        )
    if categories[BreakingChangeCategory.REQUIRED_FIELD_REMOVED]:
        recommendations.append(
            "Deprecate fields before removing them. Mark as deprecated in v1, remove in v2"
        )
    if categories[BreakingChangeCategory.TYPE_INCOMPATIBLE]:
        recommendations.append(
            "Type changes should be avoided. Consider adding a new field with the new type"
        )
    if categories[BreakingChangeCategory.FIELD_MADE_REQUIRED]:
        recommendations.append(
            "Making fields required should be done across major versions "
            "with proper client migration notice"
        )
    if categories[BreakingChangeCategory.DTO_REMOVED]:
        recommendations.append(
            "Keep removed DTOs available until every endpoint referencing them is retired"
        )
    recommendations.append(
        "Communicate breaking changes to all API consumers before deployment"
    )
    recommendations.append(
        "Consider a migration period where both old and new APIs are supported"
    )
    return recommendations


def get_breaking_change_summary(diffs: Sequence[DtoDiff]) -> BreakingChangeSummary:
    """Aggregate DTO diffs into totals, categories and recommendations."""
    total_breaking = total_minor = total_patch = 0
    affected: list[str] = []
    breaking: list[FieldDiff] = []
    categories = {category: 0 for category in BreakingChangeCategory}

    for dto_diff in diffs:
        total_breaking += dto_diff.summary.breaking
        total_minor += dto_diff.summary.minor
        total_patch += dto_diff.summary.patch

        if dto_diff.fields:
            affected.append(dto_diff.dto_name)

        for change in dto_diff.fields:
            if change.severity != Severity.BREAKING:
                continue
            breaking.append(change)
            category = categorize_breaking_change(change)
            if category is not None:
                categories[category] += 1

    return BreakingChangeSummary(
        total_breaking=total_breaking,
        total_minor=total_minor,
        total_patch=total_patch,
        affected_dtos=tuple(affected),
        breaking_changes=tuple(breaking),
        categories=categories,
        recommendations=tuple(_recommendations(total_breaking, categories)),
    )


def is_safe_for_deployment(diffs: Sequence[DtoDiff]) -> DeploymentVerdict:
    """A change set is safe to deploy when it contains no breaking change."""
    summary = get_breaking_change_summary(diffs)
    if summary.total_breaking == 0:
        return DeploymentVerdict(safe=True)
    return DeploymentVerdict(
        safe=False,
        breaking_count=summary.total_breaking,
        reason=(
            f"{summary.total_breaking} breaking change(s) detected across "
            f"{len(summary.affected_dtos)} DTO(s)"
        ),
    )


def estimate_impact_level(diffs: Sequence[DtoDiff]) -> ImpactLevel:
    """Estimate impact from breaking-change counts."""
    summary = get_breaking_change_summary(diffs)

    if summary.total_breaking == 0 and summary.total_minor == 0 and summary.total_patch == 0:
        return ImpactLevel.NONE
    if summary.total_breaking >= 10:
        return ImpactLevel.CRITICAL
    if summary.total_breaking >= 5:
        return ImpactLevel.HIGH
    if summary.total_breaking >= 1:
        return ImpactLevel.MEDIUM
    return ImpactLevel.LOW


def get_only_breaking_changes(diffs: Sequence[DtoDiff]) -> list[DtoDiff]:
    """Filter DTO diffs down to their breaking fields, dropping empty ones."""
    result: list[DtoDiff] = []
    for dto_diff in diffs:
        fields = tuple(f for f in dto_diff.fields if f.severity == Severity.BREAKING)
        if fields:
            result.append(DtoDiff(
                dto_name=dto_diff.dto_name,
                fields=fields,
                summary=DiffSummary(breaking=len(fields), total=len(fields)),
            ))
    return result


def generate_breaking_change_report(diffs: Sequence[DtoDiff]) -> str:
    """Render a plain-text breaking change report."""
    summary = get_breaking_change_summary(diffs)

    if summary.total_breaking == 0:
        return "No breaking changes detected. Safe to deploy."

    lines = [
        _RULE,
        "           BREAKING CHANGES DETECTED",
        _RULE,
        "",
        "Summary:",
        f"  Breaking Changes: {summary.total_breaking}",
        f"  Minor Changes: {summary.total_minor}",
        f"  Patch Changes: {summary.total_patch}",
        f"  Affected DTOs: {len(summary.affected_dtos)}",
        "",
        "Breakdown by Category:",
    ]
    for category, count in summary.categories.items():
        if count > 0:
            lines.append(f"  - {category.value.replace('_', ' ')}: {count}")
    lines.append("")

    lines.append("Detailed Changes:")
    lines.append(_THIN_RULE)
    for dto_diff in diffs:
        breaking = [f for f in dto_diff.fields if f.severity == Severity.BREAKING]
        if not breaking:
            continue
        lines.append("")
        lines.append(f"DTO: {dto_diff.dto_name}")
        for change in breaking:
            lines.append(f"  {format_breaking_change_message(change)}")

    if summary.recommendations:
        lines.append("")
        lines.append("Recommendations:")
        lines.append(_THIN_RULE)
        for idx, recommendation in enumerate(summary.recommendations, start=1):
            lines.append(f"{idx}. {recommendation}")

    lines.append("")
    lines.append(_RULE)
    return "\n".join(lines)


def detect_breaking_changes(
    old: EndpointContract,
    new: EndpointContract,
    max_depth: int = MAX_DEPTH,
) -> list[BreakingChange]:
    """Find breaking changes between two versions of one endpoint.

    Request and response bodies are diffed independently; a side is skipped
    when either version lacks that body. Field paths are prefixed with
    ``Request.`` or ``Response.``.
    """
    changes: list[BreakingChange] = []
    sides = (
        ("Request", old.request_body, new.request_body),
        ("Response", old.response_body, new.response_body),
    )

    for prefix, old_body, new_body in sides:
        if old_body is None or new_body is None:
            continue
        dto_diff = compare_dto_fields(old_body, new_body, max_depth=max_depth)
        for change in dto_diff.fields:
            if change.severity != Severity.BREAKING:
                continue
            category = categorize_breaking_change(change)
            if category is None:
                continue
            field_path = f"{prefix}.{change.dotted_path}"
            changes.append(BreakingChange(
                field_path=field_path,
                category=category,
                message=format_breaking_change_message(change, field_path),
                diff=change,
            ))

    return changes


def summarize_breaking_changes(changes: Sequence[BreakingChange]) -> str:
    """Short plain-text digest of endpoint breaking changes, grouped by category."""
    if not changes:
        return "No breaking changes."

    counts: dict[BreakingChangeCategory, int] = {}
    for change in changes:
        counts[change.category] = counts.get(change.category, 0) + 1

    tally = ", ".join(
        f"{count} {category.value.replace('_', ' ').lower()}"
        for category, count in counts.items()
    )
    lines = [f"{len(changes)} breaking change(s): {tally}"]
    lines.extend(f"- {change.field_path}: {change.message}" for change in changes)
    return "\n".join(lines)


def bind_contract(
    endpoint: EndpointDescriptor,
    models: Sequence[ModelDescriptor],
) -> EndpointContract:
    """Resolve an endpoint's body type names against a model collection."""
    by_name = {model.name: model for model in models}
    request = by_name.get(extract_base_type(endpoint.request_body)) if endpoint.request_body else None
    response = (
        by_name.get(extract_base_type(endpoint.response_type))
        if endpoint.response_type else None
    )
    return EndpointContract(
        method=endpoint.method.upper(),
        path=endpoint.path,
        request_body=request,
        response_body=response,
    )


def detect_snapshot_breaking_changes(
    before: Snapshot,
    after: Snapshot,
    max_depth: int = MAX_DEPTH,
) -> dict[str, list[BreakingChange]]:
    """Run endpoint-level detection for every endpoint present in both snapshots.

    Returns only endpoints with at least one breaking change, keyed by
    ``METHOD path`` in sorted order.
    """
    old_map = {ep.key: ep for ep in before.endpoints}
    new_map = {ep.key: ep for ep in after.endpoints}

    result: dict[str, list[BreakingChange]] = {}
    for key in sorted(old_map.keys() & new_map.keys()):
        changes = detect_breaking_changes(
            bind_contract(old_map[key], before.models),
            bind_contract(new_map[key], after.models),
            max_depth=max_depth,
        )
        if changes:
            result[key] = changes
    return result
