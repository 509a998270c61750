"""Markdown formatters for LLM consumption."""

from __future__ import annotations

from schemawarden.models.changes import ChangeStats, EndpointChange
from schemawarden.models.diff import BreakingChange, BreakingChangeSummary, DtoDiff
from schemawarden.models.enums import VersionChangeKind
from schemawarden.models.graph import DependencyGraph, ImpactAnalysis
from schemawarden.models.schema import Snapshot


def format_snapshot(snapshot: Snapshot, limit: int | None = None) -> str:
    """Format a snapshot's endpoints and models as markdown tables."""
    lines = [
        f"# Snapshot: {snapshot.name}",
        f"**Endpoints:** {len(snapshot.endpoints)}  **Models:** {len(snapshot.models)}",
        "",
        "## Endpoints",
        "",
    ]

    endpoints = snapshot.endpoints[:limit] if limit else snapshot.endpoints
    if endpoints:
        lines.append("| Method | Path | Request | Response | Summary |")
        lines.append("|--------|------|---------|----------|---------|")
        for ep in endpoints:
            lines.append(
                f"| {ep.method} | {ep.path} | {ep.request_body or ''} | "
                f"{ep.response_type or ''} | {ep.summary} |"
            )
    else:
        lines.append("*No endpoints found.*")
    lines.append("")

    lines.append("## Models")
    lines.append("")
    models = snapshot.models[:limit] if limit else snapshot.models
    if models:
        lines.append("| Model | Fields | Required |")
        lines.append("|-------|--------|----------|")
        for model in models:
            required = sum(1 for fd in model.fields if fd.required)
            lines.append(f"| {model.name} | {model.field_count} | {required} |")
    else:
        lines.append("*No models found.*")

    return "\n".join(lines)


def format_dto_diffs(diffs: list[DtoDiff]) -> str:
    """Format DTO diffs as severity-tagged lists, one section per model."""
    if not diffs:
        return "*No schema changes detected.*"

    lines: list[str] = []
    for dto_diff in diffs:
        s = dto_diff.summary
        lines.append(
            f"## {dto_diff.dto_name} "
            f"({s.breaking} breaking, {s.minor} minor, {s.patch} patch)"
        )
        for change in dto_diff.fields:
            lines.append(f"- [{change.severity.value.upper()}] `{change.dotted_path}`: {change.message}")
        lines.append("")

    return "\n".join(lines).rstrip()


def format_breaking_summary(summary: BreakingChangeSummary) -> str:
    """Format a cross-model breaking change summary with recommendations."""
    if summary.total_breaking == 0:
        return (
            "*No breaking changes detected. Safe to deploy.*\n\n"
            f"Minor: {summary.total_minor}, Patch: {summary.total_patch}"
        )

    lines = [
        "# Breaking Changes Detected",
        f"**Breaking:** {summary.total_breaking}  "
        f"**Minor:** {summary.total_minor}  **Patch:** {summary.total_patch}",
        f"**Affected DTOs:** {', '.join(summary.affected_dtos)}",
        "",
        "## Categories",
        "",
    ]
    for category, count in summary.categories.items():
        if count:
            lines.append(f"- {category.value}: {count}")
    lines.append("")

    lines.append("## Changes")
    lines.append("")
    for change in summary.breaking_changes:
        lines.append(f"- `{change.dotted_path}`: {change.message}")

    if summary.recommendations:
        lines.append("")
        lines.append("## Recommendations")
        lines.append("")
        for idx, recommendation in enumerate(summary.recommendations, start=1):
            lines.append(f"{idx}. {recommendation}")

    return "\n".join(lines)


def format_endpoint_breaking_changes(changes: dict[str, list[BreakingChange]]) -> str:
    """Format per-endpoint breaking changes."""
    if not changes:
        return "*No endpoint breaking changes detected.*"

    lines: list[str] = []
    for key, items in changes.items():
        lines.append(f"**{key}**")
        for change in items:
            lines.append(f"- [{change.category.value}] `{change.field_path}`: {change.message}")
        lines.append("")

    return "\n".join(lines).rstrip()


def format_dependency_graph(graph: DependencyGraph, limit: int | None = None) -> str:
    """Format a dependency graph as stats plus an edge table."""
    s = graph.stats
    lines = [
        "# Dependency Graph",
        f"**Models:** {s.total_models}  **Endpoints:** {s.total_endpoints}  "
        f"**Edges:** {s.total_edges}  **Isolated:** {s.isolated_nodes}",
        "",
    ]

    if not graph.edges:
        lines.append("*No dependencies found.*")
        return "\n".join(lines)

    edges = graph.edges[:limit] if limit else graph.edges
    lines.append("| Source | Relation | Target |")
    lines.append("|--------|----------|--------|")
    for edge in edges:
        lines.append(f"| {edge.source} | {edge.relation.value} | {edge.target} |")
    if len(edges) < len(graph.edges):
        lines.append("")
        lines.append(f"*... and {len(graph.edges) - len(edges)} more edges.*")

    return "\n".join(lines)


def format_impact(analysis: ImpactAnalysis) -> str:
    """Format an impact analysis."""
    lines = [
        f"# Impact: {analysis.source_model}",
        f"**Impact level:** {analysis.impact_level.value.upper()}",
        f"**Affected models:** {len(analysis.affected_models)}  "
        f"**Affected endpoints:** {analysis.endpoint_count}",
        "",
    ]

    if not analysis.affected_models and not analysis.affected_endpoints:
        lines.append("*Nothing depends on this model.*")
        return "\n".join(lines)

    if analysis.direct_dependents:
        lines.append(f"**Direct dependents:** {', '.join(analysis.direct_dependents)}")
    if analysis.indirect_dependents:
        lines.append(f"**Indirect dependents:** {', '.join(analysis.indirect_dependents)}")
    if analysis.affected_endpoints:
        lines.append("")
        lines.append("## Endpoints")
        lines.append("")
        for endpoint in analysis.affected_endpoints:
            lines.append(f"- {endpoint}")

    return "\n".join(lines)


def format_cycles(cycles: list[list[str]]) -> str:
    """Format reference cycles, one per line."""
    if not cycles:
        return "*No circular references detected.*"

    lines = [f"**{len(cycles)} circular reference(s):**", ""]
    for cycle in cycles:
        lines.append(f"- {' -> '.join([*cycle, cycle[0]])}")
    return "\n".join(lines)


def format_version_changes(
    changes: list[EndpointChange],
    stats: ChangeStats,
    limit: int | None = None,
) -> str:
    """Format endpoint version changes as a markdown table."""
    lines = [
        f"**Added:** {stats.added}  **Deleted:** {stats.deleted}  "
        f"**Modified:** {stats.modified}  **Unchanged:** {stats.unchanged}  "
        f"**Change rate:** {stats.change_rate}%",
        "",
    ]

    significant = [c for c in changes if c.kind != VersionChangeKind.UNCHANGED]
    if not significant:
        lines.append("*No endpoint changes detected.*")
        return "\n".join(lines)

    shown = significant[:limit] if limit else significant
    lines.append("| Change | Method | Path | Details |")
    lines.append("|--------|--------|------|---------|")
    for change in shown:
        details = ", ".join(a.attribute for a in change.attribute_changes)
        lines.append(f"| {change.kind.value} | {change.method} | {change.path} | {details} |")

    return "\n".join(lines)
