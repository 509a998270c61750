"""FastMCP server factory with 7 MCP tools."""

from __future__ import annotations

from pathlib import Path

from schemawarden.config import SchemaWardenConfig


def create_server(config: SchemaWardenConfig | None = None):
    """Create and return a configured FastMCP server instance."""
    from mcp.server.fastmcp import FastMCP

    mcp = FastMCP(
        "schemawarden",
        instructions=(
            "Schema evolution and dependency analysis for HTTP APIs. "
            "Extracts DTO models and endpoints from source trees, diffs two "
            "snapshots, classifies breaking changes, and answers "
            "'what is affected if this model changes'."
        ),
    )
    _config = config or SchemaWardenConfig.load()

    def _resolve(path: str) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else _config.project_path / candidate

    def _load(path: str):
        from schemawarden.core.snapshot import load_input

        return load_input(_resolve(path), _config)

    @mcp.tool()
    def schemawarden_extract(path: str, limit: int | None = None) -> str:
        """Extract endpoints and models from a source directory or snapshot file.

        Args:
            path: Source directory to scan, or a YAML/JSON snapshot file
            limit: Maximum rows per table (optional, default 50)
        """
        from schemawarden.mcp.formatters import format_snapshot

        try:
            snapshot = _load(path)
            return format_snapshot(snapshot, limit=limit or _config.mcp.default_query_limit)
        except (OSError, ValueError) as exc:
            return f"Error: {exc}"

    @mcp.tool()
    def schemawarden_diff(before: str, after: str) -> str:
        """Field-level schema diff between two snapshots.

        Args:
            before: Older snapshot file or source directory
            after: Newer snapshot file or source directory
        """
        from schemawarden.core.differ import compare_all_dtos
        from schemawarden.mcp.formatters import format_dto_diffs

        try:
            old, new = _load(before), _load(after)
            diffs = compare_all_dtos(
                old.models, new.models, max_depth=_config.analysis.max_depth,
            )
            return format_dto_diffs(diffs)
        except (OSError, ValueError) as exc:
            return f"Error: {exc}"

    @mcp.tool()
    def schemawarden_breaking(before: str, after: str) -> str:
        """Classify breaking changes between two snapshots and give a deployment verdict.

        Args:
            before: Older snapshot file or source directory
            after: Newer snapshot file or source directory
        """
        from schemawarden.core.breaking import (
            detect_snapshot_breaking_changes,
            get_breaking_change_summary,
            is_safe_for_deployment,
        )
        from schemawarden.core.differ import compare_all_dtos
        from schemawarden.mcp.formatters import (
            format_breaking_summary,
            format_endpoint_breaking_changes,
        )

        try:
            old, new = _load(before), _load(after)
            max_depth = _config.analysis.max_depth
            diffs = compare_all_dtos(old.models, new.models, max_depth=max_depth)
            verdict = is_safe_for_deployment(diffs)
            endpoint_changes = detect_snapshot_breaking_changes(old, new, max_depth=max_depth)

            lines = [
                f"**Safe to deploy:** {'yes' if verdict.safe else 'no'}",
                "",
                format_breaking_summary(get_breaking_change_summary(diffs)),
                "",
                "# Endpoints",
                "",
                format_endpoint_breaking_changes(endpoint_changes),
            ]
            return "\n".join(lines)
        except (OSError, ValueError) as exc:
            return f"Error: {exc}"

    @mcp.tool()
    def schemawarden_changes(before: str, after: str, limit: int | None = None) -> str:
        """List endpoints added, deleted or modified between two snapshots.

        Args:
            before: Older snapshot file or source directory
            after: Newer snapshot file or source directory
            limit: Maximum rows to return (optional, default 50)
        """
        from schemawarden.core.changes import calculate_change_stats, compare_versions
        from schemawarden.mcp.formatters import format_version_changes

        try:
            old, new = _load(before), _load(after)
            changes = compare_versions(new.endpoints, old.endpoints)
            return format_version_changes(
                changes,
                calculate_change_stats(changes),
                limit=limit or _config.mcp.default_query_limit,
            )
        except (OSError, ValueError) as exc:
            return f"Error: {exc}"

    @mcp.tool()
    def schemawarden_graph(path: str, limit: int | None = None) -> str:
        """Build the model/endpoint dependency graph.

        Args:
            path: Snapshot file or source directory
            limit: Maximum edges to list (optional, default 50)
        """
        from schemawarden.core.graph import build_dependency_graph
        from schemawarden.mcp.formatters import format_dependency_graph

        try:
            snapshot = _load(path)
            graph = build_dependency_graph(snapshot.models, snapshot.endpoints)
            return format_dependency_graph(graph, limit=limit or _config.mcp.default_query_limit)
        except (OSError, ValueError) as exc:
            return f"Error: {exc}"

    @mcp.tool()
    def schemawarden_impact(path: str, model: str) -> str:
        """Find models and endpoints affected if a model changes.

        Args:
            path: Snapshot file or source directory
            model: Name of the model that changes
        """
        from schemawarden.core.impact import analyze_impact
        from schemawarden.mcp.formatters import format_impact

        try:
            snapshot = _load(path)
            if snapshot.get_model(model) is None:
                return f"Model '{model}' not found in {snapshot.name}."
            return format_impact(analyze_impact(model, snapshot.models, snapshot.endpoints))
        except (OSError, ValueError) as exc:
            return f"Error: {exc}"

    @mcp.tool()
    def schemawarden_cycles(path: str) -> str:
        """Detect circular references between models.

        Args:
            path: Snapshot file or source directory
        """
        from schemawarden.core.cycles import detect_cycles
        from schemawarden.mcp.formatters import format_cycles

        try:
            snapshot = _load(path)
            return format_cycles(detect_cycles(snapshot.models))
        except (OSError, ValueError) as exc:
            return f"Error: {exc}"

    return mcp


def main() -> None:
    """Entry point for schemawarden-mcp (stdio transport)."""
    from schemawarden.log import setup_logging

    config = SchemaWardenConfig.load()
    setup_logging(config.logging.level)
    server = create_server(config)
    server.run()


if __name__ == "__main__":
    main()
