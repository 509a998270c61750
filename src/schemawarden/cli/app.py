"""Typer CLI for SchemaWarden."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape

from schemawarden.config import SchemaWardenConfig
from schemawarden.models.enums import Severity

app = typer.Typer(
    name="schemawarden",
    help="Schema evolution and dependency analysis for HTTP APIs.",
    no_args_is_help=True,
)
console = Console(stderr=True)

_SEVERITY_STYLES = {
    Severity.BREAKING: "red",
    Severity.MINOR: "yellow",
    Severity.PATCH: "dim",
}


def _config() -> SchemaWardenConfig:
    return SchemaWardenConfig.load()


def _load(path: Path, config: SchemaWardenConfig):
    from schemawarden.core.snapshot import load_input

    try:
        return load_input(path, config)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Schema evolution and dependency analysis for HTTP APIs."""
    from schemawarden.log import setup_logging

    setup_logging(logging.DEBUG if verbose else _config().logging.level)


@app.command()
def extract(
    path: Path,
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Write snapshot to file")
    ] = None,
    name: Annotated[Optional[str], typer.Option("--name", help="Snapshot name")] = None,
) -> None:
    """Extract endpoints and models from a source directory or snapshot file."""
    from rich.table import Table

    from schemawarden.core.scanner import compute_snapshot_hash
    from schemawarden.models.schema import Snapshot

    config = _config()
    snapshot = _load(path, config)
    if name:
        snapshot = Snapshot(name=name, endpoints=snapshot.endpoints, models=snapshot.models)

    if output is not None:
        from schemawarden.core.snapshot import dump_snapshot

        try:
            dump_snapshot(snapshot, output)
        except OSError as exc:
            console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(1)
        console.print(
            f"[green]Wrote[/green] {len(snapshot.endpoints)} endpoints, "
            f"{len(snapshot.models)} models to {output} "
            f"(hash: {compute_snapshot_hash(snapshot)[:12]})"
        )
        return

    if not snapshot.endpoints and not snapshot.models:
        console.print("[dim]No endpoints or models found.[/dim]")
        return

    if snapshot.endpoints:
        table = Table(title=f"Endpoints: {snapshot.name}")
        table.add_column("Method", style="bold")
        table.add_column("Path")
        table.add_column("Request")
        table.add_column("Response")
        for ep in snapshot.endpoints:
            table.add_row(ep.method, ep.path, ep.request_body or "", ep.response_type or "")
        console.print(table)

    if snapshot.models:
        table = Table(title=f"Models: {snapshot.name}")
        table.add_column("Model", style="bold")
        table.add_column("Fields")
        table.add_column("Required")
        for model in snapshot.models:
            required = sum(1 for fd in model.fields if fd.required)
            table.add_row(model.name, str(model.field_count), str(required))
        console.print(table)


@app.command()
def diff(before: Path, after: Path) -> None:
    """Show field-level schema changes between two snapshots."""
    from schemawarden.core.differ import compare_all_dtos

    config = _config()
    old, new = _load(before, config), _load(after, config)
    diffs = compare_all_dtos(old.models, new.models, max_depth=config.analysis.max_depth)

    if not diffs:
        console.print("[green]No schema changes detected.[/green]")
        return

    for dto_diff in diffs:
        s = dto_diff.summary
        console.print(
            f"[bold]{dto_diff.dto_name}[/bold] "
            f"({s.breaking} breaking, {s.minor} minor, {s.patch} patch)"
        )
        for change in dto_diff.fields:
            style = _SEVERITY_STYLES[change.severity]
            console.print(
                f"  [{style}]{change.severity.value}[/{style}] {escape(change.message)}",
                highlight=False,
            )


@app.command()
def breaking(
    before: Path,
    after: Path,
    report: Annotated[
        bool, typer.Option("--report", help="Print the full plain-text report")
    ] = False,
) -> None:
    """Check for breaking changes; exits 1 when the change set is unsafe to deploy."""
    from schemawarden.core.breaking import (
        detect_snapshot_breaking_changes,
        estimate_impact_level,
        generate_breaking_change_report,
        get_breaking_change_summary,
        is_safe_for_deployment,
    )
    from schemawarden.core.differ import compare_all_dtos

    config = _config()
    old, new = _load(before, config), _load(after, config)
    max_depth = config.analysis.max_depth
    diffs = compare_all_dtos(old.models, new.models, max_depth=max_depth)
    verdict = is_safe_for_deployment(diffs)

    if report:
        console.print(generate_breaking_change_report(diffs), highlight=False, markup=False)
    else:
        summary = get_breaking_change_summary(diffs)
        if summary.total_breaking:
            console.print(
                f"[red bold]{summary.total_breaking} breaking change(s) detected:[/red bold]"
            )
            for change in summary.breaking_changes:
                console.print(f"  [breaking] {change.message}", highlight=False, markup=False)
        else:
            console.print("[green]No breaking changes detected.[/green]")

    endpoint_changes = detect_snapshot_breaking_changes(old, new, max_depth=max_depth)
    for key, changes in endpoint_changes.items():
        console.print(f"[bold]{key}[/bold]")
        for change in changes:
            console.print(f"  {change.field_path}: {change.message}", highlight=False, markup=False)

    console.print(f"Impact level: {estimate_impact_level(diffs).value}")
    if not verdict.safe:
        console.print(f"[red]Not safe to deploy:[/red] {verdict.reason}")
        raise typer.Exit(1)
    console.print("[green]Safe to deploy.[/green]")


@app.command()
def changes(
    before: Path,
    after: Path,
    project: Annotated[str, typer.Option("--project", "-p", help="Project name")] = "api",
) -> None:
    """Summarize endpoints added, deleted or modified between two snapshots."""
    from schemawarden.core.changes import compare_models, compare_versions, generate_change_summary
    from schemawarden.models.enums import VersionChangeKind

    config = _config()
    old, new = _load(before, config), _load(after, config)
    endpoint_changes = compare_versions(new.endpoints, old.endpoints)

    console.print(
        generate_change_summary(endpoint_changes, project, old.name, new.name),
        highlight=False, markup=False,
    )

    model_changes = [
        c for c in compare_models(new.models, old.models)
        if c.kind != VersionChangeKind.UNCHANGED
    ]
    if model_changes:
        console.print("")
        console.print("[bold]Model changes:[/bold]")
        for change in model_changes:
            console.print(f"  {change.kind.value}: {change.name}", highlight=False)


@app.command()
def graph(path: Path) -> None:
    """Show the model and endpoint dependency graph."""
    from rich.table import Table

    from schemawarden.core.graph import build_dependency_graph

    config = _config()
    snapshot = _load(path, config)
    dep_graph = build_dependency_graph(snapshot.models, snapshot.endpoints)
    s = dep_graph.stats

    console.print(
        f"[bold]{s.total_models}[/bold] models, [bold]{s.total_endpoints}[/bold] endpoints, "
        f"[bold]{s.total_edges}[/bold] edges, [bold]{s.isolated_nodes}[/bold] isolated"
    )
    if not dep_graph.edges:
        console.print("[dim]No dependencies found.[/dim]")
        return

    table = Table(title=f"Dependencies: {snapshot.name}")
    table.add_column("Source", style="bold")
    table.add_column("Relation")
    table.add_column("Target")
    for edge in dep_graph.edges:
        table.add_row(edge.source, edge.relation.value, edge.target)
    console.print(table)


@app.command()
def impact(path: Path, model: str) -> None:
    """Show models and endpoints affected if MODEL changes."""
    from schemawarden.core.impact import analyze_impact

    config = _config()
    snapshot = _load(path, config)
    if snapshot.get_model(model) is None:
        console.print(f"[yellow]Model '{model}' not found in {snapshot.name}[/yellow]")
        raise typer.Exit(1)

    analysis = analyze_impact(model, snapshot.models, snapshot.endpoints)
    console.print(f"[bold]Impact of {model}:[/bold] {analysis.impact_level.value}")
    if analysis.direct_dependents:
        console.print(f"  direct: {', '.join(analysis.direct_dependents)}")
    if analysis.indirect_dependents:
        console.print(f"  indirect: {', '.join(analysis.indirect_dependents)}")
    for endpoint in analysis.affected_endpoints:
        console.print(f"  endpoint: {endpoint}", highlight=False)
    if not analysis.affected_models and not analysis.affected_endpoints:
        console.print("  [dim](nothing depends on this model)[/dim]")


@app.command()
def cycles(path: Path) -> None:
    """Detect circular references between models."""
    from schemawarden.core.cycles import detect_cycles

    config = _config()
    snapshot = _load(path, config)
    found = detect_cycles(snapshot.models)

    if not found:
        console.print("[green]No circular references detected.[/green]")
        return

    console.print(f"[yellow]{len(found)} circular reference(s):[/yellow]")
    for cycle in found:
        console.print(f"  {' -> '.join([*cycle, cycle[0]])}", highlight=False)


def main() -> None:
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
