"""Impact analysis: who is affected when a model changes."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Mapping, Sequence

from schemawarden.core.graph import build_model_dependency_map
from schemawarden.core.types import extract_base_type
from schemawarden.models.enums import ImpactLevel
from schemawarden.models.graph import ImpactAnalysis
from schemawarden.models.schema import EndpointDescriptor, ModelDescriptor

logger = logging.getLogger(__name__)


def build_reverse_dependency_map(
    model_deps: Mapping[str, Sequence[str]],
) -> dict[str, list[str]]:
    """Invert a model adjacency: referenced model -> models referencing it."""
    reverse: dict[str, list[str]] = {}
    for model_name, deps in model_deps.items():
        for dep in deps:
            dependents = reverse.setdefault(dep, [])
            if model_name not in dependents:
                dependents.append(model_name)
    return reverse


def _impact_level(affected_models: int, affected_endpoints: int) -> ImpactLevel:
    combined = affected_models + affected_endpoints
    if combined >= 10 or affected_endpoints >= 5:
        return ImpactLevel.CRITICAL
    if combined >= 5 or affected_endpoints >= 3:
        return ImpactLevel.HIGH
    if combined >= 2:
        return ImpactLevel.MEDIUM
    return ImpactLevel.LOW


def analyze_impact(
    target: str,
    models: Sequence[ModelDescriptor],
    endpoints: Sequence[EndpointDescriptor],
    model_deps: Mapping[str, Sequence[str]] | None = None,
) -> ImpactAnalysis:
    """Find every model and endpoint affected by a change to ``target``.

    Walks the reverse dependency graph breadth-first. Dependents found one
    hop from ``target`` are direct, anything further is indirect. An
    endpoint is affected when its request or response base type is
    ``target`` or any affected model.
    """
    if model_deps is None:
        model_deps = build_model_dependency_map(models)
    if target not in model_deps:
        logger.warning("Impact target '%s' is not a known model", target)

    reverse = build_reverse_dependency_map(model_deps)

    affected: list[str] = []
    direct: list[str] = []
    indirect: list[str] = []
    visited: set[str] = set()
    queue: deque[tuple[str, int]] = deque([(target, 0)])

    while queue:
        model, depth = queue.popleft()
        if model in visited:
            continue
        visited.add(model)

        for dependent in reverse.get(model, ()):
            if dependent in visited or dependent in affected:
                continue
            affected.append(dependent)
            (direct if depth == 0 else indirect).append(dependent)
            queue.append((dependent, depth + 1))

    reached = {target, *affected}
    affected_endpoints: list[str] = []
    for endpoint in endpoints:
        request = extract_base_type(endpoint.request_body) if endpoint.request_body else None
        response = extract_base_type(endpoint.response_type) if endpoint.response_type else None
        if request in reached or response in reached:
            affected_endpoints.append(f"{endpoint.method} {endpoint.path}")

    return ImpactAnalysis(
        source_model=target,
        affected_models=tuple(affected),
        affected_endpoints=tuple(affected_endpoints),
        impact_level=_impact_level(len(affected), len(affected_endpoints)),
        direct_dependents=tuple(direct),
        indirect_dependents=tuple(indirect),
    )
