"""Dependency graph builder: model references and endpoint bodies as a node/edge graph."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from schemawarden.core.differ import MAX_DEPTH
from schemawarden.core.types import extract_base_type, is_primitive_type
from schemawarden.models.enums import NodeType, RelationType
from schemawarden.models.graph import DependencyGraph, GraphEdge, GraphNode, GraphStats
from schemawarden.models.schema import EndpointDescriptor, FieldDescriptor, ModelDescriptor

logger = logging.getLogger(__name__)


def model_node_id(name: str) -> str:
    return f"model-{name}"


def endpoint_node_id(endpoint: EndpointDescriptor) -> str:
    return f"endpoint-{endpoint.id or endpoint.key}"


def extract_referenced_models(
    fields: Sequence[FieldDescriptor],
    max_depth: int = MAX_DEPTH,
) -> list[str]:
    """Collect non-primitive base types named anywhere in a field tree.

    Order is first-seen, without duplicates. Nesting deeper than
    ``max_depth`` is not walked.
    """
    references: dict[str, None] = {}

    def walk(items: Sequence[FieldDescriptor], depth: int) -> None:
        if depth > max_depth:
            logger.debug("Reference scan truncated at depth %d", max_depth)
            return
        for fd in items:
            if not fd.field_type:
                continue
            base = extract_base_type(fd.field_type)
            if base and not is_primitive_type(base):
                references.setdefault(base, None)
            if fd.ref_fields:
                walk(fd.ref_fields, depth + 1)

    walk(fields, 0)
    return list(references)


def _model_references(
    fields: Sequence[FieldDescriptor],
    names: set[str],
    max_depth: int,
) -> list[str]:
    """Known models named by ``fields``, without walking into them.

    A field whose base type is a known model contributes that model only;
    its resolved ``ref_fields`` belong to the model's own entry. Nested
    fields of any other type are still walked.
    """
    references: dict[str, None] = {}

    def walk(items: Sequence[FieldDescriptor], depth: int) -> None:
        if depth > max_depth:
            return
        for fd in items:
            base = extract_base_type(fd.field_type)
            if base in names:
                references.setdefault(base, None)
            elif fd.ref_fields:
                walk(fd.ref_fields, depth + 1)

    walk(fields, 0)
    return list(references)


def build_model_dependency_map(
    models: Sequence[ModelDescriptor],
) -> dict[str, tuple[str, ...]]:
    """Map each model to the known models its fields reference directly.

    Resolved ``ref_fields`` are not followed past a known model, so every
    edge is one hop and a cycle is seen only through the models on it.
    """
    names = {model.name for model in models}
    return {
        model.name: tuple(_model_references(model.fields, names, MAX_DEPTH))
        for model in models
    }


def build_endpoint_dependency_map(
    endpoints: Sequence[EndpointDescriptor],
) -> dict[str, dict[str, str]]:
    """Map endpoint ids to the base types of their request and response bodies.

    Endpoints with neither body are omitted. Types are not checked against
    any model set.
    """
    result: dict[str, dict[str, str]] = {}
    for endpoint in endpoints:
        deps: dict[str, str] = {}
        if endpoint.request_body:
            deps["request"] = extract_base_type(endpoint.request_body)
        if endpoint.response_type:
            deps["response"] = extract_base_type(endpoint.response_type)
        if deps:
            result[endpoint.id or endpoint.key] = deps
    return result


def build_dependency_graph(
    models: Sequence[ModelDescriptor],
    endpoints: Sequence[EndpointDescriptor],
) -> DependencyGraph:
    """Build the full dependency graph of models and endpoints.

    Emits one node per model and per endpoint, ``reference`` edges between
    models, and ``request``/``response`` edges from endpoints to the models
    their bodies name. The model adjacency is returned on the graph for
    reuse by impact analysis and cycle detection.
    """
    nodes: list[GraphNode] = []
    edges: list[GraphEdge] = []
    connected: set[str] = set()

    for model in models:
        nodes.append(GraphNode(
            id=model_node_id(model.name),
            node_type=NodeType.MODEL,
            label=model.name,
            name=model.name,
            field_count=len(model.fields) or model.field_count or 0,
        ))

    for endpoint in endpoints:
        nodes.append(GraphNode(
            id=endpoint_node_id(endpoint),
            node_type=NodeType.ENDPOINT,
            label=f"{endpoint.method} {endpoint.path}",
            name=endpoint.method_name or endpoint.path,
            method=endpoint.method,
            path=endpoint.path,
        ))

    model_deps = build_model_dependency_map(models)
    for model_name, deps in model_deps.items():
        source = model_node_id(model_name)
        for dep in deps:
            target = model_node_id(dep)
            edges.append(GraphEdge(
                id=f"{source}->{target}",
                source=source,
                target=target,
                label="references",
                relation=RelationType.REFERENCE,
            ))
            connected.update((source, target))

    names = {model.name for model in models}
    for endpoint in endpoints:
        source = endpoint_node_id(endpoint)
        sides = (
            (endpoint.request_body, RelationType.REQUEST, "req"),
            (endpoint.response_type, RelationType.RESPONSE, "res"),
        )
        for type_name, relation, tag in sides:
            if not type_name:
                continue
            base = extract_base_type(type_name)
            if base not in names:
                continue
            target = model_node_id(base)
            edges.append(GraphEdge(
                id=f"{source}->{tag}-{target}",
                source=source,
                target=target,
                label=relation.value,
                relation=relation,
                required=True,
            ))
            connected.update((source, target))

    stats = GraphStats(
        total_models=len(models),
        total_endpoints=len(endpoints),
        total_edges=len(edges),
        isolated_nodes=sum(1 for node in nodes if node.id not in connected),
    )
    logger.debug(
        "Built graph: %d nodes, %d edges, %d isolated",
        len(nodes), len(edges), stats.isolated_nodes,
    )
    return DependencyGraph(
        nodes=tuple(nodes), edges=tuple(edges), stats=stats, model_deps=model_deps,
    )
