"""Circular reference detection over the model dependency graph."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from schemawarden.core.graph import build_model_dependency_map
from schemawarden.models.schema import ModelDescriptor

_KEY_SEPARATOR = "->"


def normalize_cycle(cycle: Sequence[str]) -> list[str]:
    """Rotate a cycle so it starts at its lexicographically smallest member.

    ``["B", "C", "A"]`` -> ``["A", "B", "C"]``.
    """
    if not cycle:
        return []
    start = min(range(len(cycle)), key=lambda i: cycle[i])
    return [*cycle[start:], *cycle[:start]]


def detect_cycles(
    models: Sequence[ModelDescriptor],
    model_deps: Mapping[str, Sequence[str]] | None = None,
) -> list[list[str]]:
    """Return each distinct reference cycle once, in canonical rotation.

    Depth-first search from every model with an explicit stack, so long
    reference chains never hit the interpreter's recursion limit. A model
    fully explored from one root is not re-entered from another.
    """
    if model_deps is None:
        model_deps = build_model_dependency_map(models)

    visited: set[str] = set()
    seen: dict[str, list[str]] = {}

    for model in models:
        root = model.name
        if root in visited:
            continue

        path: list[str] = [root]
        on_path: set[str] = {root}
        visited.add(root)
        # Each frame is (model, index of the next dependency to try).
        stack: list[tuple[str, int]] = [(root, 0)]

        while stack:
            current, idx = stack[-1]
            deps = model_deps.get(current, ())
            if idx >= len(deps):
                stack.pop()
                path.pop()
                on_path.discard(current)
                continue

            stack[-1] = (current, idx + 1)
            dep = deps[idx]

            if dep in on_path:
                cycle = normalize_cycle(path[path.index(dep):])
                seen.setdefault(_KEY_SEPARATOR.join(cycle), cycle)
                continue
            if dep in visited:
                continue

            visited.add(dep)
            on_path.add(dep)
            path.append(dep)
            stack.append((dep, 0))

    return list(seen.values())
