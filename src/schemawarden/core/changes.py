"""Version change detection: which endpoints and models were added, removed or modified."""

from __future__ import annotations

from collections.abc import Sequence

from schemawarden.models.changes import AttributeChange, ChangeStats, EndpointChange, ModelChange
from schemawarden.models.enums import VersionChangeKind
from schemawarden.models.schema import EndpointDescriptor, ModelDescriptor

NOTABLE_CHANGE_LIMIT = 5

# Attributes that make an endpoint MODIFIED. Path and method form the key,
# so they can only differ in get_field_changes when called directly.
_MODIFY_ATTRIBUTES = ("summary", "request_body", "response_type", "class_name", "method_name")
_DETAIL_ATTRIBUTES = (*_MODIFY_ATTRIBUTES, "path", "method")

_SYMBOLS = {
    VersionChangeKind.ADDED: "+",
    VersionChangeKind.DELETED: "-",
    VersionChangeKind.MODIFIED: "~",
}


def endpoint_key(endpoint: EndpointDescriptor) -> str:
    return endpoint.key


def classify_change(
    current: EndpointDescriptor | None,
    previous: EndpointDescriptor | None,
) -> VersionChangeKind:
    """Classify how an endpoint changed between two versions."""
    if current is not None and previous is None:
        return VersionChangeKind.ADDED
    if current is None and previous is not None:
        return VersionChangeKind.DELETED
    if current is None or previous is None:
        return VersionChangeKind.UNCHANGED

    changed = any(
        getattr(current, attr) != getattr(previous, attr) for attr in _MODIFY_ATTRIBUTES
    )
    return VersionChangeKind.MODIFIED if changed else VersionChangeKind.UNCHANGED


def get_field_changes(
    current: EndpointDescriptor,
    previous: EndpointDescriptor,
) -> list[AttributeChange]:
    """List every descriptive attribute that differs between two endpoint versions."""
    return [
        AttributeChange(
            attribute=attr,
            before=getattr(previous, attr),
            after=getattr(current, attr),
        )
        for attr in _DETAIL_ATTRIBUTES
        if getattr(current, attr) != getattr(previous, attr)
    ]


def compare_versions(
    current: Sequence[EndpointDescriptor] | None,
    previous: Sequence[EndpointDescriptor] | None,
) -> list[EndpointChange]:
    """Pair endpoints by ``METHOD path`` and classify each; sorted by path."""
    current_map = {endpoint_key(ep): ep for ep in current or ()}
    previous_map = {endpoint_key(ep): ep for ep in previous or ()}

    changes: list[EndpointChange] = []
    for key in current_map.keys() | previous_map.keys():
        cur = current_map.get(key)
        prev = previous_map.get(key)
        method, _, path = key.partition(" ")
        attribute_changes = (
            tuple(get_field_changes(cur, prev)) if cur is not None and prev is not None else ()
        )
        changes.append(EndpointChange(
            kind=classify_change(cur, prev),
            method=method,
            path=path,
            current=cur,
            previous=prev,
            attribute_changes=attribute_changes,
        ))

    return sorted(changes, key=lambda c: (c.path, c.method))


def calculate_change_stats(changes: Sequence[EndpointChange]) -> ChangeStats:
    """Count changes by kind; ``change_rate`` is the changed percentage, 1 decimal."""
    if not changes:
        return ChangeStats()

    counts = {kind: 0 for kind in VersionChangeKind}
    for change in changes:
        counts[change.kind] += 1

    total = len(changes)
    changed = total - counts[VersionChangeKind.UNCHANGED]
    return ChangeStats(
        added=counts[VersionChangeKind.ADDED],
        deleted=counts[VersionChangeKind.DELETED],
        modified=counts[VersionChangeKind.MODIFIED],
        unchanged=counts[VersionChangeKind.UNCHANGED],
        total=total,
        change_rate=round(changed / total * 100, 1),
    )


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count > 1 else ''}"


def generate_change_summary(
    changes: Sequence[EndpointChange],
    project: str,
    version_from: str,
    version_to: str,
) -> str:
    """Render a short plain-text digest of endpoint changes between two versions."""
    stats = calculate_change_stats(changes)

    if stats.total == 0:
        return (
            f"[{project}] No endpoints found in comparison between "
            f"{version_from} and {version_to}"
        )

    changed = stats.added + stats.deleted + stats.modified
    if changed == 0:
        return (
            f"[{project}] No changes detected between {version_from} and {version_to} "
            f"({stats.total} endpoints unchanged)"
        )

    lines = [
        f"[{project}] API Changes: {version_from} -> {version_to}",
        "",
        f"Summary: {stats.change_rate}% changed ({changed}/{stats.total})",
    ]
    if stats.added:
        lines.append(f"  + {_plural(stats.added, 'endpoint')} added")
    if stats.deleted:
        lines.append(f"  - {_plural(stats.deleted, 'endpoint')} deleted")
    if stats.modified:
        lines.append(f"  ~ {_plural(stats.modified, 'endpoint')} modified")

    significant = get_significant_changes(changes)
    lines.append("")
    lines.append("Notable changes:")
    for change in significant[:NOTABLE_CHANGE_LIMIT]:
        lines.append(f"  {_SYMBOLS[change.kind]} [{change.method}] {change.path}")
        if change.kind == VersionChangeKind.MODIFIED:
            for attr in change.attribute_changes:
                if attr.attribute == "summary":
                    lines.append(f'      Summary: "{attr.before}" -> "{attr.after}"')

    if len(significant) > NOTABLE_CHANGE_LIMIT:
        lines.append(f"  ... and {len(significant) - NOTABLE_CHANGE_LIMIT} more")

    return "\n".join(lines)


def _field_count(model: ModelDescriptor) -> int:
    return model.field_count or len(model.fields)


def compare_models(
    current: Sequence[ModelDescriptor] | None,
    previous: Sequence[ModelDescriptor] | None,
) -> list[ModelChange]:
    """Coarse model comparison by field count; sorted by name.

    Use ``compare_all_dtos`` for a field-level diff.
    """
    current_map = {model.name: model for model in current or ()}
    previous_map = {model.name: model for model in previous or ()}

    changes: list[ModelChange] = []
    for name in current_map.keys() | previous_map.keys():
        cur = current_map.get(name)
        prev = previous_map.get(name)
        kind = VersionChangeKind.UNCHANGED
        attribute_changes: tuple[AttributeChange, ...] = ()

        if cur is not None and prev is None:
            kind = VersionChangeKind.ADDED
        elif cur is None and prev is not None:
            kind = VersionChangeKind.DELETED
        elif cur is not None and prev is not None:
            before, after = _field_count(prev), _field_count(cur)
            if before != after:
                kind = VersionChangeKind.MODIFIED
                attribute_changes = (AttributeChange("field_count", before, after),)

        changes.append(ModelChange(
            kind=kind, name=name, current=cur, previous=prev,
            attribute_changes=attribute_changes,
        ))

    return sorted(changes, key=lambda c: c.name)


def get_significant_changes(changes: Sequence[EndpointChange]) -> list[EndpointChange]:
    """Drop UNCHANGED entries."""
    return [c for c in changes if c.kind != VersionChangeKind.UNCHANGED]


def group_changes_by_type(
    changes: Sequence[EndpointChange],
) -> dict[VersionChangeKind, list[EndpointChange]]:
    grouped: dict[VersionChangeKind, list[EndpointChange]] = {kind: [] for kind in VersionChangeKind}
    for change in changes:
        grouped[change.kind].append(change)
    return grouped
