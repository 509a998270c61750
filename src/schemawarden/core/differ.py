"""Schema diff engine: recursive field-tree comparison with severity classification."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from schemawarden.core.types import normalize_type
from schemawarden.models.diff import DiffSummary, DtoDiff, FieldDiff, FieldSnapshot
from schemawarden.models.enums import ChangeKind, Severity
from schemawarden.models.schema import FieldDescriptor, ModelDescriptor

logger = logging.getLogger(__name__)

MAX_DEPTH = 10

# Directed pairs (from, to) that widen safely; everything else is incompatible.
_COMPATIBLE_TYPE_CHANGES: dict[str, frozenset[str]] = {
    "integer": frozenset({"number", "string"}),
    "number": frozenset({"string"}),
}


def is_type_change_breaking(from_type: str | None, to_type: str | None) -> bool:
    """Check if changing ``from_type`` to ``to_type`` breaks existing clients."""
    source = normalize_type(from_type)
    target = normalize_type(to_type)
    if source == target:
        return False
    return target not in _COMPATIBLE_TYPE_CHANGES.get(source, frozenset())


def get_change_severity(
    change_kind: ChangeKind,
    before: FieldSnapshot | None,
    after: FieldSnapshot | None,
) -> Severity:
    """Classify a field change.

    Pure function of the change kind and the before/after snapshots:

    - ADD: breaking if the new field is required, else minor
    - DELETE: breaking if the removed field was required, else minor
    - TYPE_CHANGE: breaking if the types are incompatible or the field
      switched between simple and complex, minor for a compatible widening
    - MODIFY: breaking if made required, minor if made optional, patch
      when only the description changed
    """
    if change_kind == ChangeKind.ADD:
        return Severity.BREAKING if after is not None and after.required else Severity.MINOR

    if change_kind == ChangeKind.DELETE:
        return Severity.BREAKING if before is not None and before.required else Severity.MINOR

    if change_kind == ChangeKind.TYPE_CHANGE:
        if before is None or after is None:
            return Severity.BREAKING
        if before.complex != after.complex:
            return Severity.BREAKING
        if is_type_change_breaking(before.field_type, after.field_type):
            return Severity.BREAKING
        return Severity.MINOR

    # MODIFY
    before_required = before.required if before is not None else False
    after_required = after.required if after is not None else False
    if not before_required and after_required:
        return Severity.BREAKING
    if before_required and not after_required:
        return Severity.MINOR
    return Severity.PATCH


def _snapshot(fd: FieldDescriptor) -> FieldSnapshot:
    return FieldSnapshot(
        field_type=fd.field_type,
        required=fd.required,
        description=fd.description,
        complex=fd.complex,
    )


def _change_message(
    change_kind: ChangeKind,
    path: tuple[str, ...],
    severity: Severity,
    before: FieldSnapshot | None,
    after: FieldSnapshot | None,
) -> str:
    """Create a human-readable message for a field change."""
    path_str = ".".join(path)

    if change_kind == ChangeKind.ADD:
        if after is not None and after.required:
            return f"Required field '{path_str}' was added (BREAKING: breaks existing clients)"
        return f"Optional field '{path_str}' was added"

    if change_kind == ChangeKind.DELETE:
        if before is not None and before.required:
            return f"Required field '{path_str}' was removed (BREAKING)"
        return f"Optional field '{path_str}' was removed"

    if change_kind == ChangeKind.TYPE_CHANGE and before is not None and after is not None:
        if before.complex != after.complex:
            old_shape = "complex" if before.complex else "simple"
            new_shape = "complex" if after.complex else "simple"
            return f"Field '{path_str}' structure changed ({old_shape} -> {new_shape})"
        suffix = " (BREAKING: incompatible types)" if severity == Severity.BREAKING else ""
        return (
            f"Field '{path_str}' type changed from "
            f"{before.field_type} to {after.field_type}{suffix}"
        )

    changes: list[str] = []
    if before is not None and after is not None:
        if before.required != after.required:
            changes.append("made required (BREAKING)" if after.required else "made optional")
        if before.description != after.description:
            changes.append("description updated")
    return f"Field '{path_str}' {', '.join(changes) or 'changed'}"


def _make_diff(
    change_kind: ChangeKind,
    path: tuple[str, ...],
    before: FieldSnapshot | None,
    after: FieldSnapshot | None,
) -> FieldDiff:
    severity = get_change_severity(change_kind, before, after)
    return FieldDiff(
        path=path,
        change_kind=change_kind,
        severity=severity,
        message=_change_message(change_kind, path, severity, before, after),
        before=before,
        after=after,
    )


def compare_fields(
    before: Sequence[FieldDescriptor] | None,
    after: Sequence[FieldDescriptor] | None,
    path: tuple[str, ...] = (),
    depth: int = 0,
    max_depth: int = MAX_DEPTH,
) -> list[FieldDiff]:
    """Recursively compare two field lists and return every field-level diff.

    Field names are visited in first-seen order: the ``before`` fields, then
    the fields only present in ``after``. Complex fields are descended into
    with ``depth + 1``; anything nested deeper than ``max_depth`` is logged
    and skipped.
    """
    if depth > max_depth:
        logger.warning(
            "Max recursion depth %d reached at path: %s", max_depth, ".".join(path)
        )
        return []

    before_map = {fd.name: fd for fd in before or ()}
    after_map = {fd.name: fd for fd in after or ()}
    names = list(before_map)
    names.extend(name for name in after_map if name not in before_map)

    diffs: list[FieldDiff] = []
    for name in names:
        old = before_map.get(name)
        new = after_map.get(name)
        current_path = (*path, name)

        if old is None and new is not None:
            diffs.append(_make_diff(ChangeKind.ADD, current_path, None, _snapshot(new)))
            if new.complex and new.ref_fields:
                diffs.extend(compare_fields(
                    (), new.ref_fields, current_path, depth + 1, max_depth,
                ))

        elif old is not None and new is None:
            diffs.append(_make_diff(ChangeKind.DELETE, current_path, _snapshot(old), None))
            if old.complex and old.ref_fields:
                diffs.extend(compare_fields(
                    old.ref_fields, (), current_path, depth + 1, max_depth,
                ))

        elif old is not None and new is not None:
            old_snap = _snapshot(old)
            new_snap = _snapshot(new)

            if old.complex != new.complex:
                diffs.append(_make_diff(ChangeKind.TYPE_CHANGE, current_path, old_snap, new_snap))
                continue

            if normalize_type(old.field_type) != normalize_type(new.field_type):
                diffs.append(_make_diff(ChangeKind.TYPE_CHANGE, current_path, old_snap, new_snap))
            elif old.required != new.required or old.description != new.description:
                diffs.append(_make_diff(ChangeKind.MODIFY, current_path, old_snap, new_snap))

            if old.complex and new.complex:
                diffs.extend(compare_fields(
                    old.ref_fields, new.ref_fields, current_path, depth + 1, max_depth,
                ))

    return diffs


def summarize_diffs(diffs: Sequence[FieldDiff]) -> DiffSummary:
    """Tally severities over a list of diffs."""
    return DiffSummary(
        breaking=sum(1 for d in diffs if d.severity == Severity.BREAKING),
        minor=sum(1 for d in diffs if d.severity == Severity.MINOR),
        patch=sum(1 for d in diffs if d.severity == Severity.PATCH),
        total=len(diffs),
    )


def compare_dto_fields(
    before: ModelDescriptor,
    after: ModelDescriptor,
    max_depth: int = MAX_DEPTH,
) -> DtoDiff:
    """Compare two versions of the same model."""
    fields = compare_fields(before.fields, after.fields, max_depth=max_depth)
    return DtoDiff(dto_name=after.name, fields=tuple(fields), summary=summarize_diffs(fields))


def compare_all_dtos(
    before_set: Sequence[ModelDescriptor],
    after_set: Sequence[ModelDescriptor],
    max_depth: int = MAX_DEPTH,
) -> list[DtoDiff]:
    """Compare two model collections, matched by name.

    Models present in both versions are included only when they changed.
    A model only in ``after_set`` yields one minor "added" diff, a model only
    in ``before_set`` one breaking "removed" diff. Sorted by model name.
    """
    before_map = {model.name: model for model in before_set}
    after_map = {model.name: model for model in after_set}

    diffs: list[DtoDiff] = []
    for name in before_map.keys() | after_map.keys():
        old = before_map.get(name)
        new = after_map.get(name)

        if old is not None and new is not None:
            dto_diff = compare_dto_fields(old, new, max_depth=max_depth)
            if dto_diff.fields:
                diffs.append(dto_diff)

        elif new is not None:
            added = FieldDiff(
                path=(name,),
                change_kind=ChangeKind.ADD,
                severity=Severity.MINOR,
                message=f"New DTO '{name}' was added",
                after=FieldSnapshot(
                    field_type="object", required=False,
                    description=f"New DTO: {name}", complex=True,
                ),
                model_level=True,
            )
            diffs.append(DtoDiff(
                dto_name=name, fields=(added,), summary=DiffSummary(minor=1, total=1),
            ))

        elif old is not None:
            removed = FieldDiff(
                path=(name,),
                change_kind=ChangeKind.DELETE,
                severity=Severity.BREAKING,
                message=f"DTO '{name}' was removed (BREAKING)",
                before=FieldSnapshot(
                    field_type="object", required=True,
                    description=f"Deleted DTO: {name}", complex=True,
                ),
                model_level=True,
            )
            diffs.append(DtoDiff(
                dto_name=name, fields=(removed,), summary=DiffSummary(breaking=1, total=1),
            ))

    return sorted(diffs, key=lambda d: d.dto_name)
