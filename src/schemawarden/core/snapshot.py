"""Snapshot files: load and dump models and endpoints as YAML or JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from schemawarden.config import SchemaWardenConfig
from schemawarden.core.extractor import resolve_models
from schemawarden.core.scanner import scan_sources
from schemawarden.core.types import is_complex_type
from schemawarden.models.schema import (
    EndpointDescriptor,
    FieldDescriptor,
    ModelDescriptor,
    Snapshot,
)

logger = logging.getLogger(__name__)


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    """First present, non-None value among ``keys``."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def _field_from_dict(data: Any) -> FieldDescriptor:
    if not isinstance(data, dict) or not data.get("name"):
        raise ValueError(f"Invalid field entry: {data!r}")

    field_type = str(_pick(data, "type", "field_type", default="unknown"))
    complex_flag = _pick(data, "complex", "isComplex", "is_complex")
    children = _pick(data, "ref_fields", "refFields", default=[]) or []
    if not isinstance(children, list):
        raise ValueError(f"Field '{data['name']}' has non-list ref_fields")

    return FieldDescriptor(
        name=str(data["name"]),
        field_type=field_type,
        description=_pick(data, "description"),
        required=bool(_pick(data, "required", "isRequired", "is_required", default=False)),
        complex=is_complex_type(field_type) if complex_flag is None else bool(complex_flag),
        ref_fields=tuple(_field_from_dict(child) for child in children),
    )


def _model_from_dict(data: Any) -> ModelDescriptor:
    if not isinstance(data, dict) or not data.get("name"):
        raise ValueError(f"Invalid model entry: {data!r}")

    fields = data.get("fields") or []
    if not isinstance(fields, list):
        raise ValueError(f"Model '{data['name']}' has non-list fields")

    return ModelDescriptor(
        name=str(data["name"]),
        fields=tuple(_field_from_dict(fd) for fd in fields),
        field_count=_pick(data, "field_count", "fieldCount"),
    )


def _endpoint_from_dict(data: Any) -> EndpointDescriptor:
    if not isinstance(data, dict) or not data.get("path") or not data.get("method"):
        raise ValueError(f"Invalid endpoint entry: {data!r}")

    return EndpointDescriptor(
        path=str(data["path"]),
        method=str(data["method"]).upper(),
        class_name=_pick(data, "class_name", "className", default=""),
        method_name=_pick(data, "method_name", "methodName", default=""),
        summary=_pick(data, "summary", default=""),
        request_body=_pick(data, "request_body", "request_body_model", "requestBody"),
        response_type=_pick(data, "response_type", "responseType"),
        version=_pick(data, "version"),
        id=_pick(data, "id"),
    )


def snapshot_from_dict(data: Any, name: str | None = None) -> Snapshot:
    """Build a snapshot from parsed data; snake_case and camelCase keys are accepted."""
    if not isinstance(data, dict):
        raise ValueError("Snapshot data must be a mapping")

    endpoints = data.get("endpoints") or []
    models = data.get("models") or []
    if not isinstance(endpoints, list) or not isinstance(models, list):
        raise ValueError("Snapshot 'endpoints' and 'models' must be lists")

    return Snapshot(
        name=name or str(data.get("name") or "snapshot"),
        endpoints=tuple(_endpoint_from_dict(ep) for ep in endpoints),
        models=tuple(_model_from_dict(model) for model in models),
    )


def _field_to_dict(fd: FieldDescriptor) -> dict:
    data: dict[str, Any] = {
        "name": fd.name,
        "type": fd.field_type,
        "required": fd.required,
        "complex": fd.complex,
    }
    if fd.description:
        data["description"] = fd.description
    if fd.ref_fields:
        data["ref_fields"] = [_field_to_dict(child) for child in fd.ref_fields]
    return data


def snapshot_to_dict(snapshot: Snapshot) -> dict:
    endpoints = []
    for ep in snapshot.endpoints:
        entry: dict[str, Any] = {"path": ep.path, "method": ep.method}
        for key in ("class_name", "method_name", "summary", "request_body",
                    "response_type", "version", "id"):
            value = getattr(ep, key)
            if value:
                entry[key] = value
        endpoints.append(entry)

    return {
        "name": snapshot.name,
        "endpoints": endpoints,
        "models": [
            {"name": model.name, "fields": [_field_to_dict(fd) for fd in model.fields]}
            for model in snapshot.models
        ],
    }


def load_snapshot(path: Path) -> Snapshot:
    """Load a snapshot file. JSON is valid YAML, so one parser reads both."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValueError(f"Malformed snapshot file {path}: {exc}") from exc

    if data is None:
        raise ValueError(f"Snapshot file {path} is empty")
    if isinstance(data, dict) and not data.get("name"):
        return snapshot_from_dict(data, name=path.stem)
    return snapshot_from_dict(data)


def dump_snapshot(snapshot: Snapshot, path: Path) -> None:
    """Write a snapshot as JSON for ``.json`` paths, YAML otherwise."""
    path = Path(path)
    data = snapshot_to_dict(snapshot)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            json.dump(data, f, indent=2)
            f.write("\n")
        else:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)


def load_input(path: Path, config: SchemaWardenConfig | None = None) -> Snapshot:
    """Load a snapshot from a source directory (scanned) or a snapshot file.

    Model references in a file are re-resolved against the file's own models.
    """
    config = config or SchemaWardenConfig()
    path = Path(path)

    if path.is_dir():
        return scan_sources(path, config.extractor)
    if not path.is_file():
        raise FileNotFoundError(f"No such snapshot or source directory: {path}")

    snapshot = load_snapshot(path)
    logger.debug("Loaded snapshot %s from %s", snapshot.name, path)
    return Snapshot(
        name=snapshot.name,
        endpoints=snapshot.endpoints,
        models=resolve_models(snapshot.models, max_depth=config.extractor.resolve_depth),
    )
