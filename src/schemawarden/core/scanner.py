"""Source tree scanner: walk a project, extract every unit, build a snapshot."""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import asdict, replace
from pathlib import Path

from schemawarden.config import ExtractorConfig
from schemawarden.core.extractor import extract_source, resolve_models
from schemawarden.models.schema import EndpointDescriptor, ModelDescriptor, Snapshot

logger = logging.getLogger(__name__)


def iter_source_files(root: Path, config: ExtractorConfig) -> list[Path]:
    """Source files under ``root`` with a configured suffix, in sorted order."""
    root = Path(root)
    files: list[Path] = []
    for suffix in config.source_suffixes:
        for path in root.rglob(f"*{suffix}"):
            relative = path.relative_to(root)
            if any(part in config.exclude_dirs for part in relative.parts[:-1]):
                continue
            if path.is_file():
                files.append(path)
    return sorted(set(files))


def _merge_model(existing: ModelDescriptor, other: ModelDescriptor) -> ModelDescriptor:
    """Append fields from a same-named model that ``existing`` lacks."""
    known = {fd.name for fd in existing.fields}
    extra = tuple(fd for fd in other.fields if fd.name not in known)
    if not extra:
        return existing
    fields = existing.fields + extra
    return replace(existing, fields=fields, field_count=len(fields))


def scan_sources(
    root: Path,
    config: ExtractorConfig | None = None,
    name: str | None = None,
    version: str | None = None,
) -> Snapshot:
    """Extract endpoints and models from every source unit under ``root``.

    Unreadable units are logged and skipped. Models sharing a name are
    merged, then nested model references are resolved.
    """
    config = config or ExtractorConfig()
    root = Path(root)

    endpoints: list[EndpointDescriptor] = []
    models: dict[str, ModelDescriptor] = {}

    for path in iter_source_files(root, config):
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping unreadable source %s: %s", path, exc)
            continue

        result = extract_source(source, filename=path.name, config=config, version=version)
        endpoints.extend(result.endpoints)
        for model in result.models:
            if model.name in models:
                logger.debug("Merging duplicate model %s from %s", model.name, path)
                models[model.name] = _merge_model(models[model.name], model)
            else:
                models[model.name] = model

    resolved = resolve_models(list(models.values()), max_depth=config.resolve_depth)
    logger.info(
        "Scanned %s: %d endpoints, %d models", root, len(endpoints), len(resolved)
    )
    return Snapshot(name=name or root.name, endpoints=tuple(endpoints), models=resolved)


def compute_snapshot_hash(snapshot: Snapshot) -> str:
    """Compute a deterministic SHA256 hash of sorted endpoint and model data."""
    endpoints = sorted(
        (
            ep.method.upper(), ep.path, ep.request_body or "",
            ep.response_type or "", ep.summary,
        )
        for ep in snapshot.endpoints
    )
    models = sorted(
        ((model.name, [asdict(fd) for fd in model.fields]) for model in snapshot.models),
        key=lambda item: item[0],
    )
    data = json.dumps({"endpoints": endpoints, "models": models}, sort_keys=True).encode()
    return hashlib.sha256(data).hexdigest()
