"""Source extractor: controller endpoints and DTO fields via structural text scanning.

Targets Spring-style Java sources. Nothing here parses the language; every
function is a pattern scan that returns an empty result when the expected
markers are absent.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from pathlib import PurePath

from schemawarden.config import ExtractorConfig
from schemawarden.core.types import extract_base_type, is_complex_type
from schemawarden.models.schema import (
    EndpointDescriptor,
    ExtractionResult,
    FieldDescriptor,
    ModelDescriptor,
)

logger = logging.getLogger(__name__)

SUMMARY_SCAN_LINES = 10
DESCRIPTION_SCAN_LINES = 5

_CONTROLLER_MARKERS = ("@RestController", "@Controller")

# A parenthesized annotation argument list; quoted strings may contain parentheses.
_ANNOTATION_ARGS = r"""\((?:"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'|[^)"'])*\)"""

_CLASS_RE = re.compile(
    r"^[ \t]*(?:(?:public|protected|private|abstract|final|static|sealed)\s+)*class\s+(\w+)",
    re.MULTILINE,
)
_CLASS_MAPPING_RE = re.compile(r"@RequestMapping\s*\((?P<args>[^)]*)\)")
_MAPPING_RE = re.compile(
    r"@(?P<kind>Get|Post|Put|Delete|Patch|Request)Mapping\b(?:\s*\((?P<args>[^)]*)\))?"
)
_SIGNATURE_RE = re.compile(
    r"(?:\s*@\w+(?:\.\w+)*(?:\s*" + _ANNOTATION_ARGS + r")?)*"
    r"\s*(?:(?:public|private|protected|static|final|synchronized|abstract|default)\s+)*"
    r"(?:<[^>]*>\s+)?"
    r"(?P<return>[\w.$?]+(?:\s*<[^;{}()]*>)?(?:\s*\[\s*\])*)"
    r"\s+(?P<name>\w+)\s*\("
)
_PATH_ATTR_RE = re.compile(r"\b(?:value|path)\s*=\s*\{?\s*[\"']([^\"']*)[\"']")
_BARE_PATH_RE = re.compile(r"^\s*\{?\s*[\"']([^\"']*)[\"']")
_METHOD_ATTR_RE = re.compile(r"RequestMethod\.(\w+)")
_REQUEST_BODY_RE = re.compile(
    r"@RequestBody(?:\s*" + _ANNOTATION_ARGS + r")?\s+"
    r"(?:@\w+(?:\.\w+)*(?:\s*" + _ANNOTATION_ARGS + r")?\s+)*"
    r"(?:final\s+)?"
    r"(?P<type>[\w.$]+)"
)
_ARRAY_RE = re.compile(r"(?:\s*\[\s*\])+")
_OPERATION_SUMMARY_RE = re.compile(
    r"@(?:Operation\s*\([^)]*?\bsummary|ApiOperation\s*\(\s*(?:value)?)\s*=?\s*\"([^\"]*)\""
)

_FIELD_RE = re.compile(
    r"(?P<annotations>(?:@\w+(?:\.\w+)*(?:\s*" + _ANNOTATION_ARGS + r")?\s*)*)"
    r"(?P<modifiers>(?:(?:private|protected|public|static|final|transient|volatile)\s+)+)"
    r"(?P<type>[\w.$]+(?:\s*<[^;=(){}]*>)?(?:\s*\[\s*\])*)"
    r"\s+(?P<name>\w+)\s*(?:=[^;]*)?;"
)
_ACCESS_RE = re.compile(r"\b(?:private|protected|public)\b")
_REQUIRED_RE = re.compile(r"@(?:NotNull|NotEmpty|NotBlank)\b|\brequired\s*=\s*true\b")
_SCHEMA_DESCRIPTION_RE = re.compile(r"@Schema\s*\([^)]*?\bdescription\s*=\s*\"([^\"]*)\"")

_COMMENT_CLOSE_RE = re.compile(r"\*+/\s*$")
_COMMENT_PREFIX_RE = re.compile(r"^(?:/\*+|\*+|//+)\s*")


def is_controller(source: str) -> bool:
    """Check if a source unit declares an HTTP controller."""
    return any(marker in source for marker in _CONTROLLER_MARKERS)


def extract_class_name(source: str) -> str | None:
    """Return the first declared class name, if any."""
    match = _CLASS_RE.search(source)
    return match.group(1) if match else None


def join_path(base: str, sub: str) -> str:
    """Join a base path and a sub-path, collapsing duplicate slashes."""
    joined = re.sub(r"/+", "/", f"/{base}/{sub}")
    if len(joined) > 1:
        joined = joined.rstrip("/")
    return joined


def _mapping_path(args: str | None) -> str:
    if not args:
        return ""
    match = _PATH_ATTR_RE.search(args) or _BARE_PATH_RE.match(args)
    return match.group(1) if match else ""


def _read_balanced(text: str, start: int, open_ch: str, close_ch: str) -> tuple[str, int]:
    """Read from ``start`` (just past an opening bracket) to its matching close."""
    depth = 1
    for i in range(start, len(text)):
        ch = text[i]
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return text[start:i], i + 1
    return text[start:], len(text)


def _request_body_type(params: str) -> str | None:
    """Extract the type of the ``@RequestBody`` parameter, generics included."""
    match = _REQUEST_BODY_RE.search(params)
    if not match:
        return None

    type_name = match.group("type")
    pos = match.end()
    rest = params[pos:]
    stripped = rest.lstrip()
    if stripped.startswith("<"):
        open_idx = pos + (len(rest) - len(stripped))
        inner, pos = _read_balanced(params, open_idx + 1, "<", ">")
        type_name += f"<{inner.strip()}>"

    array = _ARRAY_RE.match(params, pos)
    if array:
        type_name += "[]" * array.group().count("[")
    return type_name


def _comment_text(line: str) -> str | None:
    """Return the text of a comment line, or None if the line is not a comment."""
    if not line.startswith(("/*", "*", "//")):
        return None
    text = _COMMENT_CLOSE_RE.sub("", line)
    return _COMMENT_PREFIX_RE.sub("", text).strip()


def _preceding_comment(source: str, position: int, max_lines: int) -> str:
    """Scan backward from ``position`` for the nearest comment line.

    Gives up at a block boundary or a previous statement, and scans at most
    ``max_lines`` lines. Javadoc delimiters and ``@tag`` lines are skipped.
    """
    lines = source[:position].split("\n")
    for offset, raw in enumerate(reversed(lines)):
        if offset > max_lines:
            break
        line = raw.strip()
        text = _comment_text(line)
        if text and not text.startswith("@"):
            return text
        if text is None and ("{" in line or "}" in line or line.endswith(";")):
            break
    return ""


def _annotation_block_start(source: str, position: int) -> int:
    """Index just past the statement or block boundary preceding ``position``."""
    return max(source.rfind(ch, 0, position) for ch in "{};") + 1


def extract_endpoints(source: str, version: str | None = None) -> list[EndpointDescriptor]:
    """Extract HTTP endpoints from a controller source unit.

    Returns an empty list when the unit carries no controller marker.
    """
    if not is_controller(source):
        return []

    class_match = _CLASS_RE.search(source)
    class_name = class_match.group(1) if class_match else "Unknown"
    header = source[:class_match.start()] if class_match else source

    base_path = ""
    class_mapping = _CLASS_MAPPING_RE.search(header)
    if class_mapping:
        base_path = _mapping_path(class_mapping.group("args"))

    endpoints: list[EndpointDescriptor] = []
    body_start = class_match.end() if class_match else 0

    for match in _MAPPING_RE.finditer(source, body_start):
        signature = _SIGNATURE_RE.match(source, match.end())
        if signature is None:
            continue

        params, signature_end = _read_balanced(source, signature.end(), "(", ")")
        args = match.group("args")

        method = match.group("kind").upper()
        if method == "REQUEST":
            method_attr = _METHOD_ATTR_RE.search(args or "")
            method = method_attr.group(1).upper() if method_attr else "GET"

        method_name = signature.group("name")
        block = source[_annotation_block_start(source, match.start()):signature_end]
        operation = _OPERATION_SUMMARY_RE.search(block)
        if operation and operation.group(1).strip():
            summary = operation.group(1).strip()
        else:
            summary = _preceding_comment(source, match.start(), SUMMARY_SCAN_LINES)

        endpoints.append(EndpointDescriptor(
            path=join_path(base_path, _mapping_path(args)),
            method=method,
            class_name=class_name,
            method_name=method_name,
            summary=summary or method_name,
            request_body=_request_body_type(params),
            response_type=re.sub(r"\s+", " ", signature.group("return")).strip(),
            version=version,
        ))

    logger.debug("Extracted %d endpoints from %s", len(endpoints), class_name)
    return endpoints


def extract_fields(source: str) -> list[FieldDescriptor]:
    """Extract instance field declarations from a DTO-shaped source unit."""
    fields: list[FieldDescriptor] = []

    for match in _FIELD_RE.finditer(source):
        modifiers = match.group("modifiers")
        if "static" in modifiers.split() or not _ACCESS_RE.search(modifiers):
            continue

        annotations = match.group("annotations")
        field_type = re.sub(r"\s+", " ", match.group("type")).strip()

        schema_description = _SCHEMA_DESCRIPTION_RE.search(annotations)
        if schema_description:
            description = schema_description.group(1).strip()
        else:
            description = _preceding_comment(source, match.start(), DESCRIPTION_SCAN_LINES)

        fields.append(FieldDescriptor(
            name=match.group("name"),
            field_type=field_type,
            description=description or None,
            required=bool(_REQUIRED_RE.search(annotations)),
            complex=is_complex_type(field_type),
        ))

    return fields


def is_dto_source(
    source: str,
    filename: str | None = None,
    config: ExtractorConfig | None = None,
) -> bool:
    """Check if a source unit looks like a DTO/VO class."""
    config = config or ExtractorConfig()
    class_name = extract_class_name(source)
    if class_name is None:
        return False

    if filename and PurePath(filename).stem.endswith(config.dto_suffixes):
        return True
    if class_name.endswith(config.dto_suffixes):
        return True
    return any(marker in source for marker in config.dto_markers)


def extract_source(
    source: str,
    filename: str | None = None,
    config: ExtractorConfig | None = None,
    version: str | None = None,
) -> ExtractionResult:
    """Extract the endpoints and model of one source unit."""
    endpoints = extract_endpoints(source, version=version)

    models: tuple[ModelDescriptor, ...] = ()
    if is_dto_source(source, filename, config):
        fields = extract_fields(source)
        class_name = extract_class_name(source)
        if fields and class_name:
            models = (ModelDescriptor(name=class_name, fields=tuple(fields)),)

    return ExtractionResult(endpoints=tuple(endpoints), models=models)


def resolve_models(
    models: list[ModelDescriptor] | tuple[ModelDescriptor, ...],
    max_depth: int = 5,
) -> tuple[ModelDescriptor, ...]:
    """Hydrate ``ref_fields`` of complex fields that name a known model.

    A model already on the current resolution path is left unexpanded, and
    expansion stops below ``max_depth`` nested levels.
    """
    by_name = {model.name: model for model in models}

    def resolve(
        fields: tuple[FieldDescriptor, ...], stack: list[str], depth: int
    ) -> tuple[FieldDescriptor, ...]:
        if depth > max_depth:
            return fields

        resolved: list[FieldDescriptor] = []
        for fd in fields:
            base = extract_base_type(fd.field_type)
            target = by_name.get(base)
            if not fd.complex or target is None:
                resolved.append(fd)
                continue
            if base in stack:
                logger.debug("Circular reference: %s -> %s", " -> ".join(stack), base)
                resolved.append(fd)
                continue

            stack.append(base)
            children = resolve(target.fields, stack, depth + 1)
            stack.pop()
            resolved.append(replace(fd, ref_fields=children))
        return tuple(resolved)

    return tuple(
        replace(model, fields=resolve(model.fields, [model.name], 0))
        for model in models
    )
