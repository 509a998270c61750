"""Type-name normalization shared by the extractor, differ and graph builder."""

from __future__ import annotations

import re

_TYPE_ALIASES: dict[str, str] = {
    "int": "integer",
    "bool": "boolean",
    "str": "string",
    "float": "number",
    "double": "number",
}

PRIMITIVE_TYPES: frozenset[str] = frozenset({
    "String", "string", "int", "Integer", "long", "Long",
    "double", "Double", "float", "Float", "boolean", "Boolean",
    "Date", "LocalDate", "LocalDateTime", "LocalTime", "Instant",
    "ZonedDateTime", "OffsetDateTime", "UUID", "BigDecimal", "BigInteger",
    "byte", "Byte", "short", "Short", "char", "Character", "Object", "void",
    "Void", "number", "integer", "any", "unknown", "null", "undefined",
})

_ARRAY_SUFFIX = re.compile(r"(?:\s*\[\s*\])+$")
_WILDCARD = re.compile(r"^\?\s*(?:extends|super)\s+")


def normalize_type(type_name: str | None) -> str:
    """Map a raw type spelling to a canonical lowercase form.

    Unknown spellings pass through trimmed and lowercased; a missing type
    normalizes to ``"unknown"``.
    """
    if not type_name or not type_name.strip():
        return "unknown"
    normalized = type_name.strip().lower()
    return _TYPE_ALIASES.get(normalized, normalized)


def split_type_arguments(arguments: str) -> list[str]:
    """Split generic arguments on top-level commas only."""
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(arguments):
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth = max(0, depth - 1)
        elif ch == "," and depth == 0:
            parts.append(arguments[start:i].strip())
            start = i + 1
    parts.append(arguments[start:].strip())
    return [p for p in parts if p]


def extract_base_type(type_name: str | None) -> str:
    """Return the innermost element type of a generic or array spelling.

    ``List<UserDTO>`` -> ``UserDTO``, ``Map<String, AddressDTO>`` ->
    ``AddressDTO`` (the last argument wins, covering map values),
    ``UserDTO[]`` -> ``UserDTO``.
    """
    if not type_name:
        return ""
    current = type_name.strip()
    while True:
        open_idx = current.find("<")
        close_idx = current.rfind(">")
        if open_idx == -1 or close_idx <= open_idx:
            break
        arguments = split_type_arguments(current[open_idx + 1:close_idx])
        if not arguments:
            current = current[:open_idx].strip()
            break
        current = _WILDCARD.sub("", arguments[-1])
    return _ARRAY_SUFFIX.sub("", current).strip()


def is_primitive_type(type_name: str | None) -> bool:
    """Check if a type's base type is in the fixed primitive set."""
    return extract_base_type(type_name) in PRIMITIVE_TYPES


def is_complex_type(type_name: str | None) -> bool:
    """Check if a type resolves to a structured model rather than a primitive."""
    base = extract_base_type(type_name)
    return bool(base) and base not in PRIMITIVE_TYPES
