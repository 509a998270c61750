"""Frozen dataclass models for extracted schemas and endpoints."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """A single schema field.

    ``ref_fields`` is populated only when the field's base type is itself a
    known model, which makes the field list a tree. Consumers must bound
    their traversal depth since source data may describe self-referencing
    models.
    """

    name: str
    field_type: str
    description: str | None = None
    required: bool = False
    complex: bool = False
    ref_fields: tuple[FieldDescriptor, ...] = ()


@dataclass(frozen=True, slots=True)
class ModelDescriptor:
    """A named schema (DTO) with an ordered field list."""

    name: str
    fields: tuple[FieldDescriptor, ...] = ()
    field_count: int | None = None

    def __post_init__(self) -> None:
        if self.field_count is None:
            object.__setattr__(self, "field_count", len(self.fields))


@dataclass(frozen=True, slots=True)
class EndpointDescriptor:
    """One HTTP operation exposed by a controller."""

    path: str
    method: str
    class_name: str = ""
    method_name: str = ""
    summary: str = ""
    request_body: str | None = None
    response_type: str | None = None
    version: str | None = None
    id: str | None = None

    @property
    def key(self) -> str:
        """Identity key used to pair endpoints across snapshots."""
        return f"{self.method.upper()} {self.path}"


@dataclass(frozen=True, slots=True)
class EndpointContract:
    """An endpoint with its request and response bodies bound to models."""

    method: str
    path: str
    request_body: ModelDescriptor | None = None
    response_body: ModelDescriptor | None = None


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Endpoints and models found in one source unit."""

    endpoints: tuple[EndpointDescriptor, ...] = ()
    models: tuple[ModelDescriptor, ...] = ()


@dataclass(frozen=True, slots=True)
class Snapshot:
    """A named version of a project's models and endpoints."""

    name: str
    endpoints: tuple[EndpointDescriptor, ...] = ()
    models: tuple[ModelDescriptor, ...] = ()

    def get_model(self, name: str) -> ModelDescriptor | None:
        for model in self.models:
            if model.name == name:
                return model
        return None
