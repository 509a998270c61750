"""Tests for frozen dataclass models."""

from __future__ import annotations

import pytest

from schemawarden.models import (
    ChangeKind,
    DtoDiff,
    EndpointDescriptor,
    FieldDescriptor,
    FieldDiff,
    ImpactAnalysis,
    ModelDescriptor,
    Severity,
    Snapshot,
    VersionChangeKind,
)


class TestEnums:
    def test_change_kind_values(self):
        assert ChangeKind.ADD.value == "add"
        assert ChangeKind.TYPE_CHANGE.value == "type_change"

    def test_severity_values(self):
        assert Severity.BREAKING.value == "breaking"
        assert Severity.MINOR.value == "minor"
        assert Severity.PATCH.value == "patch"

    def test_str_enum_behavior(self):
        assert VersionChangeKind("added") == VersionChangeKind.ADDED
        assert Severity.BREAKING == "breaking"


class TestFieldDescriptor:
    def test_defaults(self):
        fd = FieldDescriptor(name="id", field_type="Long")
        assert fd.description is None
        assert not fd.required
        assert not fd.complex
        assert fd.ref_fields == ()

    def test_frozen(self):
        fd = FieldDescriptor(name="id", field_type="Long")
        with pytest.raises(AttributeError):
            fd.name = "changed"  # type: ignore[misc]


class TestModelDescriptor:
    def test_field_count_defaults_to_len(self):
        model = ModelDescriptor("M", (FieldDescriptor("a", "int"), FieldDescriptor("b", "int")))
        assert model.field_count == 2

    def test_explicit_field_count(self):
        assert ModelDescriptor("M", (), field_count=7).field_count == 7


class TestEndpointDescriptor:
    def test_key(self):
        ep = EndpointDescriptor(path="/users", method="post")
        assert ep.key == "POST /users"
        assert ep.summary == ""
        assert ep.request_body is None


class TestSnapshot:
    def test_get_model(self):
        model = ModelDescriptor("UserDTO")
        snapshot = Snapshot("v1", models=(model,))
        assert snapshot.get_model("UserDTO") is model
        assert snapshot.get_model("Missing") is None


class TestDiffModels:
    def test_field_diff_paths(self):
        diff = FieldDiff(
            path=("address", "city"), change_kind=ChangeKind.ADD,
            severity=Severity.MINOR, message="added",
        )
        assert diff.dotted_path == "address.city"
        assert diff.field_name == "city"
        assert not diff.model_level

    def test_dto_diff_defaults(self):
        dto = DtoDiff("UserDTO")
        assert dto.fields == ()
        assert dto.summary.total == 0


class TestImpactAnalysis:
    def test_endpoint_count(self):
        result = ImpactAnalysis("A", affected_endpoints=("GET /a", "POST /a"))
        assert result.endpoint_count == 2
