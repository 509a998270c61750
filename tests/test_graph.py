"""Tests for the dependency graph builder."""

from __future__ import annotations

from schemawarden.core.extractor import resolve_models
from schemawarden.core.graph import (
    build_dependency_graph,
    build_endpoint_dependency_map,
    build_model_dependency_map,
    extract_referenced_models,
)
from schemawarden.models.enums import NodeType, RelationType
from schemawarden.models.schema import EndpointDescriptor, FieldDescriptor, ModelDescriptor


def _f(name, field_type="String", ref_fields=()):
    return FieldDescriptor(
        name=name, field_type=field_type,
        complex=bool(ref_fields), ref_fields=tuple(ref_fields),
    )


def _m(name, *fields):
    return ModelDescriptor(name=name, fields=tuple(fields))


def _ep(method="GET", path="/test", req=None, resp=None, id=None):
    """Helper to create test endpoints."""
    return EndpointDescriptor(
        path=path, method=method, method_name="handler",
        request_body=req, response_type=resp, id=id,
    )


class TestReferencedModels:
    def test_collects_non_primitive_base_types(self):
        fields = [
            _f("id", "Long"),
            _f("address", "AddressDTO"),
            _f("roles", "List<RoleDTO>"),
            _f("tags", "Map<String, String>"),
        ]
        assert extract_referenced_models(fields) == ["AddressDTO", "RoleDTO"]

    def test_walks_nested_fields(self):
        fields = [_f("order", "OrderDTO", ref_fields=[_f("lines", "List<LineDTO>")])]
        assert extract_referenced_models(fields) == ["OrderDTO", "LineDTO"]

    def test_no_duplicates(self):
        fields = [_f("a", "AddressDTO"), _f("b", "AddressDTO[]")]
        assert extract_referenced_models(fields) == ["AddressDTO"]

    def test_depth_bounded(self):
        field = _f("leaf", "DeepDTO")
        for level in range(20):
            field = _f(f"n{level}", f"Level{level}DTO", ref_fields=[field])
        refs = extract_referenced_models([field], max_depth=3)
        assert "DeepDTO" not in refs
        assert len(refs) == 4


class TestDependencyMaps:
    def test_only_known_models(self):
        models = [
            _m("UserDTO", _f("address", "AddressDTO"), _f("ext", "ExternalDTO")),
            _m("AddressDTO", _f("city")),
        ]
        deps = build_model_dependency_map(models)
        assert deps == {"UserDTO": ("AddressDTO",), "AddressDTO": ()}

    def test_direct_self_reference_kept(self):
        deps = build_model_dependency_map([_m("TreeNode", _f("children", "List<TreeNode>"))])
        assert deps == {"TreeNode": ("TreeNode",)}

    def test_nested_self_reference_dropped(self):
        user = _m(
            "UserDTO",
            _f("roles", "List<RoleDTO>", ref_fields=[_f("owner", "UserDTO")]),
        )
        role = _m("RoleDTO", _f("owner", "UserDTO"))
        deps = build_model_dependency_map([user, role])
        assert deps["UserDTO"] == ("RoleDTO",)
        assert deps["RoleDTO"] == ("UserDTO",)

    def test_endpoint_map(self):
        endpoints = [
            _ep("POST", "/users", req="CreateUserRequest", resp="UserDTO"),
            _ep("GET", "/users", resp="List<UserDTO>", id="list-users"),
            _ep("GET", "/health"),
        ]
        deps = build_endpoint_dependency_map(endpoints)
        assert deps == {
            "POST /users": {"request": "CreateUserRequest", "response": "UserDTO"},
            "list-users": {"response": "UserDTO"},
        }


class TestBuildGraph:
    def _graph(self):
        models = [
            _m("UserDTO", _f("address", "AddressDTO")),
            _m("AddressDTO", _f("city")),
            _m("OrphanDTO", _f("x")),
        ]
        endpoints = [
            _ep("GET", "/users", resp="List<UserDTO>"),
            _ep("POST", "/users", req="UserDTO", resp="UserDTO", id="create"),
            _ep("DELETE", "/users/{id}", resp="void"),
        ]
        return build_dependency_graph(models, endpoints)

    def test_nodes(self):
        graph = self._graph()
        ids = [n.id for n in graph.nodes]
        assert ids == [
            "model-UserDTO", "model-AddressDTO", "model-OrphanDTO",
            "endpoint-GET /users", "endpoint-create", "endpoint-DELETE /users/{id}",
        ]
        user = graph.nodes[0]
        assert user.node_type == NodeType.MODEL
        assert user.field_count == 1
        endpoint = graph.nodes[3]
        assert endpoint.node_type == NodeType.ENDPOINT
        assert endpoint.label == "GET /users"
        assert endpoint.method == "GET"

    def test_edges(self):
        graph = self._graph()
        relations = [(e.source, e.relation, e.target) for e in graph.edges]
        assert relations == [
            ("model-UserDTO", RelationType.REFERENCE, "model-AddressDTO"),
            ("endpoint-GET /users", RelationType.RESPONSE, "model-UserDTO"),
            ("endpoint-create", RelationType.REQUEST, "model-UserDTO"),
            ("endpoint-create", RelationType.RESPONSE, "model-UserDTO"),
        ]
        assert all(e.required for e in graph.edges if e.relation != RelationType.REFERENCE)
        assert len({e.id for e in graph.edges}) == len(graph.edges)

    def test_stats_count_isolated_nodes(self):
        stats = self._graph().stats
        assert stats.total_models == 3
        assert stats.total_endpoints == 3
        assert stats.total_edges == 4
        # OrphanDTO and the DELETE endpoint touch no edge
        assert stats.isolated_nodes == 2

    def test_model_deps_returned(self):
        graph = self._graph()
        assert graph.model_deps["UserDTO"] == ("AddressDTO",)

    def test_empty(self):
        graph = build_dependency_graph([], [])
        assert graph.nodes == ()
        assert graph.stats.isolated_nodes == 0


class TestResolvedDependencies:
    def test_edges_stop_at_known_models(self):
        a = _m("A", FieldDescriptor("b", "B", complex=True))
        b = _m("B", FieldDescriptor("c", "C", complex=True))
        c = _m("C", FieldDescriptor("a", "A", complex=True))
        deps = build_model_dependency_map(resolve_models([a, b, c]))
        assert deps == {"A": ("B",), "B": ("C",), "C": ("A",)}

    def test_inline_structure_walked(self):
        inline = _f("meta", "Map<String, Object>", ref_fields=[_f("owner", "UserDTO")])
        models = [_m("OrderDTO", inline), _m("UserDTO", _f("id", "Long"))]
        assert build_model_dependency_map(models)["OrderDTO"] == ("UserDTO",)
