"""Tests for impact analysis."""

from __future__ import annotations

import logging

from schemawarden.core.graph import build_dependency_graph
from schemawarden.core.impact import analyze_impact, build_reverse_dependency_map
from schemawarden.models.enums import ImpactLevel
from schemawarden.models.schema import EndpointDescriptor, FieldDescriptor, ModelDescriptor


def _m(name, *refs):
    """A model with one field per referenced model name."""
    return ModelDescriptor(
        name=name,
        fields=tuple(FieldDescriptor(name=ref.lower(), field_type=ref) for ref in refs),
    )


def _ep(path, resp=None, req=None, method="GET"):
    return EndpointDescriptor(path=path, method=method, request_body=req, response_type=resp)


class TestReverseMap:
    def test_inverts(self):
        reverse = build_reverse_dependency_map({"A": ("B", "C"), "B": ("C",), "C": ()})
        assert reverse == {"B": ["A"], "C": ["A", "B"]}


class TestAnalyzeImpact:
    def test_direct_and_indirect(self):
        models = [_m("Address"), _m("User", "Address"), _m("Order", "User"), _m("Other")]
        result = analyze_impact("Address", models, [])
        assert result.source_model == "Address"
        assert result.direct_dependents == ("User",)
        assert result.indirect_dependents == ("Order",)
        assert set(result.affected_models) == {"User", "Order"}

    def test_affected_endpoints(self):
        models = [_m("Address"), _m("User", "Address")]
        endpoints = [
            _ep("/users", resp="List<User>"),
            _ep("/addresses", req="Address", method="POST"),
            _ep("/health", resp="String"),
        ]
        result = analyze_impact("Address", models, endpoints)
        assert result.affected_endpoints == ("GET /users", "POST /addresses")
        assert result.endpoint_count == 2

    def test_cycle_terminates(self):
        models = [_m("A", "B"), _m("B", "C"), _m("C", "A")]
        result = analyze_impact("A", models, [])
        assert set(result.affected_models) == {"B", "C"}
        assert result.direct_dependents == ("C",)
        assert result.indirect_dependents == ("B",)

    def test_unknown_target_logged(self, caplog):
        caplog.set_level(logging.WARNING, logger="schemawarden")
        result = analyze_impact("Missing", [_m("A")], [])
        assert result.affected_models == ()
        assert result.impact_level == ImpactLevel.LOW
        assert any("Missing" in r.message for r in caplog.records)

    def test_precomputed_deps(self):
        models = [_m("A"), _m("B", "A")]
        graph = build_dependency_graph(models, [])
        result = analyze_impact("A", models, [], model_deps=graph.model_deps)
        assert result.affected_models == ("B",)


class TestImpactLevel:
    def test_low(self):
        assert analyze_impact("A", [_m("A"), _m("B", "A")], []).impact_level == ImpactLevel.LOW

    def test_medium(self):
        models = [_m("A"), _m("B", "A"), _m("C", "A")]
        assert analyze_impact("A", models, []).impact_level == ImpactLevel.MEDIUM

    def test_high_by_endpoints(self):
        endpoints = [_ep(f"/a{i}", resp="A") for i in range(3)]
        assert analyze_impact("A", [_m("A")], endpoints).impact_level == ImpactLevel.HIGH

    def test_high_by_combined(self):
        models = [_m("A"), *(_m(f"M{i}", "A") for i in range(5))]
        assert analyze_impact("A", models, []).impact_level == ImpactLevel.HIGH

    def test_critical_by_endpoints(self):
        endpoints = [_ep(f"/a{i}", resp="A") for i in range(5)]
        assert analyze_impact("A", [_m("A")], endpoints).impact_level == ImpactLevel.CRITICAL

    def test_critical_by_combined(self):
        models = [_m("A"), *(_m(f"M{i}", "A") for i in range(8))]
        endpoints = [_ep("/a", resp="A"), _ep("/b", resp="A")]
        assert analyze_impact("A", models, endpoints).impact_level == ImpactLevel.CRITICAL


class TestMonotonicity:
    def test_new_dependent_only_grows_result(self):
        models = [_m("Y"), _m("P", "Y"), _m("Q", "P")]
        before = set(analyze_impact("Y", models, []).affected_models)

        models_after = [*models, _m("X", "Y")]
        after = set(analyze_impact("Y", models_after, []).affected_models)

        assert before <= after
        assert "X" in after

    def test_new_edge_only_grows_result(self):
        models = [_m("Y"), _m("P", "Y"), _m("X", "Q"), _m("Q")]
        before = set(analyze_impact("Y", models, []).affected_models)

        rewired = [_m("Y"), _m("P", "Y"), _m("X", "Q", "Y"), _m("Q")]
        after = set(analyze_impact("Y", rewired, []).affected_models)

        assert before <= after
        assert after - before == {"X"}
