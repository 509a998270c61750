"""Tests for the MCP server tools."""

from __future__ import annotations

import pytest

from schemawarden.config import SchemaWardenConfig


@pytest.fixture
def config(tmp_path):
    return SchemaWardenConfig(project_path=tmp_path)


@pytest.fixture
def server(config):
    """Create MCP server with test config."""
    from schemawarden.mcp.server import create_server
    return create_server(config)


def _tool(server, name):
    return server._tool_manager.get_tool(name)


class TestSchemawardenExtract:
    def test_source_directory(self, server, java_project):
        result = _tool(server, "schemawarden_extract").fn(path=str(java_project))
        assert "# Snapshot: user-service" in result
        assert "**Endpoints:** 4  **Models:** 4" in result
        assert "CreateUserRequest" in result

    def test_relative_to_project(self, server, snapshot_files):
        result = _tool(server, "schemawarden_extract").fn(path="v1.yaml")
        assert "# Snapshot: v1" in result
        assert "LegacyDTO" in result

    def test_missing_path(self, server):
        result = _tool(server, "schemawarden_extract").fn(path="nope.yaml")
        assert result.startswith("Error:")

    def test_malformed_file(self, server, tmp_path):
        (tmp_path / "bad.yaml").write_text("- just\n- a list\n")
        result = _tool(server, "schemawarden_extract").fn(path="bad.yaml")
        assert result.startswith("Error:")


class TestSchemawardenDiff:
    def test_diff(self, server, snapshot_files):
        result = _tool(server, "schemawarden_diff").fn(before="v1.yaml", after="v2.yaml")
        assert "## LegacyDTO (1 breaking" in result
        assert "- [BREAKING] `email`" in result
        assert "- [MINOR] `age`" in result

    def test_identical(self, server, snapshot_files):
        result = _tool(server, "schemawarden_diff").fn(before="v1.yaml", after="v1.yaml")
        assert result == "*No schema changes detected.*"


class TestSchemawardenBreaking:
    def test_breaking(self, server, snapshot_files):
        result = _tool(server, "schemawarden_breaking").fn(before="v1.yaml", after="v2.yaml")
        assert result.startswith("**Safe to deploy:** no")
        assert "DTO_REMOVED: 1" in result
        assert "REQUIRED_FIELD_ADDED: 1" in result
        assert "**GET /users**" in result
        assert "**POST /users**" in result
        assert "`Response.email`" in result

    def test_safe(self, server, snapshot_files):
        result = _tool(server, "schemawarden_breaking").fn(before="v2.yaml", after="v2.yaml")
        assert result.startswith("**Safe to deploy:** yes")
        assert "*No endpoint breaking changes detected.*" in result


class TestSchemawardenChanges:
    def test_changes(self, server, snapshot_files):
        result = _tool(server, "schemawarden_changes").fn(before="v1.yaml", after="v2.yaml")
        assert "**Added:** 1  **Deleted:** 1  **Modified:** 1  **Unchanged:** 1" in result
        assert "**Change rate:** 75.0%" in result
        assert "| deleted | GET | /legacy |" in result
        assert "| modified | GET | /users | summary |" in result
        assert "| added | GET | /users/{id} |" in result


class TestSchemawardenGraph:
    def test_graph(self, server, java_project):
        result = _tool(server, "schemawarden_graph").fn(path=str(java_project))
        assert "**Models:** 4  **Endpoints:** 4  **Edges:** 7  **Isolated:** 1" in result
        assert "| model-RoleDTO | reference | model-UserDTO |" in result
        assert "| endpoint-POST /api/users | request | model-CreateUserRequest |" in result


class TestSchemawardenImpact:
    def test_impact(self, server, java_project):
        result = _tool(server, "schemawarden_impact").fn(path=str(java_project), model="AddressDTO")
        assert "# Impact: AddressDTO" in result
        assert "**Impact level:** HIGH" in result
        assert "**Direct dependents:** UserDTO" in result
        assert "**Indirect dependents:** RoleDTO" in result
        assert "- POST /api/users" in result

    def test_unknown_model(self, server, java_project):
        result = _tool(server, "schemawarden_impact").fn(path=str(java_project), model="Nope")
        assert result == "Model 'Nope' not found in user-service."


class TestSchemawardenCycles:
    def test_cycles(self, server, java_project):
        result = _tool(server, "schemawarden_cycles").fn(path=str(java_project))
        assert "**1 circular reference(s):**" in result
        assert "- RoleDTO -> UserDTO -> RoleDTO" in result

    def test_no_cycles(self, server, snapshot_files):
        result = _tool(server, "schemawarden_cycles").fn(path="v1.yaml")
        assert result == "*No circular references detected.*"
