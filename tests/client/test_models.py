"""Unit tests for response models and payload adapters (studio_client/models.py).

The adapters accept either a bare value or the same value wrapped in an
object, and reject everything else with ResponseFormatError.
"""

import pytest

from studio_client.exceptions import ResponseFormatError
from studio_client.models import (
    BridgeTool,
    SyncResult,
    Workflow,
    parse_file_content,
    parse_file_list,
    parse_project_list,
)


# =============================================================================
# Payload adapters
# =============================================================================


class TestParseProjectList:
    """Tests for parse_project_list."""

    def test_bare_list(self) -> None:
        assert parse_project_list(["a", "b"]).projects == ["a", "b"]

    def test_wrapped_list(self) -> None:
        assert parse_project_list({"projects": ["a", "b"]}).projects == ["a", "b"]

    def test_both_shapes_normalize_identically(self) -> None:
        assert parse_project_list(["a"]) == parse_project_list({"projects": ["a"]})

    @pytest.mark.parametrize(
        "payload",
        [None, "a", 42, {"items": ["a"]}, {"projects": "a"}, [1, 2], {"projects": [None]}],
    )
    def test_rejects_other_shapes(self, payload) -> None:
        with pytest.raises(ResponseFormatError) as exc_info:
            parse_project_list(payload)

        assert exc_info.value.payload == payload


class TestParseFileList:
    """Tests for parse_file_list."""

    def test_bare_list(self) -> None:
        assert parse_file_list(["App.tsx", "components/Header.tsx"]).files == [
            "App.tsx",
            "components/Header.tsx",
        ]

    def test_wrapped_list(self) -> None:
        assert parse_file_list({"files": ["App.tsx"]}).files == ["App.tsx"]

    def test_empty_list(self) -> None:
        assert parse_file_list([]).files == []

    def test_rejects_wrong_key(self) -> None:
        with pytest.raises(ResponseFormatError):
            parse_file_list({"projects": ["App.tsx"]})


class TestParseFileContent:
    """Tests for parse_file_content."""

    def test_bare_string(self) -> None:
        assert parse_file_content("export {};").content == "export {};"

    def test_wrapped_string(self) -> None:
        assert parse_file_content({"content": "export {};"}).content == "export {};"

    def test_empty_content_is_valid(self) -> None:
        assert parse_file_content({"content": ""}).content == ""

    @pytest.mark.parametrize("payload", [None, ["x"], {"content": None}, {"text": "x"}])
    def test_rejects_other_shapes(self, payload) -> None:
        with pytest.raises(ResponseFormatError):
            parse_file_content(payload)


# =============================================================================
# SyncResult
# =============================================================================


class TestSyncResult:
    """Tests for SyncResult."""

    def test_ok(self) -> None:
        result = SyncResult.ok()

        assert result.success is True
        assert result.message is None

    def test_failure(self) -> None:
        result = SyncResult.failure("Server error (500): oops")

        assert result.success is False
        assert result.status == "failure"
        assert result.message == "Server error (500): oops"


# =============================================================================
# Bridge models
# =============================================================================


class TestWorkflow:
    """Tests for Workflow defaults and generation context."""

    def test_defaults(self) -> None:
        workflow = Workflow()

        assert workflow.id == "N/A"
        assert workflow.name == "Untitled Workflow"
        assert workflow.active is False

    def test_context_prefers_structure(self) -> None:
        workflow = Workflow(id="1", nodes=[{"type": "webhook"}], structure={"runData": {}})

        assert workflow.context() == {"runData": {}}

    def test_context_falls_back_to_nodes(self) -> None:
        workflow = Workflow(id="1", nodes=[{"type": "webhook"}])

        assert workflow.context() == [{"type": "webhook"}]

    def test_context_falls_back_to_summary(self) -> None:
        context = Workflow(id="1", name="Leads").context()

        assert context["id"] == "1"
        assert context["name"] == "Leads"


class TestBridgeTool:
    """Tests for BridgeTool."""

    def test_input_schema_alias(self) -> None:
        tool = BridgeTool.model_validate(
            {"name": "search_workflows", "inputSchema": {"type": "object"}}
        )

        assert tool.input_schema == {"type": "object"}

    def test_extra_fields_allowed(self) -> None:
        tool = BridgeTool.model_validate({"name": "x", "annotations": {"readOnly": True}})

        assert tool.name == "x"
