"""Tests for the error taxonomy."""

import pytest

from figma_sync.core.errors import (
    FigmaSyncError,
    LogicError,
    ManifestParseError,
    ParseError,
    ParseProblem,
    RenderError,
    SchemaParseError,
    TemplateRenderError,
)


class TestParseErrors:
    """Tests for ParseError and its document-specific subclasses."""

    @pytest.mark.unit
    def test_schema_error_names_document_and_path(self):
        """Message carries the document type and offending path."""
        err = SchemaParseError("Field required", path="components[0].componentName")
        assert err.document_type == "schema"
        assert err.path == "components[0].componentName"
        assert "schema document" in str(err)
        assert "components[0].componentName" in str(err)

    @pytest.mark.unit
    def test_manifest_error_root_path(self):
        """Empty path is reported as the document root."""
        err = ManifestParseError("Document is not valid JSON")
        assert err.document_type == "manifest"
        assert "<root>" in str(err)

    @pytest.mark.unit
    def test_problems_are_kept(self):
        """All problems are exposed on the exception."""
        problems = [
            ParseProblem("entries[0].nodeId", "Field required", "missing"),
            ParseProblem("entries[1].nodeId", "Field required", "missing"),
        ]
        err = ManifestParseError("Field required", "entries[0].nodeId", problems)
        assert err.problems == problems

    @pytest.mark.unit
    def test_hierarchy(self):
        """Every error derives from FigmaSyncError."""
        assert issubclass(SchemaParseError, ParseError)
        assert issubclass(ManifestParseError, ParseError)
        assert issubclass(TemplateRenderError, RenderError)
        for cls in (ParseError, RenderError, LogicError):
            assert issubclass(cls, FigmaSyncError)


class TestRenderError:
    """Tests for RenderError."""

    @pytest.mark.unit
    def test_carries_component_and_reason(self):
        """Component name and reason are exposed."""
        err = TemplateRenderError("Empty", "component has no properties")
        assert err.component_name == "Empty"
        assert err.reason == "component has no properties"
        assert "Empty" in str(err)
