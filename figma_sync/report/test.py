"""Tests for report module."""

import json
from datetime import UTC, datetime

import pytest

from figma_sync.audit import DriftIssue, DriftIssueKind, DriftReport
from figma_sync.report import (
    exit_code_for,
    render_report_json,
    render_report_markdown,
    report_to_dict,
)

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def drift_report():
    """Report with a component-level issue, property issues and a warning."""
    return DriftReport(
        issues=(
            DriftIssue(
                DriftIssueKind.MISSING_IN_MANIFEST,
                "Baz",
                None,
                "Component `Baz` is declared in the schema but absent from the manifest",
            ),
            DriftIssue(
                DriftIssueKind.VARIANT_OPTIONS_MISMATCH,
                "Foo",
                "bar",
                "Variant options of `bar` differ: schema-only `B`; manifest-only (none)",
            ),
            DriftIssue(
                DriftIssueKind.PROPERTY_MISSING,
                "Foo",
                "qux",
                "Property `qux` not found in manifest",
            ),
        ),
        generated_at=NOW,
        warnings=("Variant option comparison skipped for `Foo.size`",),
    )


@pytest.fixture
def clean_report():
    """Report without drift."""
    return DriftReport(issues=(), generated_at=NOW)


class TestReportToDict:
    """Tests for the structured projection."""

    @pytest.mark.unit
    def test_shape(self, drift_report):
        """Keys follow the documented camelCase shape."""
        data = report_to_dict(drift_report)
        assert data["generatedAt"] == "2024-05-01T12:00:00+00:00"
        assert data["issues"][0] == {
            "kind": "MISSING_IN_MANIFEST",
            "componentName": "Baz",
            "propertyName": None,
            "detail": "Component `Baz` is declared in the schema but absent from the manifest",
        }
        assert data["warnings"] == ["Variant option comparison skipped for `Foo.size`"]

    @pytest.mark.unit
    def test_order_preserved(self, drift_report):
        """Issues keep report order."""
        data = report_to_dict(drift_report)
        assert [issue["propertyName"] for issue in data["issues"]] == [None, "bar", "qux"]


class TestRenderReportJson:
    """Tests for JSON rendering."""

    @pytest.mark.unit
    def test_parses_back(self, drift_report):
        """JSON output decodes to report_to_dict."""
        text = render_report_json(drift_report)
        assert json.loads(text) == report_to_dict(drift_report)

    @pytest.mark.unit
    def test_two_space_indent(self, clean_report):
        """Output is indented with two spaces."""
        text = render_report_json(clean_report)
        assert text.splitlines()[1].startswith('  "generatedAt"')
        assert "null" not in text


class TestRenderReportMarkdown:
    """Tests for Markdown rendering."""

    @pytest.mark.unit
    def test_summary(self, drift_report):
        """Summary lists totals, per-kind counts and CI status."""
        text = render_report_markdown(drift_report)
        assert text.startswith("# Figma Sync Drift Report\nGenerated: 2024-05-01T12:00:00+00:00\n")
        assert "- Components with drift: 2" in text
        assert "- Drift issues found: 3" in text
        assert "- MISSING_IN_MANIFEST: 1" in text
        assert "- PROPERTY_MISSING: 1" in text
        assert "- Warnings: 1" in text
        assert "- CI status: FAIL" in text

    @pytest.mark.unit
    def test_component_sections(self, drift_report):
        """Each component gets a heading followed by its issues."""
        lines = render_report_markdown(drift_report).splitlines()
        baz = lines.index("## Baz")
        foo = lines.index("## Foo")
        assert baz < foo
        assert lines[baz + 1] == (
            "- [MISSING_IN_MANIFEST] Component `Baz` is declared in the schema "
            "but absent from the manifest"
        )
        assert lines[foo + 1].startswith("- [VARIANT_OPTIONS_MISMATCH] `bar`: ")
        assert lines[foo + 2] == "- [PROPERTY_MISSING] `qux`: Property `qux` not found in manifest"

    @pytest.mark.unit
    def test_warnings_section(self, drift_report):
        """Warnings are listed after the component sections."""
        text = render_report_markdown(drift_report)
        assert "## Audit warnings\n- Variant option comparison skipped for `Foo.size`\n" in text
        assert text.endswith("\n")
        assert not text.endswith("\n\n")

    @pytest.mark.unit
    def test_clean_report(self, clean_report):
        """A clean report passes and has no component sections."""
        text = render_report_markdown(clean_report)
        assert "- CI status: PASS" in text
        assert "No drift detected." in text
        assert "## Audit warnings" not in text

    @pytest.mark.unit
    def test_component_named_warnings(self):
        """A component called Warnings keeps its own section apart from audit warnings."""
        issue = DriftIssue(
            DriftIssueKind.PROPERTY_MISSING,
            "Warnings",
            "level",
            "Property `level` not found in manifest",
        )
        report = DriftReport(
            issues=(issue,),
            generated_at=NOW,
            warnings=("Manifest entry `Foo` has placeholder node id or URL",),
        )
        lines = render_report_markdown(report).splitlines()
        assert lines.count("## Warnings") == 1
        assert lines.count("## Audit warnings") == 1
        section = lines.index("## Warnings")
        assert lines[section + 1] == "- [PROPERTY_MISSING] `level`: Property `level` not found in manifest"
        assert lines.index("## Audit warnings") > section

    @pytest.mark.unit
    def test_no_deduplication(self):
        """Identical issues are all rendered."""
        issue = DriftIssue(DriftIssueKind.PROPERTY_EXTRA, "Foo", "x", "Manifest property `x` not in schema")
        report = DriftReport(issues=(issue, issue), generated_at=NOW)
        text = render_report_markdown(report)
        assert text.count("[PROPERTY_EXTRA]") == 2


class TestExitCode:
    """Tests for exit_code_for."""

    @pytest.mark.unit
    def test_exit_codes(self, drift_report, clean_report):
        """Drift fails the build, a clean report passes."""
        assert exit_code_for(drift_report) == 1
        assert exit_code_for(clean_report) == 0
