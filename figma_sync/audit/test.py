"""Unit tests for the drift auditor."""

from datetime import UTC, datetime

import pytest

from figma_sync.audit import DriftIssue, DriftIssueKind, DriftReport, audit
from figma_sync.manifest import parse_manifest
from figma_sync.schema import parse_schema

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


def _schema(*components):
    return parse_schema({"components": list(components)})


def _manifest(*entries):
    return parse_manifest({"entries": list(entries)})


def _component(name, *properties, callbacks=None):
    component = {"componentName": name, "properties": list(properties)}
    if callbacks:
        component["callbacks"] = callbacks
    return component


def _entry(name, bound):
    return {
        "componentName": name,
        "nodeId": "1:2",
        "figmaUrl": "https://www.figma.com/design/abc/DS?node-id=1-2",
        "boundProperties": bound,
    }


class TestAuditScenarios:
    """Concrete drift scenarios."""

    @pytest.mark.unit
    def test_variant_option_set_mismatch(self):
        """Foo.bar [A, B] vs [A] is a single mismatch naming B as schema-only."""
        schema = _schema(
            _component("Foo", {"name": "bar", "kind": "VARIANT", "options": ["A", "B"]})
        )
        manifest = _manifest(_entry("Foo", {"bar": {"kind": "VARIANT", "options": ["A"]}}))

        report = audit(schema, manifest, now=NOW)

        assert len(report.issues) == 1
        issue = report.issues[0]
        assert issue.kind == DriftIssueKind.VARIANT_OPTIONS_MISMATCH
        assert issue.component_name == "Foo"
        assert issue.property_name == "bar"
        assert "schema-only `B`" in issue.detail
        assert "manifest-only (none)" in issue.detail

    @pytest.mark.unit
    def test_component_missing_in_manifest(self):
        """Baz absent from the manifest yields exactly one component-level issue."""
        schema = _schema(
            _component("Baz", {"name": "a", "kind": "STRING"}, {"name": "b", "kind": "BOOLEAN"})
        )
        manifest = _manifest()

        report = audit(schema, manifest, now=NOW)

        assert report.issues == (
            DriftIssue(
                kind=DriftIssueKind.MISSING_IN_MANIFEST,
                component_name="Baz",
                property_name=None,
                detail="Component `Baz` is declared in the schema but absent from the manifest",
            ),
        )

    @pytest.mark.unit
    def test_component_missing_in_schema(self):
        """Manifest-only components yield MISSING_IN_SCHEMA and nothing else."""
        schema = _schema(_component("Foo", {"name": "a", "kind": "STRING"}))
        manifest = _manifest(
            _entry("Foo", {"a": "STRING"}),
            _entry("Qux", {"x": "BOOLEAN"}),
        )

        report = audit(schema, manifest, now=NOW)

        assert [(i.kind, i.component_name) for i in report.issues] == [
            (DriftIssueKind.MISSING_IN_SCHEMA, "Qux")
        ]

    @pytest.mark.unit
    def test_property_missing_and_extra(self):
        """Unbound schema properties and unknown manifest properties are both drift."""
        schema = _schema(
            _component("Foo", {"name": "a", "kind": "STRING"}, {"name": "b", "kind": "BOOLEAN"})
        )
        manifest = _manifest(_entry("Foo", {"a": "STRING", "z": "STRING"}))

        report = audit(schema, manifest, now=NOW)

        assert [(i.kind, i.property_name) for i in report.issues] == [
            (DriftIssueKind.PROPERTY_MISSING, "b"),
            (DriftIssueKind.PROPERTY_EXTRA, "z"),
        ]

    @pytest.mark.unit
    def test_type_mismatch(self):
        """Kind mismatch names both kinds and skips option comparison."""
        schema = _schema(
            _component("Foo", {"name": "size", "kind": "VARIANT", "options": ["S", "L"]})
        )
        manifest = _manifest(_entry("Foo", {"size": "STRING"}))

        report = audit(schema, manifest, now=NOW)

        assert len(report.issues) == 1
        issue = report.issues[0]
        assert issue.kind == DriftIssueKind.PROPERTY_TYPE_MISMATCH
        assert issue.detail == "`size` expected `VARIANT` but manifest has `STRING`"


class TestAuditProperties:
    """Determinism, no-false-drift and coverage properties."""

    @pytest.mark.unit
    def test_no_false_drift(self, schema, manifest):
        """The matching fixtures produce no issues."""
        report = audit(schema, manifest, now=NOW)
        assert report.issues == ()
        assert not report.has_issues
        assert report.warnings == ()

    @pytest.mark.unit
    def test_option_order_is_not_drift(self):
        """Reordered variant options are the same set."""
        schema = _schema(
            _component("Foo", {"name": "bar", "kind": "VARIANT", "options": ["A", "B", "C"]})
        )
        manifest = _manifest(
            _entry("Foo", {"bar": {"kind": "VARIANT", "options": ["C", "A", "B"]}})
        )
        assert audit(schema, manifest, now=NOW).issues == ()

    @pytest.mark.unit
    def test_determinism(self):
        """Two audits of the same inputs yield identical issue sequences."""
        schema = _schema(
            _component("Zed", {"name": "a", "kind": "STRING"}),
            _component("Alpha", {"name": "b", "kind": "BOOLEAN"}, {"name": "c", "kind": "STRING"}),
        )
        manifest = _manifest(
            _entry("Alpha", {"c": "BOOLEAN", "d": "STRING"}),
            _entry("Mid", {}),
        )

        first = audit(schema, manifest)
        second = audit(schema, manifest)

        assert first.issues == second.issues

    @pytest.mark.unit
    def test_sort_order(self):
        """Issues sort by component, component-level first, then property, then kind."""
        schema = _schema(
            _component("Zed", {"name": "a", "kind": "STRING"}),
            _component("Alpha", {"name": "b", "kind": "BOOLEAN"}, {"name": "c", "kind": "STRING"}),
        )
        manifest = _manifest(
            _entry("Alpha", {"c": "BOOLEAN", "a": "STRING"}),
            _entry("Mid", {}),
        )

        report = audit(schema, manifest, now=NOW)

        assert [(i.component_name, i.property_name, i.kind) for i in report.issues] == [
            ("Alpha", "a", DriftIssueKind.PROPERTY_EXTRA),
            ("Alpha", "b", DriftIssueKind.PROPERTY_MISSING),
            ("Alpha", "c", DriftIssueKind.PROPERTY_TYPE_MISMATCH),
            ("Mid", None, DriftIssueKind.MISSING_IN_SCHEMA),
            ("Zed", None, DriftIssueKind.MISSING_IN_MANIFEST),
        ]

    @pytest.mark.unit
    def test_symmetric_coverage(self):
        """Each component in the symmetric difference gets exactly one issue."""
        schema = _schema(
            _component("OnlySchema", {"name": "a", "kind": "STRING"}),
            _component("Both", {"name": "a", "kind": "STRING"}),
        )
        manifest = _manifest(
            _entry("Both", {"a": "STRING"}),
            _entry("OnlyManifest", {"a": "BOOLEAN", "b": "STRING"}),
        )

        report = audit(schema, manifest, now=NOW)

        for name in ("OnlySchema", "OnlyManifest"):
            issues = report.issues_for(name)
            assert len(issues) == 1
            assert issues[0].kind in (
                DriftIssueKind.MISSING_IN_MANIFEST,
                DriftIssueKind.MISSING_IN_SCHEMA,
            )
            assert issues[0].property_name is None


class TestAuditWarnings:
    """Tests for non-fatal audit warnings."""

    @pytest.mark.unit
    def test_variant_without_options_skipped(self):
        """A manifest VARIANT with no option list is a warning, not drift."""
        schema = _schema(
            _component("Foo", {"name": "bar", "kind": "VARIANT", "options": ["A", "B"]})
        )
        manifest = _manifest(_entry("Foo", {"bar": "VARIANT"}))

        report = audit(schema, manifest, now=NOW)

        assert report.issues == ()
        assert len(report.warnings) == 1
        assert "Foo.bar" in report.warnings[0]

    @pytest.mark.unit
    def test_placeholder_entry_warning(self):
        """Placeholder node ids are reported as warnings."""
        schema = _schema(_component("Foo", {"name": "a", "kind": "STRING"}))
        entry = _entry("Foo", {"a": "STRING"})
        entry["nodeId"] = "<node-id>"
        manifest = _manifest(entry)

        report = audit(schema, manifest, now=NOW)

        assert not report.has_issues
        assert report.warnings == ("Manifest entry `Foo` has placeholder node id or URL",)


class TestDriftReport:
    """Tests for DriftReport helpers."""

    @pytest.mark.unit
    def test_generated_at_injection(self):
        """now accepts a datetime or a callable."""
        schema = _schema()
        manifest = _manifest()
        assert audit(schema, manifest, now=NOW).generated_at == NOW
        assert audit(schema, manifest, now=lambda: NOW).generated_at == NOW

    @pytest.mark.unit
    def test_generated_at_defaults_to_utc(self):
        """Without now the timestamp is timezone-aware UTC."""
        report = audit(_schema(), _manifest())
        assert report.generated_at.tzinfo is UTC

    @pytest.mark.unit
    def test_grouping_helpers(self):
        """components, issues_for and count_by_kind follow report order."""
        report = DriftReport(
            issues=(
                DriftIssue(DriftIssueKind.PROPERTY_MISSING, "A", "x", "d1"),
                DriftIssue(DriftIssueKind.PROPERTY_MISSING, "A", "y", "d2"),
                DriftIssue(DriftIssueKind.MISSING_IN_SCHEMA, "B", None, "d3"),
            ),
            generated_at=NOW,
        )

        assert report.components() == ["A", "B"]
        assert [i.detail for i in report.issues_for("A")] == ["d1", "d2"]
        assert report.issues_for("C") == []
        assert report.count_by_kind() == {
            DriftIssueKind.MISSING_IN_SCHEMA: 1,
            DriftIssueKind.PROPERTY_MISSING: 2,
        }
        assert list(report.count_by_kind()) == [
            DriftIssueKind.MISSING_IN_SCHEMA,
            DriftIssueKind.PROPERTY_MISSING,
        ]
