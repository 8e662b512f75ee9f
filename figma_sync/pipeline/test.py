"""Tests for pipeline module."""

import json

import pytest

from figma_sync.audit import DriftIssueKind
from figma_sync.config import LoaderConfig
from figma_sync.core.errors import ManifestParseError, SchemaParseError
from figma_sync.manifest import parse_manifest
from figma_sync.pipeline import (
    RenderFailure,
    render_templates,
    run_audit,
    write_report,
    write_templates,
)
from figma_sync.schema import parse_schema


class TestRunAudit:
    """Tests for run_audit."""

    @pytest.mark.unit
    def test_clean_fixtures(self, schema_document, manifest_document, fixed_now):
        """Matching fixtures audit clean."""
        report = run_audit(schema_document, manifest_document, now=fixed_now)
        assert not report.has_issues
        assert report.generated_at == fixed_now

    @pytest.mark.unit
    def test_accepts_json_text(self, schema_document, manifest_document):
        """Documents may be passed as JSON text."""
        manifest_document["entries"] = manifest_document["entries"][:2]
        report = run_audit(json.dumps(schema_document), json.dumps(manifest_document))
        assert [(i.kind, i.component_name) for i in report.issues] == [
            (DriftIssueKind.MISSING_IN_MANIFEST, "CustomButton")
        ]

    @pytest.mark.unit
    def test_strict_config_applies_to_both(self, schema_document, manifest_document):
        """The loader config is passed to both loaders."""
        manifest_document["entries"][0]["extra"] = True
        run_audit(schema_document, manifest_document)
        with pytest.raises(ManifestParseError):
            run_audit(schema_document, manifest_document, LoaderConfig(ignore_unknown_keys=False))

    @pytest.mark.unit
    def test_schema_error_propagates(self, manifest_document):
        """Parse errors abort the audit."""
        with pytest.raises(SchemaParseError):
            run_audit("{", manifest_document)


class TestRenderTemplates:
    """Tests for render_templates."""

    @pytest.mark.unit
    def test_renders_all_in_schema_order(self, schema, manifest):
        """Every component renders, in schema order."""
        batch = render_templates(schema, manifest)
        assert not batch.has_failures
        assert [a.source_component_name for a in batch.artifacts] == schema.component_names

    @pytest.mark.unit
    def test_uses_manifest_url(self, schema, manifest):
        """The manifest figmaUrl becomes the template url line."""
        batch = render_templates(schema, manifest)
        first = batch.artifacts[0]
        assert first.body.splitlines()[0] == f"// url={manifest.url_for('LabeledSwitch')}"

    @pytest.mark.unit
    def test_continues_past_failures(self, schema_document, manifest_document):
        """A failing component is recorded and the others still render."""
        schema_document["components"].insert(1, {"componentName": "Divider", "properties": []})
        manifest_document["entries"] = [
            entry for entry in manifest_document["entries"] if entry["componentName"] != "CustomButton"
        ]
        schema = parse_schema(schema_document)
        manifest = parse_manifest(manifest_document)

        batch = render_templates(schema, manifest)

        assert [a.source_component_name for a in batch.artifacts] == [
            "LabeledSwitch",
            "CustomIconButton",
        ]
        assert [f.component_name for f in batch.failures] == ["Divider", "CustomButton"]
        assert batch.failures[1] == RenderFailure(
            component_name="CustomButton", reason="no usable figmaUrl in the manifest"
        )

    @pytest.mark.unit
    def test_workers_preserve_order(self, schema, manifest):
        """Threaded rendering returns the same artifacts in the same order."""
        serial = render_templates(schema, manifest)
        threaded = render_templates(schema, manifest, workers=4)
        assert threaded.artifacts == serial.artifacts


class TestWriters:
    """Tests for write_templates and write_report."""

    @pytest.mark.unit
    def test_write_templates(self, schema, manifest, tmp_path):
        """Artifacts are written as <Component>.figma.template.js."""
        batch = render_templates(schema, manifest)
        out_dir = tmp_path / "templates"

        written = write_templates(batch.artifacts, out_dir)

        assert [p.name for p in written] == [
            "LabeledSwitch.figma.template.js",
            "CustomIconButton.figma.template.js",
            "CustomButton.figma.template.js",
        ]
        assert written[0].read_text(encoding="utf-8") == batch.artifacts[0].file_text

    @pytest.mark.unit
    def test_write_report(self, schema_document, manifest_document, fixed_now, tmp_path):
        """Both report forms are written to the requested paths."""
        report = run_audit(schema_document, manifest_document, now=fixed_now)
        json_path = tmp_path / "reports" / "drift-report.json"
        md_path = tmp_path / "reports" / "drift-report.md"

        written = write_report(report, json_path, md_path)

        assert written == [json_path, md_path]
        assert json.loads(json_path.read_text(encoding="utf-8"))["issues"] == []
        assert "- CI status: PASS" in md_path.read_text(encoding="utf-8")
