"""End-to-end tests: documents on disk to reports and templates on disk."""

import json

import pytest

from figma_sync import parse_manifest, parse_schema
from figma_sync.audit import DriftIssueKind
from figma_sync.pipeline import render_templates, run_audit, write_report, write_templates
from figma_sync.report import exit_code_for
from figma_sync.schema import schema_to_document


@pytest.mark.integration
class TestAuditWorkflow:
    """Audit a drifted manifest and check both report forms."""

    def test_drifted_manifest(self, schema_document, manifest_document, fixed_now, tmp_path):
        """Every kind of drift is reported once, in canonical order."""
        entries = {entry["componentName"]: entry for entry in manifest_document["entries"]}
        # LabeledSwitch: label changed kind, isLabelAtStart unbound, new extra property
        switch = entries["LabeledSwitch"]["boundProperties"]
        switch["label"] = "BOOLEAN"
        del switch["isLabelAtStart"]
        switch["thumbColor"] = "STRING"
        # CustomButton: a variant option disappeared from the design
        entries["CustomButton"]["boundProperties"]["size"]["options"] = ["Small", "Medium"]
        # CustomIconButton removed, an unknown component added
        del entries["CustomIconButton"]
        entries["Chip"] = {
            "componentName": "Chip",
            "nodeId": "160:2",
            "figmaUrl": "https://www.figma.com/design/abc/DS?node-id=160-2",
            "boundProperties": {"text": "STRING"},
        }
        manifest_document["entries"] = list(entries.values())

        report = run_audit(schema_document, manifest_document, now=fixed_now)

        assert [(i.component_name, i.property_name, i.kind) for i in report.issues] == [
            ("Chip", None, DriftIssueKind.MISSING_IN_SCHEMA),
            ("CustomButton", "size", DriftIssueKind.VARIANT_OPTIONS_MISMATCH),
            ("CustomIconButton", None, DriftIssueKind.MISSING_IN_MANIFEST),
            ("LabeledSwitch", "isLabelAtStart", DriftIssueKind.PROPERTY_MISSING),
            ("LabeledSwitch", "label", DriftIssueKind.PROPERTY_TYPE_MISMATCH),
            ("LabeledSwitch", "thumbColor", DriftIssueKind.PROPERTY_EXTRA),
        ]
        assert exit_code_for(report) == 1

        json_path, md_path = write_report(
            report, tmp_path / "drift-report.json", tmp_path / "drift-report.md"
        )
        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["generatedAt"] == "2024-05-01T12:00:00+00:00"
        assert len(data["issues"]) == 6

        markdown = md_path.read_text(encoding="utf-8")
        assert "- CI status: FAIL" in markdown
        assert "## LabeledSwitch" in markdown
        assert "schema-only `Large`" in markdown


@pytest.mark.integration
class TestTemplateWorkflow:
    """Render the fixture catalog to disk."""

    def test_render_catalog(self, fixtures_dir, golden_dir, tmp_path):
        """Templates for the fixture catalog match the golden files."""
        schema = parse_schema((fixtures_dir / "schema.json").read_bytes())
        manifest = parse_manifest((fixtures_dir / "manifest.json").read_text(encoding="utf-8"))

        batch = render_templates(schema, manifest, workers=3)
        written = write_templates(batch.artifacts, tmp_path)

        assert not batch.has_failures
        assert len(written) == 3
        for golden in golden_dir.iterdir():
            assert (tmp_path / golden.name).read_bytes() == golden.read_bytes()

    def test_schema_round_trip(self, schema_document):
        """Parsing and re-serializing the fixture schema is a no-op."""
        assert schema_to_document(parse_schema(schema_document)) == schema_document
