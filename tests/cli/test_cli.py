"""Tests for the figma-sync CLI commands."""

import json
import logging
import subprocess
import sys
from pathlib import Path

import pytest

from figma_sync.__main__ import main

ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """Keep FIGMA_SYNC_* variables from the host out of the tests."""
    for name in (
        "FIGMA_SYNC_SCHEMA_PATH",
        "FIGMA_SYNC_MANIFEST_PATH",
        "FIGMA_SYNC_TEMPLATES_DIR",
        "FIGMA_SYNC_REPORTS_DIR",
        "FIGMA_SYNC_STRICT",
        "FIGMA_SYNC_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def documents(tmp_path, schema_document, manifest_document):
    """Write the fixture documents to tmp_path and return their paths."""
    schema_path = tmp_path / "component-schema.json"
    manifest_path = tmp_path / "components.manifest.json"
    schema_path.write_text(json.dumps(schema_document), encoding="utf-8")
    manifest_path.write_text(json.dumps(manifest_document), encoding="utf-8")
    return schema_path, manifest_path


class TestAuditCommand:
    """Tests for `figma-sync audit`."""

    @pytest.mark.unit
    def test_clean_audit(self, documents, tmp_path):
        """No drift exits 0 and writes both reports."""
        schema_path, manifest_path = documents
        json_path = tmp_path / "out" / "report.json"
        md_path = tmp_path / "out" / "report.md"

        code = main(
            [
                "audit",
                "--schema", str(schema_path),
                "--manifest", str(manifest_path),
                "--report-json", str(json_path),
                "--report-md", str(md_path),
            ]
        )

        assert code == 0
        assert json.loads(json_path.read_text(encoding="utf-8"))["issues"] == []
        assert "- CI status: PASS" in md_path.read_text(encoding="utf-8")

    @pytest.mark.unit
    def test_drift_exits_1(self, documents, tmp_path, manifest_document):
        """Drift exits 1."""
        schema_path, manifest_path = documents
        manifest_document["entries"].pop()
        manifest_path.write_text(json.dumps(manifest_document), encoding="utf-8")
        json_path = tmp_path / "report.json"

        code = main(
            [
                "audit",
                "--schema", str(schema_path),
                "--manifest", str(manifest_path),
                "--report-json", str(json_path),
                "--report-md", str(tmp_path / "report.md"),
            ]
        )

        assert code == 1
        issues = json.loads(json_path.read_text(encoding="utf-8"))["issues"]
        assert [(i["kind"], i["componentName"]) for i in issues] == [
            ("MISSING_IN_MANIFEST", "CustomButton")
        ]

    @pytest.mark.unit
    def test_reports_dir_from_environment(self, documents, tmp_path, monkeypatch):
        """Report paths default to FIGMA_SYNC_REPORTS_DIR."""
        schema_path, manifest_path = documents
        monkeypatch.setenv("FIGMA_SYNC_REPORTS_DIR", str(tmp_path / "reports"))

        code = main(["audit", "--schema", str(schema_path), "--manifest", str(manifest_path)])

        assert code == 0
        assert (tmp_path / "reports" / "drift-report.json").exists()
        assert (tmp_path / "reports" / "drift-report.md").exists()

    @pytest.mark.unit
    def test_invalid_schema(self, documents, tmp_path, caplog):
        """Parse errors exit 2 and name the document."""
        schema_path, manifest_path = documents
        schema_path.write_text('{"components": [{"componentName": "X"}]}', encoding="utf-8")

        with caplog.at_level(logging.ERROR):
            code = main(
                [
                    "audit",
                    "--schema", str(schema_path),
                    "--manifest", str(manifest_path),
                    "--report-json", str(tmp_path / "r.json"),
                    "--report-md", str(tmp_path / "r.md"),
                ]
            )

        assert code == 2
        assert "Invalid schema document at components[0].properties" in caplog.text
        assert not (tmp_path / "r.json").exists()

    @pytest.mark.unit
    def test_unwritable_report_exits_2(self, documents, tmp_path, caplog):
        """A report path under a regular file is an I/O error, not a traceback."""
        schema_path, manifest_path = documents
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        with caplog.at_level(logging.ERROR):
            code = main(
                [
                    "audit",
                    "--schema", str(schema_path),
                    "--manifest", str(manifest_path),
                    "--report-json", str(blocker / "r.json"),
                    "--report-md", str(tmp_path / "r.md"),
                ]
            )

        assert code == 2
        assert "Could not write report" in caplog.text


class TestTemplatesCommand:
    """Tests for `figma-sync templates`."""

    @pytest.mark.unit
    def test_writes_templates(self, documents, tmp_path, golden_dir):
        """One template per component, matching the golden files."""
        schema_path, manifest_path = documents
        out_dir = tmp_path / "templates"

        code = main(
            [
                "templates",
                "--schema", str(schema_path),
                "--manifest", str(manifest_path),
                "--out-dir", str(out_dir),
            ]
        )

        assert code == 0
        assert sorted(p.name for p in out_dir.iterdir()) == [
            "CustomButton.figma.template.js",
            "CustomIconButton.figma.template.js",
            "LabeledSwitch.figma.template.js",
        ]
        for name in ("LabeledSwitch", "CustomIconButton"):
            file_name = f"{name}.figma.template.js"
            assert (out_dir / file_name).read_text(encoding="utf-8") == (
                golden_dir / file_name
            ).read_text(encoding="utf-8")

    @pytest.mark.unit
    def test_failure_exits_1(self, documents, tmp_path, schema_document):
        """A component without properties fails the run but others are written."""
        schema_path, manifest_path = documents
        schema_document["components"].append({"componentName": "Divider", "properties": []})
        schema_path.write_text(json.dumps(schema_document), encoding="utf-8")
        out_dir = tmp_path / "templates"

        code = main(
            [
                "templates",
                "--schema", str(schema_path),
                "--manifest", str(manifest_path),
                "--out-dir", str(out_dir),
                "--workers", "2",
            ]
        )

        assert code == 1
        assert len(list(out_dir.iterdir())) == 3

    @pytest.mark.unit
    def test_unwritable_out_dir_exits_2(self, documents, tmp_path, caplog):
        """An output directory that is a regular file exits 2."""
        schema_path, manifest_path = documents
        out_dir = tmp_path / "templates"
        out_dir.write_text("", encoding="utf-8")

        with caplog.at_level(logging.ERROR):
            code = main(
                [
                    "templates",
                    "--schema", str(schema_path),
                    "--manifest", str(manifest_path),
                    "--out-dir", str(out_dir),
                ]
            )

        assert code == 2
        assert "Could not write templates" in caplog.text


class TestValidateCommand:
    """Tests for `figma-sync validate`."""

    @pytest.mark.unit
    def test_valid_documents(self, documents):
        """Valid documents exit 0."""
        schema_path, manifest_path = documents
        assert main(["validate", "--schema", str(schema_path), "--manifest", str(manifest_path)]) == 0

    @pytest.mark.unit
    def test_strict_rejects_unknown_keys(self, documents, manifest_document):
        """--strict turns unknown keys into errors."""
        schema_path, manifest_path = documents
        manifest_document["entries"][0]["kotlinFqName"] = "core.LabeledSwitch"
        manifest_path.write_text(json.dumps(manifest_document), encoding="utf-8")
        args = ["validate", "--schema", str(schema_path), "--manifest", str(manifest_path)]

        assert main(args) == 0
        assert main([*args, "--strict"]) == 1

    @pytest.mark.unit
    def test_missing_file(self, tmp_path):
        """An unreadable schema exits 1."""
        assert main(["validate", "--schema", str(tmp_path / "missing.json")]) == 1


class TestEntryPoint:
    """Tests for the module entry point."""

    @pytest.mark.unit
    def test_no_command_prints_help(self, capsys):
        """Without a command the help is printed and the exit status is 1."""
        assert main([]) == 1
        assert "usage: figma-sync" in capsys.readouterr().out

    @pytest.mark.unit
    def test_env_command(self, caplog):
        """env lists every variable."""
        with caplog.at_level(logging.INFO):
            assert main(["env"]) == 0
        assert "FIGMA_SYNC_SCHEMA_PATH" in caplog.text
        assert "FIGMA_SYNC_LOG_LEVEL" in caplog.text

    @pytest.mark.integration
    def test_module_help(self):
        """`python -m figma_sync --help` runs and exits cleanly."""
        result = subprocess.run(
            [sys.executable, "-m", "figma_sync", "--help"],
            capture_output=True,
            text=True,
            cwd=ROOT,
            timeout=30,
        )
        assert result.returncode == 0
        assert "audit" in result.stdout
        assert "templates" in result.stdout
