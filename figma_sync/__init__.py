"""figma-sync: schema/manifest drift auditing and Code Connect template generation."""

from figma_sync.audit import DriftIssue, DriftIssueKind, DriftReport, audit
from figma_sync.core.errors import (
    LogicError,
    ManifestParseError,
    ParseError,
    RenderError,
    SchemaParseError,
    TemplateRenderError,
)
from figma_sync.manifest import ManifestFile, parse_manifest
from figma_sync.schema import ComponentDefinition, SchemaFile, parse_schema
from figma_sync.template import TemplateArtifact, render

__all__ = [
    # Models
    "SchemaFile",
    "ComponentDefinition",
    "ManifestFile",
    # Loading
    "parse_schema",
    "parse_manifest",
    # Drift
    "audit",
    "DriftIssue",
    "DriftIssueKind",
    "DriftReport",
    # Templates
    "render",
    "TemplateArtifact",
    # Errors
    "ParseError",
    "SchemaParseError",
    "ManifestParseError",
    "RenderError",
    "TemplateRenderError",
    "LogicError",
]
