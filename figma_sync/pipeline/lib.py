"""Batch operations over whole schema/manifest pairs.

Ties the loaders, auditor and renderer together for the CLI and for callers
that want one call per job:
    - run_audit: load both documents and audit them
    - render_templates: render every schema component, collecting failures
    - write_templates / write_report: persist results
"""

from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from figma_sync.audit import DriftReport, audit
from figma_sync.config import LoaderConfig
from figma_sync.core.errors import RenderError, TemplateRenderError
from figma_sync.core.log import get_logger
from figma_sync.manifest import ManifestFile, parse_manifest
from figma_sync.report import render_report_json, render_report_markdown
from figma_sync.schema import ComponentDefinition, SchemaFile, parse_schema
from figma_sync.template import TemplateArtifact, render

logger = get_logger(__name__)

Document = str | bytes | Mapping[str, Any]


@dataclass(frozen=True)
class RenderFailure:
    """A component that could not be rendered.

    Attributes:
        component_name: Component that failed.
        reason: Why rendering failed.
    """

    component_name: str
    reason: str


@dataclass
class RenderBatch:
    """Result of rendering every component of a schema.

    Attributes:
        artifacts: Rendered templates, in schema order.
        failures: Components that failed, in schema order.
    """

    artifacts: list[TemplateArtifact] = field(default_factory=list)
    failures: list[RenderFailure] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        """Check if any component failed to render."""
        return len(self.failures) > 0


def run_audit(
    schema_document: Document,
    manifest_document: Document,
    config: LoaderConfig | None = None,
    *,
    now: datetime | Callable[[], datetime] | None = None,
) -> DriftReport:
    """Load a schema and a manifest and audit them.

    Raises:
        SchemaParseError: If the schema document is invalid.
        ManifestParseError: If the manifest document is invalid.
    """
    schema = parse_schema(schema_document, config)
    manifest = parse_manifest(manifest_document, config)
    report = audit(schema, manifest, now=now)
    logger.info(
        f"Audit finished: {len(report.issues)} issue(s) across "
        f"{len(report.components())} component(s)"
    )
    return report


def _render_component(
    component: ComponentDefinition,
    manifest: ManifestFile,
) -> TemplateArtifact | RenderFailure:
    url = manifest.url_for(component.component_name)
    try:
        if url is None:
            raise TemplateRenderError(
                component.component_name, "no usable figmaUrl in the manifest"
            )
        return render(component, url)
    except RenderError as e:
        logger.warning(str(e))
        return RenderFailure(component_name=e.component_name, reason=e.reason)


def render_templates(
    schema: SchemaFile,
    manifest: ManifestFile,
    *,
    workers: int = 1,
) -> RenderBatch:
    """Render a template for every schema component.

    Each component uses its manifest entry's figmaUrl as the source URL.
    A component that cannot be rendered is recorded as a RenderFailure and
    the remaining components are still rendered. LogicError propagates.

    Args:
        schema: Components to render.
        manifest: Source of the figmaUrl per component.
        workers: Number of threads. Output order is schema order regardless.

    Returns:
        RenderBatch with artifacts and failures.
    """
    components = list(schema.components)

    if workers > 1 and len(components) > 1:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(
                executor.map(lambda component: _render_component(component, manifest), components)
            )
    else:
        results = [_render_component(component, manifest) for component in components]

    batch = RenderBatch()
    for result in results:
        if isinstance(result, RenderFailure):
            batch.failures.append(result)
        else:
            batch.artifacts.append(result)

    logger.info(
        f"Rendered {len(batch.artifacts)} template(s), {len(batch.failures)} failure(s)"
    )
    return batch


def write_templates(artifacts: list[TemplateArtifact], out_dir: Path) -> list[Path]:
    """Write each artifact to `out_dir/<file_name>`.

    Returns:
        Paths written, in artifact order.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for artifact in artifacts:
        path = out_dir / artifact.file_name
        path.write_text(artifact.file_text, encoding="utf-8")
        logger.debug(f"Wrote {path}")
        written.append(path)
    return written


def write_report(
    report: DriftReport,
    json_path: Path | None = None,
    markdown_path: Path | None = None,
) -> list[Path]:
    """Write the JSON and/or Markdown projections of a report.

    Returns:
        Paths written.
    """
    written: list[Path] = []
    if json_path is not None:
        json_path.parent.mkdir(parents=True, exist_ok=True)
        json_path.write_text(render_report_json(report) + "\n", encoding="utf-8")
        written.append(json_path)
    if markdown_path is not None:
        markdown_path.parent.mkdir(parents=True, exist_ok=True)
        markdown_path.write_text(render_report_markdown(report), encoding="utf-8")
        written.append(markdown_path)
    return written


__all__ = [
    "RenderFailure",
    "RenderBatch",
    "run_audit",
    "render_templates",
    "write_templates",
    "write_report",
]
