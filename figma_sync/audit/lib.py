"""Drift auditing between the declared schema and the observed manifest.

`audit()` is a pure function: it compares the two models and returns a
DriftReport whose issues are sorted by component, then property (component
level issues first), then kind. The same inputs always produce the same
issue sequence; only `generated_at` varies between runs.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from figma_sync.core.log import get_logger
from figma_sync.manifest import ManifestEntry, ManifestFile
from figma_sync.schema import ComponentDefinition, SchemaFile, VariantKind

logger = get_logger(__name__)


class DriftIssueKind(str, Enum):
    """Classification of a single discrepancy."""

    MISSING_IN_MANIFEST = "MISSING_IN_MANIFEST"  # Schema component absent from manifest
    MISSING_IN_SCHEMA = "MISSING_IN_SCHEMA"  # Manifest component absent from schema
    PROPERTY_MISSING = "PROPERTY_MISSING"  # Schema property not bound in manifest
    PROPERTY_EXTRA = "PROPERTY_EXTRA"  # Manifest property not declared in schema
    PROPERTY_TYPE_MISMATCH = "PROPERTY_TYPE_MISMATCH"
    VARIANT_OPTIONS_MISMATCH = "VARIANT_OPTIONS_MISMATCH"


@dataclass(frozen=True)
class DriftIssue:
    """A single discrepancy between schema and manifest.

    Attributes:
        kind: Issue classification.
        component_name: Component the issue belongs to.
        property_name: Property the issue belongs to, None for component-level issues.
        detail: Human-readable description.
    """

    kind: DriftIssueKind
    component_name: str
    property_name: str | None
    detail: str


def issue_sort_key(issue: DriftIssue) -> tuple[str, tuple[int, str], str]:
    """Ordering key: component, then property (None first), then kind."""
    if issue.property_name is None:
        property_key = (0, "")
    else:
        property_key = (1, issue.property_name)
    return (issue.component_name, property_key, issue.kind.value)


@dataclass(frozen=True)
class DriftReport:
    """Result of one audit.

    Attributes:
        issues: Discrepancies in canonical order.
        generated_at: UTC timestamp of the audit.
        warnings: Non-fatal notes (skipped comparisons, placeholder ids).
    """

    issues: tuple[DriftIssue, ...]
    generated_at: datetime
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_issues(self) -> bool:
        """True when any drift was found."""
        return len(self.issues) > 0

    def components(self) -> list[str]:
        """Names of components with issues, in report order."""
        names: list[str] = []
        for issue in self.issues:
            if issue.component_name not in names:
                names.append(issue.component_name)
        return names

    def issues_for(self, component_name: str) -> list[DriftIssue]:
        """Issues belonging to one component, in report order."""
        return [issue for issue in self.issues if issue.component_name == component_name]

    def count_by_kind(self) -> dict[DriftIssueKind, int]:
        """Issue counts for the kinds present, in DriftIssueKind order."""
        counts = {kind: 0 for kind in DriftIssueKind}
        for issue in self.issues:
            counts[issue.kind] += 1
        return {kind: count for kind, count in counts.items() if count}


def audit(
    schema: SchemaFile,
    manifest: ManifestFile,
    *,
    now: datetime | Callable[[], datetime] | None = None,
) -> DriftReport:
    """Compare a schema with a manifest.

    Algorithm:
        1. Components only in the schema yield MISSING_IN_MANIFEST, components
           only in the manifest yield MISSING_IN_SCHEMA. Nothing else is
           reported for them.
        2. Components in both are compared property by property: missing,
           extra, kind mismatch, and VARIANT option-set mismatch (compared as
           sets, one issue per property).
        3. Issues are sorted with `issue_sort_key`.

    Args:
        schema: Declared catalog.
        manifest: Observed design-tool bindings.
        now: Report timestamp, or a callable producing it. Defaults to the
            current UTC time.

    Returns:
        DriftReport. An empty issue list means no drift.

    Example:
        >>> report = audit(schema, manifest)
        >>> if report.has_issues:
        ...     print(render_report_markdown(report))
    """
    issues: list[DriftIssue] = []
    warnings: list[str] = []

    schema_names = set(schema.component_names)
    manifest_names = set(manifest.component_names)

    for name in schema.component_names:
        if name not in manifest_names:
            issues.append(
                DriftIssue(
                    kind=DriftIssueKind.MISSING_IN_MANIFEST,
                    component_name=name,
                    property_name=None,
                    detail=f"Component `{name}` is declared in the schema but absent from the manifest",
                )
            )

    for name in manifest.component_names:
        if name not in schema_names:
            issues.append(
                DriftIssue(
                    kind=DriftIssueKind.MISSING_IN_SCHEMA,
                    component_name=name,
                    property_name=None,
                    detail=f"Component `{name}` is present in the manifest but not declared in the schema",
                )
            )

    for component in schema.components:
        entry = manifest.get(component.component_name)
        if entry is None:
            continue
        if entry.has_placeholder_ids:
            warnings.append(
                f"Manifest entry `{entry.component_name}` has placeholder node id or URL"
            )
        issues.extend(_compare_component(component, entry, warnings))

    issues.sort(key=issue_sort_key)

    if callable(now):
        generated_at = now()
    else:
        generated_at = now or datetime.now(UTC)

    logger.debug(
        f"Audited {len(schema_names | manifest_names)} component(s): "
        f"{len(issues)} issue(s), {len(warnings)} warning(s)"
    )
    return DriftReport(issues=tuple(issues), generated_at=generated_at, warnings=tuple(warnings))


def _compare_component(
    component: ComponentDefinition,
    entry: ManifestEntry,
    warnings: list[str],
) -> list[DriftIssue]:
    """Compare the properties of a component present on both sides."""
    name = component.component_name
    bound = entry.bound_properties
    issues: list[DriftIssue] = []

    for prop in component.properties:
        observed = bound.get(prop.name)
        if observed is None:
            issues.append(
                DriftIssue(
                    kind=DriftIssueKind.PROPERTY_MISSING,
                    component_name=name,
                    property_name=prop.name,
                    detail=f"Property `{prop.name}` not found in manifest",
                )
            )
            continue

        if observed.tag != prop.tag:
            issues.append(
                DriftIssue(
                    kind=DriftIssueKind.PROPERTY_TYPE_MISMATCH,
                    component_name=name,
                    property_name=prop.name,
                    detail=(
                        f"`{prop.name}` expected `{prop.tag.value}` "
                        f"but manifest has `{observed.tag.value}`"
                    ),
                )
            )
            continue

        if isinstance(prop.kind, VariantKind):
            if observed.options is None:
                warnings.append(
                    f"Variant option comparison skipped for `{name}.{prop.name}`: "
                    f"option list not available in manifest"
                )
                continue
            issue = _compare_options(name, prop.name, prop.kind.options, observed.options)
            if issue is not None:
                issues.append(issue)

    for bound_name in bound:
        if component.get_property(bound_name) is None:
            issues.append(
                DriftIssue(
                    kind=DriftIssueKind.PROPERTY_EXTRA,
                    component_name=name,
                    property_name=bound_name,
                    detail=f"Manifest property `{bound_name}` not in schema",
                )
            )

    return issues


def _compare_options(
    component_name: str,
    property_name: str,
    declared: tuple[str, ...],
    observed: tuple[str, ...],
) -> DriftIssue | None:
    """Compare variant option sets, ignoring order."""
    schema_only = sorted(set(declared) - set(observed))
    manifest_only = sorted(set(observed) - set(declared))
    if not schema_only and not manifest_only:
        return None
    return DriftIssue(
        kind=DriftIssueKind.VARIANT_OPTIONS_MISMATCH,
        component_name=component_name,
        property_name=property_name,
        detail=(
            f"Variant options of `{property_name}` differ: "
            f"schema-only {_format_options(schema_only)}; "
            f"manifest-only {_format_options(manifest_only)}"
        ),
    )


def _format_options(options: list[str]) -> str:
    if not options:
        return "(none)"
    return ", ".join(f"`{option}`" for option in options)


__all__ = [
    "DriftIssueKind",
    "DriftIssue",
    "DriftReport",
    "audit",
    "issue_sort_key",
]
