"""Report projections for drift audits.

Turns a DriftReport into the structured JSON form consumed by tooling and
the Markdown form attached to CI runs. Both projections keep the report's
issue order and never merge or deduplicate issues.
"""

import json
from typing import Any

from figma_sync.audit import DriftIssue, DriftReport

REPORT_TITLE = "Figma Sync Drift Report"


def report_to_dict(report: DriftReport) -> dict[str, Any]:
    """Structured form of a report.

    Returns:
        Dict with `generatedAt` (ISO 8601), `issues` and `warnings`.
        `propertyName` is None for component-level issues.
    """
    return {
        "generatedAt": report.generated_at.isoformat(),
        "issues": [_issue_to_dict(issue) for issue in report.issues],
        "warnings": list(report.warnings),
    }


def _issue_to_dict(issue: DriftIssue) -> dict[str, Any]:
    return {
        "kind": issue.kind.value,
        "componentName": issue.component_name,
        "propertyName": issue.property_name,
        "detail": issue.detail,
    }


def render_report_json(report: DriftReport) -> str:
    """Render a report as two-space indented JSON."""
    return json.dumps(report_to_dict(report), indent=2)


def render_report_markdown(report: DriftReport) -> str:
    """Render a report as Markdown.

    Example output:
        # Figma Sync Drift Report
        Generated: 2024-05-01T12:00:00+00:00

        ## Summary
        - Components with drift: 1
        - Drift issues found: 1
        - VARIANT_OPTIONS_MISMATCH: 1
        - Warnings: 0
        - CI status: FAIL

        ## Foo
        - [VARIANT_OPTIONS_MISMATCH] `bar`: Variant options of `bar` differ: ...

    Args:
        report: Audit result to render.

    Returns:
        Markdown text ending with a newline.
    """
    lines: list[str] = [
        f"# {REPORT_TITLE}",
        f"Generated: {report.generated_at.isoformat()}",
        "",
        "## Summary",
    ]

    components = report.components()
    lines.append(f"- Components with drift: {len(components)}")
    lines.append(f"- Drift issues found: {len(report.issues)}")
    for kind, count in report.count_by_kind().items():
        lines.append(f"- {kind.value}: {count}")
    lines.append(f"- Warnings: {len(report.warnings)}")
    lines.append(f"- CI status: {'FAIL' if report.has_issues else 'PASS'}")
    lines.append("")

    if not components:
        lines.append("No drift detected.")
        lines.append("")

    for name in components:
        lines.append(f"## {name}")
        for issue in report.issues_for(name):
            lines.append(_format_issue(issue))
        lines.append("")

    if report.warnings:
        lines.append("## Audit warnings")
        for warning in report.warnings:
            lines.append(f"- {warning}")
        lines.append("")

    return "\n".join(lines).rstrip("\n") + "\n"


def _format_issue(issue: DriftIssue) -> str:
    if issue.property_name is None:
        return f"- [{issue.kind.value}] {issue.detail}"
    return f"- [{issue.kind.value}] `{issue.property_name}`: {issue.detail}"


def exit_code_for(report: DriftReport) -> int:
    """CI exit status: 1 when drift was found, else 0."""
    return 1 if report.has_issues else 0


__all__ = [
    "REPORT_TITLE",
    "report_to_dict",
    "render_report_json",
    "render_report_markdown",
    "exit_code_for",
]
