"""Report module - JSON and Markdown projections of drift reports."""

from .lib import (
    REPORT_TITLE,
    exit_code_for,
    render_report_json,
    render_report_markdown,
    report_to_dict,
)

__all__ = [
    "REPORT_TITLE",
    "report_to_dict",
    "render_report_json",
    "render_report_markdown",
    "exit_code_for",
]
