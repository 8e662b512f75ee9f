"""Pipeline module - whole-catalog audit and template rendering jobs."""

from .lib import (
    RenderBatch,
    RenderFailure,
    render_templates,
    run_audit,
    write_report,
    write_templates,
)

__all__ = [
    "RenderFailure",
    "RenderBatch",
    "run_audit",
    "render_templates",
    "write_templates",
    "write_report",
]
