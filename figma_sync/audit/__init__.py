"""Drift auditor: structural diff between schema and manifest."""

from .lib import DriftIssue, DriftIssueKind, DriftReport, audit, issue_sort_key

__all__ = [
    "DriftIssueKind",
    "DriftIssue",
    "DriftReport",
    "audit",
    "issue_sort_key",
]
