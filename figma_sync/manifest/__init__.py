"""Manifest module - the design tool's observed component bindings."""

from .lib import (
    ManifestEntry,
    ManifestFile,
    ObservedKind,
    manifest_to_document,
    parse_manifest,
)

__all__ = [
    "ObservedKind",
    "ManifestEntry",
    "ManifestFile",
    "parse_manifest",
    "manifest_to_document",
]
