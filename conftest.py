"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Schema and manifest document fixtures shared by unit and integration tests
- Golden template locations
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
from dotenv import load_dotenv

if TYPE_CHECKING:
    from figma_sync.manifest import ManifestFile
    from figma_sync.schema import SchemaFile

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Configuration Constants
# =============================================================================

FIXTURES_DIR = Path(__file__).parent / "tests" / "fixtures"
GOLDEN_DIR = FIXTURES_DIR / "golden"
FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC)


def _load_fixture(name: str) -> dict[str, Any]:
    """Read a JSON fixture document."""
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


# =============================================================================
# Document Fixtures
# =============================================================================


@pytest.fixture
def schema_document() -> dict[str, Any]:
    """Decoded schema fixture (LabeledSwitch, CustomIconButton, CustomButton).

    Returns:
        A fresh copy of the schema document, safe to mutate.
    """
    return _load_fixture("schema.json")


@pytest.fixture
def manifest_document() -> dict[str, Any]:
    """Decoded manifest fixture matching the schema fixture without drift.

    Returns:
        A fresh copy of the manifest document, safe to mutate.
    """
    return _load_fixture("manifest.json")


@pytest.fixture
def schema(schema_document: dict[str, Any]) -> SchemaFile:
    """Parsed schema fixture."""
    from figma_sync.schema import parse_schema

    return parse_schema(schema_document)


@pytest.fixture
def manifest(manifest_document: dict[str, Any]) -> ManifestFile:
    """Parsed manifest fixture."""
    from figma_sync.manifest import parse_manifest

    return parse_manifest(manifest_document)


# =============================================================================
# Common Test Fixtures
# =============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    """Deterministic report timestamp."""
    return FIXED_NOW


@pytest.fixture
def golden_dir() -> Path:
    """Directory holding golden template files."""
    return GOLDEN_DIR


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding JSON fixture documents."""
    return FIXTURES_DIR
