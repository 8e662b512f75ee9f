"""Centralized configuration management for figma-sync.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Loader behaviour is configured separately through `LoaderConfig`, which is
passed explicitly to `parse_schema()` / `parse_manifest()`.

Example:
    >>> from figma_sync.config import EnvVar, get_environment
    >>>
    >>> schema_path = get_environment(EnvVar.SCHEMA_PATH)  # Returns Path
    >>> strict = get_environment(EnvVar.STRICT)  # Returns bool
    >>>
    >>> # Override at runtime
    >>> schema_path = get_environment(EnvVar.SCHEMA_PATH, override=Path("x.json"))
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "FIGMA_SYNC_SCHEMA_PATH").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, bool, Path).
        description: Human-readable description.
        category: Grouping category for documentation.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"


class EnvVar(Enum):
    """All environment variables used by figma-sync.

    Categories:
        - paths: Input documents and output directories
        - loader: Document loading behaviour
        - logging: Log output
    """

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------
    SCHEMA_PATH = EnvConfig(
        name="FIGMA_SYNC_SCHEMA_PATH",
        default=Path("figma-sync/schema/component-schema.json"),
        var_type=Path,
        description="Component schema document",
        category="paths",
    )
    MANIFEST_PATH = EnvConfig(
        name="FIGMA_SYNC_MANIFEST_PATH",
        default=Path("figma-sync/schema/components.manifest.json"),
        var_type=Path,
        description="Design tool manifest document",
        category="paths",
    )
    TEMPLATES_DIR = EnvConfig(
        name="FIGMA_SYNC_TEMPLATES_DIR",
        default=Path("figma-sync/templates"),
        var_type=Path,
        description="Output directory for generated Code Connect templates",
        category="paths",
    )
    REPORTS_DIR = EnvConfig(
        name="FIGMA_SYNC_REPORTS_DIR",
        default=Path("figma-sync/reports"),
        var_type=Path,
        description="Output directory for drift reports",
        category="paths",
    )

    # -------------------------------------------------------------------------
    # Loader
    # -------------------------------------------------------------------------
    STRICT = EnvConfig(
        name="FIGMA_SYNC_STRICT",
        default=False,
        var_type=bool,
        description="Reject unknown keys in schema and manifest documents",
        category="loader",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    LOG_LEVEL = EnvConfig(
        name="FIGMA_SYNC_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level name (DEBUG, INFO, WARNING, ERROR)",
        category="logging",
    )


@dataclass(frozen=True)
class LoaderConfig:
    """Options for schema and manifest loading.

    Attributes:
        ignore_unknown_keys: Ignore keys outside the documented shape.
            When False, any unknown key is a parse error.
    """

    ignore_unknown_keys: bool = True


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is str:
        return value

    if var_type is int:
        try:
            return int(value)
        except ValueError:
            return default

    if var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else default

    if var_type is Path:
        return Path(value)

    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: Path) -> Path: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, bool, or Path).

    Example:
        >>> get_environment(EnvVar.STRICT)
        False
        >>> get_environment(EnvVar.STRICT, override=True)
        True
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config.var_type, config.default)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable."""
    return env_var.value


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (paths, loader, logging).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


def loader_config_from_environment(strict: bool | None = None) -> LoaderConfig:
    """Build a LoaderConfig from FIGMA_SYNC_STRICT.

    Args:
        strict: Optional override for the strict flag.

    Returns:
        LoaderConfig that ignores unknown keys unless strict mode is on.
    """
    is_strict = get_environment(EnvVar.STRICT, override=strict)
    return LoaderConfig(ignore_unknown_keys=not is_strict)


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    "LoaderConfig",
    # Main interface
    "get_environment",
    "get_environment_info",
    "loader_config_from_environment",
    # Introspection
    "list_environment_variables",
]
