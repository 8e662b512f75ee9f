"""Centralized configuration management for figma-sync.

Example:
    >>> from figma_sync.config import EnvVar, LoaderConfig, get_environment
    >>>
    >>> templates_dir = get_environment(EnvVar.TEMPLATES_DIR)
    >>> config = LoaderConfig(ignore_unknown_keys=False)

Environment Variable Categories:
    paths: Input documents and output directories
    loader: Document loading behaviour (strict mode)
    logging: Log level
"""

from .lib import (
    EnvConfig,
    EnvVar,
    LoaderConfig,
    get_environment,
    get_environment_info,
    list_environment_variables,
    loader_config_from_environment,
)

__all__ = [
    "EnvConfig",
    "EnvVar",
    "LoaderConfig",
    "get_environment",
    "get_environment_info",
    "loader_config_from_environment",
    "list_environment_variables",
]
