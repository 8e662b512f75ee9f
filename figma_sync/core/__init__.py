"""Core utilities shared by every figma-sync module."""

from .errors import (
    FigmaSyncError,
    LogicError,
    ManifestParseError,
    ParseError,
    RenderError,
    SchemaParseError,
    TemplateRenderError,
)
from .log import get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "FigmaSyncError",
    "ParseError",
    "SchemaParseError",
    "ManifestParseError",
    "RenderError",
    "TemplateRenderError",
    "LogicError",
]
