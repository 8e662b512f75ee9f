"""Error taxonomy shared by the loaders, the renderer and the pipeline."""

from .lib import (
    FigmaSyncError,
    LogicError,
    ManifestParseError,
    ParseError,
    ParseProblem,
    RenderError,
    SchemaParseError,
    TemplateRenderError,
)

__all__ = [
    "FigmaSyncError",
    "ParseProblem",
    "ParseError",
    "SchemaParseError",
    "ManifestParseError",
    "RenderError",
    "TemplateRenderError",
    "LogicError",
]
