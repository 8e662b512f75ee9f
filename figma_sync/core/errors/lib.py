"""Exception hierarchy for figma-sync.

Three families:
    - ParseError: an input document is malformed. Fatal to the invocation.
    - RenderError: one component cannot be rendered. Callers may continue
      with the remaining components.
    - LogicError: an invariant guaranteed by the loaders did not hold.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParseProblem:
    """A single problem found while loading a document.

    Attributes:
        path: Dotted field path, e.g. "components[0].properties[1].kind".
        message: Human-readable description.
        error_type: Machine-readable classification.
    """

    path: str
    message: str
    error_type: str


class FigmaSyncError(Exception):
    """Base exception for figma-sync errors."""


class ParseError(FigmaSyncError):
    """Raised when a schema or manifest document is structurally invalid.

    Attributes:
        document_type: "schema" or "manifest".
        path: Field path of the first problem ("" for the document root).
        problems: Every problem reported for the document.
    """

    document_type = "document"

    def __init__(self, message: str, path: str = "", problems: list[ParseProblem] | None = None):
        self.path = path
        self.problems = list(problems or [])
        location = path or "<root>"
        super().__init__(f"Invalid {self.document_type} document at {location}: {message}")


class SchemaParseError(ParseError):
    """Raised for invalid schema documents."""

    document_type = "schema"


class ManifestParseError(ParseError):
    """Raised for invalid manifest documents."""

    document_type = "manifest"


class RenderError(FigmaSyncError):
    """Raised when a single component cannot be rendered.

    Attributes:
        component_name: Component that failed.
        reason: The unmet condition.
    """

    def __init__(self, component_name: str, reason: str):
        super().__init__(f"Cannot render '{component_name}': {reason}")
        self.component_name = component_name
        self.reason = reason


class TemplateRenderError(RenderError):
    """Raised by the Code Connect template renderer."""


class LogicError(FigmaSyncError):
    """Raised when a loader invariant is found violated downstream."""
