"""Manifest model: what the design tool currently exposes per component.

A manifest document looks like

    { "entries": [ { "componentName": "LabeledSwitch",
                     "nodeId": "148:87",
                     "figmaUrl": "https://www.figma.com/design/...?node-id=148-87",
                     "boundProperties": { "label": "STRING",
                                          "size": { "kind": "VARIANT",
                                                    "options": ["Small", "Large"] } } } ] }

Each bound property is either a bare kind string or an object carrying the
kind and, for VARIANT, the observed option list. The option list may be
absent when the design tool did not report it.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import Field, field_validator, model_validator

from figma_sync.config import LoaderConfig
from figma_sync.core.errors import ManifestParseError
from figma_sync.core.log import get_logger
from figma_sync.schema import DocumentModel, PropertyKindTag, check_options, load_document

logger = get_logger(__name__)


class ObservedKind(DocumentModel):
    """A property kind as observed in the design tool.

    Attributes:
        tag: Observed kind tag.
        options: Observed VARIANT options, or None when not reported.
    """

    tag: PropertyKindTag = Field(..., alias="kind")
    options: tuple[str, ...] | None = None

    @classmethod
    def prepare_document(cls, data: dict[str, Any]) -> dict[str, Any]:
        # Options only describe VARIANT kinds.
        if data.get("kind", data.get("tag")) != PropertyKindTag.VARIANT:
            return {key: value for key, value in data.items() if key != "options"}
        return data

    @field_validator("options")
    @classmethod
    def _validate_options(cls, value: tuple[str, ...] | None) -> tuple[str, ...] | None:
        if value is None:
            return value
        return check_options(value)

    @model_validator(mode="before")
    @classmethod
    def _from_bare_kind(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"kind": data}
        return data

    def to_document(self) -> str | dict[str, Any]:
        """Serialize as a bare kind string unless options are known."""
        if self.options is None:
            return self.tag.value
        return {"kind": self.tag.value, "options": list(self.options)}


def _is_placeholder(value: str) -> bool:
    stripped = value.strip()
    return not stripped or stripped.startswith("<")


class ManifestEntry(DocumentModel):
    """Design-tool state for one component.

    Attributes:
        component_name: Component this entry describes.
        node_id: Design-tool node identifier.
        figma_url: URL of the component node, used as the template source.
        bound_properties: Property name to observed kind, in document order.
    """

    component_name: str = Field(..., alias="componentName", min_length=1)
    node_id: str = Field(..., alias="nodeId")
    figma_url: str = Field(..., alias="figmaUrl")
    bound_properties: dict[str, ObservedKind] = Field(
        default_factory=dict, alias="boundProperties"
    )

    @property
    def has_placeholder_ids(self) -> bool:
        """True when the node id or URL is blank or a `<...>` placeholder."""
        return _is_placeholder(self.node_id) or _is_placeholder(self.figma_url)

    def to_document(self) -> dict[str, Any]:
        return {
            "componentName": self.component_name,
            "nodeId": self.node_id,
            "figmaUrl": self.figma_url,
            "boundProperties": {
                name: observed.to_document() for name, observed in self.bound_properties.items()
            },
        }


class ManifestFile(DocumentModel):
    """The observed component bindings, unique by component name."""

    entries: tuple[ManifestEntry, ...]

    @model_validator(mode="after")
    def _validate_unique_entries(self) -> "ManifestFile":
        seen: set[str] = set()
        for entry in self.entries:
            if entry.component_name in seen:
                raise ValueError(f"Duplicate componentName '{entry.component_name}'")
            seen.add(entry.component_name)
        return self

    @property
    def component_names(self) -> list[str]:
        """Component names in document order."""
        return [entry.component_name for entry in self.entries]

    def get(self, name: str) -> ManifestEntry | None:
        """Look up an entry by component name."""
        for entry in self.entries:
            if entry.component_name == name:
                return entry
        return None

    def url_for(self, name: str) -> str | None:
        """Figma URL for a component, or None when absent or a placeholder."""
        entry = self.get(name)
        if entry is None or _is_placeholder(entry.figma_url):
            return None
        return entry.figma_url

    def to_document(self) -> dict[str, Any]:
        return {"entries": [entry.to_document() for entry in self.entries]}


def parse_manifest(
    document: str | bytes | Mapping[str, Any],
    config: LoaderConfig | None = None,
) -> ManifestFile:
    """Parse a manifest document into a ManifestFile.

    Args:
        document: JSON text, bytes, or a decoded mapping.
        config: Loader options (unknown-key handling).

    Returns:
        Immutable ManifestFile.

    Raises:
        ManifestParseError: If the document is malformed, names an unknown
            kind, carries empty or duplicated options, or repeats a
            component name.
    """
    manifest = load_document(ManifestFile, document, ManifestParseError, config)
    placeholders = [entry.component_name for entry in manifest.entries if entry.has_placeholder_ids]
    if placeholders:
        logger.warning(f"Manifest entries with placeholder ids: {', '.join(placeholders)}")
    logger.debug(f"Loaded manifest with {len(manifest.entries)} entr(y/ies)")
    return manifest


def manifest_to_document(manifest: ManifestFile) -> dict[str, Any]:
    """Serialize a ManifestFile to the documented JSON shape."""
    return manifest.to_document()


__all__ = [
    "ObservedKind",
    "ManifestEntry",
    "ManifestFile",
    "parse_manifest",
    "manifest_to_document",
]
