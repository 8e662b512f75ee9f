"""Authoritative schema module for the design-system component catalog.

This module is the single source of truth for what a component looks like:
- The closed set of property kinds (a tagged union, one model per kind)
- Property, callback and component definitions
- The schema document loader and its validation rules
- The document-loading plumbing shared with the manifest module

Documents are plain JSON in the shape

    { "components": [ { "componentName": "...",
                        "properties": [ { "name": "...", "kind": "VARIANT",
                                          "options": [...], "default": "..." } ] } ] }

and are validated by pydantic; any validation failure surfaces as a
`SchemaParseError` naming the offending field path.
"""

import json
import re
from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, TypeVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from figma_sync.config import LoaderConfig
from figma_sync.core.errors import ParseError, ParseProblem, SchemaParseError
from figma_sync.core.log import get_logger

logger = get_logger(__name__)

_CONTEXT_KEY = "loader_config"
_KIND_TAGS = frozenset({"STRING", "BOOLEAN", "VARIANT", "INSTANCE_SWAP"})
# Names emitted as source identifiers (constructor arguments, JS variables).
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


# =============================================================================
# Document plumbing
# =============================================================================


class DocumentModel(BaseModel):
    """Base model for everything parsed from a schema or manifest document.

    Models are immutable. Unknown keys are dropped unless the LoaderConfig in
    the validation context asks for strict documents, in which case they are
    reported as validation errors.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # Document keys consumed by `prepare_document` rather than mapped to a field.
    document_extra_keys: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="before")
    @classmethod
    def _check_document_keys(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, dict):
            return data
        config = (info.context or {}).get(_CONTEXT_KEY)
        if config is not None and not config.ignore_unknown_keys:
            known = set(cls.document_extra_keys)
            for name, field in cls.model_fields.items():
                known.add(field.alias or name)
            unknown = sorted(key for key in data if key not in known)
            if unknown:
                raise ValueError(f"Unknown key(s): {', '.join(unknown)}")
        return cls.prepare_document(data)

    @classmethod
    def prepare_document(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Reshape raw document data before field validation."""
        return data


ModelT = TypeVar("ModelT", bound=BaseModel)


def format_path(loc: tuple[int | str, ...]) -> str:
    """Format a pydantic error location as a document field path.

    Example:
        >>> format_path(("components", 0, "properties", 1, "kind"))
        'components[0].properties[1].kind'
    """
    segments: list[int | str] = []
    index = 0
    while index < len(loc):
        segment = loc[index]
        # Tagged-union errors are located as kind.<TAG>.<field>; the document
        # keeps "options" beside "kind" instead.
        if segment == "kind" and index + 1 < len(loc) and loc[index + 1] in _KIND_TAGS:
            rest = loc[index + 2 :]
            if not (rest and rest[0] == "options"):
                segments.append("kind")
            index += 2
            continue
        segments.append(segment)
        index += 1

    parts: list[str] = []
    for segment in segments:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif not parts:
            parts.append(str(segment))
        else:
            parts.append(f".{segment}")
    return "".join(parts)


def _problems_from(exc: ValidationError) -> list[ParseProblem]:
    problems: list[ParseProblem] = []
    for error in exc.errors():
        message = str(error["msg"]).removeprefix("Value error, ")
        problems.append(ParseProblem(format_path(tuple(error["loc"])), message, error["type"]))
    return problems


def load_document(
    model_cls: type[ModelT],
    document: str | bytes | Mapping[str, Any],
    error_cls: type[ParseError],
    config: LoaderConfig | None = None,
) -> ModelT:
    """Decode and validate a document into a model.

    Args:
        model_cls: Root model to validate against.
        document: JSON text, JSON bytes or an already-decoded mapping.
        error_cls: ParseError subclass raised on failure.
        config: Loader options. Defaults to LoaderConfig().

    Returns:
        The validated model.

    Raises:
        ParseError: As `error_cls`, when decoding or validation fails.
    """
    config = config or LoaderConfig()

    if isinstance(document, (str, bytes, bytearray)):
        try:
            data = json.loads(document)
        except ValueError as exc:
            raise error_cls(f"Document is not valid JSON: {exc}") from exc
    else:
        data = document

    if not isinstance(data, Mapping):
        raise error_cls(f"Document root must be an object, got {type(data).__name__}")

    try:
        return model_cls.model_validate(dict(data), context={_CONTEXT_KEY: config})
    except ValidationError as exc:
        problems = _problems_from(exc)
        first = problems[0]
        logger.debug(f"{error_cls.document_type} document rejected with {len(problems)} problem(s)")
        raise error_cls(first.message, path=first.path, problems=problems) from exc


def check_options(options: tuple[str, ...]) -> tuple[str, ...]:
    """Reject empty or duplicated variant option sets."""
    if not options:
        raise ValueError("VARIANT option set must not be empty")
    seen: set[str] = set()
    duplicates: list[str] = []
    for option in options:
        if option in seen and option not in duplicates:
            duplicates.append(option)
        seen.add(option)
    if duplicates:
        raise ValueError(f"Duplicate VARIANT option(s): {', '.join(duplicates)}")
    return options


def check_identifier(value: str) -> str:
    """Reject names that cannot be emitted as a source identifier."""
    if not _IDENTIFIER.fullmatch(value):
        raise ValueError(f"'{value}' is not a valid identifier")
    return value


# =============================================================================
# Property kinds
# =============================================================================


class PropertyKindTag(str, Enum):
    """Tags of the closed set of property kinds."""

    STRING = "STRING"
    BOOLEAN = "BOOLEAN"
    VARIANT = "VARIANT"
    INSTANCE_SWAP = "INSTANCE_SWAP"


BOOLEAN_LITERALS = ("true", "false")


class StringKind(DocumentModel):
    """Free text property."""

    tag: Literal["STRING"] = "STRING"

    def accepts(self, literal: str) -> bool:
        return True


class BooleanKind(DocumentModel):
    """Boolean property, exposed by the design tool as a two-option variant."""

    tag: Literal["BOOLEAN"] = "BOOLEAN"

    def accepts(self, literal: str) -> bool:
        return literal in BOOLEAN_LITERALS


class VariantKind(DocumentModel):
    """Property restricted to an ordered set of named options.

    Attributes:
        options: Non-empty, duplicate-free options in document order.
    """

    tag: Literal["VARIANT"] = "VARIANT"
    options: tuple[str, ...]

    @field_validator("options")
    @classmethod
    def _validate_options(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return check_options(value)

    def accepts(self, literal: str) -> bool:
        return literal in self.options


class InstanceSwapKind(DocumentModel):
    """Slot holding a nested component instance."""

    tag: Literal["INSTANCE_SWAP"] = "INSTANCE_SWAP"

    def accepts(self, literal: str) -> bool:
        return True


PropertyKind = Annotated[
    Union[StringKind, BooleanKind, VariantKind, InstanceSwapKind],
    Field(discriminator="tag"),
]


def kind_tag(kind: PropertyKind) -> PropertyKindTag:
    """Return the PropertyKindTag of a kind model."""
    return PropertyKindTag(kind.tag)


# =============================================================================
# Definitions
# =============================================================================


class PropertyDefinition(DocumentModel):
    """A typed component property.

    Attributes:
        name: Property name, unique within its component. Emitted as the
            constructor argument and JS variable prefix, so it must be an
            identifier.
        kind: One of the PropertyKind models.
        default: Optional default literal, valid for `kind`.
        figma_name: Property key in the design tool when it differs from
            `name` (design tools allow spaces, e.g. "Icon description").
    """

    name: str = Field(..., min_length=1)
    kind: PropertyKind
    default: str | None = None
    figma_name: str | None = Field(default=None, alias="figmaName", min_length=1)

    document_extra_keys: ClassVar[frozenset[str]] = frozenset({"options"})

    @classmethod
    def prepare_document(cls, data: dict[str, Any]) -> dict[str, Any]:
        # Fold the flat document form {"kind": "VARIANT", "options": [...]}
        # into the tagged kind model.
        kind = data.get("kind")
        if not isinstance(kind, str):
            return data
        folded: dict[str, Any] = {"tag": kind}
        if kind == PropertyKindTag.VARIANT.value and "options" in data:
            folded["options"] = data["options"]
        prepared = {key: value for key, value in data.items() if key != "options"}
        prepared["kind"] = folded
        return prepared

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return check_identifier(value)

    @model_validator(mode="after")
    def _validate_default(self) -> "PropertyDefinition":
        if self.default is not None and not self.kind.accepts(self.default):
            raise ValueError(
                f"default '{self.default}' is not a valid {self.kind.tag} literal "
                f"for property '{self.name}'"
            )
        return self

    @property
    def tag(self) -> PropertyKindTag:
        """Tag of this property's kind."""
        return kind_tag(self.kind)

    @property
    def design_name(self) -> str:
        """Key used to read the property from the design tool."""
        return self.figma_name or self.name

    def to_document(self) -> dict[str, Any]:
        """Serialize back to the flat document shape."""
        document: dict[str, Any] = {"name": self.name, "kind": self.kind.tag}
        if isinstance(self.kind, VariantKind):
            document["options"] = list(self.kind.options)
        if self.default is not None:
            document["default"] = self.default
        if self.figma_name is not None:
            document["figmaName"] = self.figma_name
        return document


class CallbackDefinition(DocumentModel):
    """An event-handler parameter that has no design-tool binding.

    Attributes:
        name: Parameter name.
        arity: Number of lambda parameters in the rendered stub.
    """

    name: str = Field(..., min_length=1)
    arity: int = Field(default=0, ge=0, strict=True)

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return check_identifier(value)

    def to_document(self) -> dict[str, Any]:
        return {"name": self.name, "arity": self.arity}


ConstantValue = Union[StrictStr, StrictBool, StrictInt, StrictFloat, None]


class ConstantDefinition(DocumentModel):
    """A parameter passed a fixed literal, never read from the design tool.

    Attributes:
        name: Parameter name.
        value: JSON scalar emitted as the argument literal (null allowed).
    """

    name: str = Field(..., min_length=1)
    value: ConstantValue = ""

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        return check_identifier(value)

    def to_document(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value}


class ComponentDefinition(DocumentModel):
    """A catalog component with its ordered properties.

    Property order is part of the component's identity: it fixes the order of
    bindings and constructor arguments in rendered templates. Callbacks and
    constants follow the properties in the constructor call.
    """

    component_name: str = Field(..., alias="componentName", min_length=1)
    properties: tuple[PropertyDefinition, ...]
    callbacks: tuple[CallbackDefinition, ...] = ()
    constants: tuple[ConstantDefinition, ...] = ()

    @field_validator("component_name")
    @classmethod
    def _validate_component_name(cls, value: str) -> str:
        return check_identifier(value)

    @model_validator(mode="after")
    def _validate_names(self) -> "ComponentDefinition":
        seen: set[str] = set()
        for prop in self.properties:
            if prop.name in seen:
                raise ValueError(
                    f"Duplicate property name '{prop.name}' in component '{self.component_name}'"
                )
            seen.add(prop.name)
        for parameter in (*self.callbacks, *self.constants):
            if parameter.name in seen:
                raise ValueError(
                    f"Parameter '{parameter.name}' collides with another parameter "
                    f"in component '{self.component_name}'"
                )
            seen.add(parameter.name)
        return self

    def get_property(self, name: str) -> PropertyDefinition | None:
        """Look up a property by name."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    @property
    def property_names(self) -> list[str]:
        """Property names in declared order."""
        return [prop.name for prop in self.properties]

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "componentName": self.component_name,
            "properties": [prop.to_document() for prop in self.properties],
        }
        if self.callbacks:
            document["callbacks"] = [callback.to_document() for callback in self.callbacks]
        if self.constants:
            document["constants"] = [constant.to_document() for constant in self.constants]
        return document


class SchemaFile(DocumentModel):
    """The declared component catalog.

    Attributes:
        components: Components in document order, unique by name.
        schema_version: Optional document version marker.
    """

    components: tuple[ComponentDefinition, ...]
    schema_version: int | None = Field(default=None, alias="schemaVersion")

    @model_validator(mode="after")
    def _validate_unique_components(self) -> "SchemaFile":
        seen: set[str] = set()
        for component in self.components:
            if component.component_name in seen:
                raise ValueError(f"Duplicate componentName '{component.component_name}'")
            seen.add(component.component_name)
        return self

    @property
    def component_names(self) -> list[str]:
        """Component names in document order."""
        return [component.component_name for component in self.components]

    def get(self, name: str) -> ComponentDefinition | None:
        """Look up a component by name."""
        for component in self.components:
            if component.component_name == name:
                return component
        return None

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {}
        if self.schema_version is not None:
            document["schemaVersion"] = self.schema_version
        document["components"] = [component.to_document() for component in self.components]
        return document


# =============================================================================
# Public loader API
# =============================================================================


def parse_schema(
    document: str | bytes | Mapping[str, Any],
    config: LoaderConfig | None = None,
) -> SchemaFile:
    """Parse a schema document into a SchemaFile.

    Args:
        document: JSON text, bytes, or a decoded mapping.
        config: Loader options (unknown-key handling).

    Returns:
        Immutable SchemaFile.

    Raises:
        SchemaParseError: If the document is malformed or violates a
            schema invariant (unknown kind, bad options, duplicate names).

    Example:
        >>> schema = parse_schema('{"components": []}')
        >>> schema.component_names
        []
    """
    schema = load_document(SchemaFile, document, SchemaParseError, config)
    logger.debug(f"Loaded schema with {len(schema.components)} component(s)")
    return schema


def schema_to_document(schema: SchemaFile) -> dict[str, Any]:
    """Serialize a SchemaFile to the documented JSON shape."""
    return schema.to_document()


__all__ = [
    # Kinds
    "PropertyKindTag",
    "PropertyKind",
    "StringKind",
    "BooleanKind",
    "VariantKind",
    "InstanceSwapKind",
    "kind_tag",
    "BOOLEAN_LITERALS",
    # Definitions
    "PropertyDefinition",
    "CallbackDefinition",
    "ConstantDefinition",
    "ComponentDefinition",
    "SchemaFile",
    # Loading
    "DocumentModel",
    "load_document",
    "check_identifier",
    "check_options",
    "format_path",
    "parse_schema",
    "schema_to_document",
]
