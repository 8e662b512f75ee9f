"""Schema module - authoritative component catalog model.

This module provides:
- The closed PropertyKind union (STRING, BOOLEAN, VARIANT, INSTANCE_SWAP)
- Property, callback, constant and component definitions
- The schema document loader and serializer

Example usage:
    >>> from figma_sync.schema import parse_schema
    >>> schema = parse_schema(document_text)
    >>> schema.get("LabeledSwitch").property_names
    ['label', 'isChecked', 'isLabelAtStart']
"""

from .lib import (
    BOOLEAN_LITERALS,
    BooleanKind,
    CallbackDefinition,
    ConstantDefinition,
    ComponentDefinition,
    DocumentModel,
    InstanceSwapKind,
    PropertyDefinition,
    PropertyKind,
    PropertyKindTag,
    SchemaFile,
    StringKind,
    VariantKind,
    check_identifier,
    check_options,
    format_path,
    kind_tag,
    load_document,
    parse_schema,
    schema_to_document,
)

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
