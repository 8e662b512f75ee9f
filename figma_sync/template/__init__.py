"""Template module - Code Connect template rendering.

This module provides:
- render(): ComponentDefinition + source URL -> TemplateArtifact
- One PropertyBinding per property kind, looked up with get_binding()
- SelectedInstance / NestedInstance protocols and resolve_bindings() /
  instantiate() for evaluating binding semantics in Python

Example usage:
    >>> from figma_sync.template import render
    >>> artifact = render(component, "https://www.figma.com/design/...?node-id=148-87")
    >>> artifact.file_name
    'LabeledSwitch.figma.template.js'
"""

from .lib import (
    BOOLEAN_MAPPING,
    PLACEHOLDER_DRAWABLE,
    STRING_FALLBACK,
    TEMPLATE_SUFFIX,
    BooleanBinding,
    InstanceSwapBinding,
    PropertyBinding,
    StringBinding,
    TemplateArtifact,
    VariantBinding,
    callback_stub,
    constant_literal,
    get_binding,
    instantiate,
    js_literal,
    js_string,
    register_binding,
    render,
    resolve_bindings,
)
from .protocol import NestedInstance, SelectedInstance

__all__ = [
    # Rendering
    "render",
    "TemplateArtifact",
    "TEMPLATE_SUFFIX",
    # Bindings
    "PropertyBinding",
    "StringBinding",
    "BooleanBinding",
    "VariantBinding",
    "InstanceSwapBinding",
    "register_binding",
    "get_binding",
    "callback_stub",
    "constant_literal",
    "js_string",
    "js_literal",
    "PLACEHOLDER_DRAWABLE",
    "STRING_FALLBACK",
    "BOOLEAN_MAPPING",
    # Runtime
    "SelectedInstance",
    "NestedInstance",
    "resolve_bindings",
    "instantiate",
]
