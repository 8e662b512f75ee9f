"""Code Connect template renderer.

Renders one ComponentDefinition into a JavaScript template that reads the
selected design-tool instance at runtime and emits the matching source-code
constructor call. Each property kind has a registered PropertyBinding that
produces its variable declaration and constructor argument. Looking up a kind
without a registered binding raises LogicError instead of silently
dropping the property from the output.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

from figma_sync.core.errors import LogicError, TemplateRenderError
from figma_sync.core.log import get_logger
from figma_sync.schema import (
    BOOLEAN_LITERALS,
    ComponentDefinition,
    PropertyDefinition,
    PropertyKindTag,
    VariantKind,
)

from .protocol import SelectedInstance

logger = get_logger(__name__)

TEMPLATE_SUFFIX = ".figma.template.js"
PLACEHOLDER_DRAWABLE = "Res.drawable.ic_placeholder"
STRING_FALLBACK = "..."
BOOLEAN_MAPPING = {"true": True, "false": False}


@dataclass(frozen=True)
class TemplateArtifact:
    """A rendered template.

    Attributes:
        source_component_name: Component the template was rendered from.
        body: Template source, without leading or trailing whitespace.
        nestable: Value of the exported metadata flag.
    """

    source_component_name: str
    body: str
    nestable: bool = False

    @property
    def file_name(self) -> str:
        """Output file name, e.g. `LabeledSwitch.figma.template.js`."""
        return f"{self.source_component_name}{TEMPLATE_SUFFIX}"

    @property
    def file_text(self) -> str:
        """Body plus a single trailing newline, as written to disk."""
        return self.body + "\n"


def js_string(value: str) -> str:
    """Quote a value as a JavaScript string literal."""
    return json.dumps(value, ensure_ascii=False)


def js_literal(value: Any) -> str:
    """Text JavaScript produces when interpolating `value` into a template string."""
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# =============================================================================
# Property bindings
# =============================================================================


class PropertyBinding(ABC):
    """Code generation for one property kind.

    Subclasses set `tag` and implement `declaration` and `resolve`. Registered instances
    are looked up with `get_binding`.
    """

    tag: ClassVar[PropertyKindTag]
    # String values are interpolated inside quotes in the constructor call.
    quoted: ClassVar[bool] = False

    def variable_name(self, prop: PropertyDefinition) -> str:
        return f"{prop.name}Value"

    @abstractmethod
    def declaration(self, prop: PropertyDefinition) -> list[str]:
        """JavaScript lines (indented two spaces) declaring the value variable."""
        ...

    @abstractmethod
    def resolve(self, prop: PropertyDefinition, instance: SelectedInstance) -> Any:
        """Value the declaration would assign when evaluated against `instance`."""
        ...

    def argument(self, prop: PropertyDefinition) -> str:
        """Named constructor argument referencing the value variable."""
        value = f"${{{self.variable_name(prop)}}}"
        if self.quoted:
            value = f'"{value}"'
        return f"{prop.name} = {value}"


_BINDINGS: dict[PropertyKindTag, PropertyBinding] = {}


def register_binding(cls: type[PropertyBinding]) -> type[PropertyBinding]:
    """Class decorator registering a binding for its property kind."""
    _BINDINGS[cls.tag] = cls()
    return cls


def get_binding(tag: PropertyKindTag) -> PropertyBinding:
    """Return the binding registered for a property kind.

    Raises:
        LogicError: If no binding is registered for `tag`.
    """
    try:
        return _BINDINGS[tag]
    except KeyError:
        raise LogicError(f"No template binding registered for property kind {tag.value}") from None


@register_binding
class StringBinding(PropertyBinding):
    """Text property, falling back to an ellipsis when empty."""

    tag = PropertyKindTag.STRING
    quoted = True

    def declaration(self, prop: PropertyDefinition) -> list[str]:
        return [
            f"  const {self.variable_name(prop)} = "
            f"i.getString({js_string(prop.design_name)}) || {js_string(STRING_FALLBACK)};"
        ]

    def resolve(self, prop: PropertyDefinition, instance: SelectedInstance) -> Any:
        return instance.get_string(prop.design_name) or STRING_FALLBACK


@register_binding
class BooleanBinding(PropertyBinding):
    """Boolean property read from a true/false variant axis."""

    tag = PropertyKindTag.BOOLEAN

    def declaration(self, prop: PropertyDefinition) -> list[str]:
        mapping = ", ".join(
            f"{js_string(literal)}: {js_literal(BOOLEAN_MAPPING[literal])}"
            for literal in BOOLEAN_LITERALS
        )
        return [
            f"  const {self.variable_name(prop)} = "
            f"i.getBoolean({js_string(prop.design_name)}, {{ {mapping} }});"
        ]

    def resolve(self, prop: PropertyDefinition, instance: SelectedInstance) -> Any:
        return instance.get_boolean(prop.design_name, dict(BOOLEAN_MAPPING))


@register_binding
class VariantBinding(PropertyBinding):
    """Variant property, each option mapped to itself in declared order."""

    tag = PropertyKindTag.VARIANT

    def options(self, prop: PropertyDefinition) -> tuple[str, ...]:
        """Declared options of a VARIANT property.

        Raises:
            LogicError: If the option set is empty.
        """
        if not isinstance(prop.kind, VariantKind) or not prop.kind.options:
            raise LogicError(f"VARIANT property '{prop.name}' reached the renderer without options")
        return prop.kind.options

    def declaration(self, prop: PropertyDefinition) -> list[str]:
        mapping = ", ".join(
            f"{js_string(option)}: {js_string(option)}" for option in self.options(prop)
        )
        return [
            f"  const {self.variable_name(prop)} = "
            f"i.getEnum({js_string(prop.design_name)}, {{ {mapping} }});"
        ]

    def resolve(self, prop: PropertyDefinition, instance: SelectedInstance) -> Any:
        return instance.get_enum(prop.design_name, {option: option for option in self.options(prop)})


@register_binding
class InstanceSwapBinding(PropertyBinding):
    """Nested instance resolved through its own template.

    The nested template's `metadata.props.drawable` is used when the swapped
    instance has Code Connect; otherwise the placeholder resource is emitted.
    """

    tag = PropertyKindTag.INSTANCE_SWAP

    def declaration(self, prop: PropertyDefinition) -> list[str]:
        swap = f"{prop.name}Swap"
        value = self.variable_name(prop)
        return [
            f"  const {swap} = i.getInstanceSwap({js_string(prop.design_name)});",
            f"  let {value} = {js_string(PLACEHOLDER_DRAWABLE)};",
            f"  if ({swap} && {swap}.hasCodeConnect && {swap}.hasCodeConnect()) {{",
            f"    const result = {swap}.executeTemplate();",
            "    const drawable = result?.metadata?.props?.drawable;",
            f"    if (drawable) {{ {value} = drawable; }}",
            "  }",
        ]

    def resolve(self, prop: PropertyDefinition, instance: SelectedInstance) -> Any:
        swap = instance.get_instance_swap(prop.design_name)
        if swap is None or not swap.has_code_connect():
            return PLACEHOLDER_DRAWABLE
        result = swap.execute_template() or {}
        drawable = ((result.get("metadata") or {}).get("props") or {}).get("drawable")
        return drawable or PLACEHOLDER_DRAWABLE


def callback_stub(arity: int) -> str:
    """Lambda stub for an event-handler parameter.

    Example:
        >>> callback_stub(0), callback_stub(2)
        ('{ }', '{ _, _ -> }')
    """
    if arity <= 0:
        return "{ }"
    return "{ " + ", ".join("_" for _ in range(arity)) + " -> }"


def constant_literal(value: Any) -> str:
    """Source literal for a constant argument.

    Example:
        >>> constant_literal(""), constant_literal(True), constant_literal(None)
        ('""', 'true', 'null')
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return js_string(value)
    return str(value)


# =============================================================================
# Rendering
# =============================================================================


def render(component: ComponentDefinition, source_url: str) -> TemplateArtifact:
    """Render a Code Connect template for a component.

    Args:
        component: Component to render. Property order fixes the order of
            declarations and constructor arguments.
        source_url: Design-tool URL of the component node.

    Returns:
        TemplateArtifact with a byte-stable body.

    Raises:
        TemplateRenderError: If the component has no properties or the URL
            is blank.
        LogicError: If a VARIANT property has no options.

    Example:
        >>> artifact = render(schema.get("LabeledSwitch"), url)
        >>> artifact.file_name
        'LabeledSwitch.figma.template.js'
    """
    name = component.component_name
    if not component.properties:
        raise TemplateRenderError(name, "component has no properties to bind")
    if not source_url or not source_url.strip():
        raise TemplateRenderError(name, "source URL is blank")

    declarations: list[str] = []
    arguments: list[str] = []
    for prop in component.properties:
        binding = get_binding(prop.tag)
        declarations.extend(binding.declaration(prop))
        arguments.append(f"    {binding.argument(prop)}")
    arguments.extend(_fixed_arguments(component))

    nestable = False
    lines: list[str] = [
        f"// url={source_url.strip()}",
        "",
        "export default function template(figma) {",
        "  const i = figma.selectedInstance;",
        "",
        *declarations,
        "",
        "  return `",
        f"{name}(",
        ",\n".join(arguments),
        ")",
        "  `.trim();",
        "}",
        "",
        f"export const metadata = {{ nestable: {'true' if nestable else 'false'} }};",
    ]
    body = "\n".join(lines).strip()

    logger.debug(f"Rendered template for {name} ({len(component.properties)} properties)")
    return TemplateArtifact(source_component_name=name, body=body, nestable=nestable)


def _fixed_arguments(component: ComponentDefinition) -> list[str]:
    # Callbacks, then constants; neither reads the selected instance.
    arguments = [
        f"    {callback.name} = {callback_stub(callback.arity)}" for callback in component.callbacks
    ]
    arguments.extend(
        f"    {constant.name} = {constant_literal(constant.value)}"
        for constant in component.constants
    )
    return arguments


# =============================================================================
# Python evaluation of bindings
# =============================================================================


def resolve_bindings(
    component: ComponentDefinition,
    instance: SelectedInstance,
) -> dict[str, Any]:
    """Evaluate every property binding of a component against an instance.

    Applies the same rules as the rendered template: empty strings fall back
    to an ellipsis, booleans and variants go through their mappings, and
    instance swaps use the nested template's drawable or the placeholder.

    Returns:
        Property name to resolved value, in property order.
    """
    return {
        prop.name: get_binding(prop.tag).resolve(prop, instance) for prop in component.properties
    }


def instantiate(component: ComponentDefinition, instance: SelectedInstance) -> str:
    """Source text the rendered template returns for an instance.

    Example:
        >>> print(instantiate(schema.get("LabeledSwitch"), instance))
        LabeledSwitch(
            label = "Wi-Fi",
            isChecked = true,
            isLabelAtStart = false,
            onSwitchClick = { _ -> }
        )
    """
    values = resolve_bindings(component, instance)
    arguments: list[str] = []
    for prop in component.properties:
        text = js_literal(values[prop.name])
        if get_binding(prop.tag).quoted:
            text = f'"{text}"'
        arguments.append(f"    {prop.name} = {text}")
    arguments.extend(_fixed_arguments(component))
    return "\n".join([f"{component.component_name}(", ",\n".join(arguments), ")"])


__all__ = [
    "TEMPLATE_SUFFIX",
    "PLACEHOLDER_DRAWABLE",
    "STRING_FALLBACK",
    "BOOLEAN_MAPPING",
    "TemplateArtifact",
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
    "render",
    "resolve_bindings",
    "instantiate",
]
