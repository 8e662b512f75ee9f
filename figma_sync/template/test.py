"""Tests for template module."""

import pytest

from figma_sync.core.errors import LogicError, TemplateRenderError
from figma_sync.schema import (
    ComponentDefinition,
    PropertyDefinition,
    PropertyKindTag,
    VariantKind,
    parse_schema,
)
from figma_sync.template import (
    PLACEHOLDER_DRAWABLE,
    callback_stub,
    constant_literal,
    get_binding,
    instantiate,
    render,
    resolve_bindings,
)

LABELED_SWITCH_URL = "https://www.figma.com/design/sJoAsKB4qqqrwvHRlowppo/Design-System?node-id=148-87"
ICON_BUTTON_URL = "https://www.figma.com/design/sJoAsKB4qqqrwvHRlowppo/Design-System?node-id=150-63"


def _component(name, *properties, callbacks=None, constants=None):
    document = {"componentName": name, "properties": list(properties)}
    if callbacks:
        document["callbacks"] = callbacks
    if constants:
        document["constants"] = constants
    return parse_schema({"components": [document]}).get(name)


class FakeNested:
    """NestedInstance stand-in."""

    def __init__(self, result=None, code_connect=True):
        self._result = result
        self._code_connect = code_connect

    def has_code_connect(self):
        return self._code_connect

    def execute_template(self):
        return self._result


class FakeInstance:
    """SelectedInstance stand-in backed by a dict of raw property values."""

    def __init__(self, values=None, swaps=None):
        self.values = values or {}
        self.swaps = swaps or {}

    def get_string(self, name):
        return self.values.get(name)

    def get_boolean(self, name, mapping):
        return mapping.get(self.values.get(name, "false"))

    def get_enum(self, name, mapping):
        return mapping.get(self.values.get(name))

    def get_instance_swap(self, name):
        return self.swaps.get(name)


class TestGoldenTemplates:
    """Rendered output must match the checked-in golden files byte for byte."""

    @pytest.mark.unit
    def test_labeled_switch(self, schema, golden_dir):
        """LabeledSwitch: string + two booleans + one-argument callback."""
        artifact = render(schema.get("LabeledSwitch"), LABELED_SWITCH_URL)
        expected = (golden_dir / "LabeledSwitch.figma.template.js").read_text(encoding="utf-8")
        assert artifact.file_text == expected

    @pytest.mark.unit
    def test_custom_icon_button(self, schema, golden_dir):
        """CustomIconButton: boolean + instance swap + no-argument callback."""
        artifact = render(schema.get("CustomIconButton"), ICON_BUTTON_URL)
        expected = (golden_dir / "CustomIconButton.figma.template.js").read_text(encoding="utf-8")
        assert artifact.file_text == expected


class TestRender:
    """Tests for render()."""

    @pytest.mark.unit
    def test_artifact_fields(self, schema):
        """Artifact carries the component name, file name and nestable flag."""
        artifact = render(schema.get("LabeledSwitch"), LABELED_SWITCH_URL)
        assert artifact.source_component_name == "LabeledSwitch"
        assert artifact.file_name == "LabeledSwitch.figma.template.js"
        assert artifact.nestable is False
        assert artifact.body.startswith(f"// url={LABELED_SWITCH_URL}\n\n")
        assert artifact.body.endswith("export const metadata = { nestable: false };")
        assert artifact.file_text == artifact.body + "\n"

    @pytest.mark.unit
    def test_binding_order(self, schema):
        """Declarations and arguments follow property order."""
        body = render(schema.get("LabeledSwitch"), LABELED_SWITCH_URL).body
        positions = [body.index(f"const {name}Value") for name in ("label", "isChecked", "isLabelAtStart")]
        assert positions == sorted(positions)
        arguments = [body.index(f"    {name} = ") for name in ("label", "isChecked", "isLabelAtStart")]
        assert arguments == sorted(arguments)

    @pytest.mark.unit
    def test_variant_declaration(self, schema):
        """VARIANT maps options to themselves in declared order."""
        body = render(schema.get("CustomButton"), "https://example.com/node").body
        assert (
            '  const sizeValue = i.getEnum("size", '
            '{ "Small": "Small", "Medium": "Medium", "Large": "Large" });'
        ) in body
        assert "    size = ${sizeValue}" in body

    @pytest.mark.unit
    def test_string_argument_is_quoted(self, schema):
        """STRING values are wrapped in quotes in the constructor call."""
        body = render(schema.get("CustomButton"), "https://example.com/node").body
        assert '    text = "${textValue}",' in body
        assert "    isEnabled = ${isEnabledValue}\n)" in body

    @pytest.mark.unit
    def test_deterministic(self, schema):
        """Rendering twice yields identical bodies."""
        component = schema.get("CustomIconButton")
        assert render(component, ICON_BUTTON_URL) == render(component, ICON_BUTTON_URL)

    @pytest.mark.unit
    def test_no_callbacks(self):
        """Without callbacks the last property argument closes the call."""
        component = _component("Label", {"name": "text", "kind": "STRING"})
        body = render(component, "https://example.com/node").body
        assert 'Label(\n    text = "${textValue}"\n)' in body

    @pytest.mark.unit
    def test_names_are_escaped(self):
        """Option values are emitted as valid JavaScript string literals."""
        component = _component(
            "Chip", {"name": "tone", "kind": "VARIANT", "options": ['Say "hi"', "Plain"]}
        )
        body = render(component, "https://example.com/node").body
        assert '{ "Say \\"hi\\"": "Say \\"hi\\"", "Plain": "Plain" }' in body

    @pytest.mark.unit
    def test_figma_name_is_read_key(self):
        """figmaName is passed to the instance accessor; name stays the variable."""
        component = _component(
            "IconTile",
            {"name": "iconDescription", "kind": "STRING", "figmaName": "Icon description"},
            {"name": "isSelected", "kind": "BOOLEAN", "figmaName": "Selected"},
        )
        body = render(component, "https://example.com/node").body
        assert '  const iconDescriptionValue = i.getString("Icon description") || "...";' in body
        assert '  const isSelectedValue = i.getBoolean("Selected", ' in body
        assert '    iconDescription = "${iconDescriptionValue}",' in body

    @pytest.mark.unit
    def test_constants_follow_callbacks(self):
        """Constants are emitted as literals after the callback stubs."""
        component = _component(
            "Avatar",
            {"name": "image", "kind": "INSTANCE_SWAP"},
            callbacks=[{"name": "onClick"}],
            constants=[
                {"name": "contentDescription", "value": ""},
                {"name": "showBadge", "value": False},
            ],
        )
        body = render(component, "https://example.com/node").body
        assert (
            "    image = ${imageValue},\n"
            "    onClick = { },\n"
            '    contentDescription = "",\n'
            "    showBadge = false\n"
            ")"
        ) in body
        assert "contentDescriptionValue" not in body


class TestRenderErrors:
    """Tests for render() failures."""

    @pytest.mark.unit
    def test_zero_properties(self):
        """A component without properties cannot be rendered."""
        component = _component("Divider")
        with pytest.raises(TemplateRenderError) as exc_info:
            render(component, "https://example.com/node")
        assert exc_info.value.component_name == "Divider"

    @pytest.mark.unit
    @pytest.mark.parametrize("url", ["", "   "])
    def test_blank_url(self, schema, url):
        """A blank source URL cannot be rendered."""
        with pytest.raises(TemplateRenderError) as exc_info:
            render(schema.get("LabeledSwitch"), url)
        assert "URL" in exc_info.value.reason

    @pytest.mark.unit
    def test_empty_variant_is_logic_error(self):
        """An empty VARIANT option set bypassing the loader is a LogicError."""
        prop = PropertyDefinition.model_construct(
            name="size", kind=VariantKind.model_construct(tag="VARIANT", options=()), default=None
        )
        component = ComponentDefinition.model_construct(
            component_name="Broken", properties=(prop,), callbacks=()
        )
        with pytest.raises(LogicError):
            render(component, "https://example.com/node")


class TestBindings:
    """Tests for the binding registry and helpers."""

    @pytest.mark.unit
    def test_every_kind_has_a_binding(self):
        """Each PropertyKindTag resolves to a binding for that tag."""
        for tag in PropertyKindTag:
            assert get_binding(tag).tag == tag

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "arity,stub", [(0, "{ }"), (1, "{ _ -> }"), (3, "{ _, _, _ -> }")]
    )
    def test_callback_stub(self, arity, stub):
        """Callback stubs take one placeholder per parameter."""
        assert callback_stub(arity) == stub

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value,literal",
        [("", '""'), ('a "b"', '"a \\"b\\""'), (True, "true"), (None, "null"), (4, "4"), (0.5, "0.5")],
    )
    def test_constant_literal(self, value, literal):
        """Constant values become source literals."""
        assert constant_literal(value) == literal


class TestResolveBindings:
    """Tests for Python-side evaluation of bindings."""

    @pytest.mark.unit
    def test_string_fallback(self, schema):
        """Missing or empty strings fall back to an ellipsis."""
        component = schema.get("LabeledSwitch")
        assert resolve_bindings(component, FakeInstance())["label"] == "..."
        assert resolve_bindings(component, FakeInstance({"label": ""}))["label"] == "..."
        assert resolve_bindings(component, FakeInstance({"label": "Wi-Fi"}))["label"] == "Wi-Fi"

    @pytest.mark.unit
    def test_boolean_and_variant(self, schema):
        """Booleans and variants go through their mappings."""
        component = schema.get("CustomButton")
        values = resolve_bindings(
            component, FakeInstance({"text": "OK", "size": "Large", "isEnabled": "true"})
        )
        assert values == {"text": "OK", "size": "Large", "isEnabled": True}

    @pytest.mark.unit
    def test_figma_name_lookup(self):
        """Values are read by figmaName and keyed by property name."""
        component = _component(
            "IconTile",
            {"name": "iconDescription", "kind": "STRING", "figmaName": "Icon description"},
        )
        instance = FakeInstance({"Icon description": "Star"})
        assert resolve_bindings(component, instance) == {"iconDescription": "Star"}

    @pytest.mark.unit
    def test_instance_swap_without_capability(self, schema):
        """Swaps without Code Connect resolve to the placeholder drawable."""
        component = schema.get("CustomIconButton")
        assert resolve_bindings(component, FakeInstance())["icon"] == PLACEHOLDER_DRAWABLE
        nested = FakeNested({"metadata": {"props": {"drawable": "Res.drawable.ic_star"}}}, False)
        instance = FakeInstance(swaps={"icon": nested})
        assert resolve_bindings(component, instance)["icon"] == PLACEHOLDER_DRAWABLE

    @pytest.mark.unit
    def test_instance_swap_with_capability(self, schema):
        """Swaps with Code Connect substitute the nested drawable."""
        component = schema.get("CustomIconButton")
        nested = FakeNested({"metadata": {"props": {"drawable": "Res.drawable.ic_star"}}})
        instance = FakeInstance(swaps={"icon": nested})
        assert resolve_bindings(component, instance)["icon"] == "Res.drawable.ic_star"

    @pytest.mark.unit
    def test_instance_swap_without_drawable(self, schema):
        """A nested result lacking a drawable keeps the placeholder."""
        component = schema.get("CustomIconButton")
        for result in (None, {}, {"metadata": {}}, {"metadata": {"props": {}}}):
            instance = FakeInstance(swaps={"icon": FakeNested(result)})
            assert resolve_bindings(component, instance)["icon"] == PLACEHOLDER_DRAWABLE


class TestInstantiate:
    """Tests for instantiate()."""

    @pytest.mark.unit
    def test_labeled_switch(self, schema):
        """Produces the constructor call the template returns."""
        text = instantiate(
            schema.get("LabeledSwitch"),
            FakeInstance({"label": "Wi-Fi", "isChecked": "true"}),
        )
        assert text == (
            "LabeledSwitch(\n"
            '    label = "Wi-Fi",\n'
            "    isChecked = true,\n"
            "    isLabelAtStart = false,\n"
            "    onSwitchClick = { _ -> }\n"
            ")"
        )

    @pytest.mark.unit
    def test_icon_button(self, schema):
        """Nested drawables are substituted verbatim."""
        nested = FakeNested({"metadata": {"props": {"drawable": "Res.drawable.ic_star"}}})
        text = instantiate(
            schema.get("CustomIconButton"),
            FakeInstance({"isEnabled": "false"}, swaps={"icon": nested}),
        )
        assert text == (
            "CustomIconButton(\n"
            "    isEnabled = false,\n"
            "    icon = Res.drawable.ic_star,\n"
            "    onClick = { },\n"
            '    iconDescription = ""\n'
            ")"
        )

    @pytest.mark.unit
    def test_unmapped_variant(self, schema):
        """An option outside the mapping interpolates as undefined."""
        text = instantiate(schema.get("CustomButton"), FakeInstance({"size": "Huge"}))
        assert "    size = undefined," in text
