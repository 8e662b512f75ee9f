"""Unit tests for the schema module."""

import json

import pytest

from figma_sync.config import LoaderConfig
from figma_sync.core.errors import SchemaParseError
from figma_sync.schema import (
    BooleanKind,
    ComponentDefinition,
    InstanceSwapKind,
    PropertyDefinition,
    PropertyKindTag,
    StringKind,
    VariantKind,
    format_path,
    parse_schema,
    schema_to_document,
)


def _component(name="Foo", properties=None, **extra):
    component = {"componentName": name, "properties": properties or []}
    component.update(extra)
    return component


def _document(*components):
    return {"components": list(components)}


class TestPropertyKinds:
    """Tests for the PropertyKind union."""

    @pytest.mark.unit
    def test_tags(self):
        """Every kind model reports its tag."""
        assert StringKind().tag == PropertyKindTag.STRING
        assert BooleanKind().tag == PropertyKindTag.BOOLEAN
        assert VariantKind(options=("A",)).tag == PropertyKindTag.VARIANT
        assert InstanceSwapKind().tag == PropertyKindTag.INSTANCE_SWAP

    @pytest.mark.unit
    def test_variant_keeps_option_order(self):
        """Options keep insertion order."""
        kind = VariantKind(options=["Large", "Small", "Medium"])
        assert kind.options == ("Large", "Small", "Medium")

    @pytest.mark.unit
    def test_boolean_literals(self):
        """Only "true" and "false" are boolean literals."""
        kind = BooleanKind()
        assert kind.accepts("true")
        assert kind.accepts("false")
        assert not kind.accepts("True")
        assert not kind.accepts("yes")


class TestParseSchema:
    """Tests for parse_schema."""

    @pytest.mark.unit
    def test_parses_all_kinds(self):
        """Each documented kind parses into its model."""
        schema = parse_schema(
            _document(
                _component(
                    "CustomButton",
                    [
                        {"name": "text", "kind": "STRING"},
                        {"name": "isEnabled", "kind": "BOOLEAN", "default": "true"},
                        {"name": "size", "kind": "VARIANT", "options": ["Small", "Large"]},
                        {"name": "icon", "kind": "INSTANCE_SWAP"},
                    ],
                )
            )
        )
        component = schema.get("CustomButton")
        assert component is not None
        assert [p.tag for p in component.properties] == [
            PropertyKindTag.STRING,
            PropertyKindTag.BOOLEAN,
            PropertyKindTag.VARIANT,
            PropertyKindTag.INSTANCE_SWAP,
        ]
        assert component.get_property("size").kind.options == ("Small", "Large")
        assert component.get_property("isEnabled").default == "true"

    @pytest.mark.unit
    def test_accepts_text_and_bytes(self):
        """JSON text and bytes are decoded before validation."""
        document = _document(_component("Foo", [{"name": "bar", "kind": "STRING"}]))
        text = json.dumps(document)
        assert parse_schema(text) == parse_schema(text.encode("utf-8"))

    @pytest.mark.unit
    def test_preserves_component_and_property_order(self):
        """Document order is kept end to end."""
        schema = parse_schema(
            _document(
                _component("Zeta", [{"name": "b", "kind": "STRING"}, {"name": "a", "kind": "STRING"}]),
                _component("Alpha", [{"name": "x", "kind": "BOOLEAN"}]),
            )
        )
        assert schema.component_names == ["Zeta", "Alpha"]
        assert schema.get("Zeta").property_names == ["b", "a"]

    @pytest.mark.unit
    def test_unknown_keys_ignored_by_default(self):
        """Unknown keys are forward-compatible."""
        document = _document(
            _component(
                "Foo",
                [{"name": "bar", "kind": "STRING", "binding": {"field": "TEXT"}}],
                kotlinFqName="core.Foo",
            )
        )
        document["generatedAt"] = "2024-01-01T00:00:00Z"
        schema = parse_schema(document)
        assert schema.get("Foo").property_names == ["bar"]

    @pytest.mark.unit
    def test_unknown_keys_rejected_in_strict_mode(self):
        """Strict config names the unknown key and its location."""
        document = _document(
            _component("Foo", [{"name": "bar", "kind": "STRING", "binding": {}}])
        )
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(document, LoaderConfig(ignore_unknown_keys=False))
        assert exc_info.value.path == "components[0].properties[0]"
        assert "binding" in str(exc_info.value)

    @pytest.mark.unit
    def test_strict_mode_allows_documented_keys(self):
        """Options and default are documented keys, not unknown ones."""
        document = _document(
            _component(
                "Foo",
                [{"name": "bar", "kind": "VARIANT", "options": ["A", "B"], "default": "A"}],
            )
        )
        schema = parse_schema(document, LoaderConfig(ignore_unknown_keys=False))
        assert schema.get("Foo").get_property("bar").default == "A"

    @pytest.mark.unit
    def test_ignores_options_on_non_variant(self):
        """Options on a non-VARIANT property are dropped."""
        schema = parse_schema(
            _document(_component("Foo", [{"name": "bar", "kind": "STRING", "options": ["x"]}]))
        )
        assert isinstance(schema.get("Foo").get_property("bar").kind, StringKind)

    @pytest.mark.unit
    def test_figma_name(self):
        """figmaName overrides the design-tool key but not the parameter name."""
        schema = parse_schema(
            _document(
                _component(
                    "Foo",
                    [
                        {"name": "iconDescription", "kind": "STRING", "figmaName": "Icon description"},
                        {"name": "bar", "kind": "BOOLEAN"},
                    ],
                )
            )
        )
        component = schema.get("Foo")
        assert component.get_property("iconDescription").design_name == "Icon description"
        assert component.get_property("bar").design_name == "bar"

    @pytest.mark.unit
    def test_figma_name_allowed_in_strict_mode(self):
        """figmaName is a documented key."""
        document = _document(
            _component("Foo", [{"name": "bar", "kind": "STRING", "figmaName": "Bar label"}])
        )
        schema = parse_schema(document, LoaderConfig(ignore_unknown_keys=False))
        assert schema.get("Foo").get_property("bar").figma_name == "Bar label"

    @pytest.mark.unit
    def test_constants(self):
        """Constants keep their order and JSON scalar types."""
        schema = parse_schema(
            _document(
                _component(
                    "Foo",
                    [{"name": "bar", "kind": "STRING"}],
                    constants=[
                        {"name": "description", "value": ""},
                        {"name": "enabled", "value": True},
                        {"name": "count", "value": 3},
                        {"name": "tint", "value": None},
                    ],
                )
            )
        )
        constants = schema.get("Foo").constants
        assert [constant.name for constant in constants] == ["description", "enabled", "count", "tint"]
        assert [constant.value for constant in constants] == ["", True, 3, None]
        assert isinstance(constants[1].value, bool)

    @pytest.mark.unit
    def test_constant_value_defaults_to_empty_string(self):
        """A constant without a value is an empty string."""
        schema = parse_schema(
            _document(
                _component(
                    "Foo",
                    [{"name": "bar", "kind": "STRING"}],
                    constants=[{"name": "description"}],
                )
            )
        )
        assert schema.get("Foo").constants[0].value == ""


class TestParseSchemaErrors:
    """Tests for schema validation failures."""

    @pytest.mark.unit
    def test_invalid_json(self):
        """Malformed JSON is a parse error at the root."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema("{not json")
        assert exc_info.value.path == ""
        assert "not valid JSON" in str(exc_info.value)

    @pytest.mark.unit
    def test_root_must_be_object(self):
        """A JSON array root is rejected."""
        with pytest.raises(SchemaParseError):
            parse_schema("[]")

    @pytest.mark.unit
    def test_missing_components(self):
        """The components key is required."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema({})
        assert exc_info.value.path == "components"

    @pytest.mark.unit
    def test_missing_component_name(self):
        """componentName is required and reported by path."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema({"components": [{"properties": []}]})
        assert exc_info.value.path == "components[0].componentName"

    @pytest.mark.unit
    def test_mistyped_property_name(self):
        """Property names must be strings."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(_document(_component("Foo", [{"name": 3, "kind": "STRING"}])))
        assert exc_info.value.path == "components[0].properties[0].name"

    @pytest.mark.unit
    def test_unknown_kind(self):
        """Kinds outside the closed set are rejected at the kind field."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(_document(_component("Foo", [{"name": "bar", "kind": "NUMBER"}])))
        assert exc_info.value.path == "components[0].properties[0].kind"

    @pytest.mark.unit
    def test_missing_kind(self):
        """kind is required."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(_document(_component("Foo", [{"name": "bar"}])))
        assert exc_info.value.path == "components[0].properties[0].kind"

    @pytest.mark.unit
    def test_empty_variant_options(self):
        """VARIANT requires at least one option."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(
                _document(_component("Foo", [{"name": "bar", "kind": "VARIANT", "options": []}]))
            )
        assert exc_info.value.path == "components[0].properties[0].options"
        assert "must not be empty" in str(exc_info.value)

    @pytest.mark.unit
    def test_missing_variant_options(self):
        """VARIANT without options is rejected."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(_document(_component("Foo", [{"name": "bar", "kind": "VARIANT"}])))
        assert exc_info.value.path == "components[0].properties[0].options"

    @pytest.mark.unit
    def test_duplicate_variant_options(self):
        """Duplicated options are named in the message."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(
                _document(
                    _component("Foo", [{"name": "bar", "kind": "VARIANT", "options": ["A", "B", "A"]}])
                )
            )
        assert "Duplicate VARIANT option(s): A" in str(exc_info.value)

    @pytest.mark.unit
    def test_duplicate_property_names(self):
        """Property names collide within a component."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(
                _document(
                    _component("Foo", [{"name": "bar", "kind": "STRING"}, {"name": "bar", "kind": "BOOLEAN"}])
                )
            )
        assert exc_info.value.path == "components[0]"
        assert "Duplicate property name 'bar'" in str(exc_info.value)

    @pytest.mark.unit
    def test_duplicate_component_names(self):
        """Component names collide within the schema."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(_document(_component("Foo"), _component("Foo")))
        assert "Duplicate componentName 'Foo'" in str(exc_info.value)

    @pytest.mark.unit
    def test_invalid_boolean_default(self):
        """BOOLEAN defaults must be "true" or "false"."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(
                _document(_component("Foo", [{"name": "bar", "kind": "BOOLEAN", "default": "yes"}]))
            )
        assert "not a valid BOOLEAN literal" in str(exc_info.value)

    @pytest.mark.unit
    def test_invalid_variant_default(self):
        """VARIANT defaults must be one of the options."""
        with pytest.raises(SchemaParseError):
            parse_schema(
                _document(
                    _component(
                        "Foo",
                        [{"name": "bar", "kind": "VARIANT", "options": ["A"], "default": "B"}],
                    )
                )
            )

    @pytest.mark.unit
    def test_callback_name_collision(self):
        """Callbacks cannot reuse a property name."""
        with pytest.raises(SchemaParseError):
            parse_schema(
                _document(
                    _component(
                        "Foo",
                        [{"name": "onClick", "kind": "STRING"}],
                        callbacks=[{"name": "onClick"}],
                    )
                )
            )

    @pytest.mark.unit
    def test_constant_name_collision(self):
        """Constants cannot reuse a callback name."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(
                _document(
                    _component(
                        "Foo",
                        [{"name": "bar", "kind": "STRING"}],
                        callbacks=[{"name": "onClick"}],
                        constants=[{"name": "onClick", "value": ""}],
                    )
                )
            )
        assert "collides" in str(exc_info.value)

    @pytest.mark.unit
    def test_property_name_must_be_identifier(self):
        """A design-tool label with a space is rejected as a property name."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(
                _document(_component("Foo", [{"name": "Icon description", "kind": "STRING"}]))
            )
        assert exc_info.value.path == "components[0].properties[0].name"
        assert "is not a valid identifier" in str(exc_info.value)

    @pytest.mark.unit
    def test_component_name_must_be_identifier(self):
        """Component names become the constructor call and the file name."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(_document(_component("Icon-Button", [{"name": "bar", "kind": "STRING"}])))
        assert exc_info.value.path == "components[0].componentName"

    @pytest.mark.unit
    def test_callback_name_must_be_identifier(self):
        """Callback names are checked like property names."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(
                _document(
                    _component(
                        "Foo",
                        [{"name": "bar", "kind": "STRING"}],
                        callbacks=[{"name": "on click"}],
                    )
                )
            )
        assert exc_info.value.path == "components[0].callbacks[0].name"

    @pytest.mark.unit
    def test_constant_name_must_be_identifier(self):
        """Constant names are checked like property names."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(
                _document(
                    _component(
                        "Foo",
                        [{"name": "bar", "kind": "STRING"}],
                        constants=[{"name": "1st", "value": ""}],
                    )
                )
            )
        assert exc_info.value.path == "components[0].constants[0].name"

    @pytest.mark.unit
    def test_constant_value_must_be_scalar(self):
        """Constant values are JSON scalars."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(
                _document(
                    _component(
                        "Foo",
                        [{"name": "bar", "kind": "STRING"}],
                        constants=[{"name": "tags", "value": ["a"]}],
                    )
                )
            )
        assert exc_info.value.path.startswith("components[0].constants[0].value")

    @pytest.mark.unit
    def test_all_problems_collected(self):
        """Every problem is reported, the first drives the message."""
        with pytest.raises(SchemaParseError) as exc_info:
            parse_schema(
                _document(
                    _component("Foo", [{"name": "a", "kind": "NUMBER"}]),
                    {"properties": []},
                )
            )
        paths = [problem.path for problem in exc_info.value.problems]
        assert "components[0].properties[0].kind" in paths
        assert "components[1].componentName" in paths


class TestRoundTrip:
    """Tests for schema_to_document."""

    @pytest.mark.unit
    def test_round_trip_is_identity(self, schema_document):
        """Parsing then serializing reproduces the document."""
        schema = parse_schema(schema_document)
        assert schema_to_document(schema) == schema_document

    @pytest.mark.unit
    def test_round_trip_reparses_equal(self, schema_document):
        """Serialized output parses back to an equal model."""
        schema = parse_schema(schema_document)
        assert parse_schema(schema_to_document(schema)) == schema

    @pytest.mark.unit
    def test_figma_name_round_trip(self):
        """figmaName is written back only when set."""
        document = _document(
            _component(
                "Foo",
                [
                    {"name": "iconDescription", "kind": "STRING", "figmaName": "Icon description"},
                    {"name": "bar", "kind": "STRING"},
                ],
            )
        )
        assert schema_to_document(parse_schema(document)) == document


class TestDirectConstruction:
    """Models can be built in code without a document."""

    @pytest.mark.unit
    def test_flat_kind_keywords(self):
        """The flat document form is accepted as keyword arguments."""
        prop = PropertyDefinition(name="size", kind="VARIANT", options=["S", "L"])
        assert prop.kind == VariantKind(options=("S", "L"))

    @pytest.mark.unit
    def test_component_by_field_name(self):
        """component_name is accepted by field name."""
        component = ComponentDefinition(
            component_name="Foo",
            properties=[PropertyDefinition(name="bar", kind=BooleanKind())],
        )
        assert component.component_name == "Foo"
        assert component.to_document() == {
            "componentName": "Foo",
            "properties": [{"name": "bar", "kind": "BOOLEAN"}],
        }


class TestFormatPath:
    """Tests for format_path."""

    @pytest.mark.unit
    def test_nested_indices(self):
        """Integer segments become subscripts."""
        assert format_path(("components", 0, "properties", 1, "kind")) == (
            "components[0].properties[1].kind"
        )

    @pytest.mark.unit
    def test_tagged_union_location(self):
        """Union tags are folded back into the document shape."""
        assert format_path(("components", 0, "properties", 0, "kind", "VARIANT", "options")) == (
            "components[0].properties[0].options"
        )
        assert format_path(("properties", 0, "kind", "VARIANT")) == "properties[0].kind"

    @pytest.mark.unit
    def test_empty(self):
        """An empty location is the document root."""
        assert format_path(()) == ""
