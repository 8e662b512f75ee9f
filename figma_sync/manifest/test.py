"""Unit tests for the manifest module."""

import pytest

from figma_sync.config import LoaderConfig
from figma_sync.core.errors import ManifestParseError
from figma_sync.manifest import ObservedKind, manifest_to_document, parse_manifest
from figma_sync.schema import PropertyKindTag


def _entry(name="Foo", bound=None, **overrides):
    entry = {
        "componentName": name,
        "nodeId": "1:2",
        "figmaUrl": "https://www.figma.com/design/abc/DS?node-id=1-2",
        "boundProperties": bound or {},
    }
    entry.update(overrides)
    return entry


class TestParseManifest:
    """Tests for parse_manifest."""

    @pytest.mark.unit
    def test_bare_kind_strings(self):
        """Bound properties may be bare kind strings."""
        manifest = parse_manifest(
            {"entries": [_entry(bound={"label": "STRING", "isChecked": "BOOLEAN"})]}
        )
        entry = manifest.get("Foo")
        assert entry.bound_properties["label"].tag == PropertyKindTag.STRING
        assert entry.bound_properties["isChecked"].tag == PropertyKindTag.BOOLEAN
        assert entry.bound_properties["isChecked"].options is None

    @pytest.mark.unit
    def test_variant_with_options(self):
        """VARIANT objects keep their observed options in order."""
        manifest = parse_manifest(
            {"entries": [_entry(bound={"size": {"kind": "VARIANT", "options": ["L", "S"]}})]}
        )
        observed = manifest.get("Foo").bound_properties["size"]
        assert observed.tag == PropertyKindTag.VARIANT
        assert observed.options == ("L", "S")

    @pytest.mark.unit
    def test_variant_without_options(self):
        """A bare VARIANT has unknown options."""
        manifest = parse_manifest({"entries": [_entry(bound={"size": "VARIANT"})]})
        assert manifest.get("Foo").bound_properties["size"].options is None

    @pytest.mark.unit
    def test_entry_fields(self):
        """Entry metadata is exposed under Python names."""
        manifest = parse_manifest({"entries": [_entry("LabeledSwitch", nodeId="148:87")]})
        entry = manifest.get("LabeledSwitch")
        assert entry.node_id == "148:87"
        assert entry.figma_url.endswith("node-id=1-2")
        assert manifest.component_names == ["LabeledSwitch"]
        assert manifest.get("Missing") is None

    @pytest.mark.unit
    def test_placeholder_ids(self):
        """Placeholder ids are detected and yield no URL."""
        manifest = parse_manifest(
            {"entries": [_entry("Foo", nodeId="<node-id>", figmaUrl="<url>")]}
        )
        assert manifest.get("Foo").has_placeholder_ids
        assert manifest.url_for("Foo") is None

    @pytest.mark.unit
    def test_url_for(self):
        """url_for returns the entry's URL."""
        manifest = parse_manifest({"entries": [_entry("Foo")]})
        assert manifest.url_for("Foo") == "https://www.figma.com/design/abc/DS?node-id=1-2"
        assert manifest.url_for("Bar") is None

    @pytest.mark.unit
    def test_unknown_keys_ignored(self):
        """Unknown keys are dropped by default."""
        manifest = parse_manifest(
            {"version": 1, "entries": [_entry(kotlinFqName="core.Foo")]}
        )
        assert manifest.component_names == ["Foo"]

    @pytest.mark.unit
    def test_unknown_keys_strict(self):
        """Strict mode rejects unknown keys."""
        with pytest.raises(ManifestParseError) as exc_info:
            parse_manifest(
                {"entries": [_entry(kotlinFqName="core.Foo")]},
                LoaderConfig(ignore_unknown_keys=False),
            )
        assert exc_info.value.path == "entries[0]"
        assert "kotlinFqName" in str(exc_info.value)


class TestParseManifestErrors:
    """Tests for manifest validation failures."""

    @pytest.mark.unit
    def test_invalid_json(self):
        """Malformed JSON is a manifest parse error."""
        with pytest.raises(ManifestParseError) as exc_info:
            parse_manifest(b"\x00garbage")
        assert exc_info.value.document_type == "manifest"

    @pytest.mark.unit
    def test_missing_entries(self):
        """entries is required."""
        with pytest.raises(ManifestParseError) as exc_info:
            parse_manifest({"components": []})
        assert exc_info.value.path == "entries"

    @pytest.mark.unit
    def test_missing_node_id(self):
        """nodeId is required."""
        entry = _entry()
        del entry["nodeId"]
        with pytest.raises(ManifestParseError) as exc_info:
            parse_manifest({"entries": [entry]})
        assert exc_info.value.path == "entries[0].nodeId"

    @pytest.mark.unit
    def test_unknown_kind(self):
        """Unknown kinds are reported at the bound property."""
        with pytest.raises(ManifestParseError) as exc_info:
            parse_manifest({"entries": [_entry(bound={"label": "TEXT"})]})
        assert exc_info.value.path == "entries[0].boundProperties.label.kind"

    @pytest.mark.unit
    def test_duplicate_options(self):
        """Duplicated observed options are rejected."""
        with pytest.raises(ManifestParseError):
            parse_manifest(
                {"entries": [_entry(bound={"size": {"kind": "VARIANT", "options": ["A", "A"]}})]}
            )

    @pytest.mark.unit
    def test_empty_options(self):
        """An empty observed option list is rejected."""
        with pytest.raises(ManifestParseError):
            parse_manifest({"entries": [_entry(bound={"size": {"kind": "VARIANT", "options": []}})]})

    @pytest.mark.unit
    def test_duplicate_component_names(self):
        """Component names are unique within the manifest."""
        with pytest.raises(ManifestParseError) as exc_info:
            parse_manifest({"entries": [_entry("Foo"), _entry("Foo")]})
        assert "Duplicate componentName 'Foo'" in str(exc_info.value)


class TestObservedKind:
    """Tests for ObservedKind."""

    @pytest.mark.unit
    def test_options_dropped_for_non_variant(self):
        """Options only apply to VARIANT."""
        observed = ObservedKind.model_validate({"kind": "BOOLEAN", "options": ["true", "false"]})
        assert observed.options is None

    @pytest.mark.unit
    def test_construct_by_field_name(self):
        """tag and options are accepted by field name."""
        observed = ObservedKind(tag=PropertyKindTag.VARIANT, options=("A", "B"))
        assert observed.to_document() == {"kind": "VARIANT", "options": ["A", "B"]}

    @pytest.mark.unit
    def test_bare_document(self):
        """Kinds without options serialize to bare strings."""
        assert ObservedKind.model_validate("INSTANCE_SWAP").to_document() == "INSTANCE_SWAP"


class TestRoundTrip:
    """Tests for manifest_to_document."""

    @pytest.mark.unit
    def test_round_trip_is_identity(self, manifest_document):
        """Parsing then serializing reproduces the fixture document."""
        manifest = parse_manifest(manifest_document)
        assert manifest_to_document(manifest) == manifest_document
