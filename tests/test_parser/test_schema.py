"""Tests for specslice.parser.schema -- classification of schema fragments."""

from __future__ import annotations

from typing import Any

from specslice.models import SchemaKind
from specslice.parser.schema import (
    OPENAPI_SCHEMA_PREFIX,
    SWAGGER_SCHEMA_PREFIX,
    get_schemas,
    load_definitions,
    parse_schema,
    schema_ref_prefix,
)


class TestParseSchema:
    """Classification precedence: ref, composition, array, enum, primitive."""

    def test_reference(self) -> None:
        node = parse_schema({"$ref": "#/components/schemas/Pet"})
        assert node.kind is SchemaKind.REFERENCE
        assert node.ref == "#/components/schemas/Pet"

    def test_reference_wins_over_siblings(self) -> None:
        node = parse_schema({"$ref": "#/components/schemas/Pet", "type": "array", "enum": [1]})
        assert node.kind is SchemaKind.REFERENCE

    def test_composition_wins_over_array_and_enum(self) -> None:
        node = parse_schema({"oneOf": [{"type": "string"}], "type": "array", "enum": ["x"]})
        assert node.kind is SchemaKind.COMPOSITION
        assert [m.type for m in node.members] == ["string"]

    def test_any_of_is_composition(self) -> None:
        node = parse_schema({"anyOf": [{"$ref": "#/definitions/A"}, {"type": "null"}]})
        assert node.kind is SchemaKind.COMPOSITION
        assert node.members[0].kind is SchemaKind.REFERENCE

    def test_array_with_items(self) -> None:
        node = parse_schema({"type": "array", "items": {"type": "integer"}})
        assert node.kind is SchemaKind.ARRAY
        assert node.items is not None
        assert node.items.type == "integer"

    def test_array_without_items(self) -> None:
        node = parse_schema({"type": "array"})
        assert node.kind is SchemaKind.ARRAY
        assert node.items is None

    def test_enum(self) -> None:
        node = parse_schema({"type": "string", "enum": ["a", "b"]})
        assert node.kind is SchemaKind.ENUM
        assert node.enum_values == ["a", "b"]

    def test_primitive_with_format(self) -> None:
        node = parse_schema({"type": "string", "format": "uuid"})
        assert node.kind is SchemaKind.PRIMITIVE
        assert (node.type, node.format) == ("string", "uuid")

    def test_object_properties_are_classified(self) -> None:
        node = parse_schema(
            {"type": "object", "properties": {"owner": {"$ref": "#/definitions/Owner"}}}
        )
        assert node.kind is SchemaKind.PRIMITIVE
        assert node.properties["owner"].kind is SchemaKind.REFERENCE

    def test_type_list_from_openapi_31(self) -> None:
        node = parse_schema({"type": ["null", "string"]})
        assert node.type == "string"

    def test_non_dict_fragment(self) -> None:
        node = parse_schema("nonsense")
        assert node.kind is SchemaKind.PRIMITIVE
        assert node.properties == {}


class TestDefinitions:
    """Definition lookup for OpenAPI 3.x and Swagger 2.0."""

    def test_openapi_components(self, petstore_raw: dict[str, Any]) -> None:
        assert "Pet" in get_schemas(petstore_raw)
        assert schema_ref_prefix(petstore_raw) == OPENAPI_SCHEMA_PREFIX

    def test_swagger_definitions(self, swagger2_raw: dict[str, Any]) -> None:
        assert set(get_schemas(swagger2_raw)) == {"Item", "Category"}
        assert schema_ref_prefix(swagger2_raw) == SWAGGER_SCHEMA_PREFIX

    def test_missing_definitions(self) -> None:
        assert get_schemas({"openapi": "3.0.0"}) == {}

    def test_load_definitions_keeps_document_order(self, petstore_raw: dict[str, Any]) -> None:
        definitions = load_definitions(petstore_raw)
        assert list(definitions) == list(petstore_raw["components"]["schemas"])
        assert definitions["NewPet"].kind is SchemaKind.COMPOSITION
