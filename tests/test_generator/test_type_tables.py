"""Tests for specslice.generator.type_tables -- label to native type mapping."""

from __future__ import annotations

import pytest

from specslice.generator.type_tables import (
    enum_values,
    format_field_name,
    is_reference_label,
    map_type,
)
from specslice.models import DtoLanguage as L


class TestMapType:
    """map_type over the label vocabulary."""

    @pytest.mark.parametrize(
        "label, language, expected",
        [
            ("string", L.KOTLIN, "String"),
            ("integer", L.GO, "int"),
            ("number", L.CSHARP, "double"),
            ("boolean", L.PYTHON, "bool"),
            ("object", L.TYPESCRIPT, "Record<string, unknown>"),
            ("any", L.DART, "dynamic"),
            ("Pet", L.JAVA, "Pet"),
            ("Pet[]", L.CSHARP, "List<Pet>"),
            ("Pet[]", L.TYPESCRIPT, "Pet[]"),
            ("Pet[]", L.PYTHON, "list[Pet]"),
            ("Pet[]", L.GO, "[]Pet"),
            ("integer[]", L.JAVA, "List<Integer>"),
            ("array", L.PYTHON, "list[Any]"),
            ("string(date-time)", L.GO, "time.Time"),
            ("string(date)", L.CSHARP, "DateTime"),
            ("string(date-time)", L.TYPESCRIPT, "string"),
            ("string(uuid)", L.JAVA, "UUID"),
            ("string(uuid)", L.GO, "string"),
            ("integer(int64)", L.KOTLIN, "Long"),
            ("integer(int32)", L.JAVA, "int"),
            ("number(float)", L.GO, "float32"),
            ("number(double)", L.DART, "double"),
            ("string(email)", L.CSHARP, "string"),
            ("string(binary)", L.PYTHON, "str"),
            ("number(decimal)", L.CSHARP, "double"),
            ("string(date-time)[]", L.PYTHON, "list[datetime]"),
        ],
    )
    def test_mapping(self, label: str, language: L, expected: str) -> None:
        assert map_type(label, language) == expected

    def test_enum_is_union_for_typescript(self) -> None:
        assert map_type("enum(a, b)", L.TYPESCRIPT) == '"a" | "b"'

    def test_enum_numbers_and_booleans_are_bare_for_typescript(self) -> None:
        assert map_type("enum(1, 2.5, -3)", L.TYPESCRIPT) == "1 | 2.5 | -3"
        assert map_type("enum(true, null, on)", L.TYPESCRIPT) == 'true | null | "on"'
        assert map_type("enum(2024-01-01)", L.TYPESCRIPT) == '"2024-01-01"'

    @pytest.mark.parametrize(
        "language, expected",
        [(L.CSHARP, "string"), (L.PYTHON, "str"), (L.GO, "string"), (L.KOTLIN, "String")],
    )
    def test_enum_is_plain_string_elsewhere(self, language: L, expected: str) -> None:
        assert map_type("enum(a, b)", language) == expected

    def test_unknown_lowercase_label_passes_through(self) -> None:
        assert map_type("file", L.JAVA) == "file"

    def test_every_language_maps_every_primitive(self) -> None:
        for language in L:
            for label in ("string", "number", "integer", "boolean", "object", "any"):
                assert map_type(label, language)


class TestLabels:
    def test_enum_values(self) -> None:
        assert enum_values("enum(a, b, c)") == ["a", "b", "c"]
        assert enum_values("enum()") == []

    def test_reference_labels(self) -> None:
        assert is_reference_label("Pet")
        assert not is_reference_label("Pet[]")
        assert not is_reference_label("string")
        assert not is_reference_label("enum(a)")


class TestFormatFieldName:
    """Per-language field naming."""

    @pytest.mark.parametrize(
        "name, language, expected",
        [
            ("petId", L.TYPESCRIPT, "petId"),
            ("petId", L.JAVA, "petId"),
            ("petId", L.KOTLIN, "petId"),
            ("petId", L.DART, "petId"),
            ("petId", L.CSHARP, "PetId"),
            ("petId", L.GO, "PetId"),
            ("petId", L.PYTHON, "pet_id"),
            ("class", L.PYTHON, "class_"),
            ("x-rate-limit", L.PYTHON, "x_rate_limit"),
            ("2fa", L.PYTHON, "_2fa"),
            ("x-rate-limit", L.TYPESCRIPT, '"x-rate-limit"'),
            ("x-request-id", L.JAVA, "xRequestId"),
            ("x-request-id", L.KOTLIN, "xRequestId"),
            ("@type", L.DART, "type"),
            ("x-request-id", L.GO, "XRequestId"),
            ("@type", L.CSHARP, "Type"),
            ("2fa", L.GO, "F2fa"),
            ("2fa", L.JAVA, "_2fa"),
            ("---", L.KOTLIN, "field"),
        ],
    )
    def test_names(self, name: str, language: L, expected: str) -> None:
        assert format_field_name(name, language) == expected
