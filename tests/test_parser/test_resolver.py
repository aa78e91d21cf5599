"""Tests for specslice.parser.resolver."""

from __future__ import annotations

import pytest

from specslice.exceptions import SpecParseError
from specslice.parser.resolver import find_all_references, ref_name, resolve_pointer, resolve_ref


# ---------------------------------------------------------------------------
# resolve_ref
# ---------------------------------------------------------------------------


class TestResolveRef:
    """Reference labels of single fragments."""

    def test_direct_ref(self) -> None:
        assert resolve_ref({"$ref": "#/components/schemas/Pet"}) == "Pet"

    def test_array_of_refs(self) -> None:
        assert resolve_ref({"type": "array", "items": {"$ref": "#/definitions/Pet"}}) == "Pet[]"

    def test_inline_schema(self) -> None:
        assert resolve_ref({"type": "object"}) is None

    def test_none(self) -> None:
        assert resolve_ref(None) is None

    def test_ref_name_is_last_segment(self) -> None:
        assert ref_name("#/components/schemas/pet.Pet") == "pet.Pet"


# ---------------------------------------------------------------------------
# find_all_references
# ---------------------------------------------------------------------------


class TestFindAllReferences:
    """Reference discovery at any depth."""

    def test_collects_nested_refs(self) -> None:
        value = {
            "allOf": [
                {"$ref": "#/components/schemas/Base"},
                {
                    "properties": {
                        "items": {"type": "array", "items": {"$ref": "#/components/schemas/Item"}},
                        "meta": {"additionalProperties": {"$ref": "#/definitions/Meta"}},
                    }
                },
            ]
        }
        assert find_all_references(value) == {"Base", "Item", "Meta"}

    def test_ignores_non_schema_pointers(self) -> None:
        value = {"$ref": "#/components/parameters/Limit"}
        assert find_all_references(value) == set()

    def test_duplicates_are_absorbed(self) -> None:
        ref = {"$ref": "#/components/schemas/A"}
        assert find_all_references([ref, ref, {"x": ref}]) == {"A"}

    def test_scalars(self) -> None:
        assert find_all_references("text") == set()


# ---------------------------------------------------------------------------
# resolve_pointer
# ---------------------------------------------------------------------------


class TestResolvePointer:
    """Internal JSON pointer resolution."""

    def test_resolves_component(self) -> None:
        doc = {"components": {"parameters": {"Limit": {"name": "limit"}}}}
        assert resolve_pointer("#/components/parameters/Limit", doc) == {"name": "limit"}

    def test_escaped_segments(self) -> None:
        doc = {"paths": {"/pets/{id}": {"a~b": 1}}}
        assert resolve_pointer("#/paths/~1pets~1{id}/a~0b", doc) == 1

    def test_list_index(self) -> None:
        doc = {"tags": [{"name": "a"}, {"name": "b"}]}
        assert resolve_pointer("#/tags/1", doc) == {"name": "b"}

    def test_external_pointer_raises(self) -> None:
        with pytest.raises(SpecParseError, match="External"):
            resolve_pointer("other.yaml#/Pet", {})

    def test_missing_segment_raises(self) -> None:
        with pytest.raises(SpecParseError, match="not found"):
            resolve_pointer("#/components/schemas/Nope", {"components": {"schemas": {}}})
