"""Tests for specslice.parser.analyzer -- tag buckets."""

from __future__ import annotations

from typing import Any

from specslice.models import TagSort
from specslice.parser.analyzer import (
    UNTAGGED,
    analyze_tags,
    count_endpoints,
    sort_tags,
    sort_tags_by_count,
    sort_tags_by_name,
)


class TestAnalyzeTags:
    """Bucketing of operations by tag."""

    def test_buckets_in_first_seen_order(self, petstore_raw: dict[str, Any]) -> None:
        index = analyze_tags(petstore_raw)
        assert list(index) == ["Pets", "Media", "Store", UNTAGGED]

    def test_counts(self, petstore_raw: dict[str, Any]) -> None:
        pets = analyze_tags(petstore_raw)["Pets"]
        assert pets.total == 5
        assert pets.methods == {"GET": 2, "POST": 2, "DELETE": 1}
        assert pets.total == len(pets.paths)

    def test_descriptions_from_top_level_tags(self, petstore_raw: dict[str, Any]) -> None:
        index = analyze_tags(petstore_raw)
        assert index["Pets"].description == "Everything about your pets"
        assert index["Media"].description is None

    def test_multi_tag_operation_counted_in_each_bucket(self, petstore_raw: dict[str, Any]) -> None:
        index = analyze_tags(petstore_raw)
        assert [ep.path for ep in index["Media"].paths] == ["/pets/{id}/photo"]
        assert "/pets/{id}/photo" in [ep.path for ep in index["Pets"].paths]
        assert count_endpoints(index) == 8

    def test_untagged_bucket(self, petstore_raw: dict[str, Any]) -> None:
        untagged = analyze_tags(petstore_raw)[UNTAGGED]
        assert [(ep.method, ep.path) for ep in untagged.paths] == [("GET", "/health")]

    def test_method_scan_order(self) -> None:
        doc = {
            "paths": {
                "/x": {
                    "delete": {"tags": ["t"]},
                    "get": {"tags": ["t"]},
                    "head": {"tags": ["t"]},
                    "patch": {"tags": ["t"]},
                }
            }
        }
        assert [ep.method for ep in analyze_tags(doc)["t"].paths] == ["GET", "PATCH", "DELETE"]

    def test_non_dict_items_are_skipped(self) -> None:
        doc = {"paths": {"/a": "broken", "/b": {"get": None, "post": {"tags": ["t"]}}}}
        index = analyze_tags(doc)
        assert list(index) == ["t"]
        assert index["t"].total == 1

    def test_path_level_parameters(self, petstore_raw: dict[str, Any]) -> None:
        pets = analyze_tags(petstore_raw)["Pets"]
        delete = next(ep for ep in pets.paths if ep.method == "DELETE")
        assert delete.params == ["id*(path)"]

    def test_swagger_document(self, swagger2_raw: dict[str, Any]) -> None:
        items = analyze_tags(swagger2_raw)["items"]
        post = next(ep for ep in items.paths if ep.method == "POST")
        put = next(ep for ep in items.paths if ep.method == "PUT")
        assert post.body == "Item"
        assert post.body_content_type == "application/json"
        assert put.body_content_type == "multipart/form-data"
        assert put.params == ["id*(path)", "image(formData)"]

    def test_empty_paths(self) -> None:
        assert analyze_tags({"paths": {}}) == {}


class TestSortTags:
    """Ordering of bucket listings."""

    def test_by_name(self, petstore_raw: dict[str, Any]) -> None:
        names = [b.name for b in sort_tags_by_name(analyze_tags(petstore_raw))]
        assert names == ["Media", "Pets", "Store", UNTAGGED]

    def test_by_count_is_stable(self, petstore_raw: dict[str, Any]) -> None:
        names = [b.name for b in sort_tags_by_count(analyze_tags(petstore_raw))]
        assert names == ["Pets", "Media", "Store", UNTAGGED]

    def test_document_order(self, petstore_raw: dict[str, Any]) -> None:
        index = analyze_tags(petstore_raw)
        assert [b.name for b in sort_tags(index, TagSort.DOCUMENT)] == list(index)
        assert sort_tags(index, TagSort.NAME) == sort_tags_by_name(index)
