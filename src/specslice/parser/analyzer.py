"""Group every operation of a document into per-tag endpoint buckets.

:func:`analyze_tags` is the entry point of the extraction pipeline: it walks
``paths`` once and produces the tag index that both the CLI listings and
:func:`~specslice.parser.extractor.extract_by_tags` work from.

An operation with several tags is counted once in each of its buckets.  This
is intentional: every bucket is a self-contained view of one tag, so the sum
of bucket totals can exceed the number of operations in the document.
"""

from __future__ import annotations

from typing import Any

from specslice.models import HTTPMethod, TagBucket, TagSort
from specslice.parser.operations import build_endpoint

UNTAGGED = "Untagged"
"""Synthetic bucket for operations that declare no tags."""


def analyze_tags(document: dict[str, Any]) -> dict[str, TagBucket]:
    """Build the tag index of *document*.

    Iterates every path and the methods GET, POST, PUT, PATCH and DELETE in
    that order.  Buckets are keyed by tag name in first-seen order; tag
    descriptions are taken from the document's top-level ``tags`` list.

    Args:
        document: A validated API description.

    Returns:
        A dict mapping tag name to its :class:`~specslice.models.TagBucket`.
    """
    descriptions = _tag_descriptions(document)
    consumes = document.get("consumes")
    index: dict[str, TagBucket] = {}

    paths = document.get("paths") or {}
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue

        path_params = path_item.get("parameters") or []

        for method in HTTPMethod:
            operation = path_item.get(method.value)
            if not isinstance(operation, dict):
                continue

            endpoint = build_endpoint(
                str(path),
                method.value,
                operation,
                path_params=path_params,
                document=document,
                consumes=consumes,
            )
            upper = method.value.upper()

            for tag in operation.get("tags") or [UNTAGGED]:
                tag = str(tag)
                bucket = index.get(tag)
                if bucket is None:
                    bucket = TagBucket(name=tag, description=descriptions.get(tag))
                    index[tag] = bucket
                bucket.total += 1
                bucket.methods[upper] = bucket.methods.get(upper, 0) + 1
                bucket.paths.append(endpoint)

    return index


def _tag_descriptions(document: dict[str, Any]) -> dict[str, str]:
    """Map tag names to the descriptions declared in the top-level ``tags`` list."""
    descriptions: dict[str, str] = {}
    for tag in document.get("tags") or []:
        if isinstance(tag, dict) and tag.get("name") and tag.get("description"):
            descriptions[str(tag["name"])] = str(tag["description"])
    return descriptions


def sort_tags_by_name(index: dict[str, TagBucket]) -> list[TagBucket]:
    """Return the buckets ordered by tag name."""
    return sorted(index.values(), key=lambda bucket: bucket.name)


def sort_tags_by_count(index: dict[str, TagBucket]) -> list[TagBucket]:
    """Return the buckets ordered by endpoint count, largest first.

    Buckets with equal counts keep their document order.
    """
    return sorted(index.values(), key=lambda bucket: bucket.total, reverse=True)


def sort_tags(index: dict[str, TagBucket], order: TagSort = TagSort.DOCUMENT) -> list[TagBucket]:
    """Return the buckets in the requested :class:`~specslice.models.TagSort` order."""
    if order == TagSort.NAME:
        return sort_tags_by_name(index)
    if order == TagSort.COUNT:
        return sort_tags_by_count(index)
    return list(index.values())


def count_endpoints(index: dict[str, TagBucket]) -> int:
    """Return the sum of bucket totals (multi-tag operations count once per tag)."""
    return sum(bucket.total for bucket in index.values())
