"""API description parser -- load, classify, and extract tag-scoped slices.

This sub-package turns a raw OpenAPI 3.x or Swagger 2.0 document into the
tag index and :class:`~specslice.models.ExtractionResult` that the encoders
and the DTO generator consume.

Typical usage::

    from specslice.parser import analyze_tags, extract_by_tags, load_document, validate_document

    document = load_document("petstore.yaml")
    validate_document(document)
    index = analyze_tags(document)
    result = extract_by_tags(document, ["pets"], index)

Sub-modules:

* :mod:`~specslice.parser.loader` -- I/O layer (file, stdin) plus format
  detection and boundary validation.
* :mod:`~specslice.parser.schema` -- Classification of schema fragments into
  :class:`~specslice.models.SchemaNode` values.
* :mod:`~specslice.parser.resolver` -- ``$ref`` discovery and pointer
  resolution.
* :mod:`~specslice.parser.flattener` -- Shallow and deep field flattening
  with cycle guards.
* :mod:`~specslice.parser.operations` -- Parameters, request body and
  response of a single operation.
* :mod:`~specslice.parser.analyzer` -- Per-tag endpoint buckets.
* :mod:`~specslice.parser.extractor` -- Tag-scoped extraction and schema
  closure.
"""

from specslice.parser.analyzer import analyze_tags
from specslice.parser.extractor import collect_used_schemas, extract_by_tags
from specslice.parser.flattener import flatten, resolve_deep
from specslice.parser.loader import load_document, validate_document
from specslice.parser.schema import get_schemas, load_definitions

__all__ = [
    "analyze_tags",
    "collect_used_schemas",
    "extract_by_tags",
    "flatten",
    "get_schemas",
    "load_definitions",
    "load_document",
    "resolve_deep",
    "validate_document",
]
