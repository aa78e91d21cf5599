"""Extract a minimal, closed slice of a document for a tag selection.

:func:`extract_by_tags` copies the endpoints of the selected tags, collects
the schema names their bodies and responses reference, closes that set over
every nested reference (:func:`schema_closure`), and flattens each member of
the closure into the result.

Two guarantees hold for every result:

* **Completeness and minimality** -- ``schemas`` contains exactly the
  definitions reachable from the included endpoints, nothing else.
  Referenced names without a definition are left out rather than failing.
* **Determinism** -- ``schemas`` is keyed in alphabetical order, so the
  same document and selection always encode to byte-identical text
  regardless of the order the closure was discovered in.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from specslice.models import EndpointDescriptor, ExtractionResult, TagBucket
from specslice.parser.analyzer import analyze_tags
from specslice.parser.flattener import flatten
from specslice.parser.resolver import find_all_references
from specslice.parser.schema import get_schemas, load_definitions

logger = logging.getLogger(__name__)


def api_identity(document: dict[str, Any]) -> str:
    """Return the ``"<title> v<version>"`` identity string of *document*."""
    info = document.get("info") or {}
    return f"{info.get('title') or 'API'} v{info.get('version') or '1.0'}"


def _strip_array(label: str) -> str:
    return label[:-2] if label.endswith("[]") else label


def schema_closure(seed_names: Iterable[str], raw_definitions: dict[str, Any]) -> set[str]:
    """Return *seed_names* plus every name transitively referenced from them.

    Names are popped from a work stack, their raw definition is scanned with
    :func:`~specslice.parser.resolver.find_all_references`, and newly seen
    names are pushed back.  Names without a definition stay in the set but
    contribute no further references.

    Args:
        seed_names: Initial schema names (without ``[]`` suffixes).
        raw_definitions: The raw definition map from
            :func:`~specslice.parser.schema.get_schemas`.

    Returns:
        The closed set of names.
    """
    used = set(seed_names)
    stack = list(used)
    while stack:
        name = stack.pop()
        definition = raw_definitions.get(name)
        if definition is None:
            continue
        for ref in find_all_references(definition):
            if ref not in used:
                used.add(ref)
                stack.append(ref)
    return used


def endpoint_schema_names(endpoints: Iterable[EndpointDescriptor]) -> set[str]:
    """Collect the body and response schema names of *endpoints*."""
    names: set[str] = set()
    for endpoint in endpoints:
        if endpoint.body:
            names.add(_strip_array(endpoint.body))
        if endpoint.response:
            names.add(_strip_array(endpoint.response))
    return names


def collect_used_schemas(
    endpoints: Iterable[EndpointDescriptor],
    raw_definitions: dict[str, Any],
) -> list[str]:
    """Return the sorted, defined schema closure of *endpoints*.

    This is the name list to hand to
    :func:`~specslice.generator.dto.generate_dtos` when the DTOs of a single
    endpoint (or any set of endpoints) are needed with all their nested
    types.
    """
    closure = schema_closure(endpoint_schema_names(endpoints), raw_definitions)
    return sorted(name for name in closure if name in raw_definitions)


def extract_by_tags(
    document: dict[str, Any],
    selected_tags: Iterable[str],
    tag_index: Optional[dict[str, TagBucket]] = None,
) -> ExtractionResult:
    """Extract the endpoints of *selected_tags* and the schemas they need.

    Args:
        document: A validated API description.
        selected_tags: Tag names to include, in output order.  Tags absent
            from the index are logged and skipped but still listed in
            ``extracted_tags``.
        tag_index: A precomputed :func:`~specslice.parser.analyzer.analyze_tags`
            result; computed from *document* when omitted.

    Returns:
        The :class:`~specslice.models.ExtractionResult`.

    Example::

        result = extract_by_tags(document, ["Store"])
        print(list(result.schemas))   # ['Order']
    """
    if tag_index is None:
        tag_index = analyze_tags(document)

    selected = [str(tag) for tag in selected_tags]
    raw_definitions = get_schemas(document)

    endpoints: dict[str, list[EndpointDescriptor]] = {}
    for tag in selected:
        bucket = tag_index.get(tag)
        if bucket is None:
            logger.warning("Tag '%s' not found in document; skipping", tag)
            continue
        endpoints[tag] = [endpoint.model_copy() for endpoint in bucket.paths]

    used = schema_closure(
        endpoint_schema_names(ep for eps in endpoints.values() for ep in eps),
        raw_definitions,
    )

    definitions = load_definitions(document)
    schemas: dict[str, dict[str, str]] = {}
    for name in sorted(used):
        node = definitions.get(name)
        if node is None:
            logger.debug("Schema '%s' is referenced but not defined", name)
            continue
        schemas[name] = flatten(node, definitions)

    return ExtractionResult(
        api=api_identity(document),
        extracted_tags=selected,
        endpoints=endpoints,
        schemas=schemas,
    )
