"""Flatten schema definitions into field-to-type-label mappings.

Two views of a definition are produced here:

* :func:`flatten` -- the *shallow* view, ``{field: label}``, where references
  stay opaque (``"owner": "Owner"``).  This is what the tag-scoped
  extractor stores and what the DTO generator renders.
* :func:`resolve_deep` -- the *deep* view, where every reference to a known
  definition is expanded into nested :class:`~specslice.models.DeepField`
  children, for display of what an endpoint really sends and receives.

Both views merge composition members (``allOf``/``oneOf``/``anyOf``) into a
single field map.  Dangling references never raise: they render as opaque
leaf labels.

Cycle handling differs between the two.  The shallow flattener only has to
guard composition chains (a property reference is never followed), so it
keeps one ``visited_composition`` set per top-level call.  The deep
flattener guards every expansion with the set of names already expanded on
the *current path*; the set is extended by value for each child, so two
sibling fields referencing the same type both get a full expansion while a
single branch can never revisit a type it is already inside.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, Optional

from specslice.models import DeepField, SchemaKind, SchemaNode
from specslice.parser.resolver import ref_name

logger = logging.getLogger(__name__)


def flatten(
    node: SchemaNode,
    definitions: dict[str, SchemaNode],
    visited_composition: Optional[set[str]] = None,
) -> dict[str, str]:
    """Flatten one definition into ``{field: type_label}``.

    Args:
        node: The classified definition.
        definitions: All classified definitions of the document, by name.
        visited_composition: Names of composed definitions already merged
            during this call.  Created on the first call; callers normally
            omit it.

    Returns:
        An ordered mapping of field name to type label.  Definitions
        without properties yield an empty dict.
    """
    result: dict[str, str] = {}

    if node.kind is SchemaKind.COMPOSITION:
        if visited_composition is None:
            visited_composition = set()
        for member in node.members:
            if member.kind is not SchemaKind.REFERENCE:
                result.update(flatten(member, definitions, visited_composition))
                continue
            name = ref_name(member.ref or "")
            target = definitions.get(name)
            if target is None:
                logger.debug("Composed schema '%s' is not defined; skipping", name)
                continue
            if name in visited_composition:
                logger.debug("Composition cycle through '%s'; skipping", name)
                continue
            visited_composition.add(name)
            result.update(flatten(target, definitions, visited_composition))
        return result

    for prop_name, prop in node.properties.items():
        result[prop_name] = property_label(prop)

    return result


def flatten_named(name: str, definitions: dict[str, SchemaNode]) -> Optional[dict[str, str]]:
    """Flatten the definition called *name*, or return ``None`` if it is unknown."""
    node = definitions.get(name)
    if node is None:
        return None
    return flatten(node, definitions)


def property_label(prop: SchemaNode) -> str:
    """Return the type label of a single property.

    Example::

        >>> property_label(parse_schema({"type": "string", "format": "uuid"}))
        'string(uuid)'
        >>> property_label(parse_schema({"type": "array", "items": {"$ref": "#/definitions/Tag"}}))
        'Tag[]'
        >>> property_label(parse_schema({"enum": ["a", "b"]}))
        'enum(a, b)'
    """
    if prop.kind is SchemaKind.REFERENCE:
        return ref_name(prop.ref or "") or "object"

    if prop.kind is SchemaKind.ARRAY:
        items = prop.items
        if items is None:
            return "array"
        if items.kind is SchemaKind.REFERENCE:
            return f"{ref_name(items.ref or '')}[]"
        return f"{items.type or 'any'}[]"

    if prop.kind is SchemaKind.ENUM:
        return f"enum({', '.join(_enum_literal(v) for v in prop.enum_values)})"

    if prop.kind is SchemaKind.COMPOSITION:
        composed = _composed_reference(prop)
        if composed is not None:
            return composed

    label = prop.type or "any"
    if prop.format:
        label = f"{label}({prop.format})"
    return label


def _enum_literal(value: Any) -> str:
    """Render one enum value as it appears inside an ``enum(...)`` label.

    YAML loads unquoted dates and timestamps as :class:`~datetime.date`
    values; they render in ISO form like the strings they stand for.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, date):
        return value.isoformat()
    return json.dumps(value, default=str)


def _composed_reference(prop: SchemaNode) -> Optional[str]:
    """Return the referenced name of a composition with exactly one ``$ref`` member.

    ``{"allOf": [{"$ref": "#/components/schemas/Owner"}], "nullable": true}``
    is the usual way to attach siblings to a reference; it labels as
    ``Owner``.
    """
    refs = [m for m in prop.members if m.kind is SchemaKind.REFERENCE]
    if len(refs) != 1:
        return None
    return ref_name(refs[0].ref or "") or None


def _reference_target(prop: SchemaNode) -> Optional[str]:
    """Return the definition name a property expands into, if any."""
    if prop.kind is SchemaKind.REFERENCE:
        return ref_name(prop.ref or "") or None
    if prop.kind is SchemaKind.ARRAY and prop.items is not None:
        if prop.items.kind is SchemaKind.REFERENCE:
            return ref_name(prop.items.ref or "") or None
        return None
    if prop.kind is SchemaKind.COMPOSITION:
        return _composed_reference(prop)
    return None


# --------------------------------------------------------------------------- #
# Deep resolution
# --------------------------------------------------------------------------- #


def resolve_deep(
    root_name: str,
    definitions: dict[str, SchemaNode],
    visited: frozenset[str] = frozenset(),
) -> Optional[dict[str, DeepField]]:
    """Resolve a definition into a nested field tree.

    Every property referencing a known definition that is not already being
    expanded on the current root-to-leaf path is expanded into
    :attr:`DeepField.fields`.  A repeated name on the same path renders as a
    leaf, which guarantees termination over self- and mutually-referential
    schemas.

    Args:
        root_name: Definition name; a trailing ``[]`` is ignored.
        definitions: All classified definitions of the document, by name.
        visited: Names treated as already expanded on the path.  The root
            itself is not added, so for ``A{b: B}`` / ``B{a: A}`` the tree
            is ``A.b -> B.a -> A.b -> B (leaf)``.

    Returns:
        The resolved field tree, or ``None`` if *root_name* is unknown.
    """
    name = root_name[:-2] if root_name.endswith("[]") else root_name
    node = definitions.get(name)
    if node is None:
        return None
    return _resolve_node(node, definitions, frozenset(visited))


def _resolve_node(
    node: SchemaNode,
    definitions: dict[str, SchemaNode],
    path: frozenset[str],
) -> dict[str, DeepField]:
    """Deep-resolve *node* with *path* as the set of names expanded above it."""
    result: dict[str, DeepField] = {}

    if node.kind is SchemaKind.COMPOSITION:
        for member in node.members:
            if member.kind is not SchemaKind.REFERENCE:
                result.update(_resolve_node(member, definitions, path))
                continue
            name = ref_name(member.ref or "")
            target = definitions.get(name)
            if target is None or name in path:
                continue
            result.update(_resolve_node(target, definitions, path | {name}))
        return result

    for prop_name, prop in node.properties.items():
        label = property_label(prop)
        is_array = label.endswith("[]")
        name = _reference_target(prop)
        target = definitions.get(name) if name else None

        if name is None or target is None or name in path:
            if name is not None and target is None:
                logger.debug("Reference '%s' is not defined; rendering as leaf", name)
            result[prop_name] = DeepField(type=label, is_array=is_array)
            continue

        nested = _resolve_node(target, definitions, path | {name})
        result[prop_name] = DeepField(type=label, is_array=is_array, fields=nested or None)

    return result
