"""Classify raw schema fragments into :class:`~specslice.models.SchemaNode` values.

Schema objects in an API description are open-ended dictionaries whose shape
is only known from which optional keys are present.  This module inspects
each fragment exactly once and records its dominant shape as a
:class:`~specslice.models.SchemaKind`, so that the flatteners and the DTO
generator can dispatch on an explicit tag.

Classification precedence:

1. ``$ref`` -- :attr:`SchemaKind.REFERENCE`
2. ``allOf`` / ``oneOf`` / ``anyOf`` -- :attr:`SchemaKind.COMPOSITION`
3. ``type: array`` -- :attr:`SchemaKind.ARRAY`
4. ``enum`` -- :attr:`SchemaKind.ENUM`
5. anything else -- :attr:`SchemaKind.PRIMITIVE`

Definitions live under ``components.schemas`` in OpenAPI 3.x documents and
under ``definitions`` in Swagger 2.0 documents; :func:`get_schemas` and
:func:`load_definitions` hide that difference.
"""

from __future__ import annotations

from typing import Any, Optional

from specslice.models import SchemaKind, SchemaNode

_COMPOSITION_KEYS = ("allOf", "oneOf", "anyOf")

OPENAPI_SCHEMA_PREFIX = "#/components/schemas/"
SWAGGER_SCHEMA_PREFIX = "#/definitions/"


def parse_schema(fragment: Any) -> SchemaNode:
    """Classify *fragment* and all of its nested sub-schemas.

    Args:
        fragment: A raw schema object.  Non-dict values (which only appear
            in malformed documents) yield an empty primitive node.

    Returns:
        The classified :class:`~specslice.models.SchemaNode`.
    """
    if not isinstance(fragment, dict):
        return SchemaNode(kind=SchemaKind.PRIMITIVE)

    schema_type = _schema_type(fragment.get("type"))
    schema_format = fragment.get("format")
    if schema_format is not None:
        schema_format = str(schema_format)
    raw_properties = fragment.get("properties")
    properties: dict[str, SchemaNode] = {}
    if isinstance(raw_properties, dict):
        properties = {str(name): parse_schema(prop) for name, prop in raw_properties.items()}

    common: dict[str, Any] = {
        "type": schema_type,
        "format": schema_format,
        "properties": properties,
        "raw": fragment,
    }

    ref = fragment.get("$ref")
    if isinstance(ref, str):
        return SchemaNode(kind=SchemaKind.REFERENCE, ref=ref, **common)

    members = _composition_members(fragment)
    if members is not None:
        return SchemaNode(
            kind=SchemaKind.COMPOSITION,
            members=[parse_schema(member) for member in members],
            **common,
        )

    if schema_type == "array":
        items = fragment.get("items")
        return SchemaNode(
            kind=SchemaKind.ARRAY,
            items=parse_schema(items) if isinstance(items, dict) else None,
            **common,
        )

    enum_values = fragment.get("enum")
    if isinstance(enum_values, list):
        return SchemaNode(kind=SchemaKind.ENUM, enum_values=enum_values, **common)

    return SchemaNode(kind=SchemaKind.PRIMITIVE, **common)


def _composition_members(fragment: dict[str, Any]) -> Optional[list[Any]]:
    """Return the first composition list declared on *fragment*, if any."""
    for key in _COMPOSITION_KEYS:
        members = fragment.get(key)
        if isinstance(members, list):
            return members
    return None


def _schema_type(type_value: Any) -> Optional[str]:
    """Normalise a schema ``type`` value.

    OpenAPI 3.1 allows ``type`` to be an array (e.g. ``["string", "null"]``);
    the first non-null entry wins.
    """
    if type_value is None:
        return None
    if isinstance(type_value, list):
        non_null = [t for t in type_value if t != "null"]
        return str(non_null[0]) if non_null else None
    return str(type_value)


def get_schemas(document: dict[str, Any]) -> dict[str, Any]:
    """Return the raw schema definition map of *document*.

    OpenAPI 3.x documents keep definitions under ``components.schemas``;
    Swagger 2.0 documents use ``definitions``.  Returns an empty dict when
    neither is present.
    """
    components = document.get("components")
    if isinstance(components, dict) and isinstance(components.get("schemas"), dict):
        return components["schemas"]
    definitions = document.get("definitions")
    if isinstance(definitions, dict):
        return definitions
    return {}


def schema_ref_prefix(document: dict[str, Any]) -> str:
    """Return the ``$ref`` prefix that definitions of *document* are addressed by."""
    if document.get("openapi"):
        return OPENAPI_SCHEMA_PREFIX
    return SWAGGER_SCHEMA_PREFIX


def load_definitions(document: dict[str, Any]) -> dict[str, SchemaNode]:
    """Classify every schema definition of *document*.

    Returns:
        A dict mapping definition name to its classified node, in document
        order.
    """
    return {str(name): parse_schema(fragment) for name, fragment in get_schemas(document).items()}
