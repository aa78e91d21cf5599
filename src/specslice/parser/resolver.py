"""Find and follow ``$ref`` JSON Reference pointers in API descriptions.

OpenAPI documents use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition.  Unlike a
full dereferencer, this module never inlines schema definitions: the
extraction pipeline keeps references opaque and works with definition
*names*.

* :func:`ref_name` -- the definition name a pointer addresses.
* :func:`resolve_ref` -- the reference label of one fragment (``"Pet"``,
  ``"Pet[]"``, or ``None``).
* :func:`find_all_references` -- every schema name referenced anywhere
  inside an arbitrary value.
* :func:`resolve_pointer` -- follow an internal pointer to its target, used
  for ``components.parameters``, ``requestBodies`` and ``responses``.
"""

from __future__ import annotations

from typing import Any, Optional

from specslice.exceptions import SpecParseError
from specslice.parser.schema import OPENAPI_SCHEMA_PREFIX, SWAGGER_SCHEMA_PREFIX


def ref_name(pointer: str) -> str:
    """Return the last path segment of a ``$ref`` pointer."""
    return pointer.rsplit("/", 1)[-1]


def resolve_ref(fragment: Any) -> Optional[str]:
    """Return the reference label of a schema fragment.

    Args:
        fragment: A raw schema object, or ``None``.

    Returns:
        ``"Name"`` for a direct ``$ref``, ``"Name[]"`` when the fragment's
        ``items`` is a ``$ref``, otherwise ``None``.

    Example::

        >>> resolve_ref({"$ref": "#/components/schemas/Pet"})
        'Pet'
        >>> resolve_ref({"type": "array", "items": {"$ref": "#/definitions/Pet"}})
        'Pet[]'
    """
    if not isinstance(fragment, dict):
        return None

    ref = fragment.get("$ref")
    if isinstance(ref, str):
        return ref_name(ref) or None

    items = fragment.get("items")
    if isinstance(items, dict) and isinstance(items.get("$ref"), str):
        name = ref_name(items["$ref"])
        return f"{name}[]" if name else None

    return None


def find_all_references(value: Any, refs: Optional[set[str]] = None) -> set[str]:
    """Collect every schema definition name referenced inside *value*.

    Walks dicts and lists depth-first without assuming any schema shape, so
    references inside ``allOf``/``oneOf``/``anyOf`` lists, ``items``,
    ``additionalProperties`` or vendor extensions are all found.  Only
    pointers into ``#/components/schemas/`` or ``#/definitions/`` count.

    No cycle guard is needed: the walk follows the literal value, never a
    pointer, and duplicates are absorbed by the set.

    Args:
        value: Any JSON-like value.
        refs: Accumulator; a new set is created when omitted.

    Returns:
        The accumulated set of referenced names.
    """
    if refs is None:
        refs = set()

    if isinstance(value, dict):
        ref = value.get("$ref")
        if isinstance(ref, str) and (
            OPENAPI_SCHEMA_PREFIX in ref or SWAGGER_SCHEMA_PREFIX in ref
        ):
            name = ref_name(ref)
            if name:
                refs.add(name)
        for item in value.values():
            find_all_references(item, refs)
    elif isinstance(value, list):
        for item in value:
            find_all_references(item, refs)

    return refs


def resolve_pointer(pointer: str, document: dict[str, Any]) -> Any:
    """Resolve an internal JSON pointer against *document*.

    Parses pointers like ``#/components/parameters/limit`` and navigates the
    document to the referenced value, handling RFC 6901 escaping (``~0``
    for ``~``, ``~1`` for ``/``).

    Args:
        pointer: The ``$ref`` string.
        document: The document to resolve against.

    Returns:
        The value found at the referenced path.

    Raises:
        SpecParseError: If the pointer is external (does not start with
            ``#/``), or if any segment does not exist in the document.
    """
    if not pointer.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {pointer}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = document
    for segment in pointer[2:].split("/"):
        segment = segment.replace("~1", "/").replace("~0", "~")

        if isinstance(current, dict):
            if segment not in current:
                raise SpecParseError(
                    f"Cannot resolve $ref '{pointer}': key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise SpecParseError(
                    f"Cannot resolve $ref '{pointer}': invalid array index '{segment}'"
                ) from exc
        else:
            raise SpecParseError(
                f"Cannot resolve $ref '{pointer}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current
