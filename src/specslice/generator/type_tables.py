"""Map universal type labels to native types of each DTO target language.

Type labels produced by :mod:`specslice.parser.flattener` form a small
closed vocabulary -- primitives (``string``, ``integer`` ...), formatted
primitives (``string(date-time)``), references (``Pet``), arrays
(``Pet[]``, ``string[]``) and enums (``enum(a, b)``).  Each language gets a
total lookup over that vocabulary here, table-driven rather than through a
class per language.

**Mapping rules** (applied by :func:`map_type` in this order):

* ``X[]`` -- the language's list wrapper around ``map_type(X)``.
* ``enum(...)`` -- a union of literals for TypeScript (numbers, booleans
  and ``null`` bare, everything else quoted), the plain string type
  everywhere else.
* ``type(format)`` -- :data:`_FORMAT_TYPES` overrides for ``date``,
  ``date-time``, ``uuid``, ``int64`` and ``float``; ``int32`` and
  ``double`` map to the base integer/number type; string-like formats map to
  string; any other format falls back to the base type.
* ``Name`` -- references are kept as-is.
* primitives, ``object`` and ``any`` -- :data:`_BASIC_TYPES`.

Field names are converted per language by :func:`format_field_name`.
"""

from __future__ import annotations

import json
import keyword
import re

from specslice.models import DtoLanguage

L = DtoLanguage

_BASIC_TYPES: dict[str, dict[DtoLanguage, str]] = {
    "string": {
        L.TYPESCRIPT: "string", L.CSHARP: "string", L.DART: "String", L.JAVA: "String",
        L.PYTHON: "str", L.GO: "string", L.KOTLIN: "String",
    },
    "number": {
        L.TYPESCRIPT: "number", L.CSHARP: "double", L.DART: "double", L.JAVA: "double",
        L.PYTHON: "float", L.GO: "float64", L.KOTLIN: "Double",
    },
    "integer": {
        L.TYPESCRIPT: "number", L.CSHARP: "int", L.DART: "int", L.JAVA: "int",
        L.PYTHON: "int", L.GO: "int", L.KOTLIN: "Int",
    },
    "boolean": {
        L.TYPESCRIPT: "boolean", L.CSHARP: "bool", L.DART: "bool", L.JAVA: "boolean",
        L.PYTHON: "bool", L.GO: "bool", L.KOTLIN: "Boolean",
    },
    "object": {
        L.TYPESCRIPT: "Record<string, unknown>", L.CSHARP: "Dictionary<string, object>",
        L.DART: "Map<String, dynamic>", L.JAVA: "Map<String, Object>",
        L.PYTHON: "dict[str, Any]", L.GO: "map[string]interface{}", L.KOTLIN: "Map<String, Any>",
    },
    "any": {
        L.TYPESCRIPT: "unknown", L.CSHARP: "object", L.DART: "dynamic", L.JAVA: "Object",
        L.PYTHON: "Any", L.GO: "interface{}", L.KOTLIN: "Any",
    },
}

_DATE_TIME = {
    L.TYPESCRIPT: "string", L.CSHARP: "DateTime", L.DART: "DateTime", L.JAVA: "LocalDateTime",
    L.PYTHON: "datetime", L.GO: "time.Time", L.KOTLIN: "LocalDateTime",
}

_FORMAT_TYPES: dict[str, dict[DtoLanguage, str]] = {
    "date-time": _DATE_TIME,
    "date": _DATE_TIME,
    "uuid": {
        L.TYPESCRIPT: "string", L.CSHARP: "Guid", L.DART: "String", L.JAVA: "UUID",
        L.PYTHON: "UUID", L.GO: "string", L.KOTLIN: "UUID",
    },
    "int64": {
        L.TYPESCRIPT: "number", L.CSHARP: "long", L.DART: "int", L.JAVA: "long",
        L.PYTHON: "int", L.GO: "int64", L.KOTLIN: "Long",
    },
    "float": {
        L.TYPESCRIPT: "number", L.CSHARP: "float", L.DART: "double", L.JAVA: "float",
        L.PYTHON: "float", L.GO: "float32", L.KOTLIN: "Float",
    },
}

_FORMAT_ALIASES = {"int32": "integer", "double": "number"}

_STRING_FORMATS = frozenset(
    {"email", "uri", "url", "hostname", "ipv4", "ipv6", "byte", "binary", "password"}
)

# Java generics cannot hold primitives.
_JAVA_BOXED = {
    "int": "Integer", "long": "Long", "double": "Double", "float": "Float", "boolean": "Boolean",
}

PRIMITIVE_LABELS = frozenset(_BASIC_TYPES) | {"array"}

_FORMAT_RE = re.compile(r"^(\w+)\(([^)]+)\)$")
_INVALID_IDENT_RE = re.compile(r"[^a-zA-Z0-9_]")
_IDENT_SEPARATOR_RE = re.compile(r"[^a-zA-Z0-9_]+")
_TS_IDENT_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_TS_BARE_LITERAL_RE = re.compile(r"^(-?(0|[1-9][0-9]*)(\.[0-9]+)?([eE][+-]?[0-9]+)?|true|false|null)$")


def is_array_label(label: str) -> bool:
    return label.endswith("[]")


def is_enum_label(label: str) -> bool:
    return label.startswith("enum(") and label.endswith(")")


def is_reference_label(label: str) -> bool:
    """Return True if *label* names another definition (``Pet``, not ``Pet[]``)."""
    return bool(label) and label[0].isupper() and label not in PRIMITIVE_LABELS and not is_array_label(label)


def enum_values(label: str) -> list[str]:
    """Return the literals of an ``enum(v1, v2)`` label."""
    inner = label[len("enum("):-1]
    return inner.split(", ") if inner else []


def _ts_literal(value: str) -> str:
    """Render one enum literal for a TypeScript union.

    JSON numbers, booleans and ``null`` stay bare; everything else is quoted.
    """
    if _TS_BARE_LITERAL_RE.match(value):
        return value
    return json.dumps(value)


def wrap_array(inner: str, language: DtoLanguage) -> str:
    """Wrap an already mapped element type in the language's list type."""
    if language == L.TYPESCRIPT:
        if " | " in inner:
            return f"({inner})[]"
        return f"{inner}[]"
    if language == L.PYTHON:
        return f"list[{inner}]"
    if language == L.GO:
        return f"[]{inner}"
    if language == L.JAVA:
        return f"List<{_JAVA_BOXED.get(inner, inner)}>"
    return f"List<{inner}>"


def map_basic_type(type_name: str, language: DtoLanguage) -> str:
    """Map a primitive, ``object`` or ``any``; unknown names pass through."""
    mapping = _BASIC_TYPES.get(type_name)
    if mapping is None:
        return type_name
    return mapping[language]


def map_formatted_type(base_type: str, type_format: str, language: DtoLanguage) -> str:
    """Map a ``base(format)`` label."""
    override = _FORMAT_TYPES.get(type_format)
    if override is not None:
        return override[language]
    alias = _FORMAT_ALIASES.get(type_format)
    if alias is not None:
        return map_basic_type(alias, language)
    if type_format in _STRING_FORMATS:
        return map_basic_type("string", language)
    return map_basic_type(base_type, language)


def map_type(label: str, language: DtoLanguage) -> str:
    """Map a type label to the native type of *language*.

    Example::

        >>> map_type("Pet[]", DtoLanguage.CSHARP)
        'List<Pet>'
        >>> map_type("string(date-time)", DtoLanguage.GO)
        'time.Time'
        >>> map_type("enum(a, b)", DtoLanguage.TYPESCRIPT)
        '"a" | "b"'
    """
    if is_array_label(label):
        return wrap_array(map_type(label[:-2], language), language)

    if label == "array":
        return wrap_array(map_basic_type("any", language), language)

    if is_enum_label(label):
        if language == L.TYPESCRIPT:
            return " | ".join(_ts_literal(value) for value in enum_values(label))
        return map_basic_type("string", language)

    match = _FORMAT_RE.match(label)
    if match:
        return map_formatted_type(match.group(1), match.group(2), language)

    if is_reference_label(label):
        return label

    return map_basic_type(label, language)


def format_field_name(name: str, language: DtoLanguage) -> str:
    """Convert a document field name to the naming convention of *language*.

    * TypeScript -- unchanged; names that are not identifiers are quoted.
    * Java, Kotlin, Dart -- unchanged when already an identifier, otherwise
      camelCased across the invalid characters (``x-request-id`` becomes
      ``xRequestId``, ``@type`` becomes ``type``).
    * C#, Go -- as for Java, then the first letter upper-cased.
    * Python -- snake_case, invalid characters replaced, keywords suffixed
      with ``_`` per PEP 8.
    """
    if language in (L.CSHARP, L.GO):
        ident = _camel_identifier(name)
        if ident[0].isdigit():
            ident = f"F{ident}"
        return ident[:1].upper() + ident[1:]

    if language == L.PYTHON:
        snake = re.sub(r"([A-Z])", r"_\1", name).lower()
        if snake.startswith("_"):
            snake = snake[1:]
        snake = _INVALID_IDENT_RE.sub("_", snake) or "field"
        if snake[0].isdigit():
            snake = f"_{snake}"
        if keyword.iskeyword(snake):
            snake = f"{snake}_"
        return snake

    if language == L.TYPESCRIPT:
        return name if _TS_IDENT_RE.match(name) else json.dumps(name)

    ident = _camel_identifier(name)
    if ident[0].isdigit():
        ident = f"_{ident}"
    return ident


def _camel_identifier(name: str) -> str:
    """Join the identifier-safe runs of *name* in camelCase."""
    parts = [part for part in _IDENT_SEPARATOR_RE.split(name) if part]
    if not parts:
        return "field"
    return parts[0] + "".join(part[:1].upper() + part[1:] for part in parts[1:])
