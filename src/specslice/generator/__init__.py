"""DTO code generation from flattened schema definitions.

* :mod:`~specslice.generator.type_tables` -- Per-language type and field
  name mapping.
* :mod:`~specslice.generator.dto` -- Jinja2 rendering of whole declarations.
"""

from specslice.generator.dto import DTO_LANGUAGES, generate_dtos, parse_language
from specslice.generator.type_tables import format_field_name, map_type

__all__ = [
    "DTO_LANGUAGES",
    "format_field_name",
    "generate_dtos",
    "map_type",
    "parse_language",
]
