"""Render flattened schema definitions as DTO source code.

The generator takes the classified definitions of a document and a list of
schema names (usually the closure computed by
:func:`~specslice.parser.extractor.collect_used_schemas`) and emits one
declaration per name in the requested :class:`~specslice.models.DtoLanguage`.

The generation process:

1. The target language is validated with :func:`parse_language`.
2. Each defined name is shallow-flattened into ``{field: type_label}``.
3. Every field is mapped to the target's native type and naming convention
   (:mod:`specslice.generator.type_tables`).
4. The language's Jinja2 template from ``generator/templates/`` renders the
   declaration.
5. Declarations are joined below the language's import header.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from jinja2 import Environment, FileSystemLoader

from specslice.exceptions import UnsupportedLanguageError
from specslice.generator.type_tables import (
    format_field_name,
    is_array_label,
    is_reference_label,
    map_type,
)
from specslice.models import DtoLanguage, SchemaNode
from specslice.parser.flattener import flatten


TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generator/templates/``)."""


@dataclass(frozen=True)
class LanguageInfo:
    """Display label and source file extension of a DTO target."""

    label: str
    extension: str


DTO_LANGUAGES: dict[DtoLanguage, LanguageInfo] = {
    DtoLanguage.TYPESCRIPT: LanguageInfo("TypeScript", ".ts"),
    DtoLanguage.CSHARP: LanguageInfo("C#", ".cs"),
    DtoLanguage.DART: LanguageInfo("Dart", ".dart"),
    DtoLanguage.JAVA: LanguageInfo("Java", ".java"),
    DtoLanguage.PYTHON: LanguageInfo("Python", ".py"),
    DtoLanguage.GO: LanguageInfo("Go", ".go"),
    DtoLanguage.KOTLIN: LanguageInfo("Kotlin", ".kt"),
}

_HEADERS: dict[DtoLanguage, str] = {
    DtoLanguage.PYTHON: (
        "from __future__ import annotations\n\n"
        "from dataclasses import dataclass\n"
        "from datetime import datetime\n"
        "from typing import Any\n"
        "from uuid import UUID"
    ),
    DtoLanguage.JAVA: (
        "import java.time.LocalDateTime;\n"
        "import java.util.List;\n"
        "import java.util.Map;\n"
        "import java.util.UUID;"
    ),
    DtoLanguage.KOTLIN: "import java.time.LocalDateTime\nimport java.util.UUID",
    DtoLanguage.CSHARP: "using System;\nusing System.Collections.Generic;",
}

_GO_TIME_HEADER = 'import "time"'


def parse_language(value: str | DtoLanguage) -> DtoLanguage:
    """Return the :class:`~specslice.models.DtoLanguage` named by *value*.

    Matching is case-insensitive.

    Raises:
        UnsupportedLanguageError: If *value* is not a supported language.
    """
    if isinstance(value, DtoLanguage):
        return value
    try:
        return DtoLanguage(str(value).strip().lower())
    except ValueError:
        raise UnsupportedLanguageError(
            str(value), [lang.value for lang in DtoLanguage]
        ) from None


def _create_jinja_env() -> Environment:
    """Create the Jinja2 environment for DTO templates.

    Autoescaping is off since the templates produce source code, not HTML.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def _field_context(field: str, label: str, language: DtoLanguage) -> dict[str, object]:
    """Build the template variables for one field."""
    name = format_field_name(field, language)
    mapped = map_type(label, language)
    if language == DtoLanguage.GO and not mapped.startswith(("[]", "map")):
        mapped = f"*{mapped}"

    inner = label[:-2] if is_array_label(label) else label
    ref_array = is_array_label(label) and is_reference_label(inner)
    return {
        "name": name,
        "json_name": field,
        "type": mapped,
        "cap": name[:1].upper() + name[1:],
        "ref": inner if (ref_array or is_reference_label(label)) else None,
        "ref_array": ref_array,
    }


def render_dto(name: str, fields: dict[str, str], language: DtoLanguage, env: Environment | None = None) -> str:
    """Render a single declaration from a flattened field map."""
    if env is None:
        env = _create_jinja_env()
    template = env.get_template(f"{language.value}.j2")
    context = [_field_context(field, label, language) for field, label in fields.items()]
    return template.render(name=name, fields=context).rstrip("\n")


def generate_dtos(
    definitions: dict[str, SchemaNode],
    schema_names: Iterable[str],
    language: str | DtoLanguage,
) -> str:
    """Generate DTO source for *schema_names* in *language*.

    Args:
        definitions: All classified definitions of the document, by name
            (see :func:`~specslice.parser.schema.load_definitions`).
        schema_names: Names to render, in output order.  Undefined names
            are skipped; definitions without fields still produce an empty
            declaration.
        language: A :class:`~specslice.models.DtoLanguage` or its value.

    Returns:
        The import header (where the language needs one) followed by the
        declarations, separated by blank lines.

    Raises:
        UnsupportedLanguageError: If *language* is not supported.

    Example::

        source = generate_dtos(definitions, ["Owner", "Pet"], "kotlin")
    """
    lang = parse_language(language)
    env = _create_jinja_env()

    declarations: list[str] = []
    for name in schema_names:
        node = definitions.get(name)
        if node is None:
            continue
        declarations.append(render_dto(name, flatten(node, definitions), lang, env))

    header = _HEADERS.get(lang)
    if lang == DtoLanguage.GO and any("time.Time" in decl for decl in declarations):
        header = _GO_TIME_HEADER

    parts = [header] if header else []
    parts.extend(declarations)
    return "\n\n".join(parts)
