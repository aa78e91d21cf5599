"""DTO commands -- generate data transfer objects for a slice of a document.

``specslice dto`` renders the schema closure of a selection (whole tags, a
single endpoint, or named schemas) as source code in one of the languages
listed by ``specslice languages``.
"""

from __future__ import annotations

from typing import Any, Optional

import typer

from specslice.commands.common import SPEC_ARGUMENT_HELP, fail, load_spec, resolve_settings
from specslice.commands.tags import select_buckets
from specslice.exceptions import InvalidUsageError, NotFoundError, SpecsliceError
from specslice.models import EndpointDescriptor, HTTPMethod, TagBucket
from specslice.output import info, print_code, print_table, warning


def parse_endpoint_selector(value: str) -> tuple[str, str]:
    """Split ``"METHOD /path"`` into an upper-cased method and the path.

    Raises:
        InvalidUsageError: If the selector is malformed or the method is
            not one of GET, POST, PUT, PATCH, DELETE.
    """
    method, _, path = value.strip().partition(" ")
    method = method.upper()
    path = path.strip()
    if not path or method.lower() not in {m.value for m in HTTPMethod}:
        raise InvalidUsageError(
            f"Invalid endpoint {value!r}: expected 'METHOD /path', e.g. 'GET /pets/{{id}}'"
        )
    return method, path


def find_endpoint(index: dict[str, TagBucket], method: str, path: str) -> EndpointDescriptor:
    """Return the endpoint for *method* and *path* from any bucket.

    Raises:
        NotFoundError: If no operation matches.
    """
    for bucket in index.values():
        for ep in bucket.paths:
            if ep.method == method and ep.path == path:
                return ep
    raise NotFoundError(f"Endpoint not found: {method} {path}")


def select_schema_names(
    document: dict[str, Any],
    tags: list[str],
    endpoints: list[str],
    schemas: list[str],
) -> list[str]:
    """Return the sorted schema closure of the selected tags, endpoints and schemas.

    Raises:
        InvalidUsageError: If nothing is selected.
        NotFoundError: If a selected tag set, endpoint or schema is missing.
    """
    from specslice.parser import analyze_tags, collect_used_schemas
    from specslice.parser.extractor import schema_closure
    from specslice.parser.schema import get_schemas

    if not (tags or endpoints or schemas):
        raise InvalidUsageError("Select schemas with --tag, --endpoint or --schema.")

    raw_definitions = get_schemas(document)
    selected: list[EndpointDescriptor] = []

    if tags or endpoints:
        index = analyze_tags(document)
        if tags:
            for bucket in select_buckets(index, tags):
                selected.extend(bucket.paths)
        for selector in endpoints:
            selected.append(find_endpoint(index, *parse_endpoint_selector(selector)))

    missing = [name for name in schemas if name not in raw_definitions]
    if missing:
        raise NotFoundError(f"Schema not found: {', '.join(missing)}")

    names = set(collect_used_schemas(selected, raw_definitions))
    names.update(name for name in schema_closure(schemas, raw_definitions) if name in raw_definitions)
    return sorted(names)


def dto_command(
    spec: str = typer.Argument(help=SPEC_ARGUMENT_HELP),
    tag: Optional[list[str]] = typer.Option(
        None, "--tag", "-t", help="Generate DTOs used by this tag (repeatable)."
    ),
    endpoint: Optional[list[str]] = typer.Option(
        None, "--endpoint", "-e", help="Generate DTOs used by 'METHOD /path' (repeatable)."
    ),
    schema: Optional[list[str]] = typer.Option(
        None, "--schema", "-s", help="Generate this schema and its dependencies (repeatable)."
    ),
    language: Optional[str] = typer.Option(
        None, "--language", "-l", help="Target language (see 'specslice languages')."
    ),
) -> None:
    """Generate DTO source code for a selection of the document.

    Example::

        specslice dto petstore.yaml -t pets -l kotlin
        specslice dto petstore.yaml -e "POST /pets" -l python
        specslice -o pet.go dto petstore.yaml -s Pet -l go
    """
    from specslice.generator import DTO_LANGUAGES, generate_dtos, parse_language
    from specslice.parser import load_definitions

    document = load_spec(spec)
    try:
        lang = parse_language(language or resolve_settings().dto.language)
        names = select_schema_names(document, tag or [], endpoint or [], schema or [])
    except SpecsliceError as exc:
        fail(exc)

    if not names:
        warning("The selection references no schemas.")
        return

    source = generate_dtos(load_definitions(document), names, lang)
    print_code(source, lexer=lang.value)
    info(f"{len(names)} DTOs generated ({DTO_LANGUAGES[lang].label})")


def languages_command() -> None:
    """List the supported DTO target languages.

    Example::

        specslice languages
    """
    from specslice.generator import DTO_LANGUAGES

    rows = [[lang.value, meta.label, meta.extension] for lang, meta in DTO_LANGUAGES.items()]
    print_table(["Language", "Name", "Extension"], rows, title="DTO languages")
