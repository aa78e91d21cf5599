"""Extraction commands -- encode tag-scoped slices and show single schemas.

``specslice extract`` is the main command: it writes the encoded
:class:`~specslice.models.ExtractionResult` for the selected tags to stdout
(or ``--output``) and reports its size on stderr, so the data stream stays
pipeable. ``specslice schema`` shows the shallow field map or the deep,
cycle-safe expansion of one definition.
"""

from __future__ import annotations

from typing import Optional

import typer

from specslice.commands.common import SPEC_ARGUMENT_HELP, fail, load_spec, resolve_settings
from specslice.exceptions import InvalidUsageError, NotFoundError
from specslice.models import EncodingFormat
from specslice.output import OutputFormat, get_output, info, print_fields, print_json, print_table


def extract_command(
    spec: str = typer.Argument(help=SPEC_ARGUMENT_HELP),
    tag: Optional[list[str]] = typer.Option(
        None, "--tag", "-t", help="Tag to extract (repeatable)."
    ),
    all_tags: bool = typer.Option(False, "--all", help="Extract every tag."),
    fmt: Optional[EncodingFormat] = typer.Option(
        None, "--format", "-f", help="Encoding: toon (tabular) or json."
    ),
) -> None:
    """Extract the endpoints of the selected tags and the schemas they need.

    Example::

        specslice extract petstore.yaml -t pets
        specslice extract petstore.yaml --all --format json -o context.json
    """
    from specslice.formatters import encode
    from specslice.parser import analyze_tags, extract_by_tags

    config = resolve_settings(cli_format=fmt.value if fmt else None)
    document = load_spec(spec)
    index = analyze_tags(document)

    if all_tags:
        selected = list(index)
    elif tag:
        # Unknown tags among known ones are logged by the extractor.
        selected = list(tag)
        if not any(name in index for name in selected):
            fail(
                NotFoundError(f"Tag not found: {', '.join(selected)}"),
                f"List available tags with: specslice tags {spec}",
            )
    else:
        fail(
            InvalidUsageError("Select at least one tag with --tag, or use --all."),
            f"List available tags with: specslice tags {spec}",
        )

    result = extract_by_tags(document, selected, index)
    encoded = encode(result, config.encoding.format, config.encoding.json_indent)

    get_output().print_data(encoded.text)
    info(
        f"{len(result.schemas)} schemas, {encoded.lines} lines, "
        f"{encoded.chars} chars, ~{encoded.tokens} tokens ({encoded.format.value})"
    )


def schema_command(
    spec: str = typer.Argument(help=SPEC_ARGUMENT_HELP),
    name: str = typer.Argument(help="Schema name."),
    deep: bool = typer.Option(
        False, "--deep", "-d", help="Expand referenced schemas recursively."
    ),
) -> None:
    """Show the fields of one schema definition.

    Example::

        specslice schema petstore.yaml Pet
        specslice schema petstore.yaml Pet --deep
    """
    from specslice.parser import flatten, load_definitions, resolve_deep

    document = load_spec(spec)
    definitions = load_definitions(document)

    node = definitions.get(name)
    if node is None:
        available = ", ".join(sorted(definitions)[:10]) or "none"
        fail(NotFoundError(f"Schema not found: {name}"), f"Available schemas: {available}")

    if deep:
        print_fields(name, resolve_deep(name, definitions) or {})
        return

    fields = flatten(node, definitions)
    if get_output().format == OutputFormat.JSON:
        print_json(fields)
    else:
        print_table(["Field", "Type"], [[key, label] for key, label in fields.items()], title=name)
