"""Tag commands -- list the tags of a document and their endpoints.

``specslice tags`` shows one row per tag bucket with its endpoint count and
per-method breakdown; ``specslice endpoints`` lists the operations inside
one or more buckets. Both are read-only views of
:func:`~specslice.parser.analyzer.analyze_tags`.
"""

from __future__ import annotations

from typing import Optional

import typer

from specslice.commands.common import SPEC_ARGUMENT_HELP, fail, load_spec, resolve_settings
from specslice.exceptions import NotFoundError
from specslice.models import HTTPMethod, TagBucket, TagSort
from specslice.output import info, print_table, warning


def select_buckets(index: dict[str, TagBucket], tags: list[str]) -> list[TagBucket]:
    """Return the buckets named by *tags*, warning about unknown names.

    Raises:
        NotFoundError: If none of *tags* is in the index.
    """
    unknown = [tag for tag in tags if tag not in index]
    buckets = [index[tag] for tag in tags if tag in index]
    if not buckets:
        raise NotFoundError(f"Tag not found: {', '.join(unknown)}")
    for tag in unknown:
        warning(f"Tag '{tag}' not found in document; skipping")
    return buckets


def tags_command(
    spec: str = typer.Argument(help=SPEC_ARGUMENT_HELP),
    sort: Optional[TagSort] = typer.Option(
        None, "--sort", "-s", help="Tag order: document, name or count."
    ),
) -> None:
    """List the tags of an API description.

    Example::

        specslice tags petstore.yaml
        specslice tags petstore.yaml --sort count
    """
    from specslice.parser.analyzer import analyze_tags, count_endpoints, sort_tags
    from specslice.parser.extractor import api_identity

    config = resolve_settings(cli_sort=sort.value if sort else None)
    document = load_spec(spec)
    index = analyze_tags(document)

    if not index:
        info("No operations found in this document.")
        return

    methods = [method.value.upper() for method in HTTPMethod]
    headers = ["Tag", "Endpoints", *methods, "Description"]
    rows: list[list[str]] = []
    for bucket in sort_tags(index, config.tags.sort):
        counts = [str(bucket.methods[m]) if m in bucket.methods else "" for m in methods]
        rows.append([bucket.name, str(bucket.total), *counts, bucket.description or "-"])

    print_table(headers, rows, title=f"{api_identity(document)} -- Tags ({len(rows)})")
    info(f"{len(index)} tags, {count_endpoints(index)} endpoints")


def endpoints_command(
    spec: str = typer.Argument(help=SPEC_ARGUMENT_HELP),
    tag: Optional[list[str]] = typer.Option(
        None, "--tag", "-t", help="Only list endpoints of this tag (repeatable)."
    ),
) -> None:
    """List the endpoints of an API description, grouped by tag.

    Example::

        specslice endpoints petstore.yaml
        specslice endpoints petstore.yaml -t pets -t store
    """
    from specslice.parser.analyzer import analyze_tags

    document = load_spec(spec)
    index = analyze_tags(document)

    if tag:
        try:
            buckets = select_buckets(index, tag)
        except NotFoundError as exc:
            fail(exc, f"List available tags with: specslice tags {spec}")
    else:
        buckets = list(index.values())

    headers = ["Tag", "Method", "Path", "Summary", "Params", "Body", "Response"]
    rows: list[list[str]] = []
    for bucket in buckets:
        for ep in bucket.paths:
            rows.append([
                bucket.name,
                ep.method,
                ep.path,
                ep.summary or "-",
                ", ".join(ep.params) or "-",
                ep.body or "-",
                ep.response or "-",
            ])

    print_table(headers, rows, title=f"Endpoints ({len(rows)})")
