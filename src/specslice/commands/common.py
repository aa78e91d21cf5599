"""Helpers shared by the document-reading commands."""

from __future__ import annotations

from typing import Any, NoReturn, Optional

import typer

from specslice.exceptions import ConfigError, SpecParseError, SpecsliceError
from specslice.models import GlobalConfig
from specslice.output import debug, error, suggest

SPEC_ARGUMENT_HELP = "Path to the OpenAPI/Swagger document (JSON or YAML), or '-' for stdin."


def fail(exc: SpecsliceError, hint: Optional[str] = None) -> NoReturn:
    """Report *exc* on stderr and exit with its exit code."""
    error(str(exc))
    if hint:
        suggest(hint)
    raise typer.Exit(code=exc.exit_code)


def load_spec(source: str) -> dict[str, Any]:
    """Load and validate the document at *source*, exiting on failure."""
    from specslice.parser import load_document, validate_document

    try:
        document = load_document(source)
        version = validate_document(document)
    except SpecParseError as exc:
        fail(exc)
    debug(f"Loaded {source} (version {version})")
    return document


def resolve_settings(
    cli_format: Optional[str] = None,
    cli_sort: Optional[str] = None,
) -> GlobalConfig:
    """Resolve the effective configuration, exiting on invalid config files."""
    from specslice.config import resolve_config

    try:
        return resolve_config(cli_format=cli_format, cli_sort=cli_sort)
    except ConfigError as exc:
        fail(exc, "Inspect it with: specslice config show")
