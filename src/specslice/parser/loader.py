"""Load API descriptions from a local file or stdin and validate their shape.

This is the boundary in front of the pure extraction core.  It handles all
I/O and the minimal structural check the core relies on; anything that gets
past :func:`validate_document` is processed without further validation.

The two public functions are:

* :func:`load_document` -- Load and parse a document from a file path or
  ``-`` (stdin).  JSON and YAML are both accepted, with automatic format
  detection.
* :func:`validate_document` -- Check for the ``info``/``paths`` sections and
  an ``openapi`` or ``swagger`` marker, and return the version string.

Remote URLs are rejected; fetch the document with another tool and pipe it
in.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import yaml

from specslice.exceptions import SpecParseError


def load_document(source: str) -> dict[str, Any]:
    """Load an API description from a file path or stdin (``'-'``).

    Args:
        source: A file path, or ``'-'`` for stdin.

    Returns:
        The parsed document as a dictionary.

    Raises:
        SpecParseError: If the source is a URL, cannot be read, or cannot
            be parsed.
    """
    if source == "-":
        return _load_from_stdin()
    if source.startswith(("http://", "https://")):
        raise SpecParseError(
            f"Remote documents are not fetched: {source}. "
            "Download it first, or pipe it in with '-'."
        )
    return _load_from_file(source)


def _load_from_stdin() -> dict[str, Any]:
    """Read a document from stdin, trying JSON first, then YAML."""
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc

    if not content.strip():
        raise SpecParseError("No input received from stdin")

    return _parse_content(content)


def _load_from_file(path: str) -> dict[str, Any]:
    """Load a document from a local file.

    The ``.json``, ``.yaml`` and ``.yml`` extensions are used as format
    hints; other extensions fall back to content-based detection.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hint is ``'yaml'``), then falls back to YAML.
    Valid JSON is also valid YAML, but JSON parsing is stricter and faster.

    Raises:
        SpecParseError: If the content is neither, or is not an object.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON format: {exc}") from exc
            json_error = exc
        else:
            return _require_object(result)

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse spec as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise SpecParseError(msg) from exc

    return _require_object(result)


def _require_object(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return result


def validate_document(document: dict[str, Any]) -> str:
    """Check the minimal structure the extraction core relies on.

    Args:
        document: The parsed document.

    Returns:
        The ``openapi`` version string, or the ``swagger`` version string
        for Swagger 2.0 documents.

    Raises:
        SpecParseError: With one of the reasons ``Missing 'info' section``,
            ``Missing 'info.title'``, ``Missing 'paths' section``, or
            ``Not a valid OpenAPI/Swagger document``.
    """
    info = document.get("info")
    if not isinstance(info, dict):
        raise SpecParseError("Missing 'info' section")
    if not info.get("title"):
        raise SpecParseError("Missing 'info.title'")
    if not isinstance(document.get("paths"), dict):
        raise SpecParseError("Missing 'paths' section")

    version = document.get("openapi") or document.get("swagger")
    if not version:
        raise SpecParseError("Not a valid OpenAPI/Swagger document")
    return str(version)
