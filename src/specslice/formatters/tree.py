"""Plain JSON encoding of an extraction result."""

from __future__ import annotations

import json
from typing import Any

from specslice.models import ExtractionResult


def to_tree_data(result: ExtractionResult) -> dict[str, Any]:
    """Return *result* as JSON-ready data.

    Endpoint fields that are unset or empty (no summary, no parameters ...)
    are omitted to keep the output small.
    """
    return {
        "api": result.api,
        "extracted_tags": list(result.extracted_tags),
        "endpoints": {
            tag: [
                {key: value for key, value in ep.model_dump().items() if value}
                for ep in endpoints
            ]
            for tag, endpoints in result.endpoints.items()
        },
        "schemas": {name: dict(fields) for name, fields in result.schemas.items()},
    }


def to_tree(result: ExtractionResult, indent: int | None = 2) -> str:
    """Encode *result* as JSON; ``indent=None`` gives the compact form."""
    return json.dumps(to_tree_data(result), indent=indent, ensure_ascii=False)
