"""Text encodings of an :class:`~specslice.models.ExtractionResult`.

* :mod:`~specslice.formatters.tabular` -- the token-minimising tabular
  format (``toon``).
* :mod:`~specslice.formatters.tree` -- plain nested JSON (``json``).

:func:`encode` dispatches on :class:`~specslice.models.EncodingFormat` and
attaches the size statistics computed by :func:`measure`.
"""

from __future__ import annotations

import math

from specslice.formatters.tabular import to_tabular
from specslice.formatters.tree import to_tree
from specslice.models import EncodedOutput, EncodingFormat, ExtractionResult

__all__ = ["encode", "measure", "to_tabular", "to_tree"]


def measure(text: str) -> tuple[int, int, int]:
    """Return ``(lines, chars, tokens)`` for *text*.

    The token count is the usual four-characters-per-token estimate, rounded
    up; it is meant for comparing encodings, not for billing.
    """
    chars = len(text)
    return len(text.split("\n")), chars, math.ceil(chars / 4)


def encode(
    result: ExtractionResult,
    fmt: EncodingFormat | str = EncodingFormat.TABULAR,
    json_indent: int | None = 2,
) -> EncodedOutput:
    """Encode *result* and measure the encoded text."""
    fmt = EncodingFormat(fmt)
    if fmt is EncodingFormat.TREE:
        text = to_tree(result, indent=json_indent)
    else:
        text = to_tabular(result)
    lines, chars, tokens = measure(text)
    return EncodedOutput(format=fmt, text=text, lines=lines, chars=chars, tokens=tokens)
