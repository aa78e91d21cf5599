"""Canonical Pydantic models shared across all specslice modules.

This is the single source of truth for data shapes in the project. Every other
module imports from here rather than defining its own models. The models fall
into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`EncodingConfig`, :class:`DtoConfig`, :class:`TagsConfig`, and
    :class:`GlobalConfig`.

**Schema models** -- the classified view of the document's schema
definitions consumed by the flatteners and the DTO generator:
    :class:`SchemaKind`, :class:`SchemaNode`, and :class:`DeepField`.

**Extraction models** -- produced by the tag analyzer and the tag-scoped
extractor and consumed by the encoders and the CLI:
    :class:`HTTPMethod`, :class:`EndpointDescriptor`, :class:`RequestBodyRef`,
    :class:`TagBucket`, :class:`ExtractionResult`, and :class:`EncodedOutput`.

Type labels (``"string(uuid)"``, ``"Pet[]"``, ``"enum(a, b)"``) are plain
strings rather than a model: they are the currency passed between the
flatteners, the encoders and the type mapper.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Enumerations ---


class EncodingFormat(str, enum.Enum):
    """Text encodings available for an :class:`ExtractionResult`.

    ``TABULAR`` is the indentation-based, token-minimising format and
    ``TREE`` is plain nested JSON.
    """

    TABULAR = "toon"
    TREE = "json"


class DtoLanguage(str, enum.Enum):
    """Closed set of target languages for DTO generation."""

    TYPESCRIPT = "typescript"
    CSHARP = "csharp"
    DART = "dart"
    JAVA = "java"
    PYTHON = "python"
    GO = "go"
    KOTLIN = "kotlin"


class TagSort(str, enum.Enum):
    """Ordering applied when listing tag buckets."""

    DOCUMENT = "document"
    NAME = "name"
    COUNT = "count"


# --- Configuration ---


class EncodingConfig(BaseModel):
    """Defaults for the ``extract`` command's encoded output."""

    format: EncodingFormat = Field(
        default=EncodingFormat.TABULAR, description="Output encoding: toon or json"
    )
    json_indent: int = Field(
        default=2, description="Indentation width of the JSON tree encoding"
    )


class DtoConfig(BaseModel):
    """Defaults for the ``dto`` command."""

    language: DtoLanguage = Field(
        default=DtoLanguage.TYPESCRIPT, description="Default DTO target language"
    )


class TagsConfig(BaseModel):
    """Defaults for tag listings."""

    sort: TagSort = Field(
        default=TagSort.DOCUMENT, description="Tag order: document, name, count"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/specslice/config.json``.

    Loaded and saved by :func:`~specslice.config.load_global_config` and
    :func:`~specslice.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by project config, environment
    variables, or CLI flags. See :func:`~specslice.config.resolve_config`
    for the full precedence chain.
    """

    encoding: EncodingConfig = Field(default_factory=EncodingConfig)
    dto: DtoConfig = Field(default_factory=DtoConfig)
    tags: TagsConfig = Field(default_factory=TagsConfig)


# --- Schema models ---


class SchemaKind(str, enum.Enum):
    """The single dominant shape of a schema fragment.

    Decided once by :func:`~specslice.parser.schema.parse_schema`;
    downstream code dispatches on this value instead of probing optional
    keys of the raw fragment.
    """

    REFERENCE = "reference"
    COMPOSITION = "composition"
    ARRAY = "array"
    ENUM = "enum"
    PRIMITIVE = "primitive"


class SchemaNode(BaseModel):
    """A classified schema fragment.

    Only the fields relevant to :attr:`kind` carry meaning, with the
    exception of :attr:`properties`, which is populated for every kind that
    declares them (objects are primitives of type ``object``). The untouched
    source fragment is kept in :attr:`raw` for reference discovery.
    """

    model_config = ConfigDict(frozen=True)

    kind: SchemaKind
    ref: Optional[str] = None
    type: Optional[str] = None
    format: Optional[str] = None
    items: Optional[SchemaNode] = None
    enum_values: list[Any] = Field(default_factory=list)
    members: list[SchemaNode] = Field(default_factory=list)
    properties: dict[str, SchemaNode] = Field(default_factory=dict)
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)


class DeepField(BaseModel):
    """One field of a deeply resolved schema.

    ``fields`` holds the nested expansion when :attr:`type` names a known
    definition that was not already expanded on the current path; it is
    ``None`` for leaves, cycles, dangling references, and empty expansions.
    """

    type: str
    is_array: bool = False
    fields: Optional[dict[str, DeepField]] = None


# --- Extraction models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods scanned by the tag analyzer, in scan order."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"


class RequestBodyRef(BaseModel):
    """Resolved request body of one operation.

    ``schema_label`` is ``None`` when the body is inline or absent;
    ``content_type`` is ``None`` only when the operation declares no body.
    """

    schema_label: Optional[str] = None
    content_type: Optional[str] = None


class EndpointDescriptor(BaseModel):
    """A single operation as shown in a tag bucket.

    ``params`` holds compact parameter strings such as ``"id*(path)"``;
    ``body`` and ``response`` hold type labels (``"Pet"``, ``"Pet[]"``).
    """

    model_config = ConfigDict(frozen=True)

    path: str
    method: str
    summary: Optional[str] = None
    description: Optional[str] = None
    params: list[str] = Field(default_factory=list)
    body: Optional[str] = None
    body_content_type: Optional[str] = None
    response: Optional[str] = None


class TagBucket(BaseModel):
    """All endpoints sharing one tag, with per-method counts.

    An operation carrying several tags appears once in each of their
    buckets; buckets are self-contained views, not a deduplicated index.
    """

    name: str
    description: Optional[str] = None
    total: int = 0
    methods: dict[str, int] = Field(default_factory=dict)
    paths: list[EndpointDescriptor] = Field(default_factory=list)


class ExtractionResult(BaseModel):
    """Minimal, closed extraction of a document for a tag selection.

    ``schemas`` contains exactly the definitions transitively reachable from
    the body and response labels of the included endpoints, keyed in
    alphabetical order.
    """

    api: str
    extracted_tags: list[str] = Field(default_factory=list)
    endpoints: dict[str, list[EndpointDescriptor]] = Field(default_factory=dict)
    schemas: dict[str, dict[str, str]] = Field(default_factory=dict)


class EncodedOutput(BaseModel):
    """Encoded text plus the size statistics shown next to it."""

    format: EncodingFormat
    text: str
    lines: int
    chars: int
    tokens: int = Field(description="Approximate token count (chars / 4, rounded up)")
