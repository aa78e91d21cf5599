"""specslice -- Slice OpenAPI/Swagger documents into compact, LLM-ready context.

An API description is grouped into per-tag endpoint buckets; selecting tags
yields a minimal, closed extraction (the endpoints plus exactly the schemas
they reach) that can be encoded as token-lean tabular text or JSON, or
rendered as DTO source code in seven languages.

Typical workflow::

    specslice tags petstore.yaml                 # list tags and counts
    specslice extract petstore.yaml -t pets      # tabular extraction
    specslice dto petstore.yaml -t pets -l go    # Go structs for the slice

Modules:
    app: Typer application factory and CLI entry point.
    models: Pydantic models shared across the entire package.
    config: XDG-aware configuration and precedence resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
    parser: Loading, classification, flattening and tag extraction.
    formatters: Tabular and JSON encodings of an extraction.
    generator: DTO code generation.
"""

__version__ = "0.1.0"
