"""Indentation-based tabular encoding of an extraction result.

The encoding is designed to spend as few tokens as possible while staying
readable by a language model:

* scalars are written as ``key: value``;
* a list of scalars is written inline as ``name[N]: a,b,c``;
* a list of uniform records is written as a header naming its columns,
  ``name[N]{col1,col2}:``, followed by one comma-joined row per record;
* nesting is expressed by two-space indentation instead of braces.

Example::

    api: Petstore v1.0
    extracted_tags[1]: Pets
    endpoints:
      Pets[2]{path,method,summary,params,response}:
        /pets,GET,List pets,,Pet[]
        /pets/{id},GET,Get a pet,id*(path),Pet
    schemas:
      Pet:
        id: integer(int64)
        owner: Owner
"""

from __future__ import annotations

from specslice.models import EndpointDescriptor, ExtractionResult

_QUOTE_TRIGGERS = (",", "\n", ":")


def escape_value(value: str) -> str:
    """Quote *value* if it contains a comma, a newline or a colon.

    Embedded double quotes are escaped as ``\\"`` inside the quoted form.
    """
    if any(trigger in value for trigger in _QUOTE_TRIGGERS):
        escaped = value.replace('"', '\\"')
        return f'"{escaped}"'
    return value


def _columns(endpoints: list[EndpointDescriptor]) -> list[str]:
    """Return the column names for one tag's endpoint table.

    ``path``, ``method`` and ``summary`` are always present; the optional
    columns appear only when at least one endpoint populates them.
    """
    columns = ["path", "method", "summary"]
    if any(ep.description for ep in endpoints):
        columns.append("desc")
    if any(ep.params for ep in endpoints):
        columns.append("params")
    if any(ep.body for ep in endpoints):
        columns.append("body")
    if any(ep.response for ep in endpoints):
        columns.append("response")
    return columns


def _row(endpoint: EndpointDescriptor, columns: list[str]) -> str:
    cells = {
        "path": endpoint.path,
        "method": endpoint.method,
        "summary": endpoint.summary or "",
        "desc": endpoint.description or "",
        "params": ";".join(endpoint.params),
        "body": endpoint.body or "",
        "response": endpoint.response or "",
    }
    return ",".join(escape_value(cells[column]) for column in columns)


def to_tabular(result: ExtractionResult) -> str:
    """Encode *result* in the tabular format.

    Tags without endpoints are left out of the ``endpoints`` section, but
    stay listed in ``extracted_tags``.
    """
    lines = [
        f"api: {escape_value(result.api)}",
        f"extracted_tags[{len(result.extracted_tags)}]: "
        f"{','.join(escape_value(tag) for tag in result.extracted_tags)}",
        "endpoints:",
    ]

    for tag, endpoints in result.endpoints.items():
        if not endpoints:
            continue
        columns = _columns(endpoints)
        lines.append(f"  {escape_value(tag)}[{len(endpoints)}]{{{','.join(columns)}}}:")
        for endpoint in endpoints:
            lines.append(f"    {_row(endpoint, columns)}")

    lines.append("schemas:")
    for schema_name, fields in result.schemas.items():
        lines.append(f"  {escape_value(schema_name)}:")
        for field_name, field_type in fields.items():
            lines.append(f"    {escape_value(field_name)}: {escape_value(field_type)}")

    return "\n".join(lines)
