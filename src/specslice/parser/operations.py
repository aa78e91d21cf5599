"""Extract parameters, request body and response references from one operation.

Every function here is a pure function of a single operation object.  The
optional ``document`` argument is used only to dereference component-level
pointers (``#/components/parameters/...``, ``#/components/requestBodies/...``,
``#/components/responses/...``); schema references are never followed.

Both OpenAPI 3.x and Swagger 2.0 operation shapes are understood:

* OpenAPI 3.x declares bodies under ``requestBody.content.<media type>.schema``
  and responses under ``responses.<code>.content.<media type>.schema``.
* Swagger 2.0 declares the body as an ``in: body`` parameter, form fields as
  ``in: formData`` parameters, media types in ``consumes``, and response
  schemas directly under ``responses.<code>.schema``.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from specslice.exceptions import SpecParseError
from specslice.models import EndpointDescriptor, RequestBodyRef
from specslice.parser.resolver import resolve_pointer, resolve_ref

logger = logging.getLogger(__name__)

CONTENT_TYPE_PRIORITY = (
    "application/json",
    "multipart/form-data",
    "application/x-www-form-urlencoded",
    "application/octet-stream",
    "*/*",
)
"""Request body media types in order of preference."""

SUCCESS_STATUSES = ("200", "201", "202")
"""Response codes scanned, in order, for the response schema."""

_JSON = "application/json"


def _deref(value: Any, document: Optional[dict[str, Any]]) -> Any:
    """Follow a component-level ``$ref`` on *value* when a document is available.

    Returns ``None`` (after logging a warning) when the pointer cannot be
    resolved, and *value* unchanged when it is not a reference or no
    document was supplied.
    """
    if not isinstance(value, dict) or "$ref" not in value or document is None:
        return value
    pointer = value["$ref"]
    if not isinstance(pointer, str):
        return value
    try:
        return resolve_pointer(pointer, document)
    except SpecParseError as exc:
        logger.warning("Skipping unresolvable reference: %s", exc)
        return None


def _resolved_parameters(
    params: Iterable[Any], document: Optional[dict[str, Any]]
) -> list[dict[str, Any]]:
    resolved: list[dict[str, Any]] = []
    for param in params:
        param = _deref(param, document)
        if isinstance(param, dict):
            resolved.append(param)
    return resolved


def merge_parameters(
    path_params: Iterable[Any],
    op_params: Iterable[Any],
    document: Optional[dict[str, Any]] = None,
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    ``name`` and ``in`` values, per the OpenAPI specification.  Path-level
    survivors come first, followed by every operation-level parameter in
    declaration order.

    Args:
        path_params: Parameters declared on the path item.
        op_params: Parameters declared on the operation.
        document: Document used to dereference parameter pointers.

    Returns:
        A merged list of parameter dicts.
    """
    op_list = _resolved_parameters(op_params, document)
    op_keys = {(p.get("name", ""), p.get("in", "")) for p in op_list}

    merged = [
        p
        for p in _resolved_parameters(path_params, document)
        if (p.get("name", ""), p.get("in", "")) not in op_keys
    ]
    merged.extend(op_list)
    return merged


def extract_params(
    operation: dict[str, Any],
    path_params: Iterable[Any] = (),
    document: Optional[dict[str, Any]] = None,
) -> list[str]:
    """Return the compact parameter descriptors of an operation.

    Each descriptor is the parameter name, suffixed with ``*`` when the
    parameter is required and ``(<location>)`` when its location is known.
    Swagger 2.0 ``in: body`` parameters are the request body, not a
    parameter, and are left out.

    Example::

        >>> extract_params({"parameters": [{"name": "id", "in": "path", "required": True}]})
        ['id*(path)']
    """
    params: list[str] = []
    for param in merge_parameters(path_params, operation.get("parameters") or [], document):
        location = param.get("in")
        if location == "body":
            continue
        info = str(param.get("name", ""))
        if param.get("required"):
            info += "*"
        if location:
            info += f"({location})"
        params.append(info)
    return params


def _choose_content_type(content_types: list[str]) -> Optional[str]:
    """Pick a media type by :data:`CONTENT_TYPE_PRIORITY`, else the first declared."""
    for content_type in CONTENT_TYPE_PRIORITY:
        if content_type in content_types:
            return content_type
    return content_types[0] if content_types else None


def extract_request_body(
    operation: dict[str, Any],
    document: Optional[dict[str, Any]] = None,
    consumes: Optional[list[str]] = None,
) -> RequestBodyRef:
    """Resolve the request body schema label and content type of an operation.

    Args:
        operation: The raw operation object.
        document: Document used to dereference ``requestBodies`` and
            parameter pointers.
        consumes: Document-level Swagger 2.0 ``consumes`` list, used when
            the operation declares none.

    Returns:
        A :class:`~specslice.models.RequestBodyRef`.  Both fields are
        ``None`` when the operation has no body.
    """
    request_body = _deref(operation.get("requestBody"), document)
    if isinstance(request_body, dict):
        content = request_body.get("content")
        if not isinstance(content, dict) or not content:
            return RequestBodyRef()
        content_type = _choose_content_type(list(content))
        media = content.get(content_type) if content_type else None
        schema = media.get("schema") if isinstance(media, dict) else None
        return RequestBodyRef(schema_label=resolve_ref(schema), content_type=content_type)

    return _swagger_request_body(operation, document, consumes)


def _swagger_request_body(
    operation: dict[str, Any],
    document: Optional[dict[str, Any]],
    consumes: Optional[list[str]],
) -> RequestBodyRef:
    """Resolve a Swagger 2.0 body from ``in: body`` / ``in: formData`` parameters."""
    params = _resolved_parameters(operation.get("parameters") or [], document)
    declared = operation.get("consumes") or consumes or []

    for param in params:
        if param.get("in") == "body":
            content_type = _choose_content_type(list(declared)) or _JSON
            return RequestBodyRef(
                schema_label=resolve_ref(param.get("schema")),
                content_type=content_type,
            )

    if any(param.get("in") == "formData" for param in params):
        if "application/x-www-form-urlencoded" in declared and "multipart/form-data" not in declared:
            return RequestBodyRef(content_type="application/x-www-form-urlencoded")
        return RequestBodyRef(content_type="multipart/form-data")

    return RequestBodyRef()


def extract_response(
    operation: dict[str, Any],
    document: Optional[dict[str, Any]] = None,
) -> Optional[str]:
    """Return the schema label of the first success response exposing a JSON schema.

    Status codes :data:`SUCCESS_STATUSES` are scanned in order.  For OpenAPI
    3.x only the ``application/json`` media type counts; Swagger 2.0
    responses expose their schema directly.
    """
    responses = operation.get("responses")
    if not isinstance(responses, dict):
        return None

    for status in SUCCESS_STATUSES:
        response = _deref(responses.get(status, responses.get(int(status))), document)
        if not isinstance(response, dict):
            continue
        content = response.get("content")
        if isinstance(content, dict):
            media = content.get(_JSON)
            if isinstance(media, dict) and media.get("schema"):
                return resolve_ref(media["schema"])
        elif response.get("schema"):
            return resolve_ref(response["schema"])

    return None


def build_endpoint(
    path: str,
    method: str,
    operation: dict[str, Any],
    path_params: Iterable[Any] = (),
    document: Optional[dict[str, Any]] = None,
    consumes: Optional[list[str]] = None,
) -> EndpointDescriptor:
    """Build the :class:`~specslice.models.EndpointDescriptor` of one operation."""
    body = extract_request_body(operation, document, consumes)
    return EndpointDescriptor(
        path=path,
        method=method.upper(),
        summary=operation.get("summary") or None,
        description=operation.get("description") or None,
        params=extract_params(operation, path_params, document),
        body=body.schema_label,
        body_content_type=body.content_type,
        response=extract_response(operation, document),
    )
