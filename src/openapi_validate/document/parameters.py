"""Turn OpenAPI parameter objects into one JSON Schema per request part.

Each parameter object constrains a single named value in one location::

    {"name": "limit", "in": "query", "required": false,
     "schema": {"type": "string"}}

:func:`build_parameter_schema` folds all parameters of one location into an
object schema keyed by parameter name, which can then be validated against
the matching request container (``request.query`` for ``query``,
``request.headers`` for ``header``, and so on).

Parameter merging follows the OpenAPI specification: path-level parameters
provide defaults, and operation-level parameters override them when they
share the same ``name`` and ``in`` values.
"""

from __future__ import annotations

from typing import Any

from openapi_validate.document.resolver import resolve_ref
from openapi_validate.exceptions import DocumentError, InvalidParameterLocationError
from openapi_validate.models import ParameterLocation

_LOCATIONS = frozenset(loc.value for loc in ParameterLocation)


def _resolve_parameters(document: dict[str, Any], params: list[Any]) -> list[dict[str, Any]]:
    """Resolve each parameter entry, rejecting anything that is not an object."""
    resolved = []
    for param in params:
        param = resolve_ref(document, param)
        if not isinstance(param, dict):
            raise DocumentError(
                f"Parameter entries must be objects (got {type(param).__name__})"
            )
        resolved.append(param)
    return resolved


def merge_parameters(
    path_params: list[Any],
    op_params: list[Any],
    document: dict[str, Any],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Both lists are resolved first, so a ``$ref`` parameter overrides (or is
    overridden) by the ``name``/``in`` of its target.

    Returns:
        Path-level parameters not overridden, followed by all
        operation-level parameters.
    """
    op_resolved = _resolve_parameters(document, op_params)
    op_keys = {(param.get("name"), param.get("in")) for param in op_resolved}

    merged = [
        param
        for param in _resolve_parameters(document, path_params)
        if (param.get("name"), param.get("in")) not in op_keys
    ]
    merged.extend(op_resolved)
    return merged


def build_parameter_schema(
    document: dict[str, Any],
    operation: dict[str, Any],
    location: ParameterLocation | str,
) -> dict[str, Any]:
    """Build the JSON Schema for one parameter location of *operation*.

    Every entry of ``operation["parameters"]`` is checked for a valid ``in``
    before filtering, so one bad parameter fails the whole operation no
    matter which location is being built.

    ``required`` defaults to ``True`` for path parameters and ``False``
    otherwise.  A parameter without a ``schema`` accepts any value.

    Args:
        document: The root OpenAPI document, used to resolve ``$ref``
            parameters and the top-level ``$ref`` of each parameter schema.
        operation: An operation object (or any dict with a ``parameters``
            list).
        location: ``query``, ``header``, ``cookie`` or ``path``.

    Returns:
        ``{"type": "object", "properties": ..., "required": ...}``, or the
        empty schema ``{}`` when no parameter lives in *location*.

    Raises:
        InvalidParameterLocationError: If any parameter's ``in`` is not a
            recognised location.
        DocumentError: If a parameter entry is not an object.
    """
    location = ParameterLocation(location)
    parameters = _resolve_parameters(document, operation.get("parameters") or [])

    for param in parameters:
        if param.get("in") not in _LOCATIONS:
            raise InvalidParameterLocationError(
                f"Parameter {param.get('name')!r} has invalid location "
                f"{param.get('in')!r}; expected one of {', '.join(sorted(_LOCATIONS))}"
            )

    selected = [p for p in parameters if p["in"] == location.value]
    if not selected:
        return {}

    properties: dict[str, Any] = {}
    required: list[str] = []
    for param in selected:
        name = param.get("name")
        properties[name] = resolve_ref(document, param.get("schema", {}))
        if param.get("required", location == ParameterLocation.PATH):
            required.append(name)

    schema: dict[str, Any] = {"type": "object", "properties": properties}
    # Draft 4 rejects an empty "required" array
    if required:
        schema["required"] = required
    return schema
