"""Resolve ``$ref`` pointers inside an OpenAPI document.

Only internal references into the ``components`` object are supported::

    #/components/schemas/Pet
    #/components/parameters/Limit
    #/components/requestBodies/PetBody

Anything else -- external files, URLs, or pointers elsewhere in the
document such as ``#/a/b/C`` -- raises
:class:`~openapi_validate.exceptions.UnsupportedReferenceError`.  A
well-formed pointer whose target does not exist raises
:class:`~openapi_validate.exceptions.UnresolvedReferenceError`.

:func:`resolve_ref` follows exactly one hop and never copies.  Refs nested
inside the target are left alone: the JSON Schema engine follows them at
check time, which is what lets self-referencing schemas (trees, linked
lists) validate without being expanded forever.  See
:func:`attach_components` for how the engine is given something to resolve
them against.
"""

from __future__ import annotations

import re
from typing import Any

from openapi_validate.exceptions import (
    UnresolvedReferenceError,
    UnsupportedReferenceError,
)

_COMPONENT_SECTIONS = ("schemas", "parameters", "requestBodies")

_REF_PATTERN = re.compile(
    r"^#/components/(?P<section>" + "|".join(_COMPONENT_SECTIONS) + r")/(?P<name>[^/]+)$"
)


def is_ref(node: Any) -> bool:
    """Return ``True`` when *node* is a ``{"$ref": ...}`` object."""
    return isinstance(node, dict) and "$ref" in node


def resolve_ref(document: dict[str, Any], node: Any) -> Any:
    """Resolve *node* one level if it is a ``$ref`` object.

    Args:
        document: The root OpenAPI document.
        node: Any value from the document.  Non-``$ref`` values are returned
            unchanged (the same object).

    Returns:
        The referenced object, taken from *document* without copying.

    Raises:
        UnsupportedReferenceError: If the ``$ref`` is not of the form
            ``#/components/<section>/<name>``.
        UnresolvedReferenceError: If the pointer is well-formed but names a
            missing section or component.
    """
    if not is_ref(node):
        return node

    ref = node["$ref"]
    segments = _parse_ref(ref)

    current: Any = document
    for segment in segments:
        if not isinstance(current, dict) or segment not in current:
            raise UnresolvedReferenceError(
                f"Cannot resolve $ref '{ref}': key '{segment}' not found", ref
            )
        current = current[segment]
    return current


def _parse_ref(ref: Any) -> list[str]:
    """Split a supported ``$ref`` into unescaped pointer segments."""
    match = _REF_PATTERN.match(ref) if isinstance(ref, str) else None
    if match is None:
        raise UnsupportedReferenceError(
            f"Unsupported $ref '{ref}'. Only internal references of the form "
            f"#/components/{{{','.join(_COMPONENT_SECTIONS)}}}/<name> are supported.",
            str(ref),
        )
    # RFC 6901 escaping: ~1 is '/', ~0 is '~' (in that order)
    name = match.group("name").replace("~1", "/").replace("~0", "~")
    return ["components", match.group("section"), name]


# Keywords whose value is a single subschema, a list of subschemas, or a
# name -> subschema map.  Everything else (enum, const, default, example,
# examples, vendor extensions, ...) is data and never searched for refs.
_SCHEMA_KEYWORDS = frozenset(
    {
        "items",
        "additionalItems",
        "additionalProperties",
        "not",
        "contains",
        "propertyNames",
        "if",
        "then",
        "else",
        "unevaluatedItems",
        "unevaluatedProperties",
    }
)
_SCHEMA_LIST_KEYWORDS = frozenset({"allOf", "anyOf", "oneOf", "prefixItems", "items"})
_SCHEMA_MAP_KEYWORDS = frozenset(
    {"properties", "patternProperties", "definitions", "$defs", "dependentSchemas", "dependencies"}
)


def _subschemas(schema: dict[str, Any]) -> list[Any]:
    """Return the immediate subschemas of *schema*, keyword-aware."""
    found: list[Any] = []
    for key, value in schema.items():
        if key in _SCHEMA_MAP_KEYWORDS and isinstance(value, dict):
            # "dependencies" mixes subschemas with lists of property names
            found.extend(v for v in value.values() if isinstance(v, dict))
        elif key in _SCHEMA_LIST_KEYWORDS and isinstance(value, list):
            found.extend(v for v in value if isinstance(v, dict))
        elif key in _SCHEMA_KEYWORDS and isinstance(value, dict):
            found.append(value)
    return found


def verify_refs(document: dict[str, Any], schema: Any) -> None:
    """Check that every ``$ref`` reachable from *schema* resolves.

    Walks the schema and the targets of its references depth-first, visiting
    each target once, so cyclic schemas terminate.  Only schema positions
    are visited: a property literally named ``$ref`` or an ``example``
    holding a ``$ref`` key is not a reference.  Nothing is expanded or
    returned; the point is to surface a broken nested reference while the
    checker is being built instead of in the middle of a request.

    Raises:
        UnsupportedReferenceError: See :func:`resolve_ref`.
        UnresolvedReferenceError: See :func:`resolve_ref`.
    """
    seen: set[str] = set()
    stack: list[Any] = [schema]
    while stack:
        node = stack.pop()
        if not isinstance(node, dict):
            continue
        ref = node.get("$ref")
        if isinstance(ref, str) and ref not in seen:
            seen.add(ref)
            stack.append(resolve_ref(document, node))
        stack.extend(_subschemas(node))


def attach_components(document: dict[str, Any], schema: Any) -> Any:
    """Return *schema* with the document's ``components`` alongside it.

    The compiled root schema then contains ``components`` as a sibling
    keyword, so the engine resolves ``#/components/...`` pointers against
    the schema itself.  Unknown keywords are ignored by every draft, so the
    extra key has no effect on validation.  *schema* is not mutated.

    Boolean schemas and documents without components are returned as-is.
    """
    components = document.get("components")
    if not isinstance(schema, dict) or not components:
        return schema
    return {**schema, "components": components}
