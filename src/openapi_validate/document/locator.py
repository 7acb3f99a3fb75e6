"""Find the operation object for a method + path pair."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from openapi_validate.exceptions import MethodNotFoundError, PathNotFoundError
from openapi_validate.models import HTTPMethod

# HTTP methods recognized by OpenAPI
_HTTP_METHODS = frozenset(m.value for m in HTTPMethod)


def locate_operation(document: dict[str, Any], method: str, path: str) -> dict[str, Any]:
    """Return the operation object declared for *method* on *path*.

    *path* must be a key of ``document["paths"]`` exactly as written in the
    document (``/pets/{id}``, not ``/pets/42``).  *method* is matched
    case-sensitively against the lowercase verb keys, so ``"POST"`` does not
    find a ``post`` operation.

    Args:
        document: The root OpenAPI document.
        method: Lowercase HTTP method, e.g. ``"post"``.
        path: Path template as declared under ``paths``.

    Returns:
        The operation dict from the document itself (not a copy).

    Raises:
        PathNotFoundError: If *path* is not declared.
        MethodNotFoundError: If *path* is declared but has no operation for
            *method*.
    """
    paths = document.get("paths") or {}
    path_item = paths.get(path)
    if not isinstance(path_item, dict):
        raise PathNotFoundError(f"Path {path!r} not found in OpenAPI document", method, path)

    operation = path_item.get(method) if method in _HTTP_METHODS else None
    if not isinstance(operation, dict):
        allowed = sorted(m for m in _HTTP_METHODS if isinstance(path_item.get(m), dict))
        raise MethodNotFoundError(
            f"Method {method!r} not found for path {path!r} "
            f"(declared: {', '.join(allowed) or 'none'})",
            method,
            path,
        )
    return operation


def iter_operations(document: dict[str, Any]) -> Iterator[tuple[str, str, dict[str, Any]]]:
    """Yield ``(path, method, operation)`` for every operation, in document order."""
    for path, path_item in (document.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if method in _HTTP_METHODS and isinstance(operation, dict):
                yield path, method, operation


def path_item_parameters(document: dict[str, Any], path: str) -> list[Any]:
    """Return the parameters declared on the path item shared by all its operations."""
    path_item = (document.get("paths") or {}).get(path) or {}
    return list(path_item.get("parameters") or [])
