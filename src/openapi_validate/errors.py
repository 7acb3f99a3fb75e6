"""Map ``jsonschema`` errors onto :class:`~openapi_validate.models.FieldError`.

The engine's own error objects carry a lot of context (the failing
subschema, the validator instance, nested ``context`` errors for
``anyOf``/``oneOf``) that is neither stable across releases nor useful to an
HTTP client.  Callers only ever see :class:`FieldError`: which request part,
where inside it, and the engine's message text unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable

import jsonschema

from openapi_validate.exceptions import ValidationError
from openapi_validate.models import FieldError, RequestPart


def json_pointer(segments: Iterable[object]) -> str:
    """Join path segments into an RFC 6901 pointer (``""`` for the root)."""
    return "".join(
        "/" + str(segment).replace("~", "~0").replace("/", "~1") for segment in segments
    )


def map_errors(
    engine_errors: Iterable[jsonschema.ValidationError],
    part: RequestPart,
) -> list[FieldError]:
    """Convert engine errors for one request part into field errors.

    The result is sorted by path and then message, so the same invalid
    request always produces the same list regardless of the order the
    engine happened to visit keywords in.
    """
    mapped = [
        FieldError(
            part=part,
            path=json_pointer(error.absolute_path),
            message=error.message,
            keyword=str(error.validator) if error.validator is not None else None,
        )
        for error in engine_errors
    ]
    mapped.sort(key=lambda e: (e.path, e.message))
    return mapped


def merge_errors(errors: Iterable[FieldError]) -> ValidationError | None:
    """Wrap the collected failures of one request into a single error, if any."""
    collected = list(errors)
    if not collected:
        return None
    return ValidationError(collected)
