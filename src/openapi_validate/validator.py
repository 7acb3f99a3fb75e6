"""Build per-route request checkers from an OpenAPI 3.x document.

:class:`OpenApiValidator` owns one document.  Each call to
:meth:`OpenApiValidator.validate` derives the JSON Schemas for one
operation -- the request body plus one object schema per parameter
location -- compiles them with ``jsonschema`` and returns a
:class:`RequestChecker` in the three-argument middleware shape::

    validator = OpenApiValidator(document)
    check = validator.validate("post", "/pets")

    def next_(err=None):
        ...

    check(Request(body={"name": "Rex"}), response, next_)

Problems with the document (unknown route, bad ``$ref``, bad parameter
location, invalid schema) raise from ``validate()``.  Problems with a
request never raise; they are delivered to ``next_`` as a single
:class:`~openapi_validate.exceptions.ValidationError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Optional

import jsonschema

from openapi_validate.document.loader import validate_openapi_version
from openapi_validate.document.locator import locate_operation, path_item_parameters
from openapi_validate.document.parameters import build_parameter_schema, merge_parameters
from openapi_validate.document.resolver import attach_components, resolve_ref, verify_refs
from openapi_validate.errors import map_errors, merge_errors
from openapi_validate.exceptions import InvalidSchemaError, ValidationError
from openapi_validate.models import (
    LOCATION_PARTS,
    FieldError,
    ParameterLocation,
    Request,
    RequestPart,
    SchemaDraft,
    ValidatorOptions,
)

logger = logging.getLogger(__name__)

MISSING_COOKIES_MESSAGE = "request.cookies is missing; is a cookie parser installed?"

_DRAFT_VALIDATORS: dict[SchemaDraft, type] = {
    SchemaDraft.DRAFT4: jsonschema.Draft4Validator,
    SchemaDraft.DRAFT6: jsonschema.Draft6Validator,
    SchemaDraft.DRAFT7: jsonschema.Draft7Validator,
    SchemaDraft.DRAFT2020_12: jsonschema.Draft202012Validator,
}


def _select_validator_class(draft: SchemaDraft, openapi_version: str) -> type:
    """Pick the ``jsonschema`` validator class for *draft*.

    ``auto`` follows the document: OpenAPI 3.1 schemas are full Draft
    2020-12, while 3.0 schemas (boolean ``exclusiveMinimum`` and friends)
    line up with Draft 4.
    """
    if draft == SchemaDraft.AUTO:
        draft = (
            SchemaDraft.DRAFT2020_12
            if openapi_version.startswith("3.1")
            else SchemaDraft.DRAFT4
        )
    return _DRAFT_VALIDATORS[draft]


class RequestChecker:
    """Validate requests for one operation against its compiled schemas.

    Instances are immutable once built and hold no per-request state, so a
    single checker can serve any number of concurrent requests.

    Args:
        method: HTTP method the checker was built for.
        path: Path template the checker was built for.
        checkers: Compiled validator per request part; ``None`` for parts
            without constraints.
    """

    def __init__(
        self,
        method: str,
        path: str,
        checkers: dict[RequestPart, Optional[Any]],
    ) -> None:
        self.method = method
        self.path = path
        self._checkers = dict(checkers)

    def __repr__(self) -> str:
        return f"RequestChecker({self.method!r}, {self.path!r})"

    def errors(self, request: Request) -> list[FieldError]:
        """Return every failure in *request*, across all parts, in part order."""
        found: list[FieldError] = []
        for part, checker in self._checkers.items():
            if checker is None:
                continue
            value = request.part(part)
            if part == RequestPart.COOKIES and value is None:
                found.append(FieldError(part=part, message=MISSING_COOKIES_MESSAGE))
                continue
            found.extend(map_errors(checker.iter_errors(value), part))
        return found

    def check(self, request: Request) -> Optional[ValidationError]:
        """Return the request's :class:`ValidationError`, or ``None`` if it is valid."""
        return merge_errors(self.errors(request))

    def __call__(
        self,
        request: Request,
        response: Any,
        next_: Callable[..., Any],
    ) -> None:
        """Middleware entry point: call ``next_()`` or ``next_(error)`` exactly once."""
        error = self.check(request)
        if error is None:
            next_()
            return
        logger.debug(
            "Rejected %s %s with %d error(s): %s",
            self.method,
            self.path,
            len(error.errors),
            error.message,
        )
        next_(error)


class OpenApiValidator:
    """Request validation for every operation of an OpenAPI 3.x document.

    The document is checked once at construction and treated as read-only
    afterwards.  Nothing is cached between :meth:`validate` calls; each one
    compiles fresh checkers, so repeated calls for the same route give
    independent, identically-behaving checkers.

    Args:
        document: A parsed OpenAPI 3.x document.
        options: Validator options; defaults to :class:`ValidatorOptions()`.

    Raises:
        UnsupportedVersionError: If *document* is a Swagger 2.x document or
            does not declare an OpenAPI 3.x version.
    """

    def __init__(
        self,
        document: dict[str, Any],
        options: Optional[ValidatorOptions] = None,
    ) -> None:
        self.openapi_version = validate_openapi_version(document)
        self.document = document
        self.options = options or ValidatorOptions()
        self._validator_cls = _select_validator_class(self.options.draft, self.openapi_version)

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    def get_operation(self, method: str, path: str) -> dict[str, Any]:
        """Return the raw operation object for *method* on *path*."""
        return locate_operation(self.document, method, path)

    def resolve_schema(self, node: Any) -> Any:
        """Resolve one ``$ref`` node against the document."""
        return resolve_ref(self.document, node)

    def build_parameter_schema(
        self,
        operation: dict[str, Any],
        location: ParameterLocation | str,
    ) -> dict[str, Any]:
        """Build the JSON Schema for *operation*'s parameters in *location*."""
        return build_parameter_schema(self.document, operation, location)

    def body_schema(self, operation: dict[str, Any]) -> Any:
        """Return the request body schema of *operation*, or ``{}`` if it has none.

        ``application/json`` wins when several media types are declared;
        otherwise the first media type with a schema is used.  The
        schema's top-level ``$ref`` is resolved, nested ones are not.
        """
        request_body = resolve_ref(self.document, operation.get("requestBody"))
        if not isinstance(request_body, dict):
            return {}

        content = request_body.get("content") or {}
        media = content.get("application/json")
        if not (isinstance(media, dict) and "schema" in media):
            media = next(
                (m for m in content.values() if isinstance(m, dict) and "schema" in m),
                None,
            )
        if media is None:
            return {}
        return resolve_ref(self.document, media["schema"])

    def schemas(self, method: str, path: str) -> dict[RequestPart, Any]:
        """Derive the uncompiled schema of every request part for one operation.

        Path-level parameters are merged in before the parameter schemas
        are built.
        """
        operation = self.get_operation(method, path)
        merged = merge_parameters(
            path_item_parameters(self.document, path),
            operation.get("parameters") or [],
            self.document,
        )
        view = {**operation, "parameters": merged}

        derived: dict[RequestPart, Any] = {RequestPart.BODY: self.body_schema(operation)}
        for location, part in LOCATION_PARTS.items():
            derived[part] = self.build_parameter_schema(view, location)
        # Keep the reporting order stable: body, query, headers, cookies, params
        return {part: derived[part] for part in RequestPart}

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #

    def validate(self, method: str, path: str) -> RequestChecker:
        """Build a :class:`RequestChecker` for *method* on *path*.

        Raises:
            PathNotFoundError: If *path* is not declared.
            MethodNotFoundError: If *path* has no *method* operation.
            UnsupportedReferenceError: For a ``$ref`` outside
                ``#/components/...``.
            UnresolvedReferenceError: For a ``$ref`` to a missing component.
            InvalidParameterLocationError: For a parameter with a bad ``in``.
            InvalidSchemaError: If a derived schema is not valid for the
                selected JSON Schema draft.
        """
        checkers = {
            part: self._compile(schema, part, method, path)
            for part, schema in self.schemas(method, path).items()
        }
        logger.debug(
            "Compiled checker for %s %s (parts: %s)",
            method,
            path,
            ", ".join(p.value for p, c in checkers.items() if c is not None) or "none",
        )
        return RequestChecker(method, path, checkers)

    def _compile(self, schema: Any, part: RequestPart, method: str, path: str) -> Optional[Any]:
        """Compile one part's schema; ``None`` when it imposes no constraints."""
        if schema == {} or schema is True:
            return None

        verify_refs(self.document, schema)
        root = attach_components(self.document, schema)
        try:
            self._validator_cls.check_schema(root)
        except jsonschema.SchemaError as exc:
            raise InvalidSchemaError(
                f"Invalid {part.value} schema for {method} {path}: {exc.message}"
            ) from exc

        if self.options.format_checking:
            return self._validator_cls(root, format_checker=self._validator_cls.FORMAT_CHECKER)
        return self._validator_cls(root)
