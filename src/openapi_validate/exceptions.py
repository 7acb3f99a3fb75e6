"""Exception hierarchy for openapi_validate.

All exceptions inherit from :class:`OpenApiValidateError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`openapi_validate.exit_codes`.  The CLI entry point in
:func:`openapi_validate.app.main` catches ``OpenApiValidateError`` and exits
with the appropriate code.

Two channels are kept apart.  Everything except :class:`ValidationError`
signals a misconfigured document or a bad lookup and is raised
synchronously while a validator or checker is being built.
:class:`ValidationError` describes a rejected request and is handed to the
``next_`` callback of a :class:`~openapi_validate.validator.RequestChecker`;
the checker itself never raises it.

Subclass hierarchy::

    OpenApiValidateError (exit 1)
    +-- ConfigError                         (exit 1)
    +-- DocumentError                       (exit 7)
    |   +-- DocumentLoadError
    |   +-- UnsupportedVersionError
    |   +-- InvalidParameterLocationError
    |   +-- InvalidSchemaError
    |   +-- ReferenceError_
    |       +-- UnsupportedReferenceError
    |       +-- UnresolvedReferenceError
    +-- OperationNotFoundError              (exit 4)
    |   +-- PathNotFoundError
    |   +-- MethodNotFoundError
    +-- ValidationError                     (exit 8)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from openapi_validate.exit_codes import (
    EXIT_DOCUMENT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_NOT_FOUND,
    EXIT_VALIDATION_FAILED,
)

if TYPE_CHECKING:
    from openapi_validate.models import FieldError


class OpenApiValidateError(Exception):
    """Base exception for all openapi_validate errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(OpenApiValidateError):
    """Raised for invalid validator options (bad env values, unreadable project file)."""

    exit_code = EXIT_GENERIC_FAILURE


class DocumentError(OpenApiValidateError):
    """Base class for problems with the OpenAPI document itself."""

    exit_code = EXIT_DOCUMENT_ERROR


class DocumentLoadError(DocumentError):
    """Raised when a document cannot be read or parsed as JSON/YAML."""


class UnsupportedVersionError(DocumentError):
    """Raised when the document is not OpenAPI 3.x (e.g. a Swagger 2.0 document)."""


class InvalidParameterLocationError(DocumentError):
    """Raised when a parameter's ``in`` is not query, header, cookie or path."""


class InvalidSchemaError(DocumentError):
    """Raised when a derived schema is rejected by the JSON Schema meta-schema."""


class ReferenceError_(DocumentError):
    """Base class for ``$ref`` resolution failures.

    Named with a trailing underscore to avoid shadowing the built-in
    ``ReferenceError``.
    """

    def __init__(self, message: str, ref: str):
        super().__init__(message)
        self.ref = ref


class UnsupportedReferenceError(ReferenceError_):
    """Raised for a ``$ref`` outside the ``#/components/<section>/<name>`` grammar."""


class UnresolvedReferenceError(ReferenceError_):
    """Raised for a well-formed ``$ref`` whose target does not exist."""


class OperationNotFoundError(OpenApiValidateError):
    """Raised when no operation exists for a method + path pair."""

    exit_code = EXIT_NOT_FOUND

    def __init__(self, message: str, method: str, path: str):
        super().__init__(message)
        self.method = method
        self.path = path


class PathNotFoundError(OperationNotFoundError):
    """Raised when the path is not a key of the document's ``paths`` object."""


class MethodNotFoundError(OperationNotFoundError):
    """Raised when the path exists but has no operation for the method."""


class ValidationError(OpenApiValidateError):
    """A request failed validation.

    Carries every field-level failure found in one pass over the request,
    across all request parts.  ``status_code`` is the HTTP status a server
    should answer with.

    Args:
        errors: The individual failures, in reporting order.  Must not be
            empty.
    """

    exit_code = EXIT_VALIDATION_FAILED
    status_code = 400

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        first = self.errors[0].describe() if self.errors else "unknown error"
        super().__init__(f"Error while validating request: {first}")

    def to_dict(self) -> dict:
        """Return a JSON-serialisable payload for an HTTP error response."""
        return {
            "name": type(self).__name__,
            "message": self.message,
            "statusCode": self.status_code,
            "data": [error.model_dump(mode="json") for error in self.errors],
        }
