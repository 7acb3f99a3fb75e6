"""openapi_validate -- validate HTTP requests against OpenAPI 3.x documents.

An :class:`OpenApiValidator` takes a parsed OpenAPI document and, per route,
derives JSON Schemas for the request body and the query, header, cookie and
path parameters.  :meth:`OpenApiValidator.validate` returns a reusable
checker in the ``(request, response, next_)`` middleware shape::

    from openapi_validate import OpenApiValidator, Request

    validator = OpenApiValidator(document)
    check = validator.validate("post", "/echo")
    check(Request(body={"input": "hello"}), None, on_done)

Modules:
    validator: :class:`OpenApiValidator` and :class:`RequestChecker`.
    document: Loading, operation lookup, ``$ref`` resolution and parameter
        schema building.
    errors: Mapping of ``jsonschema`` errors to :class:`FieldError`.
    models: Pydantic models shared across the package.
    exceptions: Exception hierarchy with exit-code mapping.
    config: Layered resolution of :class:`ValidatorOptions`.
    app: Typer CLI (``openapi-validate``).
"""

__version__ = "0.3.0"

from openapi_validate.exceptions import (  # noqa: E402
    OpenApiValidateError,
    ValidationError,
)
from openapi_validate.models import FieldError, Request, ValidatorOptions  # noqa: E402
from openapi_validate.validator import OpenApiValidator, RequestChecker  # noqa: E402

__all__ = [
    "FieldError",
    "OpenApiValidateError",
    "OpenApiValidator",
    "Request",
    "RequestChecker",
    "ValidationError",
    "ValidatorOptions",
    "__version__",
]
