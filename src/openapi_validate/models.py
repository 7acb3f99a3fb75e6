"""Pydantic models shared across openapi_validate.

The document itself stays a plain ``dict`` -- it is the parsed JSON/YAML
tree and is never copied or wrapped.  The models here describe what flows
around it:

**Request side** -- :class:`Request` is the explicit five-part shape a
:class:`~openapi_validate.validator.RequestChecker` reads, and
:class:`FieldError` is one failure inside a
:class:`~openapi_validate.exceptions.ValidationError`.

**Configuration** -- :class:`ValidatorOptions` selects the JSON Schema
draft and whether ``format`` is enforced.  See
:func:`~openapi_validate.config.resolve_options` for where the values come
from.

**Enumerations** -- :class:`HTTPMethod`, :class:`ParameterLocation`,
:class:`RequestPart` and :class:`SchemaDraft`.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class HTTPMethod(str, enum.Enum):
    """HTTP methods an OpenAPI path item may declare, as lowercase keys."""

    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Recognised values of a parameter object's ``in`` field."""

    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"
    PATH = "path"


class RequestPart(str, enum.Enum):
    """Named containers of a :class:`Request`."""

    BODY = "body"
    QUERY = "query"
    HEADERS = "headers"
    COOKIES = "cookies"
    PARAMS = "params"


# Which request container holds the values for each parameter location.
LOCATION_PARTS: dict[ParameterLocation, RequestPart] = {
    ParameterLocation.QUERY: RequestPart.QUERY,
    ParameterLocation.HEADER: RequestPart.HEADERS,
    ParameterLocation.COOKIE: RequestPart.COOKIES,
    ParameterLocation.PATH: RequestPart.PARAMS,
}


class SchemaDraft(str, enum.Enum):
    """JSON Schema dialect used to compile derived schemas.

    ``AUTO`` picks Draft 4 for OpenAPI 3.0.x documents (the closest dialect
    to the 3.0 schema object) and Draft 2020-12 for OpenAPI 3.1.x.
    """

    AUTO = "auto"
    DRAFT4 = "draft4"
    DRAFT6 = "draft6"
    DRAFT7 = "draft7"
    DRAFT2020_12 = "draft2020-12"


class Request(BaseModel):
    """The parts of an inbound HTTP request that get validated.

    ``cookies`` is ``None`` when no cookie parser ran upstream; the checker
    reports that as a failure if the operation declares cookie parameters.

    Example::

        Request(body={"input": "hello"}, headers={"x-trace": "1"})
    """

    body: Any = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)
    headers: dict[str, Any] = Field(default_factory=dict)
    cookies: Optional[dict[str, Any]] = None
    params: dict[str, Any] = Field(default_factory=dict)

    def part(self, part: RequestPart) -> Any:
        """Return the value of one named container."""
        return getattr(self, part.value)


class FieldError(BaseModel):
    """One validation failure inside a request part.

    ``path`` is a JSON pointer into the part's value (``""`` for the part
    itself), ``message`` is the validator's text verbatim and ``keyword`` is
    the failing JSON Schema keyword when there is one.
    """

    model_config = ConfigDict(frozen=True)

    part: RequestPart
    path: str = ""
    message: str
    keyword: Optional[str] = None

    def describe(self) -> str:
        """Render as ``request.<part><path> <message>``."""
        location = f"request.{self.part.value}"
        if self.path:
            location += self.path.replace("/", ".")
        return f"{location} {self.message}"


class ValidatorOptions(BaseModel):
    """Tunable behaviour of :class:`~openapi_validate.validator.OpenApiValidator`."""

    model_config = ConfigDict(frozen=True)

    draft: SchemaDraft = Field(
        default=SchemaDraft.AUTO,
        description="JSON Schema draft: auto, draft4, draft6, draft7, draft2020-12",
    )
    format_checking: bool = Field(
        default=True, description="Enforce the 'format' keyword (date-time, email, ...)"
    )
