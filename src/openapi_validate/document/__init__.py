"""OpenAPI document access -- load, locate operations, resolve refs, build parameter schemas.

Everything in this sub-package works on the raw document ``dict`` and never
mutates it.

Sub-modules:

* :mod:`~openapi_validate.document.loader` -- JSON/YAML loading from a file,
  URL or stdin, plus OpenAPI version checking.
* :mod:`~openapi_validate.document.locator` -- method + path lookup.
* :mod:`~openapi_validate.document.resolver` -- single-hop ``$ref``
  resolution into ``components``.
* :mod:`~openapi_validate.document.parameters` -- parameter objects to
  per-location JSON Schemas.
"""

from openapi_validate.document.loader import load_document, validate_openapi_version
from openapi_validate.document.locator import locate_operation
from openapi_validate.document.parameters import build_parameter_schema, merge_parameters
from openapi_validate.document.resolver import resolve_ref

__all__ = [
    "build_parameter_schema",
    "load_document",
    "locate_operation",
    "merge_parameters",
    "resolve_ref",
    "validate_openapi_version",
]
