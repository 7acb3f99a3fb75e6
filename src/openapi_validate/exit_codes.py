"""Numeric process exit codes for the ``openapi-validate`` command.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~openapi_validate.exceptions.OpenApiValidateError`
subclass.  CI scripts can branch on the exit code to tell a rejected
request apart from a broken document without parsing stderr.

Example::

    $ openapi-validate check openapi.yaml post /echo --body '{}'
    $ echo $?
    8   # EXIT_VALIDATION_FAILED -- the request did not match the schema
"""

EXIT_SUCCESS = 0
"""The request (or command) was valid."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_NOT_FOUND = 4
"""The method + path pair does not exist in the document."""

EXIT_DOCUMENT_ERROR = 7
"""The OpenAPI document could not be loaded, or is unusable for validation."""

EXIT_VALIDATION_FAILED = 8
"""The request failed validation against the derived schemas."""
