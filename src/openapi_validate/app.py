"""Typer application and CLI entry point for openapi-validate.

The CLI is a thin shell around :class:`~openapi_validate.validator.OpenApiValidator`
for checking a document and trying requests against it without writing a
server::

    openapi-validate operations openapi.yaml
    openapi-validate schema openapi.yaml get /pets/{id} --part params
    openapi-validate check openapi.yaml post /pets --body '{"name": "Rex"}'

:func:`main` is the console-script entry point declared in
``pyproject.toml``.  Every :class:`~openapi_validate.exceptions.OpenApiValidateError`
is turned into a one-line message on stderr and the error's ``exit_code``.
"""

from __future__ import annotations

import json
import signal
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Optional

import typer

from openapi_validate import __version__
from openapi_validate.exit_codes import EXIT_GENERIC_FAILURE
from openapi_validate.exceptions import OpenApiValidateError
from openapi_validate.models import Request, RequestPart

if TYPE_CHECKING:
    from openapi_validate.validator import OpenApiValidator

app = typer.Typer(
    name="openapi-validate",
    help="Validate HTTP requests against OpenAPI 3.x documents.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"openapi-validate {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    draft: Optional[str] = typer.Option(
        None, "--draft", help="JSON Schema draft: auto, draft4, draft6, draft7, draft2020-12."
    ),
    no_format_checking: bool = typer.Option(
        False, "--no-format-checking", help="Do not enforce the 'format' keyword."
    ),
) -> None:
    """Install the output manager and stash validator option overrides in ``ctx.obj``."""
    from openapi_validate.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    output.configure_logging()
    set_output(output)

    ctx.ensure_object(dict)
    ctx.obj["draft"] = draft
    ctx.obj["format_checking"] = False if no_format_checking else None


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Report library errors on stderr and exit with their code."""
    from openapi_validate.output import error

    try:
        yield
    except OpenApiValidateError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _load_validator(ctx: typer.Context, document: str) -> OpenApiValidator:
    """Load *document* and build a validator with the resolved options."""
    from openapi_validate.config import resolve_options
    from openapi_validate.document import load_document
    from openapi_validate.output import debug
    from openapi_validate.validator import OpenApiValidator

    obj = ctx.obj or {}
    options = resolve_options(draft=obj.get("draft"), format_checking=obj.get("format_checking"))
    debug(f"Loading document from {document}")
    validator = OpenApiValidator(load_document(document), options)
    debug(f"OpenAPI {validator.openapi_version}, options: {options.model_dump(mode='json')}")
    return validator


def _parse_pairs(values: Optional[list[str]], option: str) -> dict[str, Any]:
    """Turn repeated ``key=value`` options into a dict."""
    pairs: dict[str, Any] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got {item!r}", param_hint=option)
        pairs[key] = value
    return pairs


def _parse_body(body: Optional[str]) -> Any:  # noqa: ANN401
    if body is None:
        return {}
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"body is not valid JSON: {exc}", param_hint="--body") from exc


@app.command("operations")
def operations_command(
    ctx: typer.Context,
    document: str = typer.Argument(..., help="Path, URL, or '-' for stdin."),
) -> None:
    """List every method + path pair declared in the document."""
    from openapi_validate.document.locator import iter_operations
    from openapi_validate.output import get_output

    with _handle_errors():
        validator = _load_validator(ctx, document)

    rows = [
        [method.upper(), path, operation.get("summary") or "-"]
        for path, method, operation in iter_operations(validator.document)
    ]
    title = (validator.document.get("info") or {}).get("title") or "API"
    get_output().print_table(["Method", "Path", "Summary"], rows, title=f"{title} ({len(rows)})")


@app.command("schema")
def schema_command(
    ctx: typer.Context,
    document: str = typer.Argument(..., help="Path, URL, or '-' for stdin."),
    method: str = typer.Argument(..., help="Lowercase HTTP method, e.g. post."),
    path: str = typer.Argument(..., help="Path template as declared, e.g. /pets/{id}."),
    part: Optional[RequestPart] = typer.Option(
        None, "--part", help="Only print the schema for one request part."
    ),
) -> None:
    """Print the JSON Schemas derived for one operation."""
    from openapi_validate.output import get_output

    with _handle_errors():
        schemas = _load_validator(ctx, document).schemas(method, path)

    if part is not None:
        get_output().format_data(schemas[part])
    else:
        get_output().format_data({p.value: s for p, s in schemas.items()})


@app.command("check")
def check_command(
    ctx: typer.Context,
    document: str = typer.Argument(..., help="Path, URL, or '-' for stdin."),
    method: str = typer.Argument(..., help="Lowercase HTTP method, e.g. post."),
    path: str = typer.Argument(..., help="Path template as declared, e.g. /pets/{id}."),
    body: Optional[str] = typer.Option(None, "--body", "-b", help="Request body as JSON."),
    query: Optional[list[str]] = typer.Option(None, "--query", help="Query value, key=value."),
    header: Optional[list[str]] = typer.Option(None, "--header", "-H", help="Header, key=value."),
    cookie: Optional[list[str]] = typer.Option(None, "--cookie", help="Cookie, key=value."),
    param: Optional[list[str]] = typer.Option(None, "--param", help="Path parameter, key=value."),
    no_cookies: bool = typer.Option(
        False, "--no-cookies", help="Simulate a request with no cookie parser installed."
    ),
) -> None:
    """Validate one request against an operation.

    Exits 0 when the request is valid and 8 when it is not; the failures are
    printed to stdout.
    """
    from openapi_validate.output import OutputFormat, get_output, success

    request = Request(
        body=_parse_body(body),
        query=_parse_pairs(query, "--query"),
        headers=_parse_pairs(header, "--header"),
        cookies=None if no_cookies else _parse_pairs(cookie, "--cookie"),
        params=_parse_pairs(param, "--param"),
    )

    with _handle_errors():
        failure = _load_validator(ctx, document).validate(method, path).check(request)

    if failure is None:
        success(f"{method.upper()} {path}: request is valid")
        return

    output = get_output()
    if output.format == OutputFormat.JSON:
        output.format_data(failure.to_dict())
    else:
        output.print_table(
            ["Part", "Path", "Message"],
            [[e.part.value, e.path or "/", e.message] for e in failure.errors],
            title=failure.message,
        )
    raise typer.Exit(code=failure.exit_code)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``openapi-validate`` console script."""
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except Exception as exc:
        from openapi_validate.output import error

        if isinstance(exc, OpenApiValidateError):
            error(str(exc))
            sys.exit(exc.exit_code)
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
