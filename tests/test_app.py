"""End-to-end tests for the ``openapi-validate`` command line."""

from __future__ import annotations

import json
import re
from pathlib import Path

import pytest
from typer.testing import CliRunner

from openapi_validate import __version__
from openapi_validate.app import app
from openapi_validate.config import ENV_DRAFT, ENV_FORMAT_CHECKING
from openapi_validate.exit_codes import (
    EXIT_DOCUMENT_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SUCCESS,
    EXIT_VALIDATION_FAILED,
)

runner = CliRunner()

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

FIXTURES_DIR = Path(__file__).parent / "fixtures"
DOC = str(FIXTURES_DIR / "openapi.yaml")
SWAGGER_DOC = str(FIXTURES_DIR / "swagger_2.0.json")


def _strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep stray project config files and env overrides out of the CLI run."""
    monkeypatch.delenv(ENV_DRAFT, raising=False)
    monkeypatch.delenv(ENV_FORMAT_CHECKING, raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Global options
# ---------------------------------------------------------------------------


class TestGlobalOptions:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == EXIT_SUCCESS
        assert __version__ in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == EXIT_SUCCESS
        text = _strip_ansi(result.output)
        for command in ("operations", "schema", "check"):
            assert command in text


# ---------------------------------------------------------------------------
# operations
# ---------------------------------------------------------------------------


class TestOperationsCommand:
    def test_json_lists_every_operation(self) -> None:
        result = runner.invoke(app, ["--json", "operations", DOC])
        assert result.exit_code == EXIT_SUCCESS
        rows = json.loads(result.output)
        pairs = {(row["Method"], row["Path"]) for row in rows}
        assert ("POST", "/echo") in pairs
        assert ("GET", "/items/{itemId}") in pairs
        assert ("GET", "/health") in pairs
        echo = next(row for row in rows if row["Path"] == "/echo")
        assert echo["Summary"] == "Echo the input back"

    def test_plain_output_is_tab_separated(self) -> None:
        result = runner.invoke(app, ["--plain", "operations", DOC])
        assert result.exit_code == EXIT_SUCCESS
        lines = result.output.splitlines()
        assert lines[0] == "Method\tPath\tSummary"
        assert "GET\t/health\t-" in lines

    def test_swagger_document_rejected(self) -> None:
        result = runner.invoke(app, ["--plain", "operations", SWAGGER_DOC])
        assert result.exit_code == EXIT_DOCUMENT_ERROR
        assert "Swagger 2.0" in result.output

    def test_missing_document(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--plain", "operations", str(tmp_path / "nope.yaml")])
        assert result.exit_code == EXIT_DOCUMENT_ERROR
        assert "not found" in result.output


# ---------------------------------------------------------------------------
# schema
# ---------------------------------------------------------------------------


class TestSchemaCommand:
    def test_all_parts(self) -> None:
        result = runner.invoke(app, ["--json", "schema", DOC, "get", "/parameters"])
        assert result.exit_code == EXIT_SUCCESS
        schemas = json.loads(result.output)
        assert list(schemas) == ["body", "query", "headers", "cookies", "params"]
        assert schemas["body"] == {}
        assert schemas["query"]["required"] == ["param"]

    def test_single_part(self) -> None:
        result = runner.invoke(app, ["--json", "schema", DOC, "post", "/echo", "--part", "body"])
        assert result.exit_code == EXIT_SUCCESS
        schema = json.loads(result.output)
        assert schema["required"] == ["input"]

    def test_unknown_method(self) -> None:
        result = runner.invoke(app, ["--plain", "schema", DOC, "delete", "/echo"])
        assert result.exit_code == EXIT_NOT_FOUND


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


class TestCheckCommand:
    def test_valid_request(self) -> None:
        result = runner.invoke(
            app, ["--plain", "check", DOC, "post", "/echo", "--body", '{"input": "hi"}']
        )
        assert result.exit_code == EXIT_SUCCESS
        assert "POST /echo: request is valid" in result.output

    def test_quiet_valid_request_prints_nothing(self) -> None:
        result = runner.invoke(
            app, ["--plain", "-q", "check", DOC, "post", "/echo", "--body", '{"input": "hi"}']
        )
        assert result.exit_code == EXIT_SUCCESS
        assert result.output == ""

    def test_invalid_body_plain(self) -> None:
        result = runner.invoke(app, ["--plain", "check", DOC, "post", "/echo", "--body", "{}"])
        assert result.exit_code == EXIT_VALIDATION_FAILED
        assert "body\t/\t'input' is a required property" in result.output.splitlines()

    def test_invalid_body_json(self) -> None:
        result = runner.invoke(app, ["--json", "check", DOC, "post", "/echo", "--body", "{}"])
        assert result.exit_code == EXIT_VALIDATION_FAILED
        payload = json.loads(result.output)
        assert payload["statusCode"] == 400
        assert payload["message"] == (
            "Error while validating request: request.body 'input' is a required property"
        )
        assert payload["data"][0]["part"] == "body"

    def test_query_header_and_path_parameters(self) -> None:
        result = runner.invoke(
            app,
            [
                "--plain",
                "check",
                DOC,
                "get",
                "/items/{itemId}",
                "--param",
                "itemId=42",
                "--query",
                "verbose=yes",
            ],
        )
        assert result.exit_code == EXIT_SUCCESS

    def test_header_enum_violation(self) -> None:
        result = runner.invoke(
            app,
            ["--json", "check", DOC, "get", "/parameters/header", "-H", "x-param=let-out"],
        )
        assert result.exit_code == EXIT_VALIDATION_FAILED
        payload = json.loads(result.output)
        assert payload["data"][0]["part"] == "headers"
        assert payload["data"][0]["path"] == "/x-param"

    def test_cookie_given(self) -> None:
        result = runner.invoke(
            app, ["--plain", "check", DOC, "get", "/parameters/cookie", "--cookie", "session=abc"]
        )
        assert result.exit_code == EXIT_SUCCESS

    def test_no_cookie_parser(self) -> None:
        result = runner.invoke(
            app, ["--plain", "check", DOC, "get", "/parameters/cookie", "--no-cookies"]
        )
        assert result.exit_code == EXIT_VALIDATION_FAILED
        assert "is a cookie parser installed?" in result.output

    def test_format_checking_can_be_disabled(self) -> None:
        args = ["check", DOC, "post", "/subscriptions", "--body", '{"email": "not-an-email"}']
        assert runner.invoke(app, ["--plain", *args]).exit_code == EXIT_VALIDATION_FAILED
        result = runner.invoke(app, ["--plain", "--no-format-checking", *args])
        assert result.exit_code == EXIT_SUCCESS

    def test_unknown_path(self) -> None:
        result = runner.invoke(app, ["--plain", "check", DOC, "get", "/nowhere"])
        assert result.exit_code == EXIT_NOT_FOUND
        assert "/nowhere" in result.output

    def test_broken_reference(self) -> None:
        result = runner.invoke(app, ["--plain", "check", DOC, "post", "/broken", "--body", "{}"])
        assert result.exit_code == EXIT_DOCUMENT_ERROR
        assert "Missing" in result.output

    def test_malformed_pair(self) -> None:
        result = runner.invoke(
            app, ["--plain", "check", DOC, "get", "/parameters", "--query", "param"]
        )
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "key=value" in _strip_ansi(result.output)

    def test_malformed_body(self) -> None:
        result = runner.invoke(app, ["--plain", "check", DOC, "post", "/echo", "--body", "{"])
        assert result.exit_code == EXIT_INVALID_USAGE
