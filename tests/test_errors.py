"""Tests for openapi_validate.errors and the ValidationError shape."""

from __future__ import annotations

import jsonschema

from openapi_validate.errors import json_pointer, map_errors, merge_errors
from openapi_validate.exceptions import OpenApiValidateError, ValidationError
from openapi_validate.exit_codes import EXIT_VALIDATION_FAILED
from openapi_validate.models import FieldError, RequestPart


def _engine_errors(schema: dict, instance: object) -> list[jsonschema.ValidationError]:
    return list(jsonschema.Draft4Validator(schema).iter_errors(instance))


class TestJsonPointer:
    def test_root(self) -> None:
        assert json_pointer([]) == ""

    def test_mixed_segments(self) -> None:
        assert json_pointer(["items", 0, "name"]) == "/items/0/name"

    def test_escapes_special_characters(self) -> None:
        assert json_pointer(["a/b", "c~d"]) == "/a~1b/c~0d"


class TestMapErrors:
    def test_tags_part_path_and_keyword(self) -> None:
        schema = {"type": "object", "properties": {"age": {"type": "integer"}}}
        mapped = map_errors(_engine_errors(schema, {"age": "x"}), RequestPart.QUERY)
        assert mapped == [
            FieldError(
                part=RequestPart.QUERY,
                path="/age",
                message="'x' is not of type 'integer'",
                keyword="type",
            )
        ]

    def test_message_kept_verbatim(self) -> None:
        errors = _engine_errors({"required": ["id"]}, {})
        mapped = map_errors(errors, RequestPart.PARAMS)
        assert mapped[0].message == errors[0].message

    def test_sorted_by_path_then_message(self) -> None:
        schema = {
            "type": "object",
            "required": ["a"],
            "properties": {
                "z": {"type": "string"},
                "b": {"type": "string", "minLength": 3, "pattern": "^x"},
            },
        }
        mapped = map_errors(_engine_errors(schema, {"z": 1, "b": "y"}), RequestPart.BODY)
        assert [e.path for e in mapped] == ["", "/b", "/b", "/z"]
        assert mapped[1].message < mapped[2].message

    def test_empty_input(self) -> None:
        assert map_errors([], RequestPart.BODY) == []


class TestMergeErrors:
    def test_no_errors_is_none(self) -> None:
        assert merge_errors([]) is None

    def test_wraps_all_errors(self) -> None:
        errors = [
            FieldError(part=RequestPart.BODY, message="first"),
            FieldError(part=RequestPart.HEADERS, path="/x-id", message="second"),
        ]
        err = merge_errors(iter(errors))
        assert isinstance(err, ValidationError)
        assert err.errors == errors
        assert str(err) == "Error while validating request: request.body first"


class TestValidationError:
    def test_is_distinct_error_kind(self) -> None:
        err = ValidationError([FieldError(part=RequestPart.BODY, message="bad")])
        assert isinstance(err, OpenApiValidateError)
        assert err.exit_code == EXIT_VALIDATION_FAILED
        assert err.status_code == 400

    def test_describe_uses_dotted_path(self) -> None:
        error = FieldError(part=RequestPart.BODY, path="/items/0/name", message="is bad")
        assert error.describe() == "request.body.items.0.name is bad"
