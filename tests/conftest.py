"""Shared test fixtures for openapi_validate.

Provides the fixture document, a ready validator, a baseline request and a
``next_`` recorder for driving checkers the way a middleware chain would.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import pytest
import yaml

from openapi_validate.models import Request
from openapi_validate.output import reset_output
from openapi_validate.validator import OpenApiValidator


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which go stale once Typer's CliRunner restores the
    real streams.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@pytest.fixture
def document() -> dict[str, Any]:
    """The fixture OpenAPI 3.0 document, freshly loaded for each test."""
    with open(FIXTURES_DIR / "openapi.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def validator(document: dict[str, Any]) -> OpenApiValidator:
    return OpenApiValidator(document)


@pytest.fixture
def base_request() -> Request:
    """A request with every container present and empty."""
    return Request(body={}, query={}, headers={}, cookies={}, params={})


# ---------------------------------------------------------------------------
# Middleware callback recorder
# ---------------------------------------------------------------------------


class NextRecorder:
    """Stand-in for a middleware ``next`` callback that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, *args: Any) -> None:
        self.calls.append(args)

    @property
    def error(self) -> Optional[Any]:
        """The single error passed to ``next``, or ``None`` for a bare ``next()``."""
        assert len(self.calls) == 1, f"next called {len(self.calls)} times"
        return self.calls[0][0] if self.calls[0] else None


@pytest.fixture
def next_() -> NextRecorder:
    return NextRecorder()
