"""Load OpenAPI documents and check their version.

The validator itself only ever sees an in-memory ``dict``; this module is
the convenience layer used by the CLI (and by applications that do not have
their own loader) to get one from a file, a URL or stdin.

* :func:`load_document` -- read and parse JSON or YAML from any source.
* :func:`validate_openapi_version` -- accept OpenAPI 3.x, reject Swagger
  2.x and anything else.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from openapi_validate.exceptions import DocumentLoadError, UnsupportedVersionError

logger = logging.getLogger(__name__)


def load_document(source: str) -> dict[str, Any]:
    """Load an OpenAPI document from a URL, a file path, or stdin (``-``).

    Args:
        source: An ``http(s)://`` URL, a file path, or ``-``.

    Returns:
        The parsed document.

    Raises:
        DocumentLoadError: If the source cannot be read or parsed, or does
            not contain a JSON/YAML object.
    """
    if source == "-":
        content, hint = _read_stdin(), ""
    elif source.startswith(("http://", "https://")):
        content, hint = _fetch_url(source)
    else:
        content, hint = _read_file(source)

    logger.debug("Parsing document from %s (format hint: %s)", source, hint or "none")
    return _parse_content(content, hint)


def _read_stdin() -> str:
    content = sys.stdin.read()
    if not content.strip():
        raise DocumentLoadError("No input received from stdin")
    return content


def _fetch_url(url: str) -> tuple[str, str]:
    """Fetch *url*, returning the body and a format hint from its content type."""
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentLoadError(
            f"HTTP {exc.response.status_code} fetching document from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise DocumentLoadError(f"Failed to fetch document from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.text, "json"
    if "yaml" in content_type or "yml" in content_type:
        return response.text, "yaml"
    return response.text, ""


def _read_file(path: str) -> tuple[str, str]:
    """Read a local file, returning its text and a format hint from its suffix."""
    file_path = Path(path)
    if not file_path.is_file():
        raise DocumentLoadError(f"Document not found: {path}")
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentLoadError(f"Failed to read document {path}: {exc}") from exc
    if not content.strip():
        raise DocumentLoadError(f"Document is empty: {path}")

    suffix = file_path.suffix.lower()
    if suffix == ".json":
        return content, "json"
    if suffix in (".yaml", ".yml"):
        return content, "yaml"
    return content, ""


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse *content* as JSON or YAML.

    JSON is tried first unless the hint says YAML; every JSON document is
    also YAML, so YAML is the fallback.  An explicit ``json`` hint disables
    the fallback.
    """
    errors: list[str] = []

    if hint != "yaml":
        try:
            return _require_object(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise DocumentLoadError(f"Invalid JSON: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _require_object(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise DocumentLoadError(
        "Failed to parse document as JSON or YAML\n  " + "\n  ".join(errors)
    )


def _require_object(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = type(result).__name__ if result is not None else "empty document"
        raise DocumentLoadError(f"Document must be a JSON/YAML object (got {kind})")
    return result


def validate_openapi_version(document: dict[str, Any]) -> str:
    """Return the document's OpenAPI version, rejecting anything but 3.x.

    Raises:
        UnsupportedVersionError: For Swagger 2.x documents, documents with
            no ``openapi`` field, and versions other than 3.x.
    """
    if "swagger" in document:
        raise UnsupportedVersionError(
            f"Swagger {document['swagger']} documents are not supported. "
            "Only OpenAPI 3.x documents can be used for validation."
        )

    version = document.get("openapi")
    if version is None:
        raise UnsupportedVersionError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(version)
    if not version_str.startswith("3."):
        raise UnsupportedVersionError(
            f"Unsupported OpenAPI version: {version_str}. Only OpenAPI 3.x is supported."
        )
    return version_str
