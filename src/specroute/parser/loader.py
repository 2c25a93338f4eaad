"""Read raw Swagger documents from a URL, a local file, or stdin.

Every source is reduced to text plus a format hint, and the text is then
decoded as JSON or YAML.  Swagger 2.0 documents are commonly written in
either; when the hint is missing both decoders are tried, JSON first.

Both ``json.loads`` and ``yaml.safe_load`` build insertion-ordered dicts,
so the declaration order of paths, methods and response codes survives
loading.  The compiler relies on that order for route precedence and for
picking a fallback success response.  Version checks are left to the
driver.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from specroute.exceptions import SpecParseError

logger = logging.getLogger(__name__)

_FETCH_TIMEOUT = 30.0

# File suffix / content-type fragment -> decoder hint.
_SUFFIX_HINTS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}
_CONTENT_TYPE_HINTS = (("json", "json"), ("yaml", "yaml"), ("yml", "yaml"))


def load_spec(source: str) -> dict[str, Any]:
    """Load a raw document from *source*.

    Args:
        source: ``-`` for stdin, an ``http(s)://`` URL, or a file path.

    Returns:
        The decoded document, in declaration order.

    Raises:
        SpecParseError: If the source cannot be read or decoded, or does
            not hold a mapping.
    """
    if source == "-":
        document = _load_from_stdin()
    elif source.startswith(("http://", "https://")):
        document = _load_from_url(source)
    else:
        document = _load_from_file(source)
    logger.debug("Loaded %d paths from %s", len(document.get("paths") or {}), source)
    return document


def _load_from_stdin() -> dict[str, Any]:
    try:
        content = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc
    if not content.strip():
        raise SpecParseError("No input received from stdin")
    return _parse_content(content)


def _load_from_url(url: str) -> dict[str, Any]:
    """Fetch a document over HTTP, taking the decoder hint from Content-Type."""
    try:
        response = httpx.get(url, timeout=_FETCH_TIMEOUT, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "").lower()
    hint = next(
        (hint for fragment, hint in _CONTENT_TYPE_HINTS if fragment in content_type), ""
    )
    return _parse_content(response.text, hint=hint)


def _load_from_file(path: str) -> dict[str, Any]:
    """Read a local document, taking the decoder hint from its suffix."""
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")
    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc
    if not content.strip():
        raise SpecParseError(f"Spec file is empty: {path}")
    return _parse_content(content, hint=_SUFFIX_HINTS.get(file_path.suffix.lower(), ""))


def _as_document(value: Any) -> dict[str, Any]:
    if not isinstance(value, dict):
        kind = "empty document" if value is None else type(value).__name__
        raise SpecParseError(f"Spec must be a JSON/YAML object (got {kind})")
    return value


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Decode *content* according to *hint* (``"json"``, ``"yaml"`` or ``""``).

    A ``json`` hint is strict.  With no hint, JSON is tried first and YAML
    second, and both errors are reported if neither succeeds.

    Raises:
        SpecParseError: If the text cannot be decoded into a mapping.
    """
    errors: list[str] = []

    if hint != "yaml":
        try:
            return _as_document(json.loads(content))
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _as_document(yaml.safe_load(content))
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise SpecParseError(
        "Failed to parse spec as JSON or YAML" + "".join(f"\n  {e}" for e in errors)
    )
