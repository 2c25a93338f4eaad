"""Compiled representation of a single API operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from specroute.exceptions import NotImplementedForFormatError
from specroute.json_schema import JsonSchema


@dataclass
class Link:
    """One HTTP method under one path template, ready for request matching.

    ``schema`` and ``schema_data`` are mutually exclusive: an operation has
    either merged form/query/path parameters or a single raw body schema.
    ``body_required`` records whether a body parameter was declared
    ``required: true``; an optional body may be omitted from a request.
    ``target_schema`` describes the response body for ``status_success``.
    """

    method: Optional[str] = None
    href: Optional[str] = None
    enc_type: Optional[str] = None
    media_type: Optional[str] = None
    status_success: Optional[int] = None
    schema: Optional[JsonSchema] = None
    schema_data: Optional[dict[str, Any]] = None
    body_required: bool = False
    header_schema: Optional[JsonSchema] = None
    target_schema: Optional[JsonSchema] = None

    @property
    def rel(self) -> str:
        raise NotImplementedForFormatError("rel not implemented for OpenAPI")
