"""Build request schemas from Swagger 2.0 parameter declarations.

Swagger 2.0 spreads an operation's inputs over several locations (``in``):
``path``, ``query``, ``header``, ``formData`` and ``body``.  Non-body
inputs are declared keyword by keyword on the parameter itself, while a
body parameter carries a complete schema under ``schema``.  This module
reconciles the two:

* :class:`ParameterSchemaBuilder` merges path/query/form parameters into a
  single object schema, or returns the raw body schema untouched.  The two
  request encodings cannot be mixed on one operation.
* :class:`HeaderSchemaBuilder` does the same merge for header parameters.
* :func:`translate_constraints` maps one declaration's keywords into the
  schema vocabulary used by :class:`~specroute.json_schema.JsonSchema`.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Optional

from specroute.exceptions import (
    IncompatibleParameterLocationsError,
    MissingParameterNameError,
)
from specroute.json_schema import JsonSchema

logger = logging.getLogger(__name__)


class ParameterLocation(str, enum.Enum):
    """Where a Swagger 2.0 parameter is read from (its ``in`` field)."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    FORM = "form"
    BODY = "body"

    @classmethod
    def from_declaration(cls, param: dict[str, Any]) -> Optional[ParameterLocation]:
        """Return the location of *param*, or ``None`` if it is unrecognised.

        A missing ``in`` is treated as ``query``; Swagger's ``formData`` is
        an alias of ``form``.
        """
        value = param.get("in", "query")
        if value == "formData":
            return cls.FORM
        try:
            return cls(value)
        except ValueError:
            return None


# Declaration keywords copied into the property schema when present.
# ``type`` and ``enum`` are handled separately.
_CONSTRAINT_KEYWORDS = (
    "format",
    "pattern",
    "minLength",
    "maxLength",
    "minItems",
    "maxItems",
    "uniqueItems",
    "items",
    "minimum",
    "exclusiveMinimum",
    "maximum",
    "exclusiveMaximum",
    "multipleOf",
)


def translate_constraints(param: dict[str, Any]) -> JsonSchema:
    """Translate one parameter declaration into a property schema.

    Only keywords present in the declaration are carried over; an absent
    keyword leaves the constraint unset rather than defaulting it.  A
    single ``type`` is wrapped into the multi-type list form, and ``enum``
    values keep their order.

    Example::

        >>> translate_constraints({"name": "limit", "type": "integer"}).type
        ['integer']
    """
    data: dict[str, Any] = {}
    if "type" in param:
        data["type"] = [param["type"]]
    if "enum" in param:
        data["enum"] = list(param["enum"])
    for keyword in _CONSTRAINT_KEYWORDS:
        if keyword in param:
            data[keyword] = param[keyword]
    return JsonSchema.parse(data)


def _object_schema(properties: dict[str, JsonSchema], required: list[str]) -> JsonSchema:
    """Assemble the object schema wrapping translated properties."""
    data: dict[str, Any] = {
        "type": ["object"],
        "properties": {name: prop.to_dict() for name, prop in properties.items()},
    }
    if required:
        data["required"] = list(required)
    return JsonSchema.parse(data)


def _declarations(link_data: dict[str, Any]) -> list[dict[str, Any]]:
    """Return the parameter list of *link_data*, checking every entry is named."""
    params = link_data.get("parameters") or []
    for param in params:
        if "name" not in param:
            raise MissingParameterNameError("no name section in link data.")
    return params


class ParameterSchemaBuilder:
    """Merge an operation's non-header parameters into one request schema.

    Args:
        link_data: The operation object (anything with a ``parameters``
            list).
    """

    def __init__(self, link_data: dict[str, Any]) -> None:
        self.link_data = link_data

    def call(self) -> tuple[Optional[JsonSchema], Optional[dict[str, Any]]]:
        """Build the request schema.

        Returns:
            ``(schema, None)`` with an object schema (possibly without
            properties) when no body parameter is declared, or
            ``(None, body_schema)`` carrying the body parameter's raw
            ``schema`` payload.

        Raises:
            MissingParameterNameError: If a declaration has no ``name``.
            IncompatibleParameterLocationsError: If a body parameter is
                declared next to path/query/form parameters.
        """
        properties: dict[str, JsonSchema] = {}
        required: list[str] = []
        has_body = False
        schema_data: Optional[dict[str, Any]] = None

        for param in _declarations(self.link_data):
            location = ParameterLocation.from_declaration(param)
            if location is None:
                logger.warning(
                    "Skipping parameter '%s' with unknown location '%s'",
                    param["name"],
                    param.get("in"),
                )
                continue

            if location is ParameterLocation.HEADER:
                continue

            if location is ParameterLocation.BODY:
                has_body = True
                schema_data = param.get("schema")
                continue

            name = param["name"]
            if param.get("required"):
                required.append(name)
            properties[name] = translate_constraints(param)

        if has_body and properties:
            raise IncompatibleParameterLocationsError(
                "can't mix body parameter with form parameters."
            )

        if has_body:
            return None, schema_data
        return _object_schema(properties, required), None


class HeaderSchemaBuilder:
    """Build an object schema keyed by header name from ``in: header`` parameters."""

    def __init__(self, link_data: dict[str, Any]) -> None:
        self.link_data = link_data

    def call(self) -> JsonSchema:
        properties: dict[str, JsonSchema] = {}
        required: list[str] = []

        for param in _declarations(self.link_data):
            if ParameterLocation.from_declaration(param) is not ParameterLocation.HEADER:
                continue
            name = param["name"]
            if param.get("required"):
                required.append(name)
            properties[name] = translate_constraints(param)

        return _object_schema(properties, required)
