"""Queryable JSON Schema objects built from raw schema payloads.

:class:`JsonSchema` is the seam between the compiler and the validation
engine.  The compiler builds payloads in JSON Schema (draft 4) vocabulary
and materialises them here so that callers can ask for individual
constraints (``schema.properties["limit"].max``) without digging through
dicts.  The raw payload is kept verbatim in :attr:`JsonSchema.data`;
``$ref`` pointers are *not* followed here -- they are resolved lazily
against the document ``definitions`` by the validator or
:meth:`~specroute.drivers.open_api_2.Schema.resolve`.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, Field

from specroute.exceptions import SpecParseError

# JSON Schema keyword -> JsonSchema attribute, for scalar constraints that
# are copied across unchanged.
_SCALAR_KEYWORDS: dict[str, str] = {
    "format": "format",
    "minLength": "min_length",
    "maxLength": "max_length",
    "minItems": "min_items",
    "maxItems": "max_items",
    "uniqueItems": "unique_items",
    "items": "items",
    "minimum": "min",
    "exclusiveMinimum": "min_exclusive",
    "maximum": "max",
    "exclusiveMaximum": "max_exclusive",
    "multipleOf": "multiple_of",
}


def _compile_pattern(pattern: Any) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except (re.error, TypeError) as exc:
        raise SpecParseError(f"invalid pattern {pattern!r}: {exc}") from exc


class JsonSchema(BaseModel):
    """A parsed JSON Schema payload with its constraints exposed as attributes.

    Every constraint is ``None`` unless the payload declared it.  ``type``
    is always the multi-type (list) form, even when the payload used a
    single string.
    """

    data: dict[str, Any] = Field(default_factory=dict)
    ref: Optional[str] = None
    type: Optional[list[str]] = None
    enum: Optional[list[Any]] = None
    format: Optional[str] = None
    pattern: Optional[re.Pattern] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    unique_items: Optional[bool] = None
    items: Any = None
    min: Optional[int | float] = None
    min_exclusive: Optional[bool] = None
    max: Optional[int | float] = None
    max_exclusive: Optional[bool] = None
    multiple_of: Optional[int | float] = None
    properties: dict[str, JsonSchema] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    @classmethod
    def parse(cls, data: dict[str, Any]) -> JsonSchema:
        """Build a :class:`JsonSchema` from a raw payload.

        Args:
            data: A JSON Schema object literal.  It may contain ``$ref``
                pointers, which are recorded but not followed.

        Returns:
            The parsed schema.  Nested ``properties`` are parsed recursively;
            ``items`` is passed through raw.

        Raises:
            SpecParseError: If ``pattern`` is not a regex Python can compile.
        """
        fields: dict[str, Any] = {"data": data}

        if "$ref" in data:
            fields["ref"] = data["$ref"]

        if "type" in data:
            type_value = data["type"]
            fields["type"] = list(type_value) if isinstance(type_value, list) else [type_value]

        if "enum" in data:
            fields["enum"] = list(data["enum"])

        if "pattern" in data:
            fields["pattern"] = _compile_pattern(data["pattern"])

        for keyword, attr in _SCALAR_KEYWORDS.items():
            if keyword in data:
                fields[attr] = data[keyword]

        properties = data.get("properties")
        if isinstance(properties, dict):
            fields["properties"] = {
                name: cls.parse(sub)
                for name, sub in properties.items()
                if isinstance(sub, dict)
            }

        if "required" in data and isinstance(data["required"], list):
            fields["required"] = list(data["required"])

        return cls(**fields)

    def to_dict(self) -> dict[str, Any]:
        """Return the raw payload suitable for a JSON Schema validator."""
        return self.data
