"""Pick the canonical success response of an operation.

An operation may declare any number of responses keyed by status code.
Keys arrive as strings (``"200"``, ``"default"``) or, from YAML documents,
as integers; every key is normalised to its string form before matching so
that ``200`` and ``"200"`` behave the same.

Priority, first match wins:

1. ``200``
2. ``201``
3. the first three-digit key in the responses' declaration order
4. nothing -- the operation has no canonical success response
"""

from __future__ import annotations

import re
from typing import Any, Optional

from specroute.json_schema import JsonSchema

# Three ASCII digits.
_STATUS_RE = re.compile(r"[0-9]{3}")

_PREFERRED_STATUSES = ("200", "201")


def _normalize_key(key: Any) -> str:
    return str(key).strip()


def select_success_response(
    responses: Optional[dict[Any, Any]],
) -> tuple[Optional[int], Optional[JsonSchema]]:
    """Select the success status and its response schema.

    Args:
        responses: The operation's ``responses`` mapping, in declaration
            order.

    Returns:
        ``(status, target_schema)``.  ``target_schema`` wraps the chosen
        response's raw ``schema`` payload (unresolved) or is ``None`` when
        that response declares no schema.  ``(None, None)`` when no key
        qualifies.

    Example::

        >>> select_success_response({"default": {}, 302: {"schema": {}}})[0]
        302
    """
    if not responses:
        return None, None

    normalized = {_normalize_key(key): value for key, value in responses.items()}

    chosen: Optional[str] = None
    for status in _PREFERRED_STATUSES:
        if status in normalized:
            chosen = status
            break

    if chosen is None:
        chosen = next((key for key in normalized if _STATUS_RE.fullmatch(key)), None)

    if chosen is None:
        return None, None

    response = normalized[chosen] or {}
    schema_data = response.get("schema") if isinstance(response, dict) else None
    target_schema = JsonSchema.parse(schema_data) if isinstance(schema_data, dict) else None
    return int(chosen), target_schema
