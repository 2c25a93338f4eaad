"""Resolve ``$ref`` JSON Reference pointers in schema payloads.

Swagger 2.0 body and response schemas usually point into the document's
``definitions`` section (``{"$ref": "#/definitions/Pet"}``).  The compiler
keeps those payloads raw; this module inlines them on demand, for display
or for consumers that cannot follow references themselves.

Only **internal** references (those starting with ``#/``) are supported.
Anything else raises :class:`~specroute.exceptions.SpecParseError`.

Circular references are left unresolved at the cycle point, so a
self-referencing definition keeps its ``$ref`` dict there.
"""

from __future__ import annotations

from typing import Any

from specroute.exceptions import SpecParseError


def resolve_refs(payload: Any, root: dict[str, Any]) -> Any:
    """Return a copy of *payload* with every ``$ref`` replaced by its target.

    Args:
        payload: A schema payload (dict, list or scalar) that may contain
            ``{"$ref": "#/..."}`` pointers.
        root: The document the pointers are relative to -- typically the
            full spec, or ``{"definitions": ...}``.

    Returns:
        A new structure with resolvable pointers inlined.  Neither argument
        is mutated.

    Raises:
        SpecParseError: If a pointer targets a missing path or an external
            document.

    Example::

        root = {"definitions": {"Pet": {"type": "object"}}}
        resolve_refs({"$ref": "#/definitions/Pet"}, root)
        # -> {"type": "object"}
    """
    return _deep_resolve(payload, root, seen=None)


def _pointer_segments(ref: str) -> list[str]:
    """Split ``#/a/b~1c`` into ``["a", "b/c"]`` (RFC 6901 unescaping)."""
    if not ref.startswith("#/"):
        raise SpecParseError(
            f"External $ref not supported: {ref}. Definitions must live in the same document."
        )
    return [part.replace("~1", "/").replace("~0", "~") for part in ref[2:].split("/")]


def _step(node: Any, segment: str) -> Any:
    """Descend one pointer segment; raises ``LookupError`` with the reason."""
    if isinstance(node, dict):
        if segment not in node:
            raise LookupError(f"key '{segment}' not found at path")
        return node[segment]
    if isinstance(node, list):
        if not segment.isdigit() or int(segment) >= len(node):
            raise LookupError(f"invalid array index '{segment}'")
        return node[int(segment)]
    raise LookupError(f"cannot navigate into {type(node).__name__}")


def _resolve_ref(ref: str, root: dict[str, Any]) -> Any:
    """Follow a single ``#/...`` pointer through *root*.

    Raises:
        SpecParseError: If the reference is external or a segment is missing.
    """
    node: Any = root
    for segment in _pointer_segments(ref):
        try:
            node = _step(node, segment)
        except LookupError as exc:
            raise SpecParseError(f"Cannot resolve $ref '{ref}': {exc}") from None
    return node


def _deep_resolve(obj: Any, root: dict[str, Any], seen: set[str] | None = None) -> Any:
    """Recursively inline ``$ref`` pointers within *obj*.

    ``seen`` holds the pointers on the current resolution stack; a pointer
    met again is returned as-is.  Each branch gets its own copy so sibling
    references to the same definition still resolve.
    """
    if seen is None:
        seen = set()

    if isinstance(obj, dict):
        if "$ref" in obj:
            ref = obj["$ref"]
            if ref in seen:
                return obj
            seen = seen | {ref}
            return _deep_resolve(_resolve_ref(ref, root), root, seen)

        return {key: _deep_resolve(value, root, seen) for key, value in obj.items()}

    if isinstance(obj, list):
        return [_deep_resolve(item, root, seen) for item in obj]

    return obj
