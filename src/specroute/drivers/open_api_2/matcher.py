"""Compile href templates into anchored path matchers.

A template segment ``{name}`` becomes a capture of one or more non-slash,
non-newline characters; everything else is matched literally.  Captures are
positional in the compiled regex and named through :attr:`PathMatcher.names`,
so template names that are not valid Python group names (``{pet-id}``)
and repeated names both work.
"""

from __future__ import annotations

import re
from typing import Optional

# Matches one ``{name}`` placeholder in an href template.
_PLACEHOLDER_RE = re.compile(r"\{([^{}/]+)\}")

# One path segment; line breaks never belong to a segment.
_CAPTURE = r"([^/\n]+)"


class PathMatcher:
    """An href template compiled to a regex anchored at both ends.

    Args:
        href: The template, e.g. ``/api/pets/{id}``.
    """

    __slots__ = ("href", "names", "regex")

    def __init__(self, href: str) -> None:
        self.href = href
        names: list[str] = []
        parts: list[str] = []
        position = 0
        for match in _PLACEHOLDER_RE.finditer(href):
            parts.append(re.escape(href[position:match.start()]))
            parts.append(_CAPTURE)
            names.append(match.group(1))
            position = match.end()
        parts.append(re.escape(href[position:]))

        self.names: tuple[str, ...] = tuple(names)
        self.regex: re.Pattern[str] = re.compile(r"\A" + "".join(parts) + r"\Z")

    def match(self, path: str) -> Optional[dict[str, str]]:
        """Match *path* against the template.

        Returns:
            Captured values keyed by template name, in template order, or
            ``None`` when the path does not match.
        """
        found = self.regex.fullmatch(path)
        if found is None:
            return None
        return dict(zip(self.names, found.groups()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathMatcher):
            return NotImplemented
        return self.regex.pattern == other.regex.pattern and self.names == other.names

    def __hash__(self) -> int:
        return hash((self.regex.pattern, self.names))

    def __repr__(self) -> str:
        return f"PathMatcher({self.href!r}, pattern={self.regex.pattern!r})"
