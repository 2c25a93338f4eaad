"""The compiled routing and schema artefact produced by the OpenAPI 2 driver."""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator, Optional

from specroute.drivers.open_api_2.link import Link
from specroute.drivers.open_api_2.matcher import PathMatcher
from specroute.models import DriverConfig
from specroute.parser.resolver import resolve_refs

if TYPE_CHECKING:
    from specroute.drivers.base import Driver


@dataclass
class Schema:
    """Routes and definitions compiled from one Swagger 2.0 document.

    ``routes`` maps an upper-case HTTP method to its ``(matcher, link)``
    pairs in document order; the router takes the first match.  The
    producing driver is held through a weak reference and is excluded from
    equality, so two compilations of one document compare equal.
    """

    definitions: dict[str, Any] = field(default_factory=dict)
    routes: dict[str, list[tuple[PathMatcher, Link]]] = field(default_factory=dict)
    base_path: str = ""
    config: DriverConfig = field(default_factory=DriverConfig)
    _driver_ref: Optional[weakref.ReferenceType] = field(
        default=None, repr=False, compare=False
    )

    @property
    def driver(self) -> Optional[Driver]:
        if self._driver_ref is None:
            return None
        return self._driver_ref()

    @driver.setter
    def driver(self, value: Optional[Driver]) -> None:
        self._driver_ref = weakref.ref(value) if value is not None else None

    def iter_links(self) -> Iterator[tuple[str, Link]]:
        """Yield ``(method, link)`` for every route, in route order."""
        for method, method_routes in self.routes.items():
            for _, link in method_routes:
                yield method, link

    def find_link_by_href(self, method: str, href: str) -> Optional[Link]:
        """Return the link declared for *method* at the literal template *href*."""
        for _, link in self.routes.get(method.upper(), []):
            if link.href == href:
                return link
        return None

    def resolve(self, payload: Any) -> Any:
        """Inline ``#/definitions/...`` pointers in a raw payload."""
        return resolve_refs(payload, {"definitions": self.definitions})
