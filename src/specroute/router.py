"""Match incoming requests to compiled links.

A :class:`Router` wraps one compiled schema and, optionally, a path
prefix that scopes it to part of an application (``/v1`` mounts the API
under ``/v1/...``).  Lookups scan the routes for the request's method in
declaration order and return the first link whose matcher accepts the
path, together with the captured path parameters.

Routers only read the schema, so one instance can serve any number of
threads, or a fresh one can be built per request.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Protocol

from specroute.models import ValidatorOptions

if TYPE_CHECKING:
    from specroute.drivers.open_api_2 import Link, Schema
    from specroute.validator import SchemaValidator

logger = logging.getLogger(__name__)


class RequestLike(Protocol):
    """The request attributes the router reads."""

    request_method: str
    path_info: str

    @property
    def path(self) -> str: ...


class Router:
    """Prefix-scoped lookup of links in a compiled schema.

    Args:
        schema: The compiled schema to route against.
        prefix: Optional path prefix.  Paths outside it are not
            :meth:`includes`-d and the prefix is stripped before matching.
        validator_option: Options handed to validators built by
            :meth:`build_schema_validator`.
    """

    def __init__(
        self,
        schema: Schema,
        prefix: Optional[str] = None,
        validator_option: Optional[ValidatorOptions] = None,
    ) -> None:
        self.schema = schema
        self.prefix = prefix or None
        self.validator_option = validator_option or ValidatorOptions()

    def includes(self, path: str) -> bool:
        """Return ``True`` when *path* falls under the configured prefix."""
        return self.prefix is None or path.startswith(self.prefix)

    def includes_request(self, request: RequestLike) -> bool:
        return self.includes(request.path)

    def find_link(
        self, method: str, path: str
    ) -> Optional[tuple[Link, dict[str, str]]]:
        """Find the link for *method* and *path*.

        Returns:
            ``(link, path_params)`` for the first route that matches, or
            ``None`` when the method has no routes or nothing matches.
        """
        if self.prefix is not None and path.startswith(self.prefix):
            path = path[len(self.prefix):]

        for matcher, link in self.schema.routes.get(method.upper(), []):
            params = matcher.match(path)
            if params is not None:
                logger.debug("Matched %s %s to %s", method, path, link.href)
                return link, params

        logger.debug("No route for %s %s", method, path)
        return None

    def find_request_link(
        self, request: RequestLike
    ) -> Optional[tuple[Link, dict[str, str]]]:
        return self.find_link(request.request_method, request.path_info)

    def build_schema_validator(self, request: Any) -> SchemaValidator:
        """Create a validator bound to this router and *request*."""
        from specroute.validator import SchemaValidator

        return SchemaValidator(self, request, self.validator_option)
