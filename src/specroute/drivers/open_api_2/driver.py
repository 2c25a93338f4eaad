"""Compile Swagger/OpenAPI 2.0 documents into routable schemas.

:class:`OpenAPI2Driver` checks the document shape, then walks every path
and HTTP method and builds one :class:`~specroute.drivers.open_api_2.link.Link`
per operation:

* ``enc_type`` / ``media_type`` come from the first ``consumes`` /
  ``produces`` entry, operation-level first, document-level next,
  ``application/json`` otherwise.
* Path-item parameters are merged into each operation's list; an
  operation parameter with the same ``name`` and ``in`` wins.
* Request schemas come from
  :class:`~specroute.drivers.open_api_2.parameters.ParameterSchemaBuilder`
  and :class:`~specroute.drivers.open_api_2.parameters.HeaderSchemaBuilder`.
* The success response comes from
  :func:`~specroute.drivers.open_api_2.responses.select_success_response`.
* The href, prefixed with the document ``basePath``, is compiled into a
  :class:`~specroute.drivers.open_api_2.matcher.PathMatcher`.

Compilation is all-or-nothing: the first malformed operation aborts the
whole document.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from specroute.drivers.base import Driver
from specroute.drivers.open_api_2.link import Link
from specroute.drivers.open_api_2.matcher import PathMatcher
from specroute.drivers.open_api_2.parameters import (
    HeaderSchemaBuilder,
    ParameterLocation,
    ParameterSchemaBuilder,
)
from specroute.drivers.open_api_2.responses import select_success_response
from specroute.drivers.open_api_2.schema import Schema
from specroute.exceptions import MissingDefinitionsError, VersionMismatchError

logger = logging.getLogger(__name__)

REQUIRED_VERSION = "2.0"

DEFAULT_MEDIA_TYPE = "application/json"

# Methods compiled into routes; any other key under a path item is ignored.
ROUTED_METHODS = ("DELETE", "GET", "PATCH", "POST", "PUT")


class OpenAPI2Driver(Driver):
    """Driver for Swagger/OpenAPI 2.0 documents."""

    @property
    def name(self) -> str:
        return "open_api_2"

    @property
    def schema_class(self) -> type:
        return Schema

    def parse(self, data: dict[str, Any]) -> Schema:
        """Compile *data* into a :class:`Schema`.

        Args:
            data: The raw document.  It is read, never modified.

        Returns:
            A new schema holding routes in document order.

        Raises:
            VersionMismatchError: If ``swagger`` is not ``"2.0"``.
            MissingDefinitionsError: If ``definitions`` is missing or null.
            MissingParameterNameError: If any parameter has no ``name``.
            IncompatibleParameterLocationsError: If any operation mixes a
                body parameter with path/query/form parameters.
        """
        if str(data.get("swagger")) != REQUIRED_VERSION:
            raise VersionMismatchError(f"driver requires OpenAPI {REQUIRED_VERSION}.")

        definitions = data.get("definitions")
        if definitions is None:
            raise MissingDefinitionsError("no definitions section in spec data.")

        schema = Schema(
            definitions=definitions,
            base_path=(data.get("basePath") or "").rstrip("/"),
            config=self.config,
        )
        schema.driver = self
        schema.routes = self._parse_routes(data, schema.base_path)

        logger.info(
            "Compiled %d routes across %d methods",
            sum(len(method_routes) for method_routes in schema.routes.values()),
            len(schema.routes),
        )
        return schema

    def _parse_routes(
        self, data: dict[str, Any], base_path: str
    ) -> dict[str, list[tuple[PathMatcher, Link]]]:
        routes: dict[str, list[tuple[PathMatcher, Link]]] = {}

        for path, path_item in (data.get("paths") or {}).items():
            if not isinstance(path_item, dict):
                continue
            shared_params = path_item.get("parameters") or []

            for method_key, operation in path_item.items():
                method = str(method_key).upper()
                if method not in ROUTED_METHODS or not isinstance(operation, dict):
                    continue

                link = self._build_link(data, path, method, operation, shared_params)
                matcher = PathMatcher(base_path + path)
                routes.setdefault(method, []).append((matcher, link))
                logger.debug("Compiled route %s %s -> %s", method, path, matcher.regex.pattern)

        return routes

    def _build_link(
        self,
        data: dict[str, Any],
        path: str,
        method: str,
        operation: dict[str, Any],
        shared_params: list[dict[str, Any]],
    ) -> Link:
        link_data = dict(operation)
        link_data["parameters"] = _merge_parameters(
            shared_params, operation.get("parameters") or []
        )

        schema, schema_data = ParameterSchemaBuilder(link_data).call()
        status_success, target_schema = select_success_response(operation.get("responses"))

        header_schema = None
        if any(
            ParameterLocation.from_declaration(param) is ParameterLocation.HEADER
            for param in link_data["parameters"]
        ):
            header_schema = HeaderSchemaBuilder(link_data).call()

        return Link(
            method=method,
            href=path,
            enc_type=_first_media_type(operation.get("consumes"), data.get("consumes")),
            media_type=_first_media_type(operation.get("produces"), data.get("produces")),
            status_success=status_success,
            schema=schema,
            schema_data=schema_data,
            body_required=any(
                ParameterLocation.from_declaration(param) is ParameterLocation.BODY
                and bool(param.get("required"))
                for param in link_data["parameters"]
            ),
            header_schema=header_schema,
            target_schema=target_schema,
        )


def _first_media_type(
    operation_types: Optional[list[str]], document_types: Optional[list[str]]
) -> str:
    """Return the first declared media type, operation level first."""
    for declared in (operation_types, document_types):
        if declared:
            return declared[0]
    return DEFAULT_MEDIA_TYPE


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-item and operation parameters.

    Operation-level parameters override path-level ones with the same
    ``name`` and ``in``.  Path-level parameters come first, so an
    unnamed one still reaches the builder and is rejected there.
    """
    overridden = {(param.get("name"), param.get("in")) for param in op_params}
    merged = [
        param
        for param in path_params
        if (param.get("name"), param.get("in")) not in overridden
    ]
    merged.extend(op_params)
    return merged
