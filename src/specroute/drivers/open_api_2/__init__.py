"""Swagger/OpenAPI 2.0 driver.

Compiles a Swagger 2.0 document into a :class:`Schema` whose routes pair a
:class:`PathMatcher` with a :class:`Link` for every operation.
"""

from specroute.drivers.open_api_2.driver import OpenAPI2Driver
from specroute.drivers.open_api_2.link import Link
from specroute.drivers.open_api_2.matcher import PathMatcher
from specroute.drivers.open_api_2.parameters import (
    HeaderSchemaBuilder,
    ParameterLocation,
    ParameterSchemaBuilder,
    translate_constraints,
)
from specroute.drivers.open_api_2.responses import select_success_response
from specroute.drivers.open_api_2.schema import Schema

__all__ = [
    "HeaderSchemaBuilder",
    "Link",
    "OpenAPI2Driver",
    "ParameterLocation",
    "ParameterSchemaBuilder",
    "PathMatcher",
    "Schema",
    "select_success_response",
    "translate_constraints",
]
