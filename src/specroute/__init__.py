"""specroute -- compile Swagger/OpenAPI 2.0 specs into request routers.

A driver compiles a spec document once into a schema: for every HTTP
method, an ordered list of path matchers paired with links that carry the
operation's request-parameter, header and success-response schemas.  A
router then resolves incoming requests to links and captured path
parameters, and can build a validator for the matched link.

Typical usage::

    from specroute import OpenAPI2Driver, Router
    from specroute.parser import load_spec

    schema = OpenAPI2Driver().parse(load_spec("petstore.yaml"))
    router = Router(schema, prefix="/v1")
    link, params = router.find_link("GET", "/v1/api/pets/42")

Modules:
    drivers: Spec-format drivers (Swagger/OpenAPI 2.0) and their registry.
    router: Request-to-link matching with prefix scoping.
    validator: jsonschema-backed request/response validation.
    json_schema: Queryable schema objects built by the drivers.
    parser: Spec loading and ``$ref`` resolution.
    config: Layered configuration resolution.
    app: Typer CLI entry point.
"""

from specroute.drivers import OpenAPI2Driver, load_driver
from specroute.router import Router

__version__ = "0.1.0"

__all__ = ["OpenAPI2Driver", "Router", "load_driver", "__version__"]
