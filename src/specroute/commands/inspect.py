"""Inspect commands -- list, match and show compiled routes.

Each command loads a spec document, compiles it with the configured driver
and reads the result: ``routes`` lists every link, ``match`` resolves a
method and path to a link, ``show`` prints a link's schemas with
``$ref`` pointers inlined.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

import typer

from specroute.exceptions import NotFoundError, SpecrouteError
from specroute.output import error, format_response, get_output
from specroute.router import Router


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Report a :class:`SpecrouteError` on stderr and exit with its code."""
    try:
        yield
    except SpecrouteError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def compile_router(
    spec: str, prefix: Optional[str] = None, driver: Optional[str] = None
) -> Router:
    """Load *spec*, compile it with the configured driver and wrap it in a router.

    *prefix* and *driver* are command-line overrides for the configured
    values.

    Raises:
        SpecrouteError: On config, loading or compilation failures.
    """
    from specroute.config import resolve_config
    from specroute.drivers import load_driver
    from specroute.parser import load_spec

    config = resolve_config(cli_prefix=prefix, cli_driver=driver)
    compiler = load_driver(config.driver, config.driver_config)
    schema = compiler.parse(load_spec(spec))
    return Router(schema, prefix=config.prefix, validator_option=config.validator)


def routes_command(
    spec: str = typer.Argument(..., help="Spec file, URL, or '-' for stdin."),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Mount prefix."),
    driver: Optional[str] = typer.Option(None, "--driver", help="Driver name (default: open_api_2)."),
) -> None:
    """List every compiled route in match order.

    Example::

        specroute routes petstore.json
    """
    with exit_on_error():
        router = compile_router(spec, prefix, driver)

    rows: list[list[str]] = []
    for method, link in router.schema.iter_links():
        rows.append([
            method,
            (router.prefix or "") + router.schema.base_path + (link.href or ""),
            str(link.status_success) if link.status_success is not None else "-",
            link.enc_type or "-",
            link.media_type or "-",
        ])

    get_output().print_table(
        ["Method", "Path", "Success", "Consumes", "Produces"],
        rows,
        title=f"Routes ({len(rows)})",
    )


def match_command(
    spec: str = typer.Argument(..., help="Spec file, URL, or '-' for stdin."),
    method: str = typer.Argument(..., help="HTTP method."),
    path: str = typer.Argument(..., help="Request path."),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Mount prefix."),
    driver: Optional[str] = typer.Option(None, "--driver", help="Driver name (default: open_api_2)."),
) -> None:
    """Show which link a request path resolves to.

    Exits with code 4 when no route matches.

    Example::

        specroute match petstore.json GET /api/pets/42
    """
    with exit_on_error():
        router = compile_router(spec, prefix, driver)
        if not router.includes(path):
            raise NotFoundError(f"{path} is outside prefix {router.prefix}")
        found = router.find_link(method, path)
        if found is None:
            raise NotFoundError(f"No route matches {method.upper()} {path}")

    link, params = found
    format_response({
        "method": link.method,
        "href": link.href,
        "path_params": params,
        "status_success": link.status_success,
        "enc_type": link.enc_type,
        "media_type": link.media_type,
    })


def show_command(
    spec: str = typer.Argument(..., help="Spec file, URL, or '-' for stdin."),
    method: str = typer.Argument(..., help="HTTP method."),
    href: str = typer.Argument(..., help="Path template as declared, e.g. /pets/{id}."),
    driver: Optional[str] = typer.Option(None, "--driver", help="Driver name (default: open_api_2)."),
) -> None:
    """Print a link's request, header and response schemas.

    Example::

        specroute show petstore.json POST /api/pets
    """
    with exit_on_error():
        router = compile_router(spec, driver=driver)
        schema = router.schema
        link = schema.find_link_by_href(method, href)
        if link is None:
            raise NotFoundError(f"No {method.upper()} operation declared at {href}")

        format_response({
            "method": link.method,
            "href": link.href,
            "schema": schema.resolve(link.schema.to_dict()) if link.schema else None,
            "schema_data": schema.resolve(link.schema_data),
            "body_required": link.body_required,
            "header_schema": link.header_schema.to_dict() if link.header_schema else None,
            "status_success": link.status_success,
            "target_schema": (
                schema.resolve(link.target_schema.to_dict()) if link.target_schema else None
            ),
        })
