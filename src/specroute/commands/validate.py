"""Validate command -- check a request (and optionally a response) from the shell.

Builds a :class:`~specroute.models.Request` from command-line options,
routes it, and runs :class:`~specroute.validator.SchemaValidator` on it.
Exits with code 8 on validation failure and 4 when nothing matches.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import typer

from specroute.commands.inspect import compile_router, exit_on_error
from specroute.exceptions import InvalidUsageError, NotFoundError
from specroute.models import Request
from specroute.output import format_response, success


def _parse_pairs(
    pairs: Optional[list[str]], option: str, multi: bool = True
) -> dict[str, Any]:
    """Turn ``["k=v", "k=w"]`` into ``{"k": ["v", "w"]}``; single values stay scalar.

    With ``multi=False`` a repeated key keeps its last value.
    """
    result: dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"{option} expects KEY=VALUE, got '{pair}'")
        if multi and key in result:
            existing = result[key]
            result[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            result[key] = value
    return result


def _parse_json(text: Optional[str], option: str) -> Any:
    if text is None:
        return None
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"{option} is not valid JSON: {exc}") from exc


def validate_command(
    spec: str = typer.Argument(..., help="Spec file, URL, or '-' for stdin."),
    method: str = typer.Argument(..., help="HTTP method."),
    path: str = typer.Argument(..., help="Request path."),
    query: Optional[list[str]] = typer.Option(None, "--query", help="Query parameter KEY=VALUE."),
    form: Optional[list[str]] = typer.Option(None, "--form", help="Form parameter KEY=VALUE."),
    header: Optional[list[str]] = typer.Option(None, "--header", help="Header KEY=VALUE."),
    body: Optional[str] = typer.Option(None, "--body", help="JSON request body."),
    content_type: Optional[str] = typer.Option(None, "--content-type", help="Request Content-Type."),
    response_status: Optional[int] = typer.Option(None, "--response-status", help="Response status to check."),
    response_body: Optional[str] = typer.Option(None, "--response-body", help="JSON response body to check."),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Mount prefix."),
    driver: Optional[str] = typer.Option(None, "--driver", help="Driver name (default: open_api_2)."),
) -> None:
    """Validate a request against the compiled spec.

    Example::

        specroute validate petstore.json GET /api/pets --query limit=10
    """
    with exit_on_error():
        router = compile_router(spec, prefix, driver)
        request = Request(
            request_method=method.upper(),
            path_info=path,
            query_params=_parse_pairs(query, "--query"),
            form_params=_parse_pairs(form, "--form"),
            headers=_parse_pairs(header, "--header", multi=False),
            body=_parse_json(body, "--body"),
            content_type=content_type,
        )

        validator = router.build_schema_validator(request)
        if not validator.link_exist():
            raise NotFoundError(f"No route matches {request.request_method} {path}")

        params = validator.request_validate(request)
        if response_status is not None:
            validator.response_validate(response_status, _parse_json(response_body, "--response-body"))

    success("Request is valid.")
    format_response({"href": validator.link.href, "params": params})
