"""Pydantic models shared across specroute modules.

The models fall into two groups:

**Configuration models** -- read from the user's config directory, the
project-local ``specroute.json`` and the environment:
    :class:`DriverConfig`, :class:`ValidatorOptions` and :class:`GlobalConfig`.

**Request model** -- a transport-neutral view of an incoming HTTP request
that satisfies the attributes the router and validator read:
    :class:`Request`.

Compiled artefacts (``Schema``, ``Link``) live with the driver that builds
them in :mod:`specroute.drivers.open_api_2`.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class DriverConfig(BaseModel):
    """Driver-level defaults handed to the validator.

    The driver itself never acts on these flags; it records them on every
    compiled :class:`~specroute.drivers.open_api_2.Schema` so that schemas
    compiled with different defaults can coexist in one process.
    """

    model_config = ConfigDict(frozen=True)

    coerce_form_params: bool = Field(
        default=True,
        description="Coerce string form values to their declared types",
    )
    path_params: bool = Field(
        default=True,
        description="Coerce captured path values to their declared types",
    )
    query_params: bool = Field(
        default=True,
        description="Coerce query string values to their declared types",
    )


class ValidatorOptions(BaseModel):
    """Per-router options passed through to :class:`~specroute.validator.SchemaValidator`.

    A coerce option left as ``None`` defers to the matching driver default
    recorded on the compiled schema.
    """

    coerce_form_params: Optional[bool] = None
    coerce_path_params: Optional[bool] = None
    coerce_query_params: Optional[bool] = None
    check_content_type: bool = True
    check_header: bool = True


class GlobalConfig(BaseModel):
    """Effective configuration after precedence resolution.

    See :func:`~specroute.config.resolve_config` for the full chain.
    """

    driver: str = "open_api_2"
    prefix: Optional[str] = None
    driver_config: DriverConfig = Field(default_factory=DriverConfig)
    validator: ValidatorOptions = Field(default_factory=ValidatorOptions)


# --- Requests ---


class Request(BaseModel):
    """A minimal HTTP request as seen by the router and validator.

    ``path`` follows the Rack/WSGI convention of ``script_name`` plus
    ``path_info``; the router scopes on ``path`` and matches on
    ``path_info``.

    Example::

        Request(request_method="GET", path_info="/api/pets/42",
                query_params={"limit": "10"})
    """

    request_method: str
    path_info: str
    script_name: str = ""
    query_params: dict[str, Any] = Field(default_factory=dict)
    form_params: dict[str, Any] = Field(default_factory=dict)
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
    content_type: Optional[str] = None

    @property
    def path(self) -> str:
        return self.script_name + self.path_info
