"""Validate live requests and responses against a matched link.

:class:`SchemaValidator` is what :meth:`Router.build_schema_validator
<specroute.router.Router.build_schema_validator>` returns.  It looks up the
request's link once and then checks:

* the request ``Content-Type`` against the link's ``enc_type``,
* query, form and captured path parameters against ``Link.schema``, or
  the body against ``Link.schema_data`` (an absent body passes unless
  the body parameter is required),
* headers against ``Link.header_schema``,
* a response body against ``Link.target_schema`` when the response status
  is the link's success status.

Validation itself is delegated to ``jsonschema``'s Draft 4 validator,
extended with Swagger's ``file`` type.  The document ``definitions`` are
attached to every schema before validation so ``#/definitions/...``
pointers resolve without inlining.

String inputs (form fields, query strings, path captures, headers) can be
coerced to their declared ``integer``/``number``/``boolean``/``null``
types first.  Each source follows its validator option, or the driver
default recorded on the schema when the option is unset.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Optional

from jsonschema import Draft4Validator
from jsonschema.validators import extend

from specroute.exceptions import InvalidRequestError, InvalidResponseError, ValidationFailedError
from specroute.json_schema import JsonSchema
from specroute.models import ValidatorOptions

if TYPE_CHECKING:
    from specroute.router import Router

logger = logging.getLogger(__name__)

_INTEGER_RE = re.compile(r"^[-+]?\d+$")
_NUMBER_RE = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$")

# Swagger 2.0 adds ``type: file`` for form uploads; the upload arrives in
# whatever shape the HTTP layer produced, so any value is accepted.
SwaggerValidator = extend(
    Draft4Validator,
    type_checker=Draft4Validator.TYPE_CHECKER.redefine("file", lambda checker, instance: True),
)


def coerce_string_params(params: dict[str, Any], schema: JsonSchema) -> dict[str, Any]:
    """Convert string values in *params* to the types *schema* declares.

    Values that cannot be converted are left as they are so the validator
    reports them.  Keys without a declared property are left alone.

    Example::

        >>> schema = JsonSchema.parse({"properties": {"limit": {"type": "integer"}}})
        >>> coerce_string_params({"limit": "10"}, schema)
        {'limit': 10}
    """
    coerced = dict(params)
    for name, value in params.items():
        prop = schema.properties.get(name)
        if prop is None or prop.type is None:
            continue
        coerced[name] = _coerce_value(value, prop.type, prop.items)
    return coerced


def _coerce_value(value: Any, types: list[str], items: Any = None) -> Any:
    if isinstance(value, list) and "array" in types and isinstance(items, dict):
        item_type = items.get("type")
        if item_type is None:
            return value
        item_types = item_type if isinstance(item_type, list) else [item_type]
        return [_coerce_value(item, item_types) for item in value]

    if not isinstance(value, str):
        return value

    for declared in types:
        if declared == "string":
            return value
        if declared == "integer" and _INTEGER_RE.match(value):
            return int(value)
        if declared == "number" and _NUMBER_RE.match(value):
            return float(value)
        if declared == "boolean" and value in ("true", "false"):
            return value == "true"
        if declared == "null" and value == "":
            return None
    return value


def _check(
    instance: Any,
    schema: dict[str, Any],
    definitions: dict[str, Any],
    error_class: type[ValidationFailedError],
    label: str,
) -> None:
    """Validate *instance*, raising *error_class* with every failure message."""
    document = dict(schema)
    document.setdefault("definitions", definitions)
    validator = SwaggerValidator(document)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if not errors:
        return

    messages = [
        f"{'/'.join(str(p) for p in error.path) or '<root>'}: {error.message}"
        for error in errors
    ]
    raise error_class(f"{label}: {messages[0]}", errors=messages)


class SchemaValidator:
    """Request/response validation for a single request.

    Args:
        router: The router whose schema holds the links.
        request: The request being handled.
        options: Validator options; defaults to
            :class:`~specroute.models.ValidatorOptions`.
    """

    def __init__(
        self,
        router: Router,
        request: Any,
        options: Optional[ValidatorOptions] = None,
    ) -> None:
        self.router = router
        self.options = options or ValidatorOptions()
        found = router.find_request_link(request)
        if found is None:
            self.link, self.path_params = None, {}
        else:
            self.link, self.path_params = found

    def link_exist(self) -> bool:
        return self.link is not None

    @property
    def _definitions(self) -> dict[str, Any]:
        return self.router.schema.definitions

    def request_validate(self, request: Any) -> dict[str, Any]:
        """Validate *request* against the matched link.

        Returns:
            The merged (and possibly coerced) parameters that were
            validated.  Empty when no link matched or the link takes a body.

        Raises:
            InvalidRequestError: On content-type, parameter, body or header
                failures.
        """
        if self.link is None:
            return {}

        if self.options.check_content_type:
            self._check_content_type(request)

        params: dict[str, Any] = {}
        if self.link.schema is not None:
            params = self._collect_params(request, self.link.schema)
            _check(
                params,
                self.link.schema.to_dict(),
                self._definitions,
                InvalidRequestError,
                "Invalid request parameters",
            )

        if self.link.schema_data is not None and request.body is None:
            if self.link.body_required:
                raise InvalidRequestError("Invalid request body: a request body is required")
        elif self.link.schema_data is not None:
            _check(
                request.body,
                self.link.schema_data,
                self._definitions,
                InvalidRequestError,
                "Invalid request body",
            )

        if self.options.check_header and self.link.header_schema is not None:
            headers = self._collect_headers(request, self.link.header_schema)
            _check(
                headers,
                self.link.header_schema.to_dict(),
                self._definitions,
                InvalidRequestError,
                "Invalid request headers",
            )

        return params

    def response_validate(self, status: int, data: Any) -> None:
        """Validate a response body when *status* is the link's success status.

        Raises:
            InvalidResponseError: If the body does not match the target schema.
        """
        if self.link is None or self.link.target_schema is None:
            return
        if status != self.link.status_success:
            logger.debug(
                "Skipping response validation for %s %s: status %s is not %s",
                self.link.method,
                self.link.href,
                status,
                self.link.status_success,
            )
            return

        _check(
            data,
            self.link.target_schema.to_dict(),
            self._definitions,
            InvalidResponseError,
            "Invalid response",
        )

    def _check_content_type(self, request: Any) -> None:
        content_type = getattr(request, "content_type", None)
        if request.body is None or not content_type or not self.link.enc_type:
            return
        media_type = content_type.split(";", 1)[0].strip().lower()
        if media_type != self.link.enc_type.lower():
            raise InvalidRequestError(
                f"'Content-Type' should be {self.link.enc_type}, got {media_type}."
            )

    def _collect_params(self, request: Any, schema: JsonSchema) -> dict[str, Any]:
        config = self.router.schema.config
        sources = (
            (request.query_params, self.options.coerce_query_params, config.query_params),
            (request.form_params, self.options.coerce_form_params, config.coerce_form_params),
            (self.path_params, self.options.coerce_path_params, config.path_params),
        )

        # Later sources win: path captures override form and query values.
        params: dict[str, Any] = {}
        for values, coerce, default in sources:
            values = dict(values)
            if coerce if coerce is not None else default:
                values = coerce_string_params(values, schema)
            params.update(values)
        return params

    def _collect_headers(self, request: Any, schema: JsonSchema) -> dict[str, Any]:
        provided = {name.lower(): value for name, value in request.headers.items()}
        headers = {
            name: provided[name.lower()]
            for name in schema.properties
            if name.lower() in provided
        }
        return coerce_string_params(headers, schema)
