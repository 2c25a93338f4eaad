"""Tests for specroute.validator."""

from __future__ import annotations

from typing import Any

import pytest

from specroute.drivers.open_api_2 import OpenAPI2Driver, Schema
from specroute.exceptions import InvalidRequestError, InvalidResponseError
from specroute.json_schema import JsonSchema
from specroute.models import DriverConfig, Request, ValidatorOptions
from specroute.router import Router
from specroute.validator import SchemaValidator, coerce_string_params


def _validator(router: Router, **request: Any) -> SchemaValidator:
    return router.build_schema_validator(Request(**request))


def _router_for(operation: dict[str, Any], path: str = "/up") -> Router:
    document = {"swagger": "2.0", "definitions": {}, "paths": {path: {"post": operation}}}
    return Router(OpenAPI2Driver().parse(document))


# ---------------------------------------------------------------------------
# coerce_string_params
# ---------------------------------------------------------------------------


class TestCoerceStringParams:
    @pytest.fixture
    def schema(self) -> JsonSchema:
        return JsonSchema.parse({
            "type": "object",
            "properties": {
                "limit": {"type": "integer"},
                "ratio": {"type": "number"},
                "active": {"type": "boolean"},
                "note": {"type": ["string", "null"]},
                "cleared": {"type": ["null"]},
                "ids": {"type": "array", "items": {"type": "integer"}},
            },
        })

    def test_coerces_declared_types(self, schema: JsonSchema) -> None:
        result = coerce_string_params(
            {"limit": "10", "ratio": "0.5", "active": "true", "cleared": "", "ids": ["1", "2"]},
            schema,
        )
        assert result == {
            "limit": 10,
            "ratio": 0.5,
            "active": True,
            "cleared": None,
            "ids": [1, 2],
        }

    def test_first_matching_type_wins(self, schema: JsonSchema) -> None:
        assert coerce_string_params({"note": ""}, schema) == {"note": ""}

    def test_unconvertible_values_are_left_alone(self, schema: JsonSchema) -> None:
        result = coerce_string_params({"limit": "ten", "active": "yes"}, schema)
        assert result == {"limit": "ten", "active": "yes"}

    def test_undeclared_keys_are_left_alone(self, schema: JsonSchema) -> None:
        assert coerce_string_params({"other": "1"}, schema) == {"other": "1"}

    def test_input_is_not_mutated(self, schema: JsonSchema) -> None:
        params = {"limit": "1"}
        coerce_string_params(params, schema)
        assert params == {"limit": "1"}


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------


class TestRequestParameters:
    def test_path_params_are_coerced_by_default(self, router: Router) -> None:
        request = Request(request_method="GET", path_info="/api/pets/5")
        assert router.build_schema_validator(request).request_validate(request) == {"id": 5}

    def test_query_params_are_coerced_by_default(self, router: Router) -> None:
        request = Request(
            request_method="GET",
            path_info="/api/pets",
            query_params={"limit": "10", "tags": ["cat", "dog"]},
        )
        params = router.build_schema_validator(request).request_validate(request)
        assert params == {"limit": 10, "tags": ["cat", "dog"]}

    def test_constraint_violation(self, router: Router) -> None:
        request = Request(
            request_method="GET", path_info="/api/pets", query_params={"limit": "0"}
        )
        with pytest.raises(InvalidRequestError, match="limit") as exc_info:
            router.build_schema_validator(request).request_validate(request)
        assert exc_info.value.exit_code == 8
        assert len(exc_info.value.errors) == 1

    def test_uncoercible_value_is_reported(self, router: Router) -> None:
        request = Request(
            request_method="GET", path_info="/api/pets", query_params={"limit": "many"}
        )
        with pytest.raises(InvalidRequestError, match="is not of type 'integer'"):
            router.build_schema_validator(request).request_validate(request)

    def test_option_disables_query_coercion(self, petstore_schema: Schema) -> None:
        router = Router(petstore_schema, validator_option=ValidatorOptions(coerce_query_params=False))
        request = Request(
            request_method="GET", path_info="/api/pets", query_params={"limit": "10"}
        )
        with pytest.raises(InvalidRequestError):
            router.build_schema_validator(request).request_validate(request)

    def test_driver_default_disables_path_coercion(self, petstore_raw: dict[str, Any]) -> None:
        schema = OpenAPI2Driver(DriverConfig(path_params=False)).parse(petstore_raw)
        request = Request(request_method="GET", path_info="/api/pets/5")
        with pytest.raises(InvalidRequestError, match="'5' is not of type 'integer'"):
            Router(schema).build_schema_validator(request).request_validate(request)

    def test_option_overrides_driver_default(self, petstore_raw: dict[str, Any]) -> None:
        schema = OpenAPI2Driver(DriverConfig(path_params=False)).parse(petstore_raw)
        router = Router(schema, validator_option=ValidatorOptions(coerce_path_params=True))
        request = Request(request_method="GET", path_info="/api/pets/5")
        assert router.build_schema_validator(request).request_validate(request) == {"id": 5}


class TestRequestBody:
    def test_valid_body(self, router: Router) -> None:
        request = Request(
            request_method="POST",
            path_info="/api/pets",
            body={"name": "Rex"},
            content_type="application/json; charset=utf-8",
        )
        assert router.build_schema_validator(request).request_validate(request) == {}

    def test_body_refs_resolve_against_definitions(self, router: Router) -> None:
        request = Request(request_method="POST", path_info="/api/pets", body={"tag": "x"})
        with pytest.raises(InvalidRequestError, match="'name' is a required property"):
            router.build_schema_validator(request).request_validate(request)

    def test_content_type_mismatch(self, router: Router) -> None:
        request = Request(
            request_method="POST",
            path_info="/api/pets",
            body={"name": "Rex"},
            content_type="text/plain",
        )
        with pytest.raises(
            InvalidRequestError, match="'Content-Type' should be application/json, got text/plain"
        ):
            router.build_schema_validator(request).request_validate(request)

    def test_content_type_check_can_be_disabled(self, petstore_schema: Schema) -> None:
        router = Router(petstore_schema, validator_option=ValidatorOptions(check_content_type=False))
        request = Request(
            request_method="POST",
            path_info="/api/pets",
            body={"name": "Rex"},
            content_type="text/plain",
        )
        router.build_schema_validator(request).request_validate(request)

    def test_optional_body_may_be_omitted(self) -> None:
        router = _router_for({
            "parameters": [
                {"name": "payload", "in": "body", "required": False, "schema": {"type": "object"}}
            ],
            "responses": {"204": {"description": "ok"}},
        })
        request = Request(request_method="POST", path_info="/up")
        assert router.build_schema_validator(request).request_validate(request) == {}

    def test_required_body_must_be_present(self) -> None:
        router = _router_for({
            "parameters": [
                {"name": "payload", "in": "body", "required": True, "schema": {"type": "object"}}
            ],
            "responses": {"204": {"description": "ok"}},
        })
        request = Request(request_method="POST", path_info="/up")
        with pytest.raises(InvalidRequestError, match="a request body is required"):
            router.build_schema_validator(request).request_validate(request)

    def test_optional_body_is_still_checked_when_sent(self) -> None:
        router = _router_for({
            "parameters": [
                {"name": "payload", "in": "body", "schema": {"type": "object"}}
            ],
            "responses": {"204": {"description": "ok"}},
        })
        request = Request(request_method="POST", path_info="/up", body=[1])
        with pytest.raises(InvalidRequestError, match="is not of type 'object'"):
            router.build_schema_validator(request).request_validate(request)


class TestFormAndHeaders:
    def test_form_and_header_request(self, router: Router) -> None:
        request = Request(
            request_method="POST",
            path_info="/api/pets/3/photos",
            form_params={"rating": "4", "caption": "sleepy"},
            headers={"x-request-id": "abc"},
        )
        params = router.build_schema_validator(request).request_validate(request)
        assert params == {"id": 3, "rating": 4, "caption": "sleepy"}

    def test_missing_required_header(self, router: Router) -> None:
        request = Request(
            request_method="POST", path_info="/api/pets/3/photos", form_params={"rating": "4"}
        )
        with pytest.raises(InvalidRequestError, match="X-Request-Id"):
            router.build_schema_validator(request).request_validate(request)

    def test_header_check_can_be_disabled(self, petstore_schema: Schema) -> None:
        router = Router(petstore_schema, validator_option=ValidatorOptions(check_header=False))
        request = Request(
            request_method="POST", path_info="/api/pets/3/photos", form_params={"rating": "4"}
        )
        router.build_schema_validator(request).request_validate(request)

    def test_missing_required_form_param(self, router: Router) -> None:
        request = Request(
            request_method="POST",
            path_info="/api/pets/3/photos",
            headers={"X-Request-Id": "abc"},
        )
        with pytest.raises(InvalidRequestError, match="'rating' is a required property"):
            router.build_schema_validator(request).request_validate(request)

    def test_file_form_params_are_accepted(self) -> None:
        router = _router_for({
            "consumes": ["multipart/form-data"],
            "parameters": [
                {"name": "f", "in": "formData", "type": "file", "required": True},
                {"name": "title", "in": "formData", "type": "string"},
            ],
            "responses": {"201": {"description": "stored"}},
        })
        request = Request(request_method="POST", path_info="/up", form_params={"f": "data"})
        assert router.build_schema_validator(request).request_validate(request) == {"f": "data"}

    def test_missing_required_file_is_reported(self) -> None:
        router = _router_for({
            "parameters": [{"name": "f", "in": "formData", "type": "file", "required": True}],
            "responses": {"201": {"description": "stored"}},
        })
        request = Request(request_method="POST", path_info="/up", form_params={})
        with pytest.raises(InvalidRequestError, match="'f' is a required property"):
            router.build_schema_validator(request).request_validate(request)


class TestNoLink:
    def test_unmatched_request_is_not_validated(self, router: Router) -> None:
        request = Request(request_method="GET", path_info="/api/owners")
        validator = router.build_schema_validator(request)
        assert not validator.link_exist()
        assert validator.request_validate(request) == {}
        validator.response_validate(200, "anything")


# ---------------------------------------------------------------------------
# Response validation
# ---------------------------------------------------------------------------


class TestResponseValidate:
    def test_valid_response(self, router: Router) -> None:
        validator = _validator(router, request_method="GET", path_info="/api/pets/1")
        validator.response_validate(200, {"id": 1, "name": "Rex"})

    def test_invalid_response(self, router: Router) -> None:
        validator = _validator(router, request_method="GET", path_info="/api/pets/1")
        with pytest.raises(InvalidResponseError, match="id") as exc_info:
            validator.response_validate(200, {"id": "one", "name": "Rex"})
        assert exc_info.value.errors

    def test_array_of_refs(self, router: Router) -> None:
        validator = _validator(router, request_method="GET", path_info="/api/pets")
        validator.response_validate(200, [{"id": 1, "name": "Rex"}])
        with pytest.raises(InvalidResponseError):
            validator.response_validate(200, [{"name": "Rex"}])

    def test_other_statuses_are_skipped(self, router: Router) -> None:
        validator = _validator(router, request_method="GET", path_info="/api/pets/1")
        validator.response_validate(404, {"unexpected": True})

    def test_link_without_target_schema(self, router: Router) -> None:
        validator = _validator(router, request_method="DELETE", path_info="/api/pets/1")
        validator.response_validate(204, None)
