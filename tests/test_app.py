"""End-to-end tests for the specroute CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from specroute import __version__
from specroute.app import app

SPEC = str(Path(__file__).parent / "fixtures" / "petstore_2.0.json")


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestRootOptions:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"specroute {__version__}" in result.output


class TestRoutesCommand:
    def test_lists_routes_in_match_order(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--plain", "--no-color", "routes", SPEC])
        assert result.exit_code == 0, result.output
        lines = [line for line in result.output.splitlines() if line.startswith(("GET", "POST", "DELETE"))]
        assert [tuple(line.split("\t")[:2]) for line in lines] == [
            ("DELETE", "/api/pets/{id}"),
            ("GET", "/api/pets/{id}"),
            ("GET", "/api/pets"),
            ("POST", "/api/pets"),
            ("POST", "/api/pets/{id}/photos"),
        ]

    def test_prefix_is_shown(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--json", "routes", SPEC, "--prefix", "/v1"])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert rows[0]["Path"] == "/v1/api/pets/{id}"
        assert rows[4]["Success"] == "302"

    def test_missing_spec_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["--plain", "--no-color", "routes", str(tmp_path / "missing.json")]
        )
        assert result.exit_code == 7
        assert "Spec file not found" in result.output

    def test_wrong_version(self, runner: CliRunner, tmp_path: Path) -> None:
        spec = tmp_path / "openapi3.json"
        spec.write_text(json.dumps({"openapi": "3.0.0", "paths": {}}), encoding="utf-8")
        result = runner.invoke(app, ["--plain", "--no-color", "routes", str(spec)])
        assert result.exit_code == 7
        assert "driver requires OpenAPI 2.0." in result.output

    def test_uncompilable_pattern(self, runner: CliRunner, tmp_path: Path) -> None:
        spec = tmp_path / "people.json"
        spec.write_text(json.dumps({
            "swagger": "2.0",
            "definitions": {},
            "paths": {"/people": {"get": {"parameters": [
                {"name": "nick", "in": "query", "type": "string", "pattern": "^\\p{L}+$"}
            ]}}},
        }), encoding="utf-8")
        result = runner.invoke(app, ["--plain", "--no-color", "routes", str(spec)])
        assert result.exit_code == 7
        assert "invalid pattern" in result.output

    def test_unknown_driver_in_project_config(self, runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "specroute.json").write_text('{"driver": "hyper_schema"}', encoding="utf-8")
        result = runner.invoke(app, ["--plain", "--no-color", "routes", SPEC])
        assert result.exit_code == 2
        assert "Unknown driver 'hyper_schema'" in result.output

    def test_driver_flag_overrides_project_config(self, runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "specroute.json").write_text('{"driver": "hyper_schema"}', encoding="utf-8")
        result = runner.invoke(
            app, ["--plain", "--no-color", "routes", SPEC, "--driver", "open_api_2"]
        )
        assert result.exit_code == 0, result.output

    def test_unknown_driver_flag(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["--plain", "--no-color", "show", SPEC, "GET", "/api/pets", "--driver", "nope"]
        )
        assert result.exit_code == 2
        assert "Unknown driver 'nope'" in result.output


class TestMatchCommand:
    def test_match(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--json", "match", SPEC, "get", "/api/pets/42"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {
            "method": "GET",
            "href": "/api/pets/{id}",
            "path_params": {"id": "42"},
            "status_success": 200,
            "enc_type": "application/json",
            "media_type": "application/json",
        }

    def test_no_match(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--plain", "--no-color", "match", SPEC, "GET", "/api/owners"])
        assert result.exit_code == 4
        assert "No route matches GET /api/owners" in result.output

    def test_prefix_from_environment(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app,
            ["--json", "match", SPEC, "GET", "/v1/api/pets"],
            env={"SPECROUTE_PREFIX": "/v1"},
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["href"] == "/api/pets"

    def test_outside_prefix(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["--plain", "--no-color", "match", SPEC, "GET", "/api/pets", "--prefix", "/v1"]
        )
        assert result.exit_code == 4
        assert "outside prefix /v1" in result.output


class TestShowCommand:
    def test_show_resolves_refs(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--json", "show", SPEC, "POST", "/api/pets"])
        assert result.exit_code == 0, result.output
        shown = json.loads(result.stdout)
        assert shown["schema"] is None
        assert shown["schema_data"]["required"] == ["name"]
        assert shown["status_success"] == 201
        assert shown["target_schema"]["required"] == ["id", "name"]

    def test_show_header_schema(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--json", "show", SPEC, "post", "/api/pets/{id}/photos"])
        assert result.exit_code == 0, result.output
        shown = json.loads(result.stdout)
        assert list(shown["schema"]["properties"]) == ["id", "caption", "rating"]
        assert shown["header_schema"]["required"] == ["X-Request-Id"]
        assert shown["target_schema"] is None

    def test_show_unknown_operation(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--plain", "--no-color", "show", SPEC, "PUT", "/api/pets"])
        assert result.exit_code == 4
        assert "No PUT operation declared at /api/pets" in result.output


class TestValidateCommand:
    def test_valid_query(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["--json", "-q", "validate", SPEC, "GET", "/api/pets", "--query", "limit=10"]
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"href": "/api/pets", "params": {"limit": 10}}

    def test_repeated_query_values_become_a_list(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app,
            ["--json", "-q", "validate", SPEC, "GET", "/api/pets",
             "--query", "tags=cat", "--query", "tags=dog"],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["params"] == {"tags": ["cat", "dog"]}

    def test_success_message(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--plain", "--no-color", "validate", SPEC, "GET", "/api/pets/1"])
        assert result.exit_code == 0, result.output
        assert "Request is valid." in result.output

    def test_invalid_query(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app,
            ["--plain", "--no-color", "validate", SPEC, "GET", "/api/pets", "--query", "limit=0"],
        )
        assert result.exit_code == 8
        assert "Invalid request parameters" in result.output

    def test_valid_body(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app,
            ["--plain", "--no-color", "validate", SPEC, "POST", "/api/pets",
             "--body", '{"name": "Rex"}', "--content-type", "application/json"],
        )
        assert result.exit_code == 0, result.output

    def test_form_and_header(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app,
            ["--json", "-q", "validate", SPEC, "POST", "/api/pets/3/photos",
             "--form", "rating=5", "--header", "X-Request-Id=abc"],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["params"] == {"id": 3, "rating": 5}

    def test_invalid_response(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app,
            ["--plain", "--no-color", "validate", SPEC, "GET", "/api/pets/1",
             "--response-status", "200", "--response-body", '{"id": "x", "name": "Rex"}'],
        )
        assert result.exit_code == 8
        assert "Invalid response" in result.output

    def test_no_route(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--plain", "--no-color", "validate", SPEC, "PUT", "/api/pets"])
        assert result.exit_code == 4

    def test_malformed_pair(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["--plain", "--no-color", "validate", SPEC, "GET", "/api/pets", "--query", "limit"]
        )
        assert result.exit_code == 2
        assert "--query expects KEY=VALUE" in result.output

    def test_malformed_body(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["--plain", "--no-color", "validate", SPEC, "POST", "/api/pets", "--body", "{"]
        )
        assert result.exit_code == 2
        assert "--body is not valid JSON" in result.output
