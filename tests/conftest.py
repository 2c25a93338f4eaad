"""Shared test fixtures for specroute.

Provides the Swagger 2.0 petstore document, a compiled schema, a router
over it, and isolation for the global output manager and config paths.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from specroute.drivers.open_api_2 import OpenAPI2Driver, Schema
from specroute.output import reset_output
from specroute.router import Router


FIXTURES_DIR = Path(__file__).parent / "fixtures"
PETSTORE_PATH = FIXTURES_DIR / "petstore_2.0.json"


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The manager caches references to sys.stdout/sys.stderr, which the CLI
    runner swaps out per invocation.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point config lookups at an empty temp directory and clear SPECROUTE_* vars."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.setattr("specroute.config._is_xdg_platform", lambda: True)
    for var in (
        "SPECROUTE_PREFIX",
        "SPECROUTE_COERCE_FORM_PARAMS",
        "SPECROUTE_PATH_PARAMS",
        "SPECROUTE_QUERY_PARAMS",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """A fresh copy of the raw petstore 2.0 document."""
    return json.loads(PETSTORE_PATH.read_text(encoding="utf-8"))


@pytest.fixture
def driver() -> OpenAPI2Driver:
    return OpenAPI2Driver()


@pytest.fixture
def petstore_schema(driver: OpenAPI2Driver, petstore_raw: dict[str, Any]) -> Schema:
    return driver.parse(petstore_raw)


@pytest.fixture
def router(petstore_schema: Schema) -> Router:
    return Router(petstore_schema)
