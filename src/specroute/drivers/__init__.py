"""Spec-format drivers and the registry used to look them up by name.

Typical usage::

    from specroute.drivers import load_driver

    driver = load_driver("open_api_2")
    schema = driver.parse(raw_spec)
"""

from __future__ import annotations

from typing import Optional

from specroute.drivers.base import Driver
from specroute.drivers.open_api_2 import OpenAPI2Driver
from specroute.exceptions import InvalidUsageError
from specroute.models import DriverConfig

_DRIVERS: dict[str, type[Driver]] = {
    "open_api_2": OpenAPI2Driver,
}


def load_driver(name: str, config: Optional[DriverConfig] = None) -> Driver:
    """Instantiate the driver registered under *name*.

    Raises:
        InvalidUsageError: If no driver has that name.
    """
    try:
        driver_class = _DRIVERS[name]
    except KeyError:
        known = ", ".join(sorted(_DRIVERS))
        raise InvalidUsageError(
            f"Unknown driver '{name}'. Known drivers: {known}"
        ) from None
    return driver_class(config)


__all__ = ["Driver", "OpenAPI2Driver", "load_driver"]
