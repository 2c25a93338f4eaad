"""Base class shared by spec-format drivers.

A driver turns one raw spec document into a compiled schema whose
``routes`` map an HTTP method to an ordered list of ``(matcher, link)``
pairs.  Drivers also publish the defaults the validator falls back to
when a router does not override them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from specroute.models import DriverConfig


class Driver(ABC):
    """Abstract spec-format driver.

    Args:
        config: Defaults recorded on every schema this driver compiles.
            ``None`` uses :class:`~specroute.models.DriverConfig` defaults.
    """

    def __init__(self, config: Optional[DriverConfig] = None) -> None:
        self.config = config or DriverConfig()

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry name of the driver (e.g. ``"open_api_2"``)."""

    @property
    @abstractmethod
    def schema_class(self) -> type:
        """The compiled schema type returned by :meth:`parse`."""

    @abstractmethod
    def parse(self, data: dict[str, Any]) -> Any:
        """Compile a raw spec document into a schema."""

    @property
    def default_coerce_form_params(self) -> bool:
        return self.config.coerce_form_params

    @property
    def default_path_params(self) -> bool:
        return self.config.path_params

    @property
    def default_query_params(self) -> bool:
        return self.config.query_params
