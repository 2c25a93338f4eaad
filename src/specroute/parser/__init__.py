"""Spec document I/O -- load raw documents and resolve ``$ref`` pointers.

Typical usage::

    from specroute.parser import load_spec

    raw = load_spec("petstore.yaml")
    schema = OpenAPI2Driver().parse(raw)

Sub-modules:

* :mod:`~specroute.parser.loader` -- I/O layer (URL, file, stdin) plus
  JSON/YAML format detection.
* :mod:`~specroute.parser.resolver` -- Recursive ``$ref`` resolution with
  circular-reference detection.
"""

from specroute.parser.loader import load_spec
from specroute.parser.resolver import resolve_refs

__all__ = ["load_spec", "resolve_refs"]
