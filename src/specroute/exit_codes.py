"""Numeric process exit codes used by the ``specroute`` CLI.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specroute.exceptions.SpecrouteError` subclass.
Shell wrappers and CI scripts can inspect the exit code to tell a broken
spec apart from a request that simply failed validation.

Example::

    $ specroute match petstore.json GET /nowhere
    $ echo $?
    4   # EXIT_NOT_FOUND -- no route matched
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_NOT_FOUND = 4
"""No route matched the requested method and path."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API specification could not be loaded or compiled."""

EXIT_VALIDATION_FAILURE = 8
"""A request or response did not satisfy the compiled schemas."""
