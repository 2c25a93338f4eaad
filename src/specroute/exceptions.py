"""Exception hierarchy for specroute.

All exceptions inherit from :class:`SpecrouteError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specroute.exit_codes`.
The top-level error handler in :func:`specroute.app.main` catches
``SpecrouteError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Subclass hierarchy::

    SpecrouteError (exit 1)
    +-- InvalidUsageError                       (exit 2)
    +-- NotFoundError                           (exit 4)
    +-- SpecParseError                          (exit 7)
    |   +-- VersionMismatchError
    |   +-- MissingDefinitionsError
    |   +-- MissingParameterNameError
    |   +-- IncompatibleParameterLocationsError
    +-- ValidationFailedError                   (exit 8)
    |   +-- InvalidRequestError
    |   +-- InvalidResponseError
    +-- NotImplementedForFormatError            (exit 1)
    +-- ConfigError                             (exit 1)
"""

from specroute.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
    EXIT_VALIDATION_FAILURE,
)


class SpecrouteError(Exception):
    """Base exception for all specroute errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specroute.exit_codes`. The entry point catches
    this exception type and calls ``sys.exit(exc.exit_code)``.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(SpecrouteError):
    """Raised for invalid CLI arguments or unknown driver names."""

    exit_code = EXIT_INVALID_USAGE


class NotFoundError(SpecrouteError):
    """Raised by the CLI when no compiled route matches a request."""

    exit_code = EXIT_NOT_FOUND


class SpecParseError(SpecrouteError):
    """Raised when the API spec cannot be loaded or compiled."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class VersionMismatchError(SpecParseError):
    """Raised when the document's ``swagger`` marker is not the required version."""


class MissingDefinitionsError(SpecParseError):
    """Raised when the document has no ``definitions`` section."""


class MissingParameterNameError(SpecParseError):
    """Raised when a parameter declaration has no ``name``."""


class IncompatibleParameterLocationsError(SpecParseError):
    """Raised when a body parameter is declared next to form/query/path parameters."""


class ValidationFailedError(SpecrouteError):
    """Base class for request and response validation failures.

    Args:
        message: Summary of the failure.
        errors: Individual validation messages, in the order reported.
    """

    exit_code = EXIT_VALIDATION_FAILURE

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors: list[str] = errors or []


class InvalidRequestError(ValidationFailedError):
    """Raised when a request does not satisfy its link's request schemas."""


class InvalidResponseError(ValidationFailedError):
    """Raised when a response body does not satisfy its link's target schema."""


class NotImplementedForFormatError(SpecrouteError, NotImplementedError):
    """Raised by link accessors that have no meaning for the spec format."""


class ConfigError(SpecrouteError):
    """Raised for configuration problems (invalid JSON, bad environment values)."""

    exit_code = EXIT_GENERIC_FAILURE
