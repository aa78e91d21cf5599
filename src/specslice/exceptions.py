"""Exception hierarchy for specslice.

All exceptions inherit from :class:`SpecsliceError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`specslice.exit_codes`.
The top-level error handler in :func:`specslice.app.main` catches
``SpecsliceError`` and exits with the appropriate code, while unexpected
exceptions produce a crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

The resolution core never raises for dangling references or reference
cycles; those are handled structurally. Errors are reserved for the
boundary (unreadable or structurally invalid documents) and for caller
contract violations such as an unknown DTO language.

Subclass hierarchy::

    SpecsliceError (exit 1)
    +-- InvalidUsageError         (exit 2)
    |   +-- UnsupportedLanguageError
    +-- NotFoundError             (exit 4)
    +-- SpecParseError            (exit 7)
    +-- ConfigError               (exit 1)
"""

from specslice.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
)


class SpecsliceError(Exception):
    """Base exception for all specslice errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`specslice.exit_codes`. The entry point catches
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


class InvalidUsageError(SpecsliceError):
    """Raised for invalid CLI arguments or caller contract violations."""

    exit_code = EXIT_INVALID_USAGE


class UnsupportedLanguageError(InvalidUsageError):
    """Raised when a DTO target language outside the supported set is requested."""

    def __init__(self, language: str, supported: list[str]):
        super().__init__(
            f"Unsupported DTO language: {language!r}. "
            f"Choose one of: {', '.join(supported)}"
        )
        self.language = language


class NotFoundError(SpecsliceError):
    """Raised when a requested tag, schema, or endpoint is not in the document."""

    exit_code = EXIT_NOT_FOUND


class SpecParseError(SpecsliceError):
    """Raised when the API description cannot be loaded or fails boundary validation."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class ConfigError(SpecsliceError):
    """Raised for configuration problems (invalid JSON, unknown keys, bad values)."""

    exit_code = EXIT_GENERIC_FAILURE
