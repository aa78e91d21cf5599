"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~specslice.exceptions.SpecsliceError` subclass.
Shell wrappers can inspect the exit code to tell a bad document apart from a
typo in a tag name without parsing stderr.

Example::

    $ specslice extract petstore.json -t Pest
    $ echo $?
    4   # EXIT_NOT_FOUND -- no such tag in the document
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or an unsupported option value."""

EXIT_NOT_FOUND = 4
"""A requested tag, schema, or endpoint does not exist in the document."""

EXIT_SPEC_PARSE_ERROR = 7
"""The API description could not be parsed or failed boundary validation."""
