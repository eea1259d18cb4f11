"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~storefront.exceptions.StorefrontError` subclass.
Shell wrappers can inspect the exit code of the ``storefront`` command to
tell a missing product from an unreachable backend without parsing stderr.

Example::

    $ storefront products remove 42
    $ echo $?
    4   # EXIT_NOT_FOUND -- the backend answered 404
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_NOT_FOUND = 4
"""The requested resource was not found (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The backend returned a non-success HTTP status."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_RESPONSE_PARSE_ERROR = 7
"""The backend answered with a body that could not be parsed."""
