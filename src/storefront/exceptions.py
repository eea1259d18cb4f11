"""Exception hierarchy for storefront.

All exceptions inherit from :class:`StorefrontError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`storefront.exit_codes`.
The controller flows catch every failure and turn it into a channel-scoped
error string; the CLI entry point catches ``StorefrontError`` raised outside
a flow (bad configuration, for instance) and exits with the matching code.

Subclass hierarchy::

    StorefrontError (exit 1)
    +-- ConfigError             (exit 1)
    +-- ApiError                (exit 5)
    |   +-- NotFoundError       (exit 4)
    |   +-- ServerError         (exit 5)
    |   +-- ResponseParseError  (exit 7)
    +-- ConnectionError_        (exit 6)
"""

from __future__ import annotations

from typing import Optional

from storefront.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_NOT_FOUND,
    EXIT_RESPONSE_PARSE_ERROR,
    EXIT_SERVER_ERROR,
)


class StorefrontError(Exception):
    """Base exception for all storefront errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigError(StorefrontError):
    """Raised for configuration problems (invalid JSON, unreadable config file)."""

    exit_code = EXIT_GENERIC_FAILURE


class ApiError(StorefrontError):
    """Raised when the backend answers with a non-success HTTP status.

    The message reads ``"<METHOD> <path> -> <status> <reason>"`` where
    *path* is relative to the API base (``/products``, ``/products/7``,
    ``/quotes``).  When *body* is given and non-empty it is appended after
    a period so that server-side diagnostics reach the user.

    Args:
        method: HTTP method of the failed request.
        path: Request path relative to the API base.
        status_code: HTTP status code of the response.
        reason: HTTP reason phrase (status text).
        body: Raw response text, kept only for operations that report it.
    """

    exit_code = EXIT_SERVER_ERROR

    def __init__(
        self,
        method: str,
        path: str,
        status_code: int,
        reason: str = "",
        body: Optional[str] = None,
    ) -> None:
        self.method = method
        self.path = path
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        message = f"{self.method} {self.path} -> {self.status_code} {self.reason}".rstrip()
        if self.body:
            message = f"{message}. {self.body}"
        return message


class NotFoundError(ApiError):
    """Raised when the backend returns HTTP 404."""

    exit_code = EXIT_NOT_FOUND


class ServerError(ApiError):
    """Raised when the backend returns an HTTP 5xx server error."""

    exit_code = EXIT_SERVER_ERROR


class ResponseParseError(ApiError):
    """Raised when a success response carries a body that does not parse.

    Args:
        detail: Parser message describing what was wrong with the body.
    """

    exit_code = EXIT_RESPONSE_PARSE_ERROR

    def __init__(
        self,
        method: str,
        path: str,
        status_code: int,
        reason: str = "",
        detail: str = "",
    ) -> None:
        self.detail = detail
        super().__init__(method, path, status_code, reason)

    def _build_message(self) -> str:
        message = f"{self.method} {self.path} -> {self.status_code} {self.reason}".rstrip()
        message = f"{message}: invalid response body"
        if self.detail:
            message = f"{message} ({self.detail})"
        return message


class ConnectionError_(StorefrontError):
    """Raised on network-level failures (timeout, DNS resolution, connection refused).

    Named with a trailing underscore to avoid shadowing the built-in
    ``ConnectionError``.
    """

    exit_code = EXIT_CONNECTION_ERROR
