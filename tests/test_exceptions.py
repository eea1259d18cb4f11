"""Tests for the exception hierarchy and exit codes."""

from __future__ import annotations

import pytest

from storefront import exit_codes
from storefront.exceptions import (
    ApiError,
    ConfigError,
    ConnectionError_,
    NotFoundError,
    ResponseParseError,
    ServerError,
    StorefrontError,
)


class TestApiErrorMessage:
    def test_method_path_status_reason(self) -> None:
        exc = ApiError("GET", "/products", 500, "Internal")
        assert str(exc) == "GET /products -> 500 Internal"
        assert (exc.method, exc.path, exc.status_code, exc.reason) == (
            "GET",
            "/products",
            500,
            "Internal",
        )

    def test_body_appended(self) -> None:
        exc = ApiError("POST", "/products", 400, "Bad Request", body="price must be > 0")
        assert str(exc) == "POST /products -> 400 Bad Request. price must be > 0"

    def test_empty_body_not_appended(self) -> None:
        exc = ApiError("POST", "/products", 400, "Bad Request", body="")
        assert str(exc) == "POST /products -> 400 Bad Request"

    def test_missing_reason(self) -> None:
        assert str(ApiError("DELETE", "/products/7", 599)) == "DELETE /products/7 -> 599"

    def test_parse_error_message(self) -> None:
        exc = ResponseParseError("GET", "/products", 200, "OK", detail="Expecting value")
        assert str(exc) == "GET /products -> 200 OK: invalid response body (Expecting value)"


class TestExitCodes:
    @pytest.mark.parametrize(
        "exc, code",
        [
            (StorefrontError("x"), exit_codes.EXIT_GENERIC_FAILURE),
            (ConfigError("x"), exit_codes.EXIT_GENERIC_FAILURE),
            (ApiError("GET", "/q", 400), exit_codes.EXIT_SERVER_ERROR),
            (NotFoundError("GET", "/q", 404), exit_codes.EXIT_NOT_FOUND),
            (ServerError("GET", "/q", 500), exit_codes.EXIT_SERVER_ERROR),
            (ResponseParseError("GET", "/q", 200), exit_codes.EXIT_RESPONSE_PARSE_ERROR),
            (ConnectionError_("x"), exit_codes.EXIT_CONNECTION_ERROR),
        ],
    )
    def test_class_codes(self, exc: StorefrontError, code: int) -> None:
        assert exc.exit_code == code

    def test_override(self) -> None:
        assert StorefrontError("x", exit_code=42).exit_code == 42

    def test_hierarchy(self) -> None:
        assert issubclass(NotFoundError, ApiError)
        assert issubclass(ResponseParseError, ApiError)
        assert issubclass(ConnectionError_, StorefrontError)
        assert not issubclass(ConnectionError_, ApiError)
