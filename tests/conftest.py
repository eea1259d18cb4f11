"""Shared test fixtures for storefront.

Provides an in-memory fake of the backend served through
:class:`httpx.MockTransport`, config isolation, and output management.
These fixtures are automatically discovered by pytest.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from storefront.models import ClientConfig
from storefront.output import reset_output

ORIGIN = "http://backend.test"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time, which go stale once a CliRunner invocation ends.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at tmp_path, clear STOREFRONT_* vars and chdir there."""
    monkeypatch.setattr("storefront.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.delenv("STOREFRONT_API_BASE", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Fake backend
# ---------------------------------------------------------------------------


Handler = Callable[[httpx.Request], Any]


class FakeBackend:
    """In-memory stand-in for the catalog + quote backend.

    Products are kept in insertion order. ``overrides`` maps
    ``(METHOD, path)`` (path relative to ``/api``) to a handler that
    replaces the default behaviour for that route; it may return an
    :class:`httpx.Response` or a coroutine producing one.
    """

    def __init__(self) -> None:
        self.products: dict[int, dict[str, Any]] = {}
        self.quote = "La simplicidad es la maxima sofisticacion. - Leonardo da Vinci"
        self.requests: list[httpx.Request] = []
        self.overrides: dict[tuple[str, str], Handler] = {}

    def add(self, id: int, name: str, price: float) -> None:
        self.products[id] = {"id": id, "name": name, "price": price}

    def override(self, method: str, path: str, handler: Handler) -> None:
        self.overrides[(method, path)] = handler

    def respond(self, method: str, path: str, status_code: int, **kwargs: Any) -> None:
        """Make *method path* always answer with the given status and body."""
        self.override(method, path, lambda request: httpx.Response(status_code, **kwargs))

    def requests_to(self, method: str, path: str) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path == f"/api{path}"
        ]

    def handler(self, request: httpx.Request) -> Any:
        self.requests.append(request)
        path = request.url.path
        assert path.startswith("/api"), path
        path = path[len("/api"):]

        override = self.overrides.get((request.method, path))
        if override is not None:
            return override(request)

        if path == "/products" and request.method == "GET":
            return httpx.Response(200, json=list(self.products.values()))
        if path == "/products" and request.method == "POST":
            body = json.loads(request.content)
            self.products[body["id"]] = body
            return httpx.Response(200, json=body)
        if path.startswith("/products/"):
            product_id = int(path.rsplit("/", 1)[1])
            if request.method == "GET":
                if product_id not in self.products:
                    return httpx.Response(404)
                return httpx.Response(200, json=self.products[product_id])
            if request.method == "DELETE":
                self.products.pop(product_id, None)
                return httpx.Response(200)
        if path == "/quotes" and request.method == "GET":
            return httpx.Response(200, text=self.quote)
        return httpx.Response(404)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def client_config() -> ClientConfig:
    """Config with no base override, resolved against the fake origin."""
    return ClientConfig(origin=ORIGIN)


@pytest.fixture
def make_client(
    backend: FakeBackend, client_config: ClientConfig
) -> Callable[..., Any]:
    """Factory for AsyncClient instances wired to the fake backend."""
    from storefront.client import AsyncClient

    def _make(config: Optional[ClientConfig] = None) -> AsyncClient:
        return AsyncClient(config or client_config, transport=backend.transport())

    return _make
