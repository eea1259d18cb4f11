"""Tests for the quote client."""

from __future__ import annotations

import httpx
import pytest

from storefront.client.quotes import QuoteClient
from storefront.exceptions import NotFoundError, ServerError

pytestmark = pytest.mark.asyncio


async def test_returns_text_and_asks_for_plain_text(backend, make_client) -> None:
    async with make_client() as client:
        quote = await QuoteClient(client).get_quote()
    assert quote == backend.quote
    (request,) = backend.requests_to("GET", "/quotes")
    assert request.headers["accept"] == "text/plain"


async def test_body_is_not_parsed(backend, make_client) -> None:
    backend.respond("GET", "/quotes", 200, text='{"content": "raw"}')
    async with make_client() as client:
        assert await QuoteClient(client).get_quote() == '{"content": "raw"}'


async def test_empty_body_falls_back(backend, make_client) -> None:
    backend.respond("GET", "/quotes", 200, text="")
    async with make_client() as client:
        assert await QuoteClient(client).get_quote() == "(respuesta vacia)"


async def test_not_found(backend, make_client) -> None:
    backend.respond("GET", "/quotes", 404)
    async with make_client() as client:
        with pytest.raises(NotFoundError) as exc_info:
            await QuoteClient(client).get_quote()
    assert str(exc_info.value) == "GET /quotes -> 404 Not Found"


async def test_server_error_body_not_included(backend, make_client) -> None:
    backend.override(
        "GET", "/quotes", lambda request: httpx.Response(502, text="upstream down")
    )
    async with make_client() as client:
        with pytest.raises(ServerError) as exc_info:
            await QuoteClient(client).get_quote()
    assert "upstream down" not in str(exc_info.value)
