"""Asynchronous HTTP transport for the storefront backend.

This module provides :class:`AsyncClient`, a thin wrapper around
:class:`httpx.AsyncClient` rooted at the resolved API base.  It adds
debug diagnostics and maps every failure onto the
:mod:`storefront.exceptions` hierarchy:

* non-2xx responses become :class:`~storefront.exceptions.ApiError`
  (or :class:`NotFoundError` / :class:`ServerError`),
* transport failures (DNS, refused connection, timeout) become
  :class:`~storefront.exceptions.ConnectionError_`.

Every request is sent exactly once.  There is no retry and no response
caching: the backend owns caching.

See Also:
    :mod:`storefront.client.products` and :mod:`storefront.client.quotes`
    for the resource clients built on top of this transport.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from storefront.config import resolve_api_base
from storefront.exceptions import ApiError, ConnectionError_, NotFoundError, ServerError
from storefront.models import ClientConfig
from storefront.output import get_output


class AsyncClient:
    """Asynchronous HTTP client for the storefront API.

    The API base is resolved once, at construction time, from
    ``config.api_base``.  A relative base (``/api``) is joined against
    ``config.origin``.  Must be used as an async context manager.

    Args:
        config: Connection settings (base override, origin, timeout).
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        async with AsyncClient(ClientConfig()) as client:
            response = await client.get("/products")
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self.api_base = resolve_api_base(self._config.api_base)

    @property
    def base_url(self) -> str:
        """Absolute URL every request path is appended to."""
        if self.api_base.startswith("/"):
            return f"{self._config.origin.rstrip('/')}{self.api_base}"
        return self.api_base

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> AsyncClient:
        request = self._config.request
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=request.timeout,
            verify=request.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public request methods
    # ------------------------------------------------------------------ #

    async def request(
        self,
        method: str,
        path: str,
        headers: Optional[dict[str, str]] = None,
        json_body: Optional[Any] = None,
        include_body_in_error: bool = False,
    ) -> httpx.Response:
        """Send one HTTP request and map failures to storefront exceptions.

        Args:
            method: HTTP method (GET, POST, DELETE).
            path: Path relative to the API base, e.g. ``/products/7``.
            headers: Extra request headers.
            json_body: JSON-serialisable body (sets Content-Type automatically).
            include_body_in_error: Attach the raw response text to the raised
                :class:`ApiError` on a non-success status.

        Returns:
            The successful :class:`httpx.Response`.

        Raises:
            NotFoundError: On 404.
            ServerError: On 5xx.
            ApiError: On any other non-2xx status.
            ConnectionError_: On network / timeout errors.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        output = get_output()
        output.debug(f"{method} {self.base_url}{path}")

        kwargs: dict[str, Any] = {"headers": headers or {}}
        if json_body is not None:
            kwargs["json"] = json_body

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            output.debug(f"{method} {path} failed: {exc!r}")
            raise ConnectionError_(
                f"{method} {path} -> connection failed: {str(exc) or type(exc).__name__}"
            ) from exc

        output.debug(f"{method} {path} -> {response.status_code} {response.reason_phrase}")
        self._map_response_error(response, method, path, include_body_in_error)
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a GET request; see :meth:`request`."""
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a POST request; see :meth:`request`."""
        return await self.request("POST", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        """Send a DELETE request; see :meth:`request`."""
        return await self.request("DELETE", path, **kwargs)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _map_response_error(
        response: httpx.Response,
        method: str,
        path: str,
        include_body: bool,
    ) -> None:
        """Raise a typed exception for non-2xx HTTP status codes."""
        if response.is_success:
            return

        status = response.status_code
        reason = response.reason_phrase or ""
        body = response.text if include_body else None

        if status == 404:
            raise NotFoundError(method, path, status, reason, body)
        if status >= 500:
            raise ServerError(method, path, status, reason, body)
        raise ApiError(method, path, status, reason, body)
