"""Product catalog client: list, fetch, create and delete products.

All paths are relative to the API base held by
:class:`~storefront.client.async_client.AsyncClient`.  Error messages
carry the method, the relative path, the status code and the reason
phrase, e.g. ``"GET /products -> 500 Internal Server Error"``.
"""

from __future__ import annotations

import math
import time
from typing import Callable, Optional

from pydantic import TypeAdapter

from storefront.client.async_client import AsyncClient
from storefront.exceptions import ResponseParseError
from storefront.models import DEFAULT_PRICE, Product, ProductDraft

PRODUCTS_PATH = "/products"

_PRODUCT_LIST = TypeAdapter(list[Product])


def parse_price(text: str) -> float:
    """Coerce the price draft the way a browser coerces a numeric input.

    Surrounding whitespace is ignored and blank input counts as ``0``.
    Decimal and exponent notation are accepted, as are ``0x``/``0o``/``0b``
    integer literals. Digit separators (``_``), non-numeric text and
    non-finite values (``inf``, ``nan``) fall back to :data:`DEFAULT_PRICE`.
    """
    stripped = text.strip()
    if not stripped:
        return 0.0
    if "_" in stripped:
        return DEFAULT_PRICE
    if stripped[:2].lower() in ("0x", "0o", "0b"):
        try:
            return float(int(stripped, 0))
        except ValueError:
            return DEFAULT_PRICE
    try:
        value = float(stripped)
    except ValueError:
        return DEFAULT_PRICE
    if not math.isfinite(value):
        return DEFAULT_PRICE
    return value


def build_product(draft: ProductDraft, product_id: int) -> Product:
    """Build the product to submit from the raw draft inputs.

    A blank name becomes ``"Producto <id>"``.
    """
    name = draft.name.strip() or f"Producto {product_id}"
    return Product(id=product_id, name=name, price=parse_price(draft.price))


class ProductIdGenerator:
    """Hands out product ids from the current time in epoch milliseconds.

    Successive ids are strictly increasing: when the clock has not moved
    since the previous call (or went backwards), the previous id plus one is
    returned instead.

    Args:
        clock: Returns the current time in seconds; defaults to
            :func:`time.time`.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock or time.time
        self._last: Optional[int] = None

    def next_id(self) -> int:
        candidate = int(self._clock() * 1000)
        if self._last is not None and candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate


class ProductClient:
    """Client for the ``/products`` resource.

    Every operation sends exactly one request.

    Args:
        client: An open :class:`AsyncClient`.
    """

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def list(self) -> list[Product]:
        """Fetch every product, in the order the backend returns them.

        Raises:
            ApiError: On a non-success status.
            ResponseParseError: When the body is not a JSON list of products.
            ConnectionError_: On network failures.
        """
        response = await self._client.get(PRODUCTS_PATH)
        try:
            return _PRODUCT_LIST.validate_python(response.json())
        except ValueError as exc:
            raise ResponseParseError(
                "GET",
                PRODUCTS_PATH,
                response.status_code,
                response.reason_phrase,
                detail=_short_detail(exc),
            ) from exc

    async def get(self, product_id: int) -> Product:
        """Fetch a single product by id."""
        path = f"{PRODUCTS_PATH}/{product_id}"
        response = await self._client.get(path)
        try:
            return Product.model_validate(response.json())
        except ValueError as exc:
            raise ResponseParseError(
                "GET",
                path,
                response.status_code,
                response.reason_phrase,
                detail=_short_detail(exc),
            ) from exc

    async def create(self, product: Product) -> Product:
        """Submit *product* as JSON ``{id, name, price}``.

        The response body is ignored on success.  On failure the raised
        :class:`ApiError` carries the raw response text in its message.
        """
        await self._client.post(
            PRODUCTS_PATH,
            json_body=product.model_dump(mode="json"),
            include_body_in_error=True,
        )
        return product

    async def delete(self, product_id: int) -> None:
        """Delete the product identified by *product_id*."""
        await self._client.delete(f"{PRODUCTS_PATH}/{product_id}")


def _short_detail(exc: Exception) -> str:
    """First line of a parser error, enough to tell what went wrong."""
    return str(exc).splitlines()[0] if str(exc) else type(exc).__name__
