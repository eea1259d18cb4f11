"""HTTP client layer for storefront.

Classes:
    :class:`AsyncClient` -- transport rooted at the resolved API base,
    backed by :class:`httpx.AsyncClient`.
    :class:`ProductClient` -- list/get/create/delete on ``/products``.
    :class:`QuoteClient` -- plain-text read of ``/quotes``.
    :class:`LatencyMeter` -- records how long the last awaited call took.

Example::

    from storefront.client import AsyncClient, ProductClient

    async with AsyncClient(config) as client:
        products = await ProductClient(client).list()
"""

from storefront.client.async_client import AsyncClient
from storefront.client.products import ProductClient, ProductIdGenerator
from storefront.client.quotes import QuoteClient
from storefront.client.timing import LatencyMeter

__all__ = [
    "AsyncClient",
    "LatencyMeter",
    "ProductClient",
    "ProductIdGenerator",
    "QuoteClient",
]
