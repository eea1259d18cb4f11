"""Quote-of-the-day client."""

from __future__ import annotations

from storefront.client.async_client import AsyncClient
from storefront.models import QUOTE_EMPTY

QUOTES_PATH = "/quotes"


class QuoteClient:
    """Client for the proxied ``/quotes`` endpoint.

    The body is treated as opaque plain text.

    Args:
        client: An open :class:`AsyncClient`.
    """

    def __init__(self, client: AsyncClient) -> None:
        self._client = client

    async def get_quote(self) -> str:
        """Fetch the current quote.

        Returns:
            The raw response text, or ``"(respuesta vacia)"`` when the body
            is empty.

        Raises:
            ApiError: On a non-success status.
            ConnectionError_: On network failures.
        """
        response = await self._client.get(QUOTES_PATH, headers={"Accept": "text/plain"})
        return response.text or QUOTE_EMPTY
