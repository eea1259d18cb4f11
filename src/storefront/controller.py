"""View-state controller: owns all mutable UI state and the flows that change it.

A presentation layer (the :mod:`storefront.app` CLI, or any other front
end) constructs one :class:`StorefrontController`, calls its flow methods
(:meth:`~StorefrontController.load`, :meth:`~StorefrontController.add`,
:meth:`~StorefrontController.remove`, :meth:`~StorefrontController.get_quote`)
and renders :meth:`~StorefrontController.snapshot` or subscribes to
changes.

Flows run on one asyncio event loop.  Each suspends at its HTTP call and
writes its slice of state when the call settles.  Overlapping loads are
not fenced: whichever settles last wins.  No flow lets an exception
escape; failures land in the product or quote error channel.
"""

from __future__ import annotations

from typing import Callable, Optional

import httpx

from storefront.client.async_client import AsyncClient
from storefront.client.products import ProductClient, ProductIdGenerator, build_product
from storefront.client.quotes import QuoteClient
from storefront.client.timing import LatencyMeter
from storefront.models import (
    QUOTE_PENDING,
    QUOTE_PLACEHOLDER,
    ClientConfig,
    Product,
    ProductDraft,
    ViewState,
)
from storefront.output import debug

Listener = Callable[[ViewState], None]


class StorefrontController:
    """Orchestrates the product and quote flows for one front end.

    Must be used as an async context manager; the underlying HTTP client
    is opened on enter and closed on exit.

    Args:
        config: Connection settings.  The API base is resolved once from it.
        transport: Optional httpx transport (tests use
            :class:`httpx.MockTransport`).
        id_generator: Source of ids for new products.

    Example::

        async with StorefrontController(config) as controller:
            await controller.start()
            print(controller.snapshot().items)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        id_generator: Optional[ProductIdGenerator] = None,
    ) -> None:
        self._http = AsyncClient(config, transport=transport)
        self._products = ProductClient(self._http)
        self._quotes = QuoteClient(self._http)
        self._ids = id_generator or ProductIdGenerator()
        self._list_meter = LatencyMeter()
        self._quote_meter = LatencyMeter()
        self._listeners: list[Listener] = []
        self._started = False

        self.items: list[Product] = []
        self.loading = False
        self.draft = ProductDraft()
        self.quote = QUOTE_PLACEHOLDER
        self.product_error = ""
        self.quote_error = ""

    async def __aenter__(self) -> StorefrontController:
        await self._http.__aenter__()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self._http.__aexit__(*args)

    @property
    def api_base(self) -> str:
        return self._http.api_base

    @property
    def list_ms(self) -> Optional[float]:
        """Duration of the last product list fetch in milliseconds."""
        return self._list_meter.ms

    @property
    def quote_ms(self) -> Optional[float]:
        """Duration of the last quote fetch in milliseconds."""
        return self._quote_meter.ms

    # ------------------------------------------------------------------ #
    # State surface
    # ------------------------------------------------------------------ #

    def snapshot(self) -> ViewState:
        """Return an immutable copy of the current state."""
        return ViewState(
            items=list(self.items),
            loading=self.loading,
            draft=self.draft.model_copy(),
            quote=self.quote,
            product_error=self.product_error,
            quote_error=self.quote_error,
            list_ms=self.list_ms,
            quote_ms=self.quote_ms,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with a fresh snapshot after every state change.

        Returns:
            A function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_draft(self, name: Optional[str] = None, price: Optional[str] = None) -> None:
        """Update the create-product inputs."""
        self.draft = ProductDraft(
            name=self.draft.name if name is None else name,
            price=self.draft.price if price is None else price,
        )
        self._notify()

    # ------------------------------------------------------------------ #
    # Flows
    # ------------------------------------------------------------------ #

    async def start(self) -> None:
        """Run the initial load.  Later calls do nothing."""
        if self._started:
            return
        self._started = True
        await self.load()

    async def load(self) -> None:
        """Fetch the product list and replace :attr:`items` on success.

        On failure the previous items are kept and :attr:`product_error`
        holds the message.
        """
        self.product_error = ""
        self.loading = True
        self._notify()
        try:
            items = await self._list_meter.measure(self._products.list)
        except Exception as exc:
            self.product_error = _error_message(exc)
            debug(f"Product load failed: {self.product_error}")
        else:
            self.items = items
        finally:
            self.loading = False
            self._notify()

    async def refresh(self) -> bool:
        """User-triggered load; ignored while a load is already running.

        Returns:
            ``True`` if a load was performed.
        """
        if self.loading:
            debug("Refresh ignored: a product load is already in flight")
            return False
        await self.load()
        return True

    async def add(self) -> Optional[Product]:
        """Create a product from the current draft, then reload the list.

        Returns:
            The submitted product, or ``None`` if the backend rejected it.
            On failure the draft is left untouched.
        """
        self.product_error = ""
        self._notify()
        product = build_product(self.draft, self._ids.next_id())
        try:
            await self._products.create(product)
        except Exception as exc:
            self.product_error = _error_message(exc)
            debug(f"Product create failed: {self.product_error}")
            self._notify()
            return None

        self.draft = ProductDraft()
        self._notify()
        await self.load()
        return product

    async def remove(self, product_id: int) -> bool:
        """Delete a product, then reload the list.

        Returns:
            ``True`` if the backend accepted the deletion.
        """
        self.product_error = ""
        self._notify()
        try:
            await self._products.delete(product_id)
        except Exception as exc:
            self.product_error = _error_message(exc)
            debug(f"Product delete failed: {self.product_error}")
            self._notify()
            return False

        await self.load()
        return True

    async def get_quote(self) -> str:
        """Fetch the quote of the day into :attr:`quote`.

        On failure :attr:`quote` goes back to the placeholder and
        :attr:`quote_error` holds the message.

        Returns:
            The resulting value of :attr:`quote`.
        """
        self.quote_error = ""
        self.quote = QUOTE_PENDING
        self._notify()
        try:
            self.quote = await self._quote_meter.measure(self._quotes.get_quote)
        except Exception as exc:
            self.quote = QUOTE_PLACEHOLDER
            self.quote_error = _error_message(exc)
            debug(f"Quote fetch failed: {self.quote_error}")
        self._notify()
        return self.quote

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _notify(self) -> None:
        if not self._listeners:
            return
        state = self.snapshot()
        for listener in list(self._listeners):
            listener(state)


def _error_message(exc: Exception) -> str:
    return str(exc) or type(exc).__name__
