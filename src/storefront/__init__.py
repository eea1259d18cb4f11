"""storefront -- instrumented client for the product catalog and quote-of-the-day API.

The package talks to a backend exposing ``/api/products`` (a cached catalog)
and ``/api/quotes`` (a proxied quote provider).  It measures the latency of
each read, turns every failure into a readable message and keeps the state
a front end needs in one controller object.

Typical use::

    async with StorefrontController(ClientConfig()) as controller:
        await controller.start()
        await controller.get_quote()
        state = controller.snapshot()

Modules:
    controller: View-state controller owning items, drafts, errors and timings.
    client: HTTP transport, product and quote clients, latency meter.
    models: Pydantic models shared across the package.
    config: API base resolution and XDG-aware configuration.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich support.
    app: Typer CLI.
"""

__version__ = "0.1.0"
