"""Canonical Pydantic models shared across all storefront modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig` and :class:`ClientConfig`.

**Domain and state models** -- exchanged with the backend or exposed to
the presentation layer:
    :class:`Product`, :class:`ProductDraft` and :class:`ViewState`.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PRICE = 9.99
DEFAULT_PRICE_DRAFT = "9.99"
QUOTE_PLACEHOLDER = "—"
QUOTE_PENDING = "cargando..."
QUOTE_EMPTY = "(respuesta vacia)"


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP transport settings."""

    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class ClientConfig(BaseModel):
    """Connection settings for the storefront backend.

    ``api_base`` is the optional external base URL override. When it is
    unset the client talks to the same-origin relative path ``/api``,
    which is joined against ``origin`` because a process outside the
    browser has no page origin of its own.

    Example::

        ClientConfig(api_base="https://shop.example.com")
    """

    api_base: Optional[str] = Field(
        default=None, description="External base URL; /api is appended"
    )
    origin: str = Field(
        default="http://localhost:8080",
        description="Origin used to resolve the relative /api path",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)


# --- Domain ---


class Product(BaseModel):
    """A catalog entry as stored by the backend.

    The ``id`` is assigned by the client at creation time and identifies
    the product. Instances are never mutated in place; the controller only
    swaps whole lists.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    price: float


class ProductDraft(BaseModel):
    """Raw text typed into the create-product inputs."""

    name: str = ""
    price: str = DEFAULT_PRICE_DRAFT


# --- Presentation state ---


class ViewState(BaseModel):
    """Immutable snapshot of everything a presentation layer renders.

    ``list_ms`` and ``quote_ms`` are ``None`` until the corresponding
    operation has been measured once. Error strings are empty when the
    channel holds no error.
    """

    model_config = ConfigDict(frozen=True)

    items: list[Product] = Field(default_factory=list)
    loading: bool = False
    draft: ProductDraft = Field(default_factory=ProductDraft)
    quote: str = QUOTE_PLACEHOLDER
    product_error: str = ""
    quote_error: str = ""
    list_ms: Optional[float] = None
    quote_ms: Optional[float] = None
