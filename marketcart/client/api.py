# marketcart/client/api.py
"""Async HTTP client for the marketplace cart API."""

import logging
import uuid
from typing import Any

import httpx

from marketcart.core.config import get_settings
from marketcart.core.errors import CartError, error_for_status
from marketcart.schemas.cart import EnrichedCart
from marketcart.schemas.product import ProductSnapshot

logger = logging.getLogger(__name__)


class MarketplaceApi:
    """
    Thin wrapper over httpx.AsyncClient.

    - Attaches the bearer token when one is set.
    - Unwraps the `{success, message, data}` envelope.
    - Turns error envelopes into the cart exception classes.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: API root including the version prefix,
                e.g. "http://localhost:8000/api/v1"
            token: bearer token for an authenticated session, or None
            timeout: per-request network timeout in seconds
            transport: optional httpx transport (ASGITransport in tests)
        """
        self.token = token
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def from_settings(cls, token: str | None = None) -> "MarketplaceApi":
        settings = get_settings()
        return cls(settings.CART_API_URL, token=token, timeout=settings.CART_API_TIMEOUT)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def set_token(self, token: str | None) -> None:
        self.token = token

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "MarketplaceApi":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ----- transport -----

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> Any:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        response = await self.client.request(method, path, json=json, headers=headers)

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_error or not body.get("success", False):
            message = body.get("message") or response.reason_phrase
            logger.warning("%s %s failed (%d): %s", method, path, response.status_code, message)
            if response.is_error:
                raise error_for_status(response.status_code, message)
            raise CartError(message, status_code=response.status_code)

        return body.get("data")

    # ----- cart -----

    async def get_cart(self) -> EnrichedCart:
        data = await self._request("GET", "cart")
        return EnrichedCart.model_validate(data["cart"])

    async def add_item(self, product_id: uuid.UUID, quantity: int = 1) -> EnrichedCart:
        data = await self._request(
            "POST", "cart", json={"productId": str(product_id), "quantity": quantity}
        )
        return EnrichedCart.model_validate(data["cart"])

    async def update_item(self, product_id: uuid.UUID, quantity: int) -> EnrichedCart:
        data = await self._request("PUT", f"cart/{product_id}", json={"quantity": quantity})
        return EnrichedCart.model_validate(data["cart"])

    async def remove_item(self, product_id: uuid.UUID) -> EnrichedCart:
        data = await self._request("DELETE", f"cart/{product_id}")
        return EnrichedCart.model_validate(data["cart"])

    async def clear_cart(self) -> EnrichedCart:
        data = await self._request("DELETE", "cart")
        return EnrichedCart.model_validate(data["cart"])

    # ----- products -----

    async def get_product(self, product_id: uuid.UUID) -> ProductSnapshot:
        data = await self._request("GET", f"products/{product_id}")
        return ProductSnapshot.model_validate(data)
