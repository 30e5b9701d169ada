# marketcart/client/sources.py
import uuid
from datetime import datetime, timezone
from typing import Literal, Protocol

from marketcart.client.api import MarketplaceApi
from marketcart.core.errors import InsufficientStockError, NotFoundError
from marketcart.schemas.cart import CartLine, EnrichedCart

SourceKind = Literal["server", "local"]


class CartSource(Protocol):
    """
    Where cart mutations are applied.

    Every operation receives the current view and returns the complete
    next view; it never mutates the view it was given.
    """

    kind: SourceKind

    async def get(self, cart: EnrichedCart) -> EnrichedCart: ...

    async def add(self, cart: EnrichedCart, product_id: uuid.UUID, quantity: int) -> EnrichedCart: ...

    async def update(self, cart: EnrichedCart, product_id: uuid.UUID, quantity: int) -> EnrichedCart: ...

    async def remove(self, cart: EnrichedCart, product_id: uuid.UUID) -> EnrichedCart: ...

    async def clear(self, cart: EnrichedCart) -> EnrichedCart: ...


class ServerCartSource:
    """Authenticated session: the server cart is authoritative."""

    kind: SourceKind = "server"

    def __init__(self, api: MarketplaceApi):
        self.api = api

    async def get(self, cart: EnrichedCart) -> EnrichedCart:
        return await self.api.get_cart()

    async def add(self, cart: EnrichedCart, product_id: uuid.UUID, quantity: int) -> EnrichedCart:
        return await self.api.add_item(product_id, quantity)

    async def update(self, cart: EnrichedCart, product_id: uuid.UUID, quantity: int) -> EnrichedCart:
        return await self.api.update_item(product_id, quantity)

    async def remove(self, cart: EnrichedCart, product_id: uuid.UUID) -> EnrichedCart:
        return await self.api.remove_item(product_id)

    async def clear(self, cart: EnrichedCart) -> EnrichedCart:
        return await self.api.clear_cart()


class LocalCartSource:
    """
    Guest session: the locally persisted cart is authoritative.

    Product snapshots are fetched fresh before an add or update, and the
    same existence and stock rules as the server are applied.
    """

    kind: SourceKind = "local"

    def __init__(self, api: MarketplaceApi):
        self.api = api

    async def get(self, cart: EnrichedCart) -> EnrichedCart:
        return cart

    async def add(self, cart: EnrichedCart, product_id: uuid.UUID, quantity: int) -> EnrichedCart:
        product = await self.api.get_product(product_id)

        existing = cart.find(product_id)
        current_quantity = existing.quantity if existing else 0
        if product.stock < current_quantity + quantity:
            raise InsufficientStockError("Insufficient stock")

        if existing:
            lines = [
                line.model_copy(update={"quantity": line.quantity + quantity, "product": product})
                if line.product_id == product_id
                else line
                for line in cart.items
            ]
        else:
            lines = [
                *cart.items,
                CartLine(
                    product_id=product_id,
                    quantity=quantity,
                    added_at=datetime.now(timezone.utc),
                    product=product,
                ),
            ]
        return EnrichedCart.from_lines(cart.user_id, lines)

    async def update(self, cart: EnrichedCart, product_id: uuid.UUID, quantity: int) -> EnrichedCart:
        if cart.find(product_id) is None:
            raise NotFoundError("Cart item not found")

        product = await self.api.get_product(product_id)
        if product.stock < quantity:
            raise InsufficientStockError("Insufficient stock")

        lines = [
            line.model_copy(update={"quantity": quantity, "product": product})
            if line.product_id == product_id
            else line
            for line in cart.items
        ]
        return EnrichedCart.from_lines(cart.user_id, lines)

    async def remove(self, cart: EnrichedCart, product_id: uuid.UUID) -> EnrichedCart:
        if cart.find(product_id) is None:
            raise NotFoundError("Cart item not found")
        lines = [line for line in cart.items if line.product_id != product_id]
        return EnrichedCart.from_lines(cart.user_id, lines)

    async def clear(self, cart: EnrichedCart) -> EnrichedCart:
        return EnrichedCart(user_id=cart.user_id)


def select_source(api: MarketplaceApi) -> CartSource:
    """Pick the authoritative source for the api's current session."""
    if api.is_authenticated:
        return ServerCartSource(api)
    return LocalCartSource(api)
