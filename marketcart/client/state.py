# marketcart/client/state.py
import asyncio
import logging
import uuid
from typing import Awaitable, Callable

import httpx
from pydantic import ValidationError

from marketcart.client.api import MarketplaceApi
from marketcart.client.sources import CartSource, LocalCartSource, SourceKind, select_source
from marketcart.client.storage import KeyValueStorage
from marketcart.core.errors import CartError, MalformedPersistedStateError
from marketcart.schemas.cart import EnrichedCart

logger = logging.getLogger(__name__)

STORAGE_KEY = "cart"


class CartClientState:
    """
    Single source of truth for a client's cart view.

    Modes:
      - server: the api holds a token; every mutation round-trips and the
        returned cart replaces local state wholesale.
      - local: no token; a persisted guest cart is authoritative and totals
        are recomputed locally.

    Mutations are serialized with an asyncio.Lock, so a second call always
    starts from the result of the first. A failed mutation leaves `cart`
    untouched and re-raises. Every committed view is persisted under
    STORAGE_KEY so a restart can rehydrate before any network call.
    """

    def __init__(self, api: MarketplaceApi, storage: KeyValueStorage):
        self.api = api
        self.storage = storage
        self.source: CartSource = select_source(api)
        self.cart = EnrichedCart()
        self.is_loading = False
        self._lock = asyncio.Lock()

    # ----- read-only views -----

    @property
    def mode(self) -> SourceKind:
        return self.source.kind

    @property
    def total(self) -> float:
        return self.cart.total

    @property
    def item_count(self) -> int:
        return self.cart.item_count

    # ----- persistence -----

    def _commit(self, cart: EnrichedCart) -> EnrichedCart:
        self.cart = cart
        self.storage.set(STORAGE_KEY, cart.model_dump_json(by_alias=True))
        return cart

    @staticmethod
    def _parse_persisted(raw: str) -> EnrichedCart:
        try:
            return EnrichedCart.model_validate_json(raw)
        except ValidationError as exc:
            raise MalformedPersistedStateError() from exc

    def rehydrate(self) -> EnrichedCart:
        """
        Restore the last persisted view. A missing or unreadable blob
        resets to an empty cart, and so does a server cart cached by a
        signed-in session when no token is held.
        """
        raw = self.storage.get(STORAGE_KEY)
        if raw is None:
            return self._commit(EnrichedCart())
        try:
            cart = self._parse_persisted(raw)
        except MalformedPersistedStateError:
            logger.warning("Discarding unreadable persisted cart; starting empty")
            return self._commit(EnrichedCart())
        if self.mode == "local" and cart.user_id is not None:
            logger.info("Discarding cached cart of user %s for guest session", cart.user_id)
            return self._commit(EnrichedCart())
        self.cart = cart
        return cart

    async def load(self) -> EnrichedCart:
        """
        Rehydrate, then refresh from the server in server mode. If the
        server cannot be reached the cached view is kept.
        """
        self.rehydrate()
        if self.mode != "server":
            return self.cart
        try:
            return await self.sync_with_server()
        except (CartError, httpx.HTTPError) as exc:
            logger.warning("Failed to load cart from server, using cached cart: %s", exc)
            return self.cart

    async def set_token(self, token: str | None) -> EnrichedCart:
        """
        Switch session (login / logout): reselect the source and reload.
        """
        self.api.set_token(token)
        self.source = select_source(self.api)
        return await self.load()

    # ----- mutations -----

    async def _mutate(
        self,
        action: str,
        op: Callable[[EnrichedCart], Awaitable[EnrichedCart]],
    ) -> EnrichedCart:
        async with self._lock:
            self.is_loading = True
            try:
                updated = await op(self.cart)
            except (CartError, httpx.HTTPError) as exc:
                logger.error("Failed to %s: %s", action, exc)
                raise
            finally:
                self.is_loading = False
            return self._commit(updated)

    async def add_to_cart(self, product_id: uuid.UUID, quantity: int = 1) -> EnrichedCart:
        return await self._mutate(
            "add item to cart",
            lambda cart: self.source.add(cart, product_id, quantity),
        )

    async def update_quantity(self, product_id: uuid.UUID, quantity: int) -> EnrichedCart:
        """
        Set a line's quantity; zero or below removes the line instead.
        """
        if quantity <= 0:
            return await self.remove_from_cart(product_id)
        return await self._mutate(
            "update cart item",
            lambda cart: self.source.update(cart, product_id, quantity),
        )

    async def remove_from_cart(self, product_id: uuid.UUID) -> EnrichedCart:
        return await self._mutate(
            "remove item from cart",
            lambda cart: self.source.remove(cart, product_id),
        )

    async def clear_cart(self) -> EnrichedCart:
        return await self._mutate("clear cart", self.source.clear)

    async def sync_with_server(self) -> EnrichedCart:
        """
        Replace local state with the server cart. No-op for guests.
        """
        if isinstance(self.source, LocalCartSource):
            return self.cart
        return await self._mutate("sync cart with server", self.source.get)
