# marketcart/services/cart_service.py
import logging
import threading
import uuid

from sqlmodel import Session

from marketcart.core.errors import InsufficientStockError, NotFoundError
from marketcart.repositories.cart_repo import CartRepository
from marketcart.schemas.cart import CartLine, EnrichedCart
from marketcart.services.product_service import ProductService

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence
      - enforce requested quantity <= remaining stock
      - join cart lines with live product data
      - return the whole recomputed cart after every mutation

    Mutations hold a process-wide lock, so the stock check and the write
    it guards never interleave with another mutation.
    """

    def __init__(self, cart_repo: CartRepository, product_service: ProductService):
        self.cart_repo = cart_repo
        self.product_service = product_service
        self._lock = threading.Lock()

    # ---- internal helpers ----

    def _require_product(self, session: Session, product_id: uuid.UUID):
        snapshot = self.product_service.find_snapshot(session, product_id)
        if snapshot is None:
            raise NotFoundError("Product not found")
        return snapshot

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: uuid.UUID) -> EnrichedCart:
        """
        Enrich every line with a fresh product snapshot.

        Lines whose product was deleted keep `product=None`: they still
        count toward item_count but add nothing to total.
        """
        lines = [
            CartLine(
                product_id=it.product_id,
                quantity=it.quantity,
                added_at=it.added_at,
                product=self.product_service.find_snapshot(session, it.product_id),
            )
            for it in self.cart_repo.list_for_user(session, user_id)
        ]
        return EnrichedCart.from_lines(user_id, lines)

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int = 1,
    ) -> EnrichedCart:
        """
        Add a product to the user's cart.

        Rules:
          - product must exist (404)
          - existing_quantity + quantity <= stock (400)
        """
        with self._lock:
            product = self._require_product(session, product_id)

            existing = self.cart_repo.get_item(session, user_id, product_id)
            current_quantity = existing.quantity if existing else 0

            if product.stock < current_quantity + quantity:
                logger.info(
                    "Rejected add of %d x %s for user %s: stock %d, in cart %d",
                    quantity, product_id, user_id, product.stock, current_quantity,
                )
                raise InsufficientStockError("Insufficient stock")

            self.cart_repo.add(session, user_id, product_id, quantity)

        return self.get_cart(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        quantity: int,
    ) -> EnrichedCart:
        """
        Set the absolute quantity of a line.

        The new quantity replaces the old one, so the stock check is
        against `quantity` alone.
        """
        with self._lock:
            product = self._require_product(session, product_id)

            if self.cart_repo.get_item(session, user_id, product_id) is None:
                raise NotFoundError("Cart item not found")

            if product.stock < quantity:
                raise InsufficientStockError("Insufficient stock")

            self.cart_repo.update(session, user_id, product_id, quantity)

        return self.get_cart(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> EnrichedCart:
        with self._lock:
            removed = self.cart_repo.remove(session, user_id, product_id)

        if removed is None:
            raise NotFoundError("Cart item not found")
        return self.get_cart(session, user_id)

    def clear_cart(self, session: Session, user_id: uuid.UUID) -> EnrichedCart:
        with self._lock:
            self.cart_repo.clear(session, user_id)
        return self.get_cart(session, user_id)
