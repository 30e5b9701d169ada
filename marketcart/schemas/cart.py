# marketcart/schemas/cart.py
import uuid
from datetime import datetime
from typing import Iterable

from pydantic import ConfigDict, Field

from marketcart.schemas.common import CamelModel
from marketcart.schemas.product import ProductSnapshot


class CartItemCreate(CamelModel):
    """
    Payload for adding to cart. Quantity defaults to 1.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(CamelModel):
    """
    Payload for setting the absolute quantity of a cart line.

    Zero or negative quantities are rejected; removal has its own route.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int = Field(gt=0)


class CartLine(CamelModel):
    """
    One enriched cart line. `product` is None when the product was
    deleted after it was added to the cart.
    """

    product_id: uuid.UUID
    quantity: int = Field(gt=0)
    added_at: datetime
    product: ProductSnapshot | None = None


def compute_totals(lines: Iterable[CartLine]) -> tuple[float, int]:
    """
    Return (total, item_count) for a set of lines.

    - total: sum of price * quantity over lines with a product, 2 decimals
    - item_count: sum of all quantities, including lines without a product
    """
    subtotal = 0.0
    item_count = 0
    for line in lines:
        item_count += line.quantity
        if line.product is not None:
            subtotal += line.product.price * line.quantity
    return round(subtotal, 2), item_count


class EnrichedCart(CamelModel):
    """
    Full cart view: lines joined with live product data, plus totals.

    Also used as the client's working copy; `user_id` is None for a
    local (guest) cart.
    """

    user_id: uuid.UUID | None = None
    items: list[CartLine] = []
    total: float = 0.0
    item_count: int = 0

    @classmethod
    def from_lines(
        cls,
        user_id: uuid.UUID | None,
        lines: list[CartLine],
    ) -> "EnrichedCart":
        total, item_count = compute_totals(lines)
        return cls(user_id=user_id, items=lines, total=total, item_count=item_count)

    def find(self, product_id: uuid.UUID) -> CartLine | None:
        for line in self.items:
            if line.product_id == product_id:
                return line
        return None


class CartPayload(CamelModel):
    cart: EnrichedCart
