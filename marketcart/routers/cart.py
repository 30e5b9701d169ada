# marketcart/routers/cart.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from marketcart.core.auth import require_auth
from marketcart.database import get_session
from marketcart.models.user import User
from marketcart.repositories.cart_repo import CartRepository
from marketcart.repositories.product_repo import ProductRepository
from marketcart.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartPayload,
    EnrichedCart,
)
from marketcart.schemas.common import ApiResponse
from marketcart.services.cart_service import CartService
from marketcart.services.product_service import ProductService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_service = ProductService(ProductRepository())
service = CartService(cart_repo, product_service)

CartResponse = ApiResponse[CartPayload]


def _ok(cart: EnrichedCart, message: str) -> CartResponse:
    return CartResponse(success=True, message=message, data=CartPayload(cart=cart))


@router.get("", response_model=CartResponse)
def get_my_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Get the current user's enriched cart.
    """
    return _ok(service.get_cart(session, current_user.id), "Cart retrieved")


@router.post("", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
def add_to_cart(
    payload: CartItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add a product to the current user's cart.

    Returns the whole updated cart.
    """
    cart = service.add_to_cart(
        session, current_user.id, payload.product_id, payload.quantity
    )
    return _ok(cart, "Item added to cart")


@router.put("/{product_id}", response_model=CartResponse)
def update_cart_item(
    product_id: uuid.UUID,
    payload: CartItemUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Set the quantity of a product already in the cart.
    """
    cart = service.update_quantity(
        session=session,
        user_id=current_user.id,
        product_id=product_id,
        quantity=payload.quantity,
    )
    return _ok(cart, "Cart item updated")


@router.delete("/{product_id}", response_model=CartResponse)
def remove_cart_item(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return _ok(
        service.remove_item(session, current_user.id, product_id),
        "Item removed from cart",
    )


@router.delete("", response_model=CartResponse)
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Clear the entire cart. Always succeeds.
    """
    return _ok(service.clear_cart(session, current_user.id), "Cart cleared")
