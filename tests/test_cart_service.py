"""Cart enrichment: existence and stock rules, joins and totals."""
import uuid

import pytest

from marketcart.core.config import get_settings
from marketcart.core.errors import InsufficientStockError, NotFoundError
from marketcart.models.product import Product


def test_stock_five_scenario(session, cart_service, make_product, user_id):
    product = make_product(price=12.5, stock=5)

    cart = cart_service.add_to_cart(session, user_id, product.id, 3)
    assert cart.total == 37.5
    assert cart.item_count == 3

    with pytest.raises(InsufficientStockError):
        cart_service.add_to_cart(session, user_id, product.id, 3)

    cart = cart_service.update_quantity(session, user_id, product.id, 5)
    assert cart.items[0].quantity == 5

    with pytest.raises(InsufficientStockError):
        cart_service.update_quantity(session, user_id, product.id, 6)

    assert cart_service.get_cart(session, user_id).items[0].quantity == 5


@pytest.mark.parametrize(
    "stock, in_cart, requested, ok",
    [
        (5, 0, 5, True),
        (5, 0, 6, False),
        (5, 2, 3, True),
        (5, 2, 4, False),
        (0, 0, 1, False),
    ],
)
def test_add_succeeds_iff_stock_covers_cart_plus_request(
    session, cart_service, make_product, user_id, stock, in_cart, requested, ok
):
    product = make_product(stock=stock)
    if in_cart:
        cart_service.add_to_cart(session, user_id, product.id, in_cart)

    if ok:
        cart = cart_service.add_to_cart(session, user_id, product.id, requested)
        assert cart.items[0].quantity == in_cart + requested
    else:
        with pytest.raises(InsufficientStockError):
            cart_service.add_to_cart(session, user_id, product.id, requested)


def test_add_unknown_product_is_not_found(session, cart_service, user_id):
    with pytest.raises(NotFoundError, match="Product not found"):
        cart_service.add_to_cart(session, user_id, uuid.uuid4(), 1)


def test_update_missing_line_is_not_found(session, cart_service, make_product, user_id):
    product = make_product()

    with pytest.raises(NotFoundError, match="Cart item not found"):
        cart_service.update_quantity(session, user_id, product.id, 1)


def test_update_unknown_product_is_not_found(session, cart_service, user_id):
    with pytest.raises(NotFoundError, match="Product not found"):
        cart_service.update_quantity(session, user_id, uuid.uuid4(), 1)


def test_remove_missing_line_is_not_found(session, cart_service, user_id):
    with pytest.raises(NotFoundError):
        cart_service.remove_item(session, user_id, uuid.uuid4())


def test_clear_returns_empty_cart(session, cart_service, make_product, user_id):
    cart_service.add_to_cart(session, user_id, make_product().id, 2)

    first = cart_service.clear_cart(session, user_id)
    second = cart_service.clear_cart(session, user_id)

    assert first.items == second.items == []
    assert second.total == 0
    assert second.item_count == 0
    assert second.user_id == user_id


def test_deleted_product_counts_items_but_not_total(
    session, cart_service, product_service, make_product, user_id
):
    kept = make_product(name="Notebook", price=4.0, stock=10)
    gone = make_product(name="Pen", price=1.5, stock=10)
    cart_service.add_to_cart(session, user_id, kept.id, 2)
    cart_service.add_to_cart(session, user_id, gone.id, 3)

    product_service.delete_product(session, gone.id)
    cart = cart_service.get_cart(session, user_id)

    assert cart.item_count == 5
    assert cart.total == 8.0
    orphan = cart.find(gone.id)
    assert orphan.product is None
    assert orphan.quantity == 3


def test_enrichment_embeds_trimmed_snapshot(session, cart_service, make_product, user_id):
    with_images = make_product(
        name="Camera",
        price=300.0,
        stock=2,
        images=["https://img.example.com/a.jpg", "https://img.example.com/b.jpg"],
    )
    without_images = make_product(name="Strap", price=10.0, stock=2)

    cart_service.add_to_cart(session, user_id, with_images.id)
    cart = cart_service.add_to_cart(session, user_id, without_images.id)

    camera = cart.find(with_images.id).product
    assert camera.name == "Camera"
    assert camera.image == "https://img.example.com/a.jpg"
    assert camera.images == [
        "https://img.example.com/a.jpg",
        "https://img.example.com/b.jpg",
    ]
    assert camera.stock == 2

    strap = cart.find(without_images.id).product
    assert strap.image == get_settings().PLACEHOLDER_IMAGE_URL
    assert strap.images == []


def test_price_changes_are_reflected_live(session, cart_service, make_product, user_id):
    product = make_product(price=10.0, stock=5)
    cart_service.add_to_cart(session, user_id, product.id, 2)

    row = session.get(Product, product.id)
    row.price = 12.0
    session.add(row)
    session.commit()

    assert cart_service.get_cart(session, user_id).total == 24.0


def test_total_is_rounded_to_cents(session, cart_service, make_product, user_id):
    product = make_product(price=0.1, stock=10)

    cart = cart_service.add_to_cart(session, user_id, product.id, 3)

    assert cart.total == 0.3


def test_failed_add_leaves_cart_unchanged(session, cart_service, make_product, user_id):
    product = make_product(stock=2)
    before = cart_service.add_to_cart(session, user_id, product.id, 2)

    with pytest.raises(InsufficientStockError):
        cart_service.add_to_cart(session, user_id, product.id, 1)

    assert cart_service.get_cart(session, user_id) == before
