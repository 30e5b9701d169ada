# marketcart/services/seed.py
import logging

from sqlmodel import Session

from marketcart.repositories.product_repo import ProductRepository
from marketcart.schemas.product import ProductCreate
from marketcart.services.product_service import ProductService

logger = logging.getLogger(__name__)

DEMO_PRODUCTS: list[dict] = [
    {
        "name": "Wireless Headphones",
        "description": "Over-ear Bluetooth headphones with noise cancellation.",
        "price": 129.99,
        "stock": 25,
        "images": ["https://images.example.com/headphones-1.jpg"],
    },
    {
        "name": "Mechanical Keyboard",
        "description": "Tenkeyless keyboard with hot-swappable switches.",
        "price": 89.5,
        "stock": 10,
        "images": [
            "https://images.example.com/keyboard-1.jpg",
            "https://images.example.com/keyboard-2.jpg",
        ],
    },
    {
        "name": "Ceramic Coffee Mug",
        "description": "Hand-glazed 350ml mug.",
        "price": 14.0,
        "stock": 5,
        "images": [],
    },
]


def seed_demo_catalog(session: Session, service: ProductService | None = None) -> int:
    """
    Insert the demo catalog into an empty products table.

    Returns:
        Number of products created (0 if the catalog already had rows).
    """
    service = service or ProductService(ProductRepository())
    if service.repo.count(session) > 0:
        return 0

    for raw in DEMO_PRODUCTS:
        service.create_product(session, ProductCreate(**raw))

    logger.info("Seeded %d demo products", len(DEMO_PRODUCTS))
    return len(DEMO_PRODUCTS)
