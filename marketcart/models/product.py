# marketcart/models/product.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Marketplace catalog entry.

    The cart only ever references a product by id; name, price and stock
    are read from here at enrichment time.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
    )

    description: str = Field(default="")

    price: float = Field(
        gt=0,
        description="Unit price",
    )

    stock: int = Field(
        default=0,
        ge=0,
        description="Units remaining",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )


class ProductImage(SQLModel, table=True):
    """
    Gallery images for a product; the lowest sort_order is the cover image.
    """

    __tablename__ = "product_images"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
        description="FK to products.id",
    )

    image_url: str

    sort_order: int = Field(
        default=0,
        ge=0,
        description="Ordering index within the gallery",
    )
