# marketcart/schemas/product.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from marketcart.schemas.common import CamelModel


class ProductSnapshot(CamelModel):
    """
    Read-only product view embedded in cart lines.

    Fetched fresh on every enrichment; never stored in the cart.
    """

    id: uuid.UUID
    name: str
    description: str = ""
    price: float
    image: str
    images: list[str] = []
    stock: int


class ProductRead(ProductSnapshot):
    """
    Product representation for catalog endpoints.
    """

    created_at: datetime


class ProductList(CamelModel):
    products: list[ProductRead]
    total: int
    skip: int
    limit: int


class ProductCreate(CamelModel):
    """
    Payload for creating a product (seeding / admin tooling).
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    description: str = ""
    price: float = Field(gt=0)
    stock: int = Field(default=0, ge=0)
    images: list[str] = []

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v
