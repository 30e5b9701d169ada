# marketcart/services/product_service.py
import logging
import uuid

from sqlmodel import Session

from marketcart.core.config import get_settings
from marketcart.core.errors import NotFoundError
from marketcart.models.product import Product, ProductImage
from marketcart.repositories.product_repo import ProductRepository
from marketcart.schemas.product import (
    ProductCreate,
    ProductList,
    ProductRead,
    ProductSnapshot,
)

logger = logging.getLogger(__name__)


class ProductService:
    """
    Read side of the product catalog, plus the few writes the seeding
    and test tooling need.

    Responsibilities:
      - resolve a product id to a snapshot (cover image or placeholder)
      - catalog listing with paging
      - create / delete products with their gallery
    """

    def __init__(self, repo: ProductRepository, placeholder_image: str | None = None):
        self.repo = repo
        self.placeholder_image = placeholder_image or get_settings().PLACEHOLDER_IMAGE_URL

    # ----- Helpers -----

    def _image_urls(self, session: Session, product_id: uuid.UUID) -> list[str]:
        return [
            img.image_url
            for img in self.repo.list_images_for_product(session, product_id)
        ]

    def _to_read(self, session: Session, product: Product) -> ProductRead:
        images = self._image_urls(session, product.id)
        return ProductRead(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            image=images[0] if images else self.placeholder_image,
            images=images,
            stock=product.stock,
            created_at=product.created_at,
        )

    # ----- Lookups -----

    def find_snapshot(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> ProductSnapshot | None:
        """
        Trimmed product view for cart enrichment, or None if the product
        no longer exists.
        """
        product = self.repo.get_by_id(session, product_id)
        if product is None:
            return None
        read = self._to_read(session, product)
        return ProductSnapshot.model_validate(read.model_dump(exclude={"created_at"}))

    def get_product(self, session: Session, product_id: uuid.UUID) -> ProductRead:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        return self._to_read(session, product)

    def list_products(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> ProductList:
        products = self.repo.list_products(session, skip=skip, limit=limit)
        return ProductList(
            products=[self._to_read(session, p) for p in products],
            total=self.repo.count(session),
            skip=skip,
            limit=limit,
        )

    # ----- Writes -----

    def create_product(self, session: Session, payload: ProductCreate) -> ProductRead:
        product = self.repo.create(
            session,
            Product(
                name=payload.name,
                description=payload.description,
                price=payload.price,
                stock=payload.stock,
            ),
        )
        for idx, url in enumerate(payload.images):
            self.repo.create_image(
                session,
                ProductImage(product_id=product.id, image_url=url, sort_order=idx),
            )
        logger.info("Created product %s (%s)", product.id, product.name)
        return self._to_read(session, product)

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Delete a product and its gallery rows.

        Cart lines referencing it are left in place; they enrich to a
        null product from then on.
        """
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")

        for img in self.repo.list_images_for_product(session, product_id):
            self.repo.delete_image(session, img)

        self.repo.delete(session, product)
