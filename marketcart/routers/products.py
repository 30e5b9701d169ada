# marketcart/routers/products.py
import uuid

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from marketcart.database import get_session
from marketcart.repositories.product_repo import ProductRepository
from marketcart.schemas.common import ApiResponse
from marketcart.schemas.product import ProductList, ProductRead
from marketcart.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


@router.get("", response_model=ApiResponse[ProductList])
def list_products(
    session: Session = Depends(get_session),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
):
    """
    List products (public).
    """
    return ApiResponse[ProductList](
        data=service.list_products(session, skip=skip, limit=limit),
        message="Products retrieved",
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductRead])
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a single product by id (public).

    Guest carts use this to fetch a fresh snapshot before every change.
    """
    return ApiResponse[ProductRead](
        data=service.get_product(session, product_id),
        message="Product retrieved",
    )
