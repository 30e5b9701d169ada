"""
Shared fixtures.

Every test gets its own in-memory SQLite engine; the app's `get_session`
dependency is overridden to use it, so tests never share cart state.
"""
import os

os.environ["JWT_SECRET"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO_DATA"] = "false"

import uuid

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlmodel import Session, SQLModel

from marketcart.database import build_engine, get_session
from marketcart.main import app
from marketcart.repositories.cart_repo import CartRepository
from marketcart.repositories.product_repo import ProductRepository
from marketcart.schemas.product import ProductCreate
from marketcart.services.cart_service import CartService
from marketcart.services.product_service import ProductService


def make_token(user_id: uuid.UUID, email: str = "shopper@example.com") -> str:
    return jwt.encode(
        {"sub": str(user_id), "email": email},
        "test-secret",
        algorithm="HS256",
    )


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def app_with_db(engine):
    """The FastAPI app wired to this test's engine."""

    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app_with_db) -> TestClient:
    # No context manager: skips the lifespan hook and its global engine.
    return TestClient(app_with_db)


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def token(user_id) -> str:
    return make_token(user_id)


@pytest.fixture
def auth_headers(token) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    """Factory: bearer headers for an arbitrary user id."""

    def _headers(user_id: uuid.UUID) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return _headers


@pytest.fixture
def product_service() -> ProductService:
    return ProductService(ProductRepository())


@pytest.fixture
def cart_repo() -> CartRepository:
    return CartRepository()


@pytest.fixture
def cart_service(cart_repo, product_service) -> CartService:
    return CartService(cart_repo, product_service)


@pytest.fixture
def make_product(session, product_service):
    """Factory creating a product row; returns its ProductRead."""

    def _make(
        name: str = "Desk Lamp",
        price: float = 20.0,
        stock: int = 5,
        images: list[str] | None = None,
    ):
        return product_service.create_product(
            session,
            ProductCreate(name=name, price=price, stock=stock, images=images or []),
        )

    return _make
