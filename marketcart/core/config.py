# marketcart/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - JWT_SECRET (HS256 signing secret shared with the auth provider)

    Optional:
      - DATABASE_URL (defaults to an in-memory SQLite database)
      - SEED_DEMO_DATA (load a small demo catalog on startup)
      - CART_API_URL / CART_API_TIMEOUT / CART_STORAGE_PATH (cart client)
    """

    PROJECT_NAME: str = "Marketplace Cart API"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str = "sqlite://"

    # JWT verification (backend-side)
    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    PLACEHOLDER_IMAGE_URL: str = "https://via.placeholder.com/400x400?text=No+Image"
    SEED_DEMO_DATA: bool = False
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    # Cart client
    CART_API_URL: str = "http://localhost:8000/api/v1"
    CART_API_TIMEOUT: float = 10.0
    CART_STORAGE_PATH: str = ".cart_state.json"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
