"""
Configuration management for the furniture procurement backend
"""
from decimal import Decimal

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Furniture Procurement & Inventory"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database
    DATABASE_URL: str = "sqlite:///./procurement.db"

    # Inventory defaults
    DEFAULT_THRESHOLD: int = 10
    DEFAULT_MATERIAL_UNIT: str = "Nos."
    REORDER_MULTIPLIER: int = 2  # low-stock draft orders threshold * N

    # Pricing defaults
    DEFAULT_GST: Decimal = Decimal("18")

    # Seed a few vendors/materials/sites on first start
    SEED_DEMO_DATA: bool = True

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
