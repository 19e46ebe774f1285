# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 720
    DATABASE_URL: str = "sqlite:///./storefront.db"

    # Shared operator password for the single-password admin login
    ADMIN_PASSWORD: str = "admin123"
    FRONTEND_URL: Optional[str] = None

    # Fallback when the shippingFlatCents setting has never been stored
    DEFAULT_SHIPPING_CENTS: int = 800
    # Record a SALE ledger entry per line at checkout and refuse oversells
    DECREMENT_STOCK_ON_CHECKOUT: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra: ClassVar[str] = "ignore"

settings = Settings()
