from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    # delivery pricing, in cents
    FREE_DELIVERY_THRESHOLD_CENTS: int = 5000
    DELIVERY_FEE_CENTS: int = 500

    DEFAULT_PAYMENT_METHOD: str = "PENDING"
    LOCK_TIMEOUT_SECONDS: int = 10
    LOCKS_DIR_NAME: str = "marketplace_locks"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
