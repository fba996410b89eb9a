# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar, Optional
from pathlib import Path
from dotenv import load_dotenv

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

class Settings(BaseSettings):
    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    DATABASE_URL: str = "sqlite:///./nafaa_exchange.db"

    FRONTEND_URL: str = "http://localhost:5173"
    LOG_LEVEL: str = "INFO"

    # Primordial admin, recognised even when system_admins is empty
    SEED_ADMIN_EMAIL: Optional[str] = None
    SEED_ADMIN_UID: str = "seed-admin"
    SEED_ADMIN_PASSWORD: Optional[str] = None

    # Avatars are stored as <pharmacy_id>.<ext> and served from /avatars
    AVATAR_DIR: str = "static/avatars"

    CATALOG_MIN_QUERY_LENGTH: int = 3
    CATALOG_SEARCH_LIMIT: int = 10

    VERIFIED_MIN_RATING: float = 4.0
    VERIFIED_MIN_SUCCESS_SCORE: int = 5
    NEAR_EXPIRY_DAYS: int = 90

    class Config:
        env_file: ClassVar[str] = str(env_path)

settings = Settings()
