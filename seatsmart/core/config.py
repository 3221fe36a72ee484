"""
Configuration settings for the application
"""

import os
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./seatsmart.db")
    USE_FIREBASE: bool = os.getenv("USE_FIREBASE", "false").lower() in ("1", "true", "yes")
    FIREBASE_CREDENTIALS_JSON: str | None = os.getenv("FIREBASE_CREDENTIALS_JSON")
    FIREBASE_CREDENTIALS_FILE: str | None = os.getenv("FIREBASE_CREDENTIALS_FILE")
    FIREBASE_CREDENTIALS_B64: str | None = os.getenv("FIREBASE_CREDENTIALS_B64")

    # Security
    ADMIN_TOKEN: str = os.getenv("ADMIN_TOKEN", "admin_token_123")

    # Application
    BASE_URL: str = os.getenv("BASE_URL", "http://localhost:8000")

    # CORS
    ALLOW_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:8000",
    ]

    # File limits
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024  # 10MB

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 30

    # Table layout
    DEFAULT_TABLE_COUNT: int = 8
    MIN_TABLES: int = 1
    MAX_TABLES: int = 50
    DEFAULT_CAPACITY: int = 10
    MAX_CAPACITY: int = 12

    # Table name generation (Gemini)
    GEMINI_API_KEY: str | None = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    THEME_PRESETS: List[str] = [
        "Flowers",
        "Movies",
        "Cities",
        "Gemstones",
        "Constellations",
        "Colors",
        "Virtues",
    ]

    class Config:
        env_file = ".env"

settings = Settings()
