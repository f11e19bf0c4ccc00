"""
Configuration management for the Egg Price API.
"""

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

BASE_DIR: Path = Path(__file__).parent.parent
load_dotenv(BASE_DIR / ".env")


class Settings:
    """API server configuration."""

    # Paths
    BASE_DIR: Path = BASE_DIR
    DATA_PATH: str = os.getenv("PRICE_DATA_PATH", str(BASE_DIR / "data" / "egg.csv"))

    # Server
    API_TITLE: str = "Egg Price API"
    API_DESCRIPTION: str = "Read-only REST API for historical egg prices"
    API_VERSION: str = "1.0.0"
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
