"""
Configuration module for loading environment variables
"""

import os
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: Optional[str]) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application configuration"""

    # MongoDB
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://localhost:27017/kekelink")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_HOURS: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_HOURS", "168"))

    # WebSocket hub
    WS_REQUIRE_TOKEN: bool = _as_bool(os.getenv("WS_REQUIRE_TOKEN", "false"))
    WS_SEND_TIMEOUT_SECONDS: float = float(os.getenv("WS_SEND_TIMEOUT_SECONDS", "5"))

    # Gemini scoring service
    GEMINI_API_KEY: Optional[str] = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    AI_TIMEOUT_SECONDS: float = float(os.getenv("AI_TIMEOUT_SECONDS", "10"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    def ai_enabled(self) -> bool:
        """Check if the scoring service is configured"""
        return bool(self.GEMINI_API_KEY)


settings = Settings()
