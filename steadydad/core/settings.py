"""App settings: loaded from environment variables with defaults."""

import os
from typing import List
from dotenv import load_dotenv

load_dotenv()


class Settings:
    DATABASE_URL: str = os.getenv("DB_CONNECTION_STRING", "sqlite+aiosqlite:///./steadydad.db")

    CORS_ORIGINS: List[str] = [
        "http://localhost:8081",
        "http://127.0.0.1:8081",
        "http://localhost:19006",
    ]
    CORS_EXTRA_ORIGINS: str = os.getenv("CORS_EXTRA_ORIGINS", "")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Glanceables only exist on iOS; the flag is left unset on other builds
    APP_PLATFORM: str = os.getenv("APP_PLATFORM", "ios")
    ENABLE_IOS_GLANCEABLES: str = os.getenv("ENABLE_IOS_GLANCEABLES", "")
    GLANCEABLES_BRIDGE_URL: str = os.getenv("GLANCEABLES_BRIDGE_URL", "http://127.0.0.1:8765")
    # 0 = wait as long as the OS takes
    GLANCEABLES_TIMEOUT_SECONDS: int = int(os.getenv("GLANCEABLES_TIMEOUT_SECONDS", "0"))
    # 0 = refresh job disabled
    GLANCEABLES_REFRESH_MINUTES: int = int(os.getenv("GLANCEABLES_REFRESH_MINUTES", "15"))

    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "UTC")
    EVENTS_LIST_LIMIT: int = int(os.getenv("EVENTS_LIST_LIMIT", "200"))


settings = Settings()
