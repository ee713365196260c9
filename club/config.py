# club/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Log format ────────────────────────────────────────────────────────
    TIME_FORMAT: str = "%H:%M"              # strftime/strptime format for event times
    TIME_SEPARATOR: str = " "               # between opening and closing time ("10:00 18:00")
    EVENT_INFO_SEPARATOR: str = " "         # between event fields ("10:00 1 client1")
    DISTINCT_EVENT_INFO_COUNT: int = 3      # <time> <kind> <client data...>

    # ── Processing ────────────────────────────────────────────────────────
    EVENTS_QUEUE_SIZE: int = 10             # producer blocks once this many events are pending
    ECHO_ORPHAN_LEAVES: bool = False        # reproduce the raw "4 <name>" line for queued clients at closing

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "127.0.0.1"
    BACKEND_PORT: int = 8080

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "WARNING"
    LOG_FILE: Optional[str] = None          # enables the rotating file handler

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
