from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    HARVEST_PORT: int = 8002
    LOG_LEVEL: str = "INFO"

    # Feed
    FEED_START_URL: str = "https://x.com/home"
    FEED_BASE_URL: str = "https://x.com"

    # Browser
    BROWSER_ENGINE: str = "chromium"
    BROWSER_HEADLESS: bool = True
    NAVIGATION_TIMEOUT_MS: int = 30000

    # Harvest behaviour
    HARVEST_DEFAULT_COUNT: int = 50
    HARVEST_MAX_COUNT: int = 1000
    COLLECT_TICK_SECONDS: float = 1.5
    COLLECT_MAX_TICKS: int = 50
    DETAIL_SETTLE_SECONDS: float = 3.0

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
