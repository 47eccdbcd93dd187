"""
Service configuration.

Load order (each layer overrides the previous):
  1. Field defaults below
  2. ``.env``                — local secrets (gitignored)
  3. Environment variables   — OANDA_*, API_HOST, PORT, LOG_LEVEL, NEWS_*

Entry point: ``load_settings() -> Settings``
"""
import logging
import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator


OANDA_BASE_URLS = {
    "practice": "https://api-fxpractice.oanda.com",
    "live": "https://api-fxtrade.oanda.com",
}

DEFAULT_NEWS_FEEDS = [
    "https://www.fxstreet.com/rss/news",
    "https://www.forexlive.com/feed/news",
]

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class Settings(BaseModel):
    """Immutable runtime settings shared by the API and the broker client."""

    model_config = ConfigDict(frozen=True)

    oanda_api_key: str = ""
    oanda_account_id: str = ""
    oanda_environment: Literal["practice", "live"] = "practice"
    broker_timeout: float = Field(default=15.0, gt=0)

    api_host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    log_level: str = "INFO"

    news_source: Literal["static", "rss"] = "static"
    news_feeds: list[str] = Field(default_factory=lambda: list(DEFAULT_NEWS_FEEDS))

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"unknown log level {v!r}")
        return v

    @property
    def oanda_base_url(self) -> str:
        return OANDA_BASE_URLS[self.oanda_environment]

    @property
    def broker_configured(self) -> bool:
        return bool(self.oanda_api_key and self.oanda_account_id)


def _split_csv(raw: Optional[str]) -> Optional[list[str]]:
    if raw is None:
        return None
    return [part.strip() for part in raw.split(",") if part.strip()]


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build Settings from ``.env`` plus the process environment."""
    load_dotenv(env_file)

    env_map = {
        "oanda_api_key": os.getenv("OANDA_API_KEY"),
        "oanda_account_id": os.getenv("OANDA_ACCOUNT_ID"),
        "oanda_environment": os.getenv("OANDA_ENVIRONMENT"),
        "broker_timeout": os.getenv("BROKER_TIMEOUT"),
        "api_host": os.getenv("API_HOST"),
        "port": os.getenv("PORT"),
        "log_level": os.getenv("LOG_LEVEL"),
        "news_source": os.getenv("NEWS_SOURCE"),
        "news_feeds": _split_csv(os.getenv("NEWS_FEEDS")),
    }
    return Settings(**{k: v for k, v in env_map.items() if v is not None})


def configure_logging(level: str = "INFO") -> None:
    """Set the root log format once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=_LOG_FORMAT)
    root.setLevel(level)
