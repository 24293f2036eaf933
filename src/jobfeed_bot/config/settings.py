"""Pydantic-based settings loaded entirely from environment variables.

All configuration is read from ``.env`` (or real env vars). Every field has a
sensible default so a bare checkout can run a poll cycle against no feeds.

Usage::

    from jobfeed_bot.config import get_settings
    settings = get_settings()
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# ---------------------------------------------------------------------------
# Type alias: env var string "a,b,c" → list[str]
# ---------------------------------------------------------------------------
CsvList = Annotated[list[str], NoDecode]


class Settings(BaseSettings):
    """Central configuration — every field maps to an UPPER_SNAKE env var."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
    )

    # -- Telegram -----------------------------------------------------------
    telegram_bot_token: str = ""
    owner_telegram_id: str = ""
    telegram_api_base: str = "https://api.telegram.org"
    notify_timeout_seconds: float = 15.0
    bot_retry_delay_seconds: float = 15.0

    # -- Feeds --------------------------------------------------------------
    rss_feeds: CsvList = Field(default_factory=list)
    keywords: CsvList = Field(default_factory=list)
    fetch_timeout_seconds: float = 15.0
    user_agent: str = "web3-job-bot/1.0"
    poll_interval_seconds: int = 300

    # -- Email (Resend) -----------------------------------------------------
    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com/emails"
    email_from: str = ""

    # -- Outreach -----------------------------------------------------------
    my_name: str = ""
    my_skills: str = "React, Next.js, Typescript"
    portfolio_url: str = ""
    outreach_generator_mode: Literal["template", "llm"] = "template"

    # -- LLM ----------------------------------------------------------------
    openrouter_api_key: str = ""
    llm_base_url: str = "https://openrouter.ai/api/v1"
    llm_model: str = "qwen/qwen3-next-80b-a3b-instruct:free"

    # -- Storage ------------------------------------------------------------
    database_path: str = "jobs.sqlite"

    # -- General ------------------------------------------------------------
    log_level: str = "INFO"

    # -- CSV field parsing --------------------------------------------------
    @field_validator("rss_feeds", mode="before")
    @classmethod
    def split_csv(cls, value: object) -> list[str]:
        """Convert comma-separated env string to list."""
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, list):
            return value
        return []

    @field_validator("keywords", mode="before")
    @classmethod
    def split_keywords(cls, value: object) -> list[str]:
        """Lowercase and de-duplicate keywords (each one scores at most once)."""
        if isinstance(value, str):
            value = value.split(",")
        if isinstance(value, list):
            cleaned = (str(item).strip().lower() for item in value)
            return list(dict.fromkeys(kw for kw in cleaned if kw))
        return []

    # -- Derived defaults ---------------------------------------------------
    @model_validator(mode="after")
    def apply_defaults(self) -> Settings:
        """Derive the sender address from ``my_name`` when EMAIL_FROM is unset."""
        if not self.email_from:
            self.email_from = f"{self.my_name or 'Emrys'} <you@example.com>"
        return self

    @property
    def email_configured(self) -> bool:
        return bool(self.resend_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    return Settings()
