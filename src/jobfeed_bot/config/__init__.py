"""Configuration module — ENV-driven settings with sensible defaults."""

from jobfeed_bot.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
