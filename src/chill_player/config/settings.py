"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import PlaylistLimit, SearchLimit, SpeechMaxLength, VolumeFloat
from ..domain.shared.validators import validate_discord_snowflake


class DiscordSettings(BaseModel):
    """Discord bot configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: str = Field(
        default="!",
        min_length=1,
        max_length=5,
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    test_guild_ids: tuple[int, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("test_guild_ids", "test_guilds")
    )
    sync_on_startup: bool = False

    @field_validator("test_guild_ids", mode="before")
    @classmethod
    def validate_snowflake_ids(cls, v: tuple[int, ...] | list[int]) -> tuple[int, ...]:
        """Validate Discord snowflake IDs and convert lists to tuples."""
        if isinstance(v, list):
            v = tuple(v)
        for snowflake in v:
            validate_discord_snowflake(snowflake)
        return v


class CatalogSettings(BaseModel):
    """Media catalog (yt-dlp) configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    search_suffix: str = "chill relaxing music"
    search_limit: SearchLimit = 15
    playlist_limit: PlaylistLimit = 50
    ytdlp_format: str = "bestaudio[acodec!=none][vcodec=none]/bestaudio/best"
    socket_timeout: int = Field(default=10, ge=1, le=120)
    cache_ttl_seconds: int = Field(
        default=3600, ge=0, validation_alias=AliasChoices("cache_ttl_seconds", "cache_ttl")
    )


class SpeechSettings(BaseModel):
    """Text-to-speech announcement configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("api_key", "openai_api_key", "openai_key"),
    )
    model: str = Field(
        default="gpt-4o-mini-tts", validation_alias=AliasChoices("model", "tts_model")
    )
    voice: str = "alloy"
    max_text_length: SpeechMaxLength = 200
    announcement_template: str = "Changing now to {title}"
    max_cached_clips: int = Field(default=8, ge=1, le=100)

    @field_validator("announcement_template")
    @classmethod
    def validate_template(cls, v: str) -> str:
        if "{title}" not in v:
            raise ValueError(ErrorMessages.INVALID_TEMPLATE)
        return v


class PlaybackSettings(BaseModel):
    """Audio playback configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    retry_delay_seconds: float = Field(default=1.5, ge=0.0, le=60.0)
    default_volume: VolumeFloat = 0.5
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            "options": "-vn",
        }
    )
    transient_message_seconds: float = Field(default=8.0, gt=0.0, le=300.0)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__TEST_GUILD_IDS, etc. (nested with ``__``)
    - CATALOG__SEARCH_LIMIT, SPEECH__API_KEY, PLAYBACK__RETRY_DELAY_SECONDS, ...
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    speech: SpeechSettings = Field(default_factory=SpeechSettings)
    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=sorted(valid_levels))
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
