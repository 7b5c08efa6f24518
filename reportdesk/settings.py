"""Settings for the report desk bot."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional, Tuple, Type

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


def _env_field(default, *env_names: str):
    if env_names:
        alias = AliasChoices(*env_names) if len(env_names) > 1 else env_names[0]
        return Field(default=default, validation_alias=alias)
    return Field(default=default)


def _parse_color(value):
    if isinstance(value, int):
        return value
    text = str(value).strip().lower()
    if text.startswith("#"):
        text = text[1:]
    elif text.startswith("0x"):
        text = text[2:]
    return int(text, 16)


class ChannelSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    reports: int
    logs: int


class PaletteSettings(BaseModel):
    """Embed colors. Accepts ints or hex strings such as ``#4caf50``."""

    model_config = ConfigDict(frozen=True)

    report: Optional[int] = None
    accepted: int = 0x4CAF50
    declined: int = 0xD32F2F

    @field_validator("report", "accepted", "declined", mode="before")
    def _colors(cls, value):  # type: ignore[override]
        if value in (None, ""):
            return None
        return _parse_color(value)


class Settings(BaseSettings):
    token: str = _env_field(..., "TOKEN", "DISCORD_TOKEN")
    api_url: str = _env_field(..., "API_URL")
    api_token: str = _env_field(..., "API_TOKEN")
    guild: int = _env_field(..., "GUILD", "GUILD_ID")
    channels: ChannelSettings
    palette: PaletteSettings = PaletteSettings()

    max_attachment_bytes: int = _env_field(25_000_000, "MAX_ATTACHMENT_BYTES")
    # Claims outlive a slow modal round trip but expire if the bot dies mid-transition
    claim_ttl_seconds: int = _env_field(900, "CLAIM_TTL_SECONDS")
    redis_url: Optional[str] = _env_field(None, "REDIS_URL")
    roblox_timeout_seconds: float = _env_field(5.0, "ROBLOX_TIMEOUT_SECONDS")
    api_timeout_seconds: float = _env_field(10.0, "API_TIMEOUT_SECONDS")

    environment: str = _env_field("production", "ENV", "APP_ENV", "ENVIRONMENT", "NODE_ENV")
    log_level: str = _env_field("INFO", "LOG_LEVEL")
    log_sampling_rate_info: float = _env_field(1.0, "LOG_SAMPLING_RATE_INFO")
    service_name: str = _env_field("reportdesk", "SERVICE_NAME")
    git_commit: str = _env_field("unknown", "GIT_COMMIT", "COMMIT_SHA", "SOURCE_VERSION")
    metrics_port: Optional[int] = _env_field(None, "METRICS_PORT")

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        json_file="config.json",
        case_sensitive=False,
        env_nested_delimiter="__",
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    @field_validator("log_level", mode="before")
    def _normalise_level(cls, value):  # type: ignore[override]
        return str(value or "INFO").upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over the legacy config.json
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    def is_prod(self) -> bool:
        return self.environment.lower() in ("prod", "production", "live")

    def is_dev(self) -> bool:
        return self.environment.lower() in ("dev", "development")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once; the result is immutable."""
    return Settings()
