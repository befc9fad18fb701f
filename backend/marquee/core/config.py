"""Application settings.

Precedence, highest first: constructor arguments, environment variables
(``MARQUEE_`` prefix, ``__`` for nesting), the YAML config file, then the
defaults below.
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

CONFIG_FILE = Path(os.environ.get("MARQUEE_CONFIG", "config.yml"))

DEFAULT_CHANNELS = ["netflix", "hulu", "disney_plus", "hbo_max", "apple_tv_plus", "prime_video"]


class AppConfig(BaseModel):
    name: str = "Marquee"
    version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False
    allowed_origins: list[str] = Field(default_factory=list)


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8484


class LoggingConfig(BaseModel):
    level: Literal["debug", "info", "warning", "error", "critical"] = "info"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower()
            if value == "warn":
                return "warning"
        return value


class RokuConfig(BaseModel):
    ip: str = "192.168.1.100"
    devices: dict[str, str] = Field(default_factory=dict)  # name -> host/IP
    launch_wait_ms: int = Field(default=2000, ge=0)
    keypress_delay_ms: int = Field(default=100, ge=0)
    char_delay_ms: int = Field(default=50, ge=0)
    request_timeout: float = 10.0


class BraveConfig(BaseModel):
    api_key: SecretStr | None = None
    timeout: float = 10.0


class EmbyConfig(BaseModel):
    server_url: str = ""
    api_key: SecretStr | None = None
    user_id: str = ""
    timeout: float = 10.0

    @property
    def enabled(self) -> bool:
        return bool(self.server_url and self.api_key and self.user_id)


class SearchConfig(BaseModel):
    default_limit: int = Field(default=20, ge=1)
    provider_timeout: float = 10.0


class Settings(BaseSettings):
    """Application settings loaded from config.yml and environment variables."""

    app: AppConfig = Field(default_factory=AppConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    roku: RokuConfig = Field(default_factory=RokuConfig)
    brave: BraveConfig = Field(default_factory=BraveConfig)
    emby: EmbyConfig = Field(default_factory=EmbyConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    # Channel names in priority order; URL matching follows this order.
    channels: list[str] = Field(default_factory=lambda: list(DEFAULT_CHANNELS))

    model_config = SettingsConfigDict(
        env_prefix="MARQUEE_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=CONFIG_FILE),
        )


# Global settings instance
settings = Settings()
