"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from find_vintage.services.exceptions import ConfigurationError

SearchMode = Literal["web_detection", "custom_search"]

DEFAULT_ENDPOINTS: dict[str, str] = {
    "web_detection": "https://vision.googleapis.com/v1/images:annotate",
    "custom_search": "https://www.googleapis.com/customsearch/v1",
}


class SearchConfig(BaseModel):
    """Provider selection and credentials; immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    mode: SearchMode = "web_detection"
    endpoint: AnyHttpUrl | None = Field(
        default=None,
        description="Overrides the provider endpoint for the selected mode.",
    )
    api_key: SecretStr | None = None
    engine_id: str | None = Field(default=None, description="Custom search engine id (cx).")
    features: tuple[str, ...] = ("WEB_DETECTION",)
    limit: int = Field(default=5, ge=0)
    image_quality: float = Field(default=0.7, gt=0.0, le=1.0)
    max_side_length: int = Field(default=1280, ge=64, le=8192)
    request_timeout_seconds: float = Field(default=30.0, gt=0.0, le=300.0)

    @field_validator("api_key", "engine_id", "endpoint", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def resolved_endpoint(self) -> str:
        if self.endpoint is not None:
            return str(self.endpoint)
        return DEFAULT_ENDPOINTS[self.mode]

    def api_key_value(self) -> str | None:
        if self.api_key is None:
            return None
        return self.api_key.get_secret_value() or None

    def missing_credentials(self) -> list[str]:
        missing: list[str] = []
        if not self.api_key_value():
            missing.append("api_key")
        if self.mode == "custom_search" and not self.engine_id:
            missing.append("engine_id")
        if self.mode == "web_detection" and not self.features:
            missing.append("features")
        return missing

    def require_credentials(self) -> SearchConfig:
        """Return ``self`` or raise when the selected mode cannot be served."""

        missing = self.missing_credentials()
        if missing:
            raise ConfigurationError(
                f"Missing search configuration for mode '{self.mode}': {', '.join(missing)}"
            )
        return self


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FIND_VINTAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    log_level: str = "INFO"
    telegram_token: SecretStr | None = None
    telegram_proxy: str | None = None
    default_language: str = "en"

    search: SearchConfig = Field(default_factory=SearchConfig)

    @field_validator("telegram_token", "telegram_proxy", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


@lru_cache
def get_settings() -> AppSettings:
    """Load settings once and fail fast when search credentials are absent."""

    try:
        settings = AppSettings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
    settings.search.require_credentials()
    return settings


__all__ = [
    "AppSettings",
    "DEFAULT_ENDPOINTS",
    "SearchConfig",
    "SearchMode",
    "get_settings",
]
