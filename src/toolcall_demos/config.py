"""Configuration module for toolcall-demos using pydantic-settings."""

from decimal import Decimal
from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from toolcall_demos.security.policy import PolicyRules


class ToolcallSettings(BaseSettings):
    """Main configuration settings for the demo programs.

    Values come from (highest priority first) init arguments, environment
    variables with the TOOLCALL_ prefix, and an optional appsettings.json in
    the working directory. For example, TOOLCALL_MODEL_NAME overrides the
    model_name setting and {"modelName": "..."} in appsettings.json sets it
    when the variable is absent.
    """

    # Models
    model_name: str = Field(
        default="llama3.1:8b",
        validation_alias=AliasChoices("model_name", "TOOLCALL_MODEL_NAME", "modelName"),
    )
    image_model_name: str = Field(
        default="dall-e-3",
        validation_alias=AliasChoices(
            "image_model_name", "TOOLCALL_IMAGE_MODEL_NAME", "imageModelName"
        ),
    )

    # Ollama
    ollama_host: str = "http://localhost:11434"

    # Image generation
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "openai_api_key", "TOOLCALL_OPENAI_API_KEY", "OPENAI_API_KEY"
        ),
    )
    image_width: int = 1792
    image_height: int = 1024

    # Plugins
    exchange_rate_url: str = "https://api.exchangerate-api.com/v4/latest/{base}"
    weather_url: str = "https://wttr.in/{city}?format=3"
    http_timeout: float = 10.0

    # Tool calling
    max_tool_iterations: int = 5

    # Security policy
    blocked_currencies: list[str] = Field(
        default_factory=lambda: ["BTC", "ETH", "DOGE", "XRP"]
    )
    restricted_countries: list[str] = Field(
        default_factory=lambda: ["NORTH_KOREA", "IRAN", "SYRIA"]
    )
    restricted_cities: list[str] = Field(
        default_factory=lambda: ["PYONGYANG", "TEHRAN"]
    )
    large_amount_threshold: Decimal = Decimal("100000")

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TOOLCALL_",
        json_file="appsettings.json",
        populate_by_name=True,
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
        """Add appsettings.json as the lowest-priority source."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    def policy_rules(self) -> PolicyRules:
        """Build the immutable security rule set from these settings."""
        return PolicyRules(
            blocked_currencies=frozenset(self.blocked_currencies),
            restricted_countries=tuple(self.restricted_countries),
            restricted_cities=tuple(self.restricted_cities),
            large_amount_threshold=self.large_amount_threshold,
        )


@lru_cache
def get_settings() -> ToolcallSettings:
    """Get the cached settings instance loaded from the environment."""
    return ToolcallSettings()
