"""
Settings Management with Pydantic

Provides type-safe configuration for the engine:
- Audience sizing constants
- Identity match pacing
- Default lift percentages
- Script-lift store backend
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreBackendType(str, Enum):
    """Supported script-lift configuration store backends."""
    IN_MEMORY = "in_memory"
    JSON_FILE = "json_file"


class SizingConfig(BaseSettings):
    """Audience sizing configuration."""
    model_config = SettingsConfigDict(
        env_prefix="SIZING_",
        extra="ignore"
    )

    base_provider_count: int = 4500
    reach_per_provider: int = 250  # patients reached per provider


class MatchConfig(BaseSettings):
    """Identity match simulation pacing."""
    model_config = SettingsConfigDict(
        env_prefix="MATCH_",
        extra="ignore"
    )

    # Seconds spent in each working stage before advancing
    parsing_seconds: float = 2.0
    matching_seconds: float = 2.5
    analyzing_seconds: float = 2.5
    hold_seconds: float = 1.0

    success_rate: float = 0.98


class LiftConfig(BaseSettings):
    """Default lift percentages."""
    model_config = SettingsConfigDict(
        env_prefix="LIFT_",
        extra="ignore"
    )

    # Configurator defaults
    target_lift: float = 25.0
    comparison_lift: float = -5.0

    # Default-config generator
    generated_target_lift: float = 35.0
    generated_category_lift: float = 15.0
    generated_competitor_lift: float = -8.0


class StoreConfig(BaseSettings):
    """Script-lift configuration store."""
    model_config = SettingsConfigDict(
        env_prefix="STORE_",
        extra="ignore"
    )

    backend: StoreBackendType = StoreBackendType.IN_MEMORY
    json_path: str = "./data/script_lift_configs.json"


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Application
    app_name: str = "Rx Lift Engine"
    debug: bool = False
    log_level: str = "INFO"

    # Sub-configurations
    sizing: SizingConfig = Field(default_factory=SizingConfig)
    match: MatchConfig = Field(default_factory=MatchConfig)
    lift: LiftConfig = Field(default_factory=LiftConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        return cls(
            sizing=SizingConfig(),
            match=MatchConfig(),
            lift=LiftConfig(),
            store=StoreConfig()
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
