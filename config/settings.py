"""
Application settings module.

Manages all configuration via environment variables using pydantic-settings.
"""

from functools import lru_cache

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PostgresSettings(BaseSettings):
    """PostgreSQL connection settings."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="PG_", extra="ignore")

    host: str = "localhost"
    port: int = 5432
    user: str = "admin"
    password: str = "1234"
    database: str = "crm_dev"
    pool_min: int = 2
    pool_max: int = 10
    command_timeout: float = 30.0  # seconds per query
    application_name: str = "crm-matching"

    @property
    def dsn(self) -> str:
        """Generate PostgreSQL DSN."""
        return (
            f"postgresql://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.database}"
        )


class MatchWeights(BaseModel):
    """
    Maximum points per matching criterion.

    The maximum weights (everything except price_partial) must add up
    to at most 100. price_partial is what a price inside the tolerance
    band earns instead of the full price weight.
    """

    property_type: float = Field(15, ge=0)
    location: float = Field(20, ge=0)
    price: float = Field(15, ge=0)
    price_partial: float = Field(5, ge=0)
    size: float = Field(10, ge=0)
    bedrooms: float = Field(10, ge=0)
    bathrooms: float = Field(5, ge=0)
    required_features: float = Field(15, ge=0)
    desired_features: float = Field(10, ge=0)

    @property
    def total(self) -> float:
        """Sum of all maximum weights."""
        return (
            self.property_type
            + self.location
            + self.price
            + self.size
            + self.bedrooms
            + self.bathrooms
            + self.required_features
            + self.desired_features
        )


class MatchingSettings(BaseSettings):
    """Matching engine settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MATCH_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    min_score: int = Field(60, ge=0, le=100)  # MATCH_MIN_SCORE
    price_tolerance: float = 0.10  # 10% around the nearer price bound

    # Worker pool for batch scoring (None = CPU count)
    max_workers: int | None = None
    parallel_min_pairs: int = 64  # Below this, pairs are scored inline

    weights: MatchWeights = MatchWeights()  # MATCH_WEIGHTS__PRICE=20


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    postgres: PostgresSettings = PostgresSettings()
    matching: MatchingSettings = MatchingSettings()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
