"""API service configuration.

Service-level settings are read from the environment (and an optional `.env`
file) through `pydantic-settings`. Database selection is deliberately *not*
modelled here: it follows its own precedence rules across several sources and
lives in `petstore_common.db.resolve()`. The only database knob on this object
is `db_env_fallback`, which decides whether the individual `DB_*` variables
are consulted before the hardcoded local defaults.
"""

from functools import lru_cache
import uuid

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the pet store API."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    port: int = 8082
    host: str = "0.0.0.0"
    app_version: str = "1.0.0"
    app_color: str = "blue"
    instance_uuid: str = Field(default_factory=lambda: str(uuid.uuid4()))
    log_level: str = "INFO"
    db_env_fallback: bool = True
    seed_database: bool = True
    cors_origins: list[str] = Field(default_factory=list)


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings, read once on first use."""
    return Settings()
