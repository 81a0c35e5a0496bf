"""Settings read from the environment and an optional ``.env`` file."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

WEAK_SECRETS = frozenset({"change-me-in-production", "secret", "password", "changeme"})
MIN_SECRET_LENGTH = 32


class Settings(BaseSettings):
    """Movie Catalog configuration. Every field maps to the upper-cased env var."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "Movie Catalog API"
    debug: bool = False
    secret_key: str = Field(min_length=1)

    database_url: str = "sqlite+aiosqlite:///./movie_catalog.db"

    # Applies to every outbound request; a timeout is reported as an upstream failure
    http_timeout: float = Field(default=10.0, gt=0)

    tmdb_api_key: str = ""
    tmdb_base_url: str = "https://api.themoviedb.org/3"

    # New release ingestion
    release_source_url: str = "https://www.dvdsreleasedates.com/"
    ingest_schedule_enabled: bool = True
    ingest_cron: str = "0 6 * * *"
    ingest_concurrency: int = Field(default=8, ge=1)

    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60

    @model_validator(mode="after")
    def check_secret_strength(self) -> "Settings":
        """Outside debug mode the signing key must be long and not a placeholder."""
        if self.debug:
            return self
        if len(self.secret_key) < MIN_SECRET_LENGTH:
            raise ValueError(
                f"SECRET_KEY must be at least {MIN_SECRET_LENGTH} characters unless DEBUG is on"
            )
        if self.secret_key in WEAK_SECRETS:
            raise ValueError("SECRET_KEY must not be a common weak value")
        return self

    @property
    def ingestion_possible(self) -> bool:
        return self.ingest_schedule_enabled and bool(self.tmdb_api_key)

    def validate_runtime_config(self) -> list[str]:
        """Problems worth a warning at startup that do not stop the app."""
        warnings = []
        if not self.tmdb_api_key:
            warnings.append("TMDB_API_KEY is not set; movie search will fail")
            if self.ingest_schedule_enabled:
                warnings.append(
                    "INGEST_SCHEDULE_ENABLED is on but new releases cannot be enriched "
                    "without TMDB_API_KEY; the ingestion job is not scheduled"
                )
        if self.debug:
            warnings.append("DEBUG is enabled; disable it in production")
        return warnings


@lru_cache
def get_settings() -> Settings:
    return Settings()
