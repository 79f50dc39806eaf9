"""Engine configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from ``FLATDATA_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FLATDATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = False

    # Repositories
    repositories_path: Path = Field(default=Path("data"))
    loader: Literal["yaml", "json"] = "yaml"

    # Hydration
    hydrate_local_relations: bool = True
    hydrate_foreign_relations: bool = True

    # Cache (none = hydrate on every getRepository call)
    cache_backend: Literal["none", "memory", "file"] = "none"
    cache_dir: Path = Field(default=Path(".cache/flatdata"))
    cache_ttl: int | None = None  # seconds; None keeps entries forever
    cache_key_prefix: str = "flat-data-repository:"

    @field_validator("debug", "hydrate_local_relations", "hydrate_foreign_relations", mode="before")
    @classmethod
    def normalize_bool(cls, v) -> bool:
        """Normalize boolean values, handling quoted strings."""
        if isinstance(v, str):
            v = v.strip().strip('"').strip("'").lower()
            return v in ("true", "1", "yes", "on")
        return bool(v)

    @field_validator("loader", "cache_backend", mode="before")
    @classmethod
    def normalize_choice(cls, v: str) -> str:
        """Strip quotes and case from choice values."""
        if isinstance(v, str):
            return v.strip().strip('"').strip("'").lower()
        return v

    @property
    def use_cache(self) -> bool:
        """Check if a cache backend is configured."""
        return self.cache_backend != "none"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
