"""
Configuration management.

Loads settings from environment variables and .env file.
Prefix: THINKMEM_
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="THINKMEM_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Storage
    data_dir: Path = Field(
        default=Path.home() / ".thinkmem", description="Data storage directory"
    )
    db_name: str = Field(default="current.db", description="JSON database file name")

    # Cross-process advisory lock
    use_file_lock: bool = Field(default=False, description="Hold an advisory lock on the database")
    lock_stale_seconds: float = Field(default=30.0, description="Lock age after which it is broken")
    lock_heartbeat_seconds: float = Field(default=10.0, description="Lock refresh interval")
    lock_timeout_seconds: float = Field(default=30.0, description="Max wait to acquire the lock")

    # Auth
    require_secret: bool = Field(default=True, description="Mutating tools require a secret")
    secret_ttl_hours: float = Field(default=1.0, description="Secret lifetime in hours")

    # Similarity search (reserved, not used by the store)
    sim_mode: Literal["levenshtein", "cosine"] = Field(
        default="levenshtein", description="Similarity mode for memory search"
    )
    emb_key: str = Field(default="", description="Embedding API key for cosine mode")

    # AI guide
    guide_file: Path | None = Field(default=None, description="Override for the built-in guide")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


def get_settings() -> Settings:
    """Get settings instance."""
    return Settings()
