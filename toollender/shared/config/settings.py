# 📄 File: toollender/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The configuration center that reads settings from environment variables,
# like where the online database lives and where to keep the offline copy.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for backend selection, cache locations,
# collection names and connectivity probing.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - python-dotenv for .env file loading (via pydantic-settings)
#
# 🔄 Connected Modules / Calls From:
# - toollender.container (composition root)
# - toollender.shared.config.supabase / redis
# - toollender.shared.utils.logging

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


REMOTE_STORE_BACKENDS = ("supabase", "memory")
LOCAL_STORE_BACKENDS = ("file", "redis")


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="ToolLender", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=False, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format (json or text)")
    LOG_FILE: Optional[str] = Field(None, description="Optional log file path")

    # =========================================================================
    # REMOTE STORE
    # =========================================================================

    REMOTE_STORE_BACKEND: str = Field(
        default="supabase",
        description="Remote document store backend (supabase or memory)"
    )
    SUPABASE_URL: Optional[str] = Field(None, description="Supabase project URL")
    SUPABASE_ANON_KEY: Optional[str] = Field(None, description="Supabase anonymous key")
    SUPABASE_STORAGE_BUCKET: str = Field(
        default="tool-images",
        description="Supabase storage bucket for tool images"
    )

    TOOLS_COLLECTION: str = Field(default="tools", description="Tools collection name")
    USERS_COLLECTION: str = Field(default="users", description="Users collection name")
    ASSOCIATIONS_COLLECTION: str = Field(
        default="associations",
        description="Associations collection name"
    )

    # =========================================================================
    # LOCAL STORE
    # =========================================================================

    LOCAL_STORE_BACKEND: str = Field(
        default="file",
        description="Local cache backend (file or redis)"
    )
    LOCAL_CACHE_DIR: Path = Field(
        default=Path.home() / ".toollender" / "cache",
        description="Directory for file-backed local cache"
    )
    REDIS_URL: str = Field(default="redis://localhost:6379/0", description="Redis URL")
    REDIS_KEY_PREFIX: str = Field(default="toollender", description="Redis key prefix")
    REDIS_MAX_CONNECTIONS: int = Field(default=10, description="Redis connection pool size")

    # =========================================================================
    # CONNECTIVITY
    # =========================================================================

    CONNECTIVITY_PROBE_URL: Optional[str] = Field(
        None,
        description="URL polled to detect reachability (defaults to SUPABASE_URL)"
    )
    CONNECTIVITY_PROBE_INTERVAL: float = Field(
        default=15.0,
        description="Seconds between reachability probes"
    )
    CONNECTIVITY_PROBE_TIMEOUT: float = Field(
        default=5.0,
        description="Timeout for a single reachability probe"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the logging level."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    @field_validator("REMOTE_STORE_BACKEND")
    @classmethod
    def validate_remote_backend(cls, v: str) -> str:
        backend = v.lower()
        if backend not in REMOTE_STORE_BACKENDS:
            raise ValueError(f"REMOTE_STORE_BACKEND must be one of: {REMOTE_STORE_BACKENDS}")
        return backend

    @field_validator("LOCAL_STORE_BACKEND")
    @classmethod
    def validate_local_backend(cls, v: str) -> str:
        backend = v.lower()
        if backend not in LOCAL_STORE_BACKENDS:
            raise ValueError(f"LOCAL_STORE_BACKEND must be one of: {LOCAL_STORE_BACKENDS}")
        return backend

    @field_validator("CONNECTIVITY_PROBE_INTERVAL", "CONNECTIVITY_PROBE_TIMEOUT")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Connectivity probe timings must be positive")
        return v

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def is_testing(self) -> bool:
        return self.ENVIRONMENT.lower() in ("test", "testing")

    @property
    def probe_url(self) -> Optional[str]:
        """URL used by the reachability probe."""
        return self.CONNECTIVITY_PROBE_URL or self.SUPABASE_URL


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
