"""Application configuration from environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rolegraph.infrastructure.persistence.file.persistence_manager import PersistenceConfig


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Ory Keto
    keto_read_url: str = Field(
        default="http://localhost:4466",
        description="Keto read API URL",
    )
    keto_write_url: str = Field(
        default="http://localhost:4467",
        description="Keto write (admin) API URL",
    )
    keto_timeout: float = Field(default=5.0, gt=0, description="Keto request timeout, seconds")
    keto_default_namespace: str = Field(
        default="simple-rbac",
        description="Namespace used when a request carries no X-Keto-Namespace header",
    )
    default_resource_collection: str = Field(
        default="items",
        description="Suffix appended to unqualified resources (product -> product:items)",
    )

    # Role catalog
    max_inheritance_depth: int = Field(
        default=5, ge=1, description="Chain depth above which a warning is reported"
    )
    seed_demo_roles: bool = Field(default=True, description="Seed demo roles into an empty catalog")

    # File persistence
    storage_file_path: Path | None = Field(
        default=None,
        description="Storage JSON file; unset runs the catalog in memory only",
    )
    storage_backup_dir: Path | None = Field(
        default=None,
        description="Backup directory (default: <storage file dir>/backups)",
    )
    storage_max_backups: int = Field(default=10, ge=0, description="Backups to keep")
    storage_autosave_interval: float = Field(
        default=30.0, ge=0, description="Autosave interval in seconds, 0 disables"
    )
    storage_compression: bool = Field(default=False, description="Gzip backup files")
    storage_save_on_write: bool = Field(
        default=True, description="Save after every role mutation"
    )

    # HTTP
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=3001, description="Bind port")
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated allowed CORS origins",
    )

    # Application
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment name",
    )
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Debug mode")

    def persistence_config(self) -> PersistenceConfig | None:
        """File persistence config, or None for memory-only mode."""
        if self.storage_file_path is None:
            return None
        return PersistenceConfig(
            data_file_path=self.storage_file_path,
            backup_dir=self.storage_backup_dir or self.storage_file_path.parent / "backups",
            max_backups=self.storage_max_backups,
            autosave_interval=self.storage_autosave_interval,
            compression=self.storage_compression,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
