"""Centralized settings for ScoutMerge via Pydantic BaseSettings.

All configuration is read from environment variables with the SCOUTMERGE_ prefix,
falling back to the defaults defined here. Set values in a .env file or export
them in the shell before starting the server or the CLI.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment variable names are formed by uppercasing the field name and
    prepending the SCOUTMERGE_ prefix.  Example: SCOUTMERGE_DATABASE_URL overrides
    database_url.
    """

    # Database
    database_url: str = "sqlite+aiosqlite:///./scoutmerge.db"
    create_tables_on_startup: bool = True

    # Aggregation
    # When False, every aggregation pass rebuilds conflicts from scratch and
    # previously resolved conflicts come back unresolved.
    preserve_resolutions: bool = False

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SCOUTMERGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Module-level singleton, imported throughout the codebase
settings = Settings()
