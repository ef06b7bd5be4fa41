"""Configuration system for the agent memory hook."""

from __future__ import annotations

import getpass
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

STATE_DIR_NAME = "agent-memory-systems-postgres"
SETUP_FILENAME = "setup.json"
JOURNAL_FILENAME = "compaction-events.jsonl"
SERVICE_NAME = "agent-memory-systems-postgres"

DEFAULT_PG_HOST = "localhost"
DEFAULT_PG_PORT = "5432"
DEFAULT_PG_DATABASE = "agent_memory"
FALLBACK_PG_USER = "postgres"


def default_state_dir() -> Path:
    """Per-user state directory: ``~/.config/opencode/agent-memory-systems-postgres``."""
    return Path.home() / ".config" / "opencode" / STATE_DIR_NAME


def default_pg_user() -> str:
    """Current OS user name, or ``postgres`` if the lookup fails."""
    try:
        return getpass.getuser()
    except Exception:
        return FALLBACK_PG_USER


class Settings(BaseSettings):
    """Agent Memory Hook Configuration."""

    # Storage
    state_dir: Path | None = Field(
        default=None,
        description="State directory holding setup.json and the event journal "
        "(defaults to ~/.config/opencode/agent-memory-systems-postgres)",
    )

    # External store
    psql_binary: str = Field(
        default="psql",
        description="SQL client executable used to reach the store",
    )
    command_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Upper bound for each SQL client invocation",
    )

    # Embedding service
    ollama_url: str = Field(
        default="http://localhost:11434/api/tags",
        description="Reachability endpoint of the local embedding service",
    )
    ollama_timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        description="Timeout for the embedding service reachability request",
    )

    # Host notifications
    toast_duration_ms: int = Field(
        default=8000,
        ge=0,
        description="Duration of warning toasts shown by the host",
    )

    # Logging (CLI only; the host owns logging when embedded)
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON log lines instead of plain text",
    )

    model_config = SettingsConfigDict(
        env_prefix="AGENT_MEMORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def resolved_state_dir(self) -> Path:
        return self.state_dir if self.state_dir is not None else default_state_dir()


class ConnectionSettings(BaseSettings):
    """Store connection parameters read from the libpq environment variables.

    Each value defaults independently.  Values are kept as strings and
    handed to the SQL client verbatim.
    """

    host: str = Field(default=DEFAULT_PG_HOST, validation_alias="PGHOST")
    port: str = Field(default=DEFAULT_PG_PORT, validation_alias="PGPORT")
    database: str = Field(
        default=DEFAULT_PG_DATABASE,
        validation_alias="PGDATABASE",
    )
    user: str = Field(
        default_factory=default_pg_user,
        validation_alias="PGUSER",
    )

    model_config = SettingsConfigDict(extra="ignore")


def resolve_connection() -> ConnectionSettings:
    """Resolve store connection parameters from the current environment.

    Not cached: each call re-reads the environment.
    """
    return ConnectionSettings()


# Settings singleton with dependency injection support
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the settings instance (lazy-loaded singleton).

    Returns:
        The Settings instance.

    Raises:
        ConfigurationError: If an ``AGENT_MEMORY_*`` value is invalid.

    Example:
        from agent_memory_postgres.config import get_settings
        settings = get_settings()
        print(settings.resolved_state_dir())
    """
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except ValidationError as e:
            from agent_memory_postgres.core.errors import ConfigurationError

            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise ConfigurationError(f"Invalid settings: {fields or e.error_count()}") from e
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override the settings instance (for testing).

    Args:
        new_settings: The new Settings instance to use.
    """
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to None (forces reload on next get_settings call)."""
    global _settings
    _settings = None


def settings_summary(settings: Settings) -> dict[str, Any]:
    """JSON-friendly view of the effective settings."""
    data = settings.model_dump()
    data["state_dir"] = str(settings.resolved_state_dir())
    return data
