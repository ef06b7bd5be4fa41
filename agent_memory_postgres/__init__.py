"""Agent Memory Postgres - lifecycle hooks that journal session compactions
and persist them as episodic memories in PostgreSQL."""

__version__ = "0.1.0"

# Re-export core components for convenience
from agent_memory_postgres.config import Settings, get_settings, resolve_connection
from agent_memory_postgres.core import (
    AgentMemoryError,
    CapabilityUnavailableError,
    CommandTimeoutError,
    ConfigurationError,
    EventJournal,
    EventKind,
    JournalEntry,
    MemoryRecord,
    SetupRecord,
    StateDirectory,
    StoreError,
    escape_sql_literal,
)
from agent_memory_postgres.factory import PluginContext
from agent_memory_postgres.hooks.plugin import create_plugin, load_plugin

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "Settings",
    "get_settings",
    "resolve_connection",
    # Errors
    "AgentMemoryError",
    "CapabilityUnavailableError",
    "CommandTimeoutError",
    "ConfigurationError",
    "StoreError",
    # Models
    "EventKind",
    "JournalEntry",
    "MemoryRecord",
    "SetupRecord",
    # Components
    "EventJournal",
    "StateDirectory",
    "escape_sql_literal",
    # Host entry point
    "PluginContext",
    "create_plugin",
    "load_plugin",
]
