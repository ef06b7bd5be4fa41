"""Core components for the agent memory hook."""

from agent_memory_postgres.core.errors import (
    AgentMemoryError,
    CapabilityUnavailableError,
    CommandTimeoutError,
    ConfigurationError,
    StoreError,
)
from agent_memory_postgres.core.journal import EventJournal
from agent_memory_postgres.core.models import (
    Capability,
    EventKind,
    JournalEntry,
    MemoryRecord,
    SelectedCapabilities,
    SetupRecord,
    VerificationResult,
)
from agent_memory_postgres.core.outcome import Outcome, attempt
from agent_memory_postgres.core.sql import escape_sql_literal, render_store_memory_sql
from agent_memory_postgres.core.state_dir import StateDirectory
from agent_memory_postgres.core.utils import format_utc_timestamp, utc_now, utc_timestamp

__all__ = [
    # Errors
    "AgentMemoryError",
    "CapabilityUnavailableError",
    "CommandTimeoutError",
    "ConfigurationError",
    "StoreError",
    # Models
    "Capability",
    "EventKind",
    "JournalEntry",
    "MemoryRecord",
    "SelectedCapabilities",
    "SetupRecord",
    "VerificationResult",
    # Components
    "EventJournal",
    "Outcome",
    "StateDirectory",
    "attempt",
    # Utilities
    "escape_sql_literal",
    "format_utc_timestamp",
    "render_store_memory_sql",
    "utc_now",
    "utc_timestamp",
]
