"""Protocol interfaces for the host runtime facilities."""

from agent_memory_postgres.ports.host import (
    CommandResult,
    CommandRunner,
    HostClient,
    LogEntry,
    Toast,
)

__all__ = [
    "CommandResult",
    "CommandRunner",
    "HostClient",
    "LogEntry",
    "Toast",
]
