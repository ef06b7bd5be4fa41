"""Adapters for external systems: SQL client, embedding service, host facilities."""

from agent_memory_postgres.adapters.console_client import ConsoleHostClient
from agent_memory_postgres.adapters.ollama import OllamaProbe
from agent_memory_postgres.adapters.psql import PsqlClient
from agent_memory_postgres.adapters.subprocess_runner import SubprocessRunner

__all__ = [
    "ConsoleHostClient",
    "OllamaProbe",
    "PsqlClient",
    "SubprocessRunner",
]
