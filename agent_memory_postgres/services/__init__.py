"""Service layer: capability verification, memory persistence, notifications."""

from agent_memory_postgres.services.notifier import Notifier
from agent_memory_postgres.services.persistence import MemoryPersistenceClient
from agent_memory_postgres.services.verifier import (
    FAILURE_MESSAGES,
    CapabilityVerifier,
    failure_messages,
    ollama_check,
    pgvector_check,
)

__all__ = [
    "FAILURE_MESSAGES",
    "CapabilityVerifier",
    "MemoryPersistenceClient",
    "Notifier",
    "failure_messages",
    "ollama_check",
    "pgvector_check",
]
