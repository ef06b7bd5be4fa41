"""Component factory for dependency injection and initialization.

Centralizes how the plugin's components are created from settings and the
host-supplied context, so the hook dispatcher stays free of wiring and
tests can swap any single component.

Usage:
    from agent_memory_postgres.factory import ComponentFactory, PluginContext

    factory = ComponentFactory(settings)
    components = factory.create_all(PluginContext(directory, run, client))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from agent_memory_postgres.adapters.ollama import OllamaProbe
from agent_memory_postgres.adapters.psql import PsqlClient
from agent_memory_postgres.config import Settings
from agent_memory_postgres.core.journal import EventJournal
from agent_memory_postgres.core.models import Capability
from agent_memory_postgres.core.state_dir import StateDirectory
from agent_memory_postgres.ports.host import CommandRunner, HostClient
from agent_memory_postgres.services.notifier import Notifier
from agent_memory_postgres.services.persistence import MemoryPersistenceClient
from agent_memory_postgres.services.verifier import (
    CapabilityVerifier,
    failure_messages,
    ollama_check,
    pgvector_check,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PluginContext:
    """Dependency bundle the host passes when it loads the plugin.

    Attributes:
        directory: Working directory of the host session.
        run: Command runner used for the SQL client.
        client: Toast and log facilities.
    """

    directory: str
    run: CommandRunner
    client: HostClient


@dataclass
class PluginComponents:
    """Container for all initialized components.

    Attributes:
        state_dir: State directory accessor.
        journal: Event journal.
        notifier: Toast and host-log sender.
        psql: Store client.
        probe: Embedding service probe.
        verifier: Capability verifier.
        persistence: Memory persistence client.
    """

    state_dir: StateDirectory
    journal: EventJournal
    notifier: Notifier
    psql: PsqlClient
    probe: OllamaProbe
    verifier: CapabilityVerifier
    persistence: MemoryPersistenceClient


class ComponentFactory:
    """Factory for creating and wiring all components.

    Example:
        factory = ComponentFactory(settings)
        components = factory.create_all(context)
    """

    def __init__(
        self,
        settings: Settings,
        state_dir: StateDirectory | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the factory.

        Args:
            settings: Application settings.
            state_dir: Optional state directory override for testing.
            http_transport: Optional HTTP transport override for testing.
        """
        self._settings = settings
        self._injected_state_dir = state_dir
        self._http_transport = http_transport

    def create_state_dir(self) -> StateDirectory:
        if self._injected_state_dir is not None:
            return self._injected_state_dir
        return StateDirectory(self._settings.resolved_state_dir())

    def create_psql(self, run: CommandRunner) -> PsqlClient:
        return PsqlClient(
            run,
            binary=self._settings.psql_binary,
            timeout=self._settings.command_timeout_seconds,
        )

    def create_probe(self) -> OllamaProbe:
        return OllamaProbe(
            url=self._settings.ollama_url,
            timeout=self._settings.ollama_timeout_seconds,
            transport=self._http_transport,
        )

    def create_all(self, context: PluginContext) -> PluginComponents:
        """Create all components for one plugin instance.

        Args:
            context: Host-supplied dependency bundle.

        Returns:
            PluginComponents with everything wired together.
        """
        state_dir = self.create_state_dir()
        journal = EventJournal(state_dir)
        notifier = Notifier(
            context.client,
            context.directory,
            duration_ms=self._settings.toast_duration_ms,
        )
        psql = self.create_psql(context.run)
        probe = self.create_probe()

        verifier = CapabilityVerifier(
            state_dir,
            journal,
            notifier,
            checks={
                Capability.PGVECTOR: pgvector_check(psql),
                Capability.OLLAMA: ollama_check(probe),
            },
            messages=failure_messages(self._settings.ollama_url),
        )
        persistence = MemoryPersistenceClient(psql, context.directory)

        logger.debug(f"Plugin components created (state dir: {state_dir.path})")
        return PluginComponents(
            state_dir=state_dir,
            journal=journal,
            notifier=notifier,
            psql=psql,
            probe=probe,
            verifier=verifier,
            persistence=persistence,
        )
