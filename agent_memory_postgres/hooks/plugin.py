"""Hook dispatcher: the object the host runtime loads.

The host calls :func:`create_plugin` once with a :class:`PluginContext`
and receives a mapping of hook name to async callable:

``experimental.session.compacting``
    Called before the host compacts a session.  Journals the occurrence,
    appends guidance blocks to ``output.context`` and fires one best-effort
    ``store_memory`` write.

``event``
    Called for every host event.  Only ``session.compacted`` is handled;
    everything else is ignored.

**Fail-open**: no exception crosses the hook boundary.  The hooks keep no
state between invocations beyond the state directory files.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from agent_memory_postgres.config import SERVICE_NAME, Settings, get_settings
from agent_memory_postgres.core.errors import ConfigurationError
from agent_memory_postgres.core.models import EventKind
from agent_memory_postgres.core.outcome import attempt
from agent_memory_postgres.factory import ComponentFactory, PluginComponents, PluginContext
from agent_memory_postgres.hooks.models import (
    coerce_compacting_input,
    coerce_hook_event,
    output_context,
)

logger = logging.getLogger(__name__)

COMPACTING_HOOK = "experimental.session.compacting"
EVENT_HOOK = "event"
SESSION_COMPACTED = "session.compacted"

SETUP_MISSING_MESSAGE = (
    "Optional setup not completed. Run bootstrap to enable pgpass/pgvector/Ollama "
    "and record setup.json."
)

SETUP_MISSING_CONTEXT = f"""## Setup Missing ({SERVICE_NAME})
- Ask the user if they want to enable optional components: pgpass, pgvector, local embeddings (Ollama)
- Record the choice by running the bootstrap script in the skill directory (writes setup.json)
- Recommended: install all optional components, then fix any failures reported
"""

MEMORY_SYSTEM_CONTEXT = f"""## Memory System ({SERVICE_NAME})
- Use store_memory(...) after solving non-obvious problems
- Compaction is logged (local jsonl + optional Postgres write)
"""

COMPACTED_LOG_MESSAGE = "Session compacted (logged)"

HookFn = Callable[..., Awaitable[None]]


class MemoryHookPlugin:
    """Composes journal, verifier and persistence per host event."""

    def __init__(self, context: PluginContext, components: PluginComponents) -> None:
        self._directory = context.directory
        self._components = components

    @property
    def components(self) -> PluginComponents:
        return self._components

    async def on_load(self, verify_setup: bool = True) -> None:
        """Load sequence: journal, setup-missing toast, capability verification.

        ``verify_setup=False`` skips the live checks (one-shot CLI hooks).
        """
        c = self._components
        c.journal.record(EventKind.PLUGIN_LOADED, cwd=self._directory)

        if not c.state_dir.has_setup():
            await c.notifier.toast(SETUP_MISSING_MESSAGE, variant="warning")

        if verify_setup:
            await attempt(c.verifier.verify, label="setup verification")

    async def on_compacting(self, input: Any, output: Any) -> None:
        """Pre-compaction hook.  Returns normally in all cases."""
        c = self._components
        session_id = coerce_compacting_input(input).session_id

        c.journal.record(EventKind.SESSION_COMPACTING, session_id=session_id, cwd=self._directory)

        try:
            context = output_context(output)
            if not c.state_dir.has_setup():
                context.append(SETUP_MISSING_CONTEXT)
            context.append(MEMORY_SYSTEM_CONTEXT)
        except Exception as e:
            logger.debug(f"Could not extend compaction context: {e}")

        await c.persistence.persist(session_id)

    async def on_event(self, event: Any) -> None:
        """Generic event hook.  Only ``session.compacted`` has an effect."""
        try:
            hook_event = coerce_hook_event(event)
        except Exception as e:
            logger.debug(f"Ignoring unreadable event: {e}")
            return
        if hook_event.type != SESSION_COMPACTED:
            return

        c = self._components
        c.journal.record(
            EventKind.SESSION_COMPACTED,
            session_id=hook_event.session_id,
            cwd=self._directory,
        )
        await c.notifier.log(COMPACTED_LOG_MESSAGE, level="info")

    def hooks(self) -> dict[str, HookFn]:
        """Named hook bindings handed back to the host."""
        return {
            COMPACTING_HOOK: self.on_compacting,
            EVENT_HOOK: self.on_event,
        }


def _settings_or_defaults() -> Settings:
    """Effective settings; built-in defaults when the environment is invalid."""
    try:
        return get_settings()
    except ConfigurationError as e:
        logger.warning(f"{e}; continuing with default settings")
        return Settings.model_construct()


async def load_plugin(
    context: PluginContext,
    *,
    settings: Settings | None = None,
    factory: ComponentFactory | None = None,
    verify_setup: bool = True,
) -> MemoryHookPlugin:
    """Build the plugin and run its load sequence.

    Args:
        context: Host-supplied dependency bundle.
        settings: Settings override (defaults to :func:`get_settings`, or the
            built-in defaults when the environment holds invalid values).
        factory: Component factory override for testing.
        verify_setup: Run the capability verification pass.

    Returns:
        The loaded plugin instance.
    """
    factory = factory or ComponentFactory(settings or _settings_or_defaults())
    plugin = MemoryHookPlugin(context, factory.create_all(context))
    await plugin.on_load(verify_setup=verify_setup)
    return plugin


async def create_plugin(
    context: PluginContext,
    *,
    settings: Settings | None = None,
    factory: ComponentFactory | None = None,
    verify_setup: bool = True,
) -> dict[str, HookFn]:
    """Host entry point: load the plugin and return its hook bindings."""
    plugin = await load_plugin(
        context, settings=settings, factory=factory, verify_setup=verify_setup
    )
    return plugin.hooks()
