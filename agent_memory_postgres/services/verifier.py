"""Capability verification for optionally-enabled subsystems.

Runs once when the plugin loads.  For each capability the setup record
selects, a live check decides ``True`` (reachable) or ``False`` (selected
but broken).  Each ``False`` shows one warning toast; the whole pass is
summarized in a single ``setup.verified`` journal entry.  Without a setup
record (or without a ``selected`` section) nothing is checked, journaled or
shown.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from agent_memory_postgres.core.errors import CapabilityUnavailableError
from agent_memory_postgres.core.journal import EventJournal
from agent_memory_postgres.core.models import Capability, EventKind, VerificationResult
from agent_memory_postgres.core.outcome import attempt
from agent_memory_postgres.core.sql import PGVECTOR_CHECK_SQL
from agent_memory_postgres.core.state_dir import StateDirectory
from agent_memory_postgres.core.utils import utc_timestamp
from agent_memory_postgres.services.notifier import Notifier

if TYPE_CHECKING:
    from agent_memory_postgres.adapters.ollama import OllamaProbe
    from agent_memory_postgres.adapters.psql import PsqlClient

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_BASE = "http://localhost:11434"

FAILURE_MESSAGES: dict[Capability, str] = {
    Capability.PGVECTOR: (
        'Setup selected pgvector=true but extension "vector" is not available '
        "(or psql auth failed)."
    ),
    Capability.OLLAMA: f"Setup selected ollama=true but {DEFAULT_OLLAMA_BASE} is not reachable.",
}


def failure_messages(ollama_url: str | None = None) -> dict[Capability, str]:
    """Toast texts, naming the configured embedding service origin.

    ``http://host:port/api/tags`` is shown as ``http://host:port``.
    """
    messages = dict(FAILURE_MESSAGES)
    if ollama_url:
        parts = urlsplit(ollama_url)
        base = f"{parts.scheme}://{parts.netloc}" if parts.scheme and parts.netloc else ollama_url
        messages[Capability.OLLAMA] = f"Setup selected ollama=true but {base} is not reachable."
    return messages


CheckFn = Callable[[], Awaitable[Any]]


class CapabilityVerifier:
    """Checks selected capabilities and records the outcome."""

    def __init__(
        self,
        state_dir: StateDirectory,
        journal: EventJournal,
        notifier: Notifier,
        checks: dict[Capability, CheckFn],
        clock: Callable[[], str] = utc_timestamp,
        messages: dict[Capability, str] | None = None,
    ) -> None:
        """Initialize the verifier.

        Args:
            state_dir: Source of the setup record.
            journal: Receives the ``setup.verified`` entry.
            notifier: Shows a warning per failed capability.
            checks: Live check per capability.  A check succeeds by returning
                and fails by raising.
            clock: Timestamp source for the journal entry.
            messages: Toast text per capability (defaults to
                :data:`FAILURE_MESSAGES`).
        """
        self._state_dir = state_dir
        self._journal = journal
        self._notifier = notifier
        self._checks = checks
        self._clock = clock
        self._messages = messages or FAILURE_MESSAGES

    async def verify(self) -> VerificationResult | None:
        """Run one verification pass.

        Returns:
            The result, or ``None`` when there is no setup selection to
            verify.  Never raises.
        """
        setup = self._state_dir.read_setup()
        if setup is None or setup.selected is None:
            logger.debug("No setup selection recorded; skipping capability verification")
            return None

        result = VerificationResult(selected=setup.selected, time_utc=self._clock())

        for capability in setup.selected.enabled():
            check = self._checks.get(capability)
            if check is None:
                outcome_ok = False
                reason = "no check configured"
            else:
                outcome = await attempt(check, label=f"{capability.value} check")
                outcome_ok = outcome.ok
                reason = outcome.reason

            result.results[capability.value] = outcome_ok
            if not outcome_ok:
                error = CapabilityUnavailableError(capability.value, reason)
                result.failures[capability.value] = error
                logger.info(f"Selected capability check failed: {error}")
                message = self._messages.get(capability, FAILURE_MESSAGES[capability])
                await self._notifier.toast(message, variant="warning")

        self._journal.record(
            EventKind.SETUP_VERIFIED,
            time_utc=result.time_utc,
            **result.journal_fields(),
        )
        return result


def pgvector_check(psql: PsqlClient) -> CheckFn:
    """Check that asks the store whether the ``vector`` extension is installed.

    Any successful execution counts, regardless of row count.
    """

    async def _check() -> Any:
        return await psql.execute(PGVECTOR_CHECK_SQL)

    return _check


def ollama_check(probe: OllamaProbe) -> CheckFn:
    """Check that requests the embedding service's model listing."""

    async def _check() -> Any:
        return await probe.check()

    return _check
