"""Best-effort persistence of compaction memories to the external store.

One ``store_memory`` call per compaction, attempted once.  Failures
(store unreachable, auth, malformed statement) are captured and logged at
DEBUG; they never reach the hook.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from agent_memory_postgres.adapters.psql import PsqlClient
from agent_memory_postgres.core.models import MemoryRecord
from agent_memory_postgres.core.outcome import Outcome, attempt
from agent_memory_postgres.core.sql import render_store_memory_sql
from agent_memory_postgres.core.utils import utc_timestamp
from agent_memory_postgres.ports.host import CommandResult

logger = logging.getLogger(__name__)


class MemoryPersistenceClient:
    """Builds and fires the ``store_memory`` write for a compaction."""

    def __init__(
        self,
        psql: PsqlClient,
        directory: str,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        """Initialize the client.

        Args:
            psql: Store client used to execute the statement.
            directory: Working directory recorded with every memory.
            clock: Timestamp source for the record.
        """
        self._psql = psql
        self._directory = directory
        self._clock = clock

    def build_record(self, session_id: object) -> MemoryRecord:
        return MemoryRecord.for_compaction(session_id, self._directory, self._clock())

    def build_statement(self, session_id: object) -> str:
        """Render the statement for ``session_id`` without executing it."""
        return render_store_memory_sql(self.build_record(session_id))

    async def persist(self, session_id: object) -> Outcome[CommandResult]:
        """Attempt the write once.

        Returns:
            The captured outcome.  Callers in the hook path ignore it.
        """
        try:
            sql = self.build_statement(session_id)
        except Exception as e:
            logger.debug(f"Could not build store_memory statement: {e}")
            return Outcome(ok=False, error=e)

        outcome = await attempt(lambda: self._psql.execute(sql), label="store_memory")
        if outcome.ok:
            logger.debug(f"Stored compaction memory for session {session_id!r}")
        return outcome
