"""Append-only JSONL event journal.

One JSON object per line, in append order.  The journal is diagnostic:
appends are fire-and-forget and every failure is swallowed so that a full
disk or a permission problem can never fail the calling hook.  Nothing in
the hook pipeline reads the journal back; :meth:`EventJournal.read_entries`
exists for the ``events`` CLI command.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from collections.abc import Callable
from pathlib import Path
from typing import Any

from agent_memory_postgres.core.models import EventKind, JournalEntry
from agent_memory_postgres.core.state_dir import StateDirectory
from agent_memory_postgres.core.utils import utc_timestamp

logger = logging.getLogger(__name__)


class EventJournal:
    """Writer for ``compaction-events.jsonl`` in the state directory."""

    def __init__(
        self,
        state_dir: StateDirectory,
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        """Initialize the journal.

        Args:
            state_dir: Directory that owns the journal file.
            clock: Returns the second-precision UTC timestamp for new entries.
        """
        self._state_dir = state_dir
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._state_dir.journal_path

    def append(self, entry: JournalEntry) -> bool:
        """Append one entry as a single line.

        Returns:
            ``True`` if the line was written, ``False`` if the append failed.
            Failures are never raised.
        """
        try:
            line = entry.to_json()
            self._state_dir.ensure_directory()
            with self._state_dir.journal_path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
            return True
        except Exception as e:
            logger.debug(f"Journal append failed for {entry.event}: {e}")
            return False

    def record(self, event: EventKind | str, time_utc: str | None = None, **fields: Any) -> JournalEntry:
        """Stamp and append an entry.

        Args:
            event: Event discriminator.
            time_utc: Timestamp to use instead of the clock (for entries
                whose time was captured before slow work ran).
            **fields: Event-specific fields.

        Returns:
            The entry that was (attempted to be) appended.
        """
        kind = event.value if isinstance(event, EventKind) else str(event)
        entry = JournalEntry(event=kind, time_utc=time_utc or self._clock(), fields=fields)
        self.append(entry)
        return entry

    def read_entries(self, limit: int | None = None) -> list[dict[str, Any]]:
        """Read back journal entries, oldest first.

        Lines that are not JSON objects are skipped.  A missing journal
        reads as empty.

        Args:
            limit: Keep only the last ``limit`` entries.
        """
        entries: deque[dict[str, Any]] = deque(maxlen=limit if limit and limit > 0 else None)
        try:
            with self._state_dir.journal_path.open(encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError:
                        continue
                    if isinstance(data, dict):
                        entries.append(data)
        except FileNotFoundError:
            return []
        return list(entries)
