"""Data models for the agent memory hook."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from agent_memory_postgres.core.errors import CapabilityUnavailableError

_UTC_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$")


class Capability(str, Enum):
    """Optional subsystems chosen during bootstrap."""

    PGVECTOR = "pgvector"
    OLLAMA = "ollama"


class EventKind(str, Enum):
    """Discriminator values written to the event journal."""

    PLUGIN_LOADED = "plugin.loaded"
    SETUP_VERIFIED = "setup.verified"
    SESSION_COMPACTING = "session.compacting"
    SESSION_COMPACTED = "session.compacted"


# =============================================================================
# Setup record (written by the external bootstrap, read-only here)
# =============================================================================


class SelectedCapabilities(BaseModel):
    """Capabilities the user opted into during bootstrap."""

    model_config = ConfigDict(extra="ignore")

    pgvector: bool = Field(default=False, description="Store has the vector extension")
    ollama: bool = Field(default=False, description="Local embedding service is running")

    @field_validator("pgvector", "ollama", mode="before")
    @classmethod
    def _as_flag(cls, value: Any) -> bool:
        """Read a flag by JSON truthiness: null, false, 0 and "" are off.

        Containers count as on, even when empty, so one odd sibling value
        never invalidates the whole selection.
        """
        if isinstance(value, (list, dict)):
            return True
        return bool(value)

    def enabled(self) -> list[Capability]:
        """Selected capabilities in verification order."""
        chosen = []
        if self.pgvector:
            chosen.append(Capability.PGVECTOR)
        if self.ollama:
            chosen.append(Capability.OLLAMA)
        return chosen


class SetupRecord(BaseModel):
    """Parsed ``setup.json``.

    ``selected`` is ``None`` when bootstrap ran without recording a choice,
    which is distinct from the file being absent or malformed (the reader
    returns ``None`` for the whole record in those cases).
    """

    model_config = ConfigDict(extra="ignore")

    selected: SelectedCapabilities | None = None


# =============================================================================
# Journal entries
# =============================================================================


@dataclass(frozen=True)
class JournalEntry:
    """One line of ``compaction-events.jsonl``.

    Frozen dataclass, immutable after construction.  ``fields`` holds the
    event-specific keys, serialized after ``event`` and ``time_utc``.
    """

    event: str
    time_utc: str
    fields: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.event:
            raise ValueError("Journal entry event must not be empty")
        if not _UTC_TIMESTAMP_RE.match(self.time_utc):
            raise ValueError(f"Journal entry time_utc must be second-precision UTC: {self.time_utc}")
        reserved = {"event", "time_utc"} & set(self.fields)
        if reserved:
            raise ValueError(f"Journal entry fields must not override {sorted(reserved)}")

    def to_dict(self) -> dict[str, Any]:
        return {"event": self.event, "time_utc": self.time_utc, **self.fields}

    def to_json(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))


# =============================================================================
# Verification
# =============================================================================


@dataclass
class VerificationResult:
    """Outcome of one capability verification pass.

    Capabilities that were not selected are absent from ``results``.
    ``failures`` keeps the reason for each ``False`` result; it is not
    journaled.
    """

    selected: SelectedCapabilities
    results: dict[str, bool] = field(default_factory=dict)
    time_utc: str = ""
    failures: dict[str, CapabilityUnavailableError] = field(default_factory=dict)

    @property
    def failed(self) -> list[str]:
        return [name for name, ok in self.results.items() if not ok]

    def journal_fields(self) -> dict[str, Any]:
        return {"selected": self.selected.model_dump(), "results": dict(self.results)}


# =============================================================================
# Memory record (constructed here, owned by the external store)
# =============================================================================

MEMORY_CATEGORY = "episodic"
MEMORY_SUBTYPE = "compaction"
MEMORY_TAGS: tuple[str, ...] = ("compaction", "opencode")
MEMORY_SOURCE = "opencode-plugin"
MEMORY_TITLE_PREFIX = "OpenCode Compaction"
MEMORY_RELEVANCE = 7.0


@dataclass(frozen=True)
class MemoryRecord:
    """Write request describing one compaction occurrence."""

    session_id: str
    cwd: str
    time_utc: str
    category: str = MEMORY_CATEGORY
    subtype: str = MEMORY_SUBTYPE
    tags: tuple[str, ...] = MEMORY_TAGS
    source: str = MEMORY_SOURCE
    relevance: float = MEMORY_RELEVANCE

    @classmethod
    def for_compaction(cls, session_id: object, cwd: object, time_utc: str) -> MemoryRecord:
        """Build the record for a compaction, normalizing missing values to ``""``."""
        return cls(
            session_id="" if session_id is None else str(session_id),
            cwd="" if cwd is None else str(cwd),
            time_utc=time_utc,
        )

    @property
    def title(self) -> str:
        return f"{MEMORY_TITLE_PREFIX} {self.session_id} {self.time_utc}"

    @property
    def body(self) -> str:
        return f"session_id={self.session_id} cwd={self.cwd} time_utc={self.time_utc}"

    @property
    def metadata(self) -> dict[str, str]:
        return {
            "session_id": self.session_id,
            "cwd": self.cwd,
            "time_utc": self.time_utc,
            "source": self.source,
        }
