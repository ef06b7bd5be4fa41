"""Hook input/output types and coercion from host payloads.

Hosts may call the hooks with these dataclasses or with the plain
mappings they natively produce (``{"sessionID": ...}``,
``{"context": [...]}``, ``{"type": ..., "properties": {...}}``).  The
``coerce_*`` helpers accept either and never raise on unexpected shapes.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CompactingInput:
    """Input of the pre-compaction hook.

    Frozen dataclass, immutable after construction.
    """

    session_id: str | None = None


@dataclass
class CompactingOutput:
    """Output of the pre-compaction hook.

    ``context`` is appended to in place; the host reads it after the hook
    returns.
    """

    context: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class HookEvent:
    """Generic event notification from the host."""

    type: str = ""
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def session_id(self) -> Any:
        return self.properties.get("sessionID", self.properties.get("session_id"))


def coerce_compacting_input(raw: object) -> CompactingInput:
    """Build a :class:`CompactingInput` from a dataclass, mapping or object."""
    if isinstance(raw, CompactingInput):
        return raw
    if isinstance(raw, Mapping):
        session_id = raw.get("sessionID", raw.get("session_id"))
    else:
        session_id = getattr(raw, "sessionID", getattr(raw, "session_id", None))
    return CompactingInput(session_id=None if session_id is None else str(session_id))


def output_context(raw: object) -> list[str]:
    """Return the mutable context list of a compaction output.

    Mappings without a ``context`` list get one inserted so that appends
    are visible to the host.

    Raises:
        TypeError: If ``raw`` exposes no appendable context list.
    """
    context = raw.get("context") if isinstance(raw, Mapping) else getattr(raw, "context", None)
    if isinstance(context, list):
        return context
    if context is None and isinstance(raw, MutableMapping):
        created: list[str] = []
        raw["context"] = created
        return created
    raise TypeError(f"Compaction output has no context list: {type(raw).__name__}")


def coerce_hook_event(raw: object) -> HookEvent:
    """Build a :class:`HookEvent`.

    Accepts the event itself or the ``{"event": {...}}`` envelope some
    hosts pass.
    """
    if isinstance(raw, HookEvent):
        return raw
    if isinstance(raw, Mapping) and isinstance(raw.get("event"), (Mapping, HookEvent)):
        return coerce_hook_event(raw["event"])
    if isinstance(raw, Mapping):
        event_type = raw.get("type", "")
        properties = raw.get("properties", {})
    else:
        event_type = getattr(raw, "type", "")
        properties = getattr(raw, "properties", {})
    return HookEvent(
        type=str(event_type or ""),
        properties=dict(properties) if isinstance(properties, Mapping) else {},
    )
