"""Stdin dispatcher for hosts that run hooks as processes.

Maps an event name from the command line to one of the plugin's hook
bindings, feeds it the JSON payload read from stdin and renders the hook's
response for stdout.

CLI usage::

    echo '{"sessionID":"abc"}' | python -m agent_memory_postgres hook pre-compact
    echo '{"type":"session.compacted","properties":{"sessionID":"abc"}}' \\
        | python -m agent_memory_postgres hook event

All exceptions are caught (fail-open).  Exit code is always 0.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import IO, Any

from agent_memory_postgres.hooks.models import CompactingOutput
from agent_memory_postgres.hooks.plugin import (
    COMPACTING_HOOK,
    EVENT_HOOK,
    SESSION_COMPACTED,
    HookFn,
)

logger = logging.getLogger(__name__)

MAX_STDIN_BYTES = 524_288

_EVENT_ALIASES: dict[str, str] = {
    # Canonical hook names
    COMPACTING_HOOK: COMPACTING_HOOK,
    EVENT_HOOK: EVENT_HOOK,
    # kebab-case (CLI)
    "pre-compact": COMPACTING_HOOK,
    "session-compacting": COMPACTING_HOOK,
    # camelCase / PascalCase
    "preCompact": COMPACTING_HOOK,
    "PreCompact": COMPACTING_HOOK,
}

_EVENT_TYPE_ALIASES: dict[str, str] = {
    SESSION_COMPACTED: SESSION_COMPACTED,
    "session-compacted": SESSION_COMPACTED,
    "post-compact": SESSION_COMPACTED,
    "postCompact": SESSION_COMPACTED,
    "PostCompact": SESSION_COMPACTED,
}


def normalize_event(raw: str) -> tuple[str, str | None] | None:
    """Resolve a CLI event name.

    Returns:
        ``(hook_name, event_type)`` where ``event_type`` is set when the
        name denotes a generic event of a specific type, or ``None`` if the
        name is not recognized.
    """
    hook = _EVENT_ALIASES.get(raw)
    if hook is not None:
        return hook, None
    event_type = _EVENT_TYPE_ALIASES.get(raw)
    if event_type is not None:
        return EVENT_HOOK, event_type
    if raw.startswith("session."):
        return EVENT_HOOK, raw
    return None


def parse_payload(raw: bytes | str) -> dict[str, Any]:
    """Parse a stdin payload; anything but a JSON object reads as ``{}``."""
    if not raw or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


async def dispatch(
    hooks: Mapping[str, HookFn],
    hook_name: str,
    data: dict[str, Any],
    event_type: str | None = None,
) -> dict[str, Any] | None:
    """Invoke one hook binding with a parsed payload.

    Args:
        hooks: Bindings returned by ``create_plugin``.
        hook_name: Canonical hook name.
        data: Parsed stdin payload.
        event_type: For generic events named on the command line, the
            event type to use when the payload does not carry one.

    Returns:
        ``{"context": [...]}`` for compaction, ``None`` otherwise.
    """
    handler = hooks.get(hook_name)
    if handler is None:
        return None

    if hook_name == COMPACTING_HOOK:
        existing = data.get("context")
        output = CompactingOutput(context=list(existing) if isinstance(existing, list) else [])
        await handler(data, output)
        return {"context": output.context}

    if event_type and "type" not in data and "event" not in data:
        data = {"type": event_type, "properties": data}
    await handler(data)
    return None


def write_response(response: dict[str, Any] | None, stdout: IO[str]) -> None:
    if response is None:
        return
    json.dump(response, stdout, ensure_ascii=False)
    stdout.write("\n")
    stdout.flush()
