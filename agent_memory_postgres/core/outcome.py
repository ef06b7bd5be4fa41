"""Outcome capture for fallible external calls.

Every call that leaves the process (SQL client, HTTP probe, host toast and
log calls) goes through :func:`attempt`.  The combinator awaits the
operation, captures success or failure into an :class:`Outcome`, logs the
failure at DEBUG and never re-raises.  Callers branch on ``outcome.ok``
instead of wrapping each call in its own ``try`` block.

``asyncio.CancelledError`` derives from ``BaseException`` and is not
captured, so cancellation by the host loop still propagates.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Captured result of one attempted operation."""

    ok: bool
    value: T | None = None
    error: Exception | None = None

    @property
    def reason(self) -> str:
        """Human-readable failure reason, empty on success."""
        if self.error is None:
            return ""
        return str(self.error) or type(self.error).__name__


async def attempt(operation: Callable[[], Awaitable[T]], *, label: str) -> Outcome[T]:
    """Run an async operation and capture its outcome.

    Args:
        operation: Zero-argument callable returning an awaitable.
        label: Short name used in the DEBUG log line on failure.

    Returns:
        ``Outcome(ok=True, value=...)`` on success, otherwise
        ``Outcome(ok=False, error=...)``.
    """
    try:
        value = await operation()
    except Exception as exc:
        logger.debug(f"{label} failed: {type(exc).__name__}: {exc}")
        return Outcome(ok=False, error=exc)
    return Outcome(ok=True, value=value)
