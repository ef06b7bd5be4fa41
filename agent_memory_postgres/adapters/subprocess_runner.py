"""Default command runner for hosts without their own (the CLI).

Runs programs with ``asyncio.create_subprocess_exec`` (no shell), so the
generated SQL is passed as a single argument and never re-parsed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from agent_memory_postgres.core.errors import CommandTimeoutError
from agent_memory_postgres.ports.host import CommandResult

logger = logging.getLogger(__name__)


class SubprocessRunner:
    """Async command runner with a per-call timeout."""

    def __init__(self, default_timeout: float | None = None) -> None:
        self._default_timeout = default_timeout

    async def __call__(
        self,
        argv: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> CommandResult:
        if not argv:
            raise ValueError("argv must not be empty")
        limit = timeout if timeout is not None else self._default_timeout

        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=limit)
        except asyncio.TimeoutError:
            await _terminate(proc)
            raise CommandTimeoutError(argv[0], limit or 0.0) from None
        except BaseException:
            await _terminate(proc)
            raise

        returncode = proc.returncode if proc.returncode is not None else -1
        if returncode != 0:
            logger.debug(f"{argv[0]} exited with status {returncode}")
        return CommandResult(
            argv=tuple(argv),
            returncode=returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    """Kill a child that is still running and reap it."""
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
    await proc.wait()
