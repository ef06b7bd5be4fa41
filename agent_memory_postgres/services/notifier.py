"""User-facing notifications and host log forwarding.

Both calls go through :func:`attempt`; a host that rejects or fails the
call never affects the hook that triggered it.
"""

from __future__ import annotations

from agent_memory_postgres.config import SERVICE_NAME
from agent_memory_postgres.core.outcome import Outcome, attempt
from agent_memory_postgres.ports.host import HostClient, LogEntry, LogLevel, Toast, ToastVariant


class Notifier:
    """Sends toasts and log lines to the host on behalf of the plugin."""

    def __init__(
        self,
        client: HostClient,
        directory: str,
        title: str = SERVICE_NAME,
        duration_ms: int = 8000,
    ) -> None:
        self._client = client
        self._directory = directory
        self._title = title
        self._duration_ms = duration_ms

    async def toast(self, message: str, variant: ToastVariant = "warning") -> Outcome[None]:
        toast = Toast(
            directory=self._directory,
            title=self._title,
            message=message,
            variant=variant,
            duration=self._duration_ms,
        )
        return await attempt(lambda: self._client.show_toast(toast), label="show_toast")

    async def log(self, message: str, level: LogLevel = "info") -> Outcome[None]:
        entry = LogEntry(service=SERVICE_NAME, level=level, message=message)
        return await attempt(lambda: self._client.log(entry), label="host log")
