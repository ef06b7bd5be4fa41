"""Host client for the command-line entry point.

Outside an agent runtime there is no toast surface or host log, so both
calls are routed to Python logging (stderr).
"""

from __future__ import annotations

import logging

from agent_memory_postgres.ports.host import LogEntry, Toast

logger = logging.getLogger(__name__)

_TOAST_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class ConsoleHostClient:
    """Logs toasts and host log entries; keeps them for inspection."""

    def __init__(self) -> None:
        self.toasts: list[Toast] = []
        self.entries: list[LogEntry] = []

    async def show_toast(self, toast: Toast) -> None:
        self.toasts.append(toast)
        logger.log(_TOAST_LEVELS.get(toast.variant, logging.INFO), f"[{toast.title}] {toast.message}")

    async def log(self, entry: LogEntry) -> None:
        self.entries.append(entry)
        logger.log(_LOG_LEVELS.get(entry.level, logging.INFO), f"[{entry.service}] {entry.message}")
