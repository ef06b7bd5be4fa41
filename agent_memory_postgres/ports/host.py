"""Protocol interfaces for the facilities the host runtime supplies.

The host constructs the plugin with a command runner and a client exposing
toast and log calls.  Using ``typing.Protocol`` keeps the plugin decoupled
from any particular host: the CLI supplies its own implementations in
``agent_memory_postgres.adapters``, tests supply mocks.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any, Literal, Protocol

ToastVariant = Literal["info", "success", "warning", "error"]
LogLevel = Literal["debug", "info", "warn", "error"]


@dataclass(frozen=True)
class CommandResult:
    """Completed external command."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class Toast:
    """Payload of the host notification call."""

    directory: str
    title: str
    message: str
    variant: ToastVariant = "info"
    duration: int = 8000

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class LogEntry:
    """Payload of the host logging call."""

    service: str
    level: LogLevel
    message: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class CommandRunner(Protocol):
    """Executes an external program and waits for it to exit.

    Implementations return a :class:`CommandResult` for any exit status and
    raise only when the program could not be run at all (missing binary,
    timeout).
    """

    async def __call__(
        self,
        argv: Sequence[str],
        *,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run ``argv`` without a shell.

        Args:
            argv: Program and arguments.
            timeout: Seconds before the program is killed.

        Returns:
            The completed command.

        Raises:
            CommandTimeoutError: If the program exceeds ``timeout``.
            OSError: If the program cannot be started.
        """
        ...


class HostClient(Protocol):
    """Notification and logging facilities of the host runtime."""

    async def show_toast(self, toast: Toast) -> None:
        """Show a transient user-facing notification."""
        ...

    async def log(self, entry: LogEntry) -> None:
        """Forward one line to the host's log."""
        ...
