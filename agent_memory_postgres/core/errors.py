"""Custom exceptions for the agent memory hook.

Adapters raise these; services capture them with
:func:`agent_memory_postgres.core.outcome.attempt`.  None of them ever
reach the host runtime.
"""


class AgentMemoryError(Exception):
    """Base exception for all agent memory errors."""

    pass


class ConfigurationError(AgentMemoryError):
    """Raised when configuration is invalid."""

    pass


class StoreError(AgentMemoryError):
    """Raised when a statement against the external store fails.

    Carries the SQL client's exit status and the tail of its stderr so the
    failure can be logged without the full statement text.
    """

    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else ""
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class CommandTimeoutError(AgentMemoryError):
    """Raised when an external command exceeds its time budget."""

    def __init__(self, program: str, timeout: float) -> None:
        self.program = program
        self.timeout = timeout
        super().__init__(f"{program} did not finish within {timeout:g}s")


class CapabilityUnavailableError(AgentMemoryError):
    """Raised when an optional capability fails its reachability check."""

    def __init__(self, capability: str, reason: str) -> None:
        self.capability = capability
        self.reason = reason
        super().__init__(f"{capability} unavailable: {reason}")
