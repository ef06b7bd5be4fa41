"""Store access through the ``psql`` command-line client.

Authentication is left to libpq (``~/.pgpass``, ``PGPASSWORD``); ``-w``
makes psql fail instead of prompting.  ``ON_ERROR_STOP=1`` turns any SQL
error into a non-zero exit status.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from agent_memory_postgres.config import ConnectionSettings, resolve_connection
from agent_memory_postgres.core.errors import StoreError
from agent_memory_postgres.ports.host import CommandResult, CommandRunner

logger = logging.getLogger(__name__)


def build_psql_argv(binary: str, conn: ConnectionSettings, sql: str) -> list[str]:
    """Build the psql argument vector for one ``-c`` statement."""
    return [
        binary,
        "-w",
        "-h",
        conn.host,
        "-p",
        conn.port,
        "-U",
        conn.user,
        "-d",
        conn.database,
        "-v",
        "ON_ERROR_STOP=1",
        "-c",
        sql,
    ]


class PsqlClient:
    """Runs single statements against the store via the host's command runner."""

    def __init__(
        self,
        run: CommandRunner,
        binary: str = "psql",
        timeout: float | None = 30.0,
        connection: Callable[[], ConnectionSettings] = resolve_connection,
    ) -> None:
        """Initialize the client.

        Args:
            run: Command runner supplied by the host.
            binary: psql executable name or path.
            timeout: Seconds allowed per invocation.
            connection: Resolves connection parameters; called per statement
                so environment changes take effect without a restart.
        """
        self._run = run
        self._binary = binary
        self._timeout = timeout
        self._connection = connection

    async def execute(self, sql: str) -> CommandResult:
        """Execute one statement.

        Returns:
            The completed command (exit status zero).

        Raises:
            StoreError: If psql exits non-zero (connection, auth or SQL error).
            CommandTimeoutError: If psql exceeds the timeout.
            OSError: If psql cannot be started.
        """
        conn = self._connection()
        argv = build_psql_argv(self._binary, conn, sql)
        logger.debug(f"psql -h {conn.host} -p {conn.port} -U {conn.user} -d {conn.database}")
        result = await self._run(argv, timeout=self._timeout)
        if not result.ok:
            raise StoreError(
                f"psql exited with status {result.returncode}",
                returncode=result.returncode,
                stderr=result.stderr,
            )
        return result
