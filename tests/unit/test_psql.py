"""Unit tests for agent_memory_postgres.adapters.psql and connection resolution."""

from __future__ import annotations

import getpass
from unittest.mock import patch

import pytest

from agent_memory_postgres.adapters.psql import PsqlClient, build_psql_argv
from agent_memory_postgres.config import ConnectionSettings, resolve_connection
from agent_memory_postgres.core.errors import CommandTimeoutError, StoreError
from tests.fakes import FakeRunner

# =============================================================================
# Connection resolution
# =============================================================================


@pytest.mark.unit
class TestResolveConnection:
    def test_defaults(self) -> None:
        with patch.object(getpass, "getuser", return_value="alice"):
            conn = resolve_connection()
        assert conn.host == "localhost"
        assert conn.port == "5432"
        assert conn.database == "agent_memory"
        assert conn.user == "alice"

    def test_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PGHOST", "db.internal")
        monkeypatch.setenv("PGPORT", "6543")
        monkeypatch.setenv("PGDATABASE", "memories")
        monkeypatch.setenv("PGUSER", "agent")
        conn = resolve_connection()
        assert (conn.host, conn.port, conn.database, conn.user) == (
            "db.internal",
            "6543",
            "memories",
            "agent",
        )

    def test_each_defaults_independently(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PGPORT", "15432")
        with patch.object(getpass, "getuser", return_value="bob"):
            conn = resolve_connection()
        assert conn.port == "15432"
        assert conn.host == "localhost"
        assert conn.database == "agent_memory"
        assert conn.user == "bob"

    def test_user_lookup_failure_falls_back(self) -> None:
        with patch.object(getpass, "getuser", side_effect=OSError("no user")):
            assert resolve_connection().user == "postgres"

    def test_not_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PGHOST", "first")
        assert resolve_connection().host == "first"
        monkeypatch.setenv("PGHOST", "second")
        assert resolve_connection().host == "second"

    def test_non_numeric_port_passed_verbatim(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PGPORT", "not-a-port")
        assert resolve_connection().port == "not-a-port"


# =============================================================================
# psql invocation
# =============================================================================


def _conn() -> ConnectionSettings:
    return ConnectionSettings(PGHOST="h", PGPORT="1", PGDATABASE="d", PGUSER="u")


@pytest.mark.unit
class TestBuildArgv:
    def test_argv(self) -> None:
        assert build_psql_argv("psql", _conn(), "SELECT 1;") == [
            "psql",
            "-w",
            "-h",
            "h",
            "-p",
            "1",
            "-U",
            "u",
            "-d",
            "d",
            "-v",
            "ON_ERROR_STOP=1",
            "-c",
            "SELECT 1;",
        ]

    def test_sql_is_single_argument(self) -> None:
        sql = "SELECT 'a b; c';"
        argv = build_psql_argv("psql", _conn(), sql)
        assert argv[-1] == sql


@pytest.mark.unit
class TestPsqlClient:
    @pytest.mark.asyncio
    async def test_success(self) -> None:
        runner = FakeRunner(stdout="1\n")
        client = PsqlClient(runner, binary="/usr/bin/psql", timeout=3.0, connection=_conn)
        result = await client.execute("SELECT 1;")
        assert result.ok
        assert runner.calls[0][0] == "/usr/bin/psql"
        assert runner.timeouts == [3.0]

    @pytest.mark.asyncio
    async def test_nonzero_exit_raises_store_error(self) -> None:
        runner = FakeRunner(returncode=2, stderr="psql: error: connection refused\n")
        client = PsqlClient(runner, connection=_conn)
        with pytest.raises(StoreError, match="connection refused") as exc_info:
            await client.execute("SELECT 1;")
        assert exc_info.value.returncode == 2

    @pytest.mark.asyncio
    async def test_runner_errors_propagate(self) -> None:
        runner = FakeRunner(raises=CommandTimeoutError("psql", 1.0))
        client = PsqlClient(runner, connection=_conn)
        with pytest.raises(CommandTimeoutError):
            await client.execute("SELECT 1;")

    @pytest.mark.asyncio
    async def test_connection_resolved_per_call(self, monkeypatch: pytest.MonkeyPatch) -> None:
        runner = FakeRunner()
        client = PsqlClient(runner)
        monkeypatch.setenv("PGHOST", "one")
        await client.execute("SELECT 1;")
        monkeypatch.setenv("PGHOST", "two")
        await client.execute("SELECT 1;")
        hosts = [argv[argv.index("-h") + 1] for argv in runner.calls]
        assert hosts == ["one", "two"]
