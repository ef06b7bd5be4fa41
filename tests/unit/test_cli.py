"""Unit tests for the command-line entry point."""

from __future__ import annotations

import io
import json
import logging
import sys
from pathlib import Path

import pytest

from agent_memory_postgres import __main__ as cli
from agent_memory_postgres.config import Settings, reset_settings
from agent_memory_postgres.core.journal import EventJournal
from agent_memory_postgres.core.state_dir import StateDirectory
from agent_memory_postgres.factory import ComponentFactory, PluginContext
from agent_memory_postgres.hooks.plugin import MEMORY_SYSTEM_CONTEXT, SETUP_MISSING_CONTEXT
from tests.fakes import FakeRunner, read_journal, write_setup


@pytest.fixture(autouse=True)
def restore_logging():
    """main() reconfigures the root logger; put pytest's handlers back."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def fake_context(monkeypatch: pytest.MonkeyPatch, context: PluginContext) -> PluginContext:
    monkeypatch.setattr(cli, "_cli_context", lambda directory: context)
    return context


def _stdin(monkeypatch: pytest.MonkeyPatch, payload: bytes) -> None:
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(payload)))


@pytest.mark.unit
class TestParser:
    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_events_limit(self) -> None:
        args = cli.build_parser().parse_args(["events", "-n", "5"])
        assert args.limit == 5
        assert args.func is cli.run_events

    def test_hook_directory(self) -> None:
        args = cli.build_parser().parse_args(["hook", "pre-compact", "--directory", "/w"])
        assert (args.event, args.directory) == ("pre-compact", "/w")


@pytest.mark.unit
class TestHookCommand:
    def test_pre_compact_prints_context(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
        test_settings: Settings,
        fake_context: PluginContext,
        state_dir: StateDirectory,
        runner: FakeRunner,
    ) -> None:
        _stdin(monkeypatch, b'{"sessionID": "s1"}')

        assert cli.main(["hook", "pre-compact"]) == 0

        response = json.loads(capsys.readouterr().out)
        assert response == {"context": [SETUP_MISSING_CONTEXT, MEMORY_SYSTEM_CONTEXT]}
        events = [e["event"] for e in read_journal(state_dir)]
        assert events == ["plugin.loaded", "session.compacting"]
        assert len(runner.statements) == 1

    @pytest.mark.parametrize(
        ("flags", "expected_events", "expected_statements"),
        [
            ([], ["plugin.loaded", "session.compacting"], 1),
            (["--verify"], ["plugin.loaded", "setup.verified", "session.compacting"], 2),
        ],
    )
    def test_verification_only_on_request(
        self,
        monkeypatch: pytest.MonkeyPatch,
        test_settings: Settings,
        fake_context: PluginContext,
        state_dir: StateDirectory,
        runner: FakeRunner,
        flags: list[str],
        expected_events: list[str],
        expected_statements: int,
    ) -> None:
        write_setup(state_dir, {"selected": {"pgvector": True}})
        _stdin(monkeypatch, b'{"sessionID": "s1"}')

        assert cli.main(["hook", "pre-compact", *flags]) == 0

        assert [e["event"] for e in read_journal(state_dir)] == expected_events
        assert len(runner.statements) == expected_statements

    def test_session_compacted_logs(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
        test_settings: Settings,
        fake_context: PluginContext,
        state_dir: StateDirectory,
        client,
    ) -> None:
        _stdin(monkeypatch, b'{"sessionID": "s1"}')

        assert cli.main(["hook", "session.compacted"]) == 0

        assert capsys.readouterr().out == ""
        last = read_journal(state_dir)[-1]
        assert last["event"] == "session.compacted"
        assert last["session_id"] == "s1"
        assert [e.message for e in client.entries] == ["Session compacted (logged)"]

    def test_unknown_event_is_noop(
        self,
        capsys: pytest.CaptureFixture[str],
        test_settings: Settings,
        fake_context: PluginContext,
        state_dir: StateDirectory,
    ) -> None:
        assert cli.main(["hook", "bogus"]) == 0
        assert capsys.readouterr().out == ""
        assert read_journal(state_dir) == []

    def test_failure_still_exits_zero(
        self,
        monkeypatch: pytest.MonkeyPatch,
        test_settings: Settings,
        fake_context: PluginContext,
    ) -> None:
        _stdin(monkeypatch, b"{}")

        async def broken(*args, **kwargs):
            raise RuntimeError("host gone")

        monkeypatch.setattr("agent_memory_postgres.hooks.plugin.create_plugin", broken)
        assert cli.main(["hook", "pre-compact"]) == 0


@pytest.mark.unit
class TestVerifyCommand:
    @pytest.fixture
    def patched_factory(
        self, monkeypatch: pytest.MonkeyPatch, factory: ComponentFactory, fake_context
    ) -> ComponentFactory:
        monkeypatch.setattr(
            "agent_memory_postgres.factory.ComponentFactory", lambda settings: factory
        )
        return factory

    def test_no_setup(
        self, capsys: pytest.CaptureFixture[str], patched_factory: ComponentFactory
    ) -> None:
        assert cli.main(["verify"]) == 0
        assert json.loads(capsys.readouterr().out) == {}

    def test_all_pass(
        self,
        capsys: pytest.CaptureFixture[str],
        patched_factory: ComponentFactory,
        state_dir: StateDirectory,
    ) -> None:
        write_setup(state_dir, {"selected": {"pgvector": True, "ollama": True}})

        assert cli.main(["verify"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["results"] == {"pgvector": True, "ollama": True}

    def test_failure_exit_code(
        self,
        capsys: pytest.CaptureFixture[str],
        patched_factory: ComponentFactory,
        state_dir: StateDirectory,
        runner: FakeRunner,
    ) -> None:
        runner.returncode = 2
        write_setup(state_dir, {"selected": {"pgvector": True}})

        assert cli.main(["verify"]) == 1

        captured = capsys.readouterr()
        assert json.loads(captured.out)["results"] == {"pgvector": False}
        assert "pgvector unavailable" in captured.err


@pytest.mark.unit
class TestStatusAndEvents:
    def test_status_missing_setup(
        self,
        capsys: pytest.CaptureFixture[str],
        test_settings: Settings,
        state_dir: StateDirectory,
    ) -> None:
        assert cli.main(["status"]) == 0
        out = capsys.readouterr().out
        assert f"State directory: {state_dir.path}" in out
        assert "Setup record: missing" in out
        assert "Store: " in out and "@localhost:5432/agent_memory" in out

    def test_status_with_setup(
        self,
        capsys: pytest.CaptureFixture[str],
        test_settings: Settings,
        state_dir: StateDirectory,
    ) -> None:
        write_setup(state_dir, {"selected": {"pgvector": True}})
        assert cli.main(["status"]) == 0
        out = capsys.readouterr().out
        assert "Setup record: present" in out
        assert "pgvector: True" in out
        assert "ollama: False" in out

    def test_events_tail(
        self,
        capsys: pytest.CaptureFixture[str],
        test_settings: Settings,
        state_dir: StateDirectory,
        tmp_path: Path,
    ) -> None:
        journal = EventJournal(state_dir)
        for session_id in ("a", "b", "c"):
            journal.record("session.compacting", session_id=session_id, cwd=str(tmp_path))

        assert cli.main(["events", "-n", "2"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert [json.loads(line)["session_id"] for line in lines] == ["b", "c"]

    def test_status_prints_settings(
        self,
        capsys: pytest.CaptureFixture[str],
        test_settings: Settings,
        state_dir: StateDirectory,
    ) -> None:
        assert cli.main(["status"]) == 0
        out = capsys.readouterr().out
        assert "Settings:" in out
        assert "  psql_binary: psql" in out
        assert f"  state_dir: {state_dir.path}" in out


@pytest.mark.unit
class TestInvalidEnvironment:
    @pytest.fixture(autouse=True)
    def fresh_settings(self):
        reset_settings()
        yield
        reset_settings()

    def test_status_reports_configuration_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("AGENT_MEMORY_OLLAMA_TIMEOUT_SECONDS", "0")

        assert cli.main(["status"]) == 2

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "ollama_timeout_seconds" in captured.err
