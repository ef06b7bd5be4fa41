"""Pytest fixtures for agent memory hook tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from agent_memory_postgres.config import Settings, override_settings, reset_settings
from agent_memory_postgres.core.state_dir import StateDirectory
from agent_memory_postgres.factory import ComponentFactory, PluginContext
from tests.fakes import FakeHostClient, FakeRunner, ollama_transport


@pytest.fixture(autouse=True)
def clean_pg_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's libpq environment out of the tests."""
    for name in ("PGHOST", "PGPORT", "PGDATABASE", "PGUSER"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def state_dir(tmp_path: Path) -> StateDirectory:
    """State directory under a temp home (not created yet)."""
    return StateDirectory(tmp_path / "state")


@pytest.fixture
def test_settings(state_dir: StateDirectory) -> Generator[Settings, None, None]:
    """Provide test settings pointing at the temp state directory."""
    settings = Settings(
        state_dir=state_dir.path,
        command_timeout_seconds=5.0,
        ollama_timeout_seconds=1.0,
        log_level="DEBUG",
    )
    override_settings(settings)
    yield settings
    reset_settings()


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def client() -> FakeHostClient:
    return FakeHostClient()


@pytest.fixture
def context(tmp_path: Path, runner: FakeRunner, client: FakeHostClient) -> PluginContext:
    return PluginContext(directory=str(tmp_path / "project"), run=runner, client=client)


@pytest.fixture
def factory(test_settings: Settings, state_dir: StateDirectory) -> ComponentFactory:
    """Factory with the temp state directory and a reachable embedding service."""
    return ComponentFactory(test_settings, state_dir=state_dir, http_transport=ollama_transport())
