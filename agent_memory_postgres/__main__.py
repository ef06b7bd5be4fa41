"""Entry point for running the agent memory hooks and CLI commands."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from agent_memory_postgres.factory import PluginContext

logger = logging.getLogger(__name__)


def _setup_logging(args: argparse.Namespace) -> None:
    from agent_memory_postgres.config import get_settings
    from agent_memory_postgres.core.logging import configure_logging

    try:
        settings = get_settings()
    except Exception as e:
        configure_logging(level="DEBUG" if args.verbose else "INFO")
        logger.warning(f"Invalid settings, using logging defaults: {e}")
        return
    level = "DEBUG" if args.verbose else settings.log_level
    configure_logging(level=level, json_format=settings.log_json)


def _cli_context(directory: str | None) -> PluginContext:
    from agent_memory_postgres.adapters.console_client import ConsoleHostClient
    from agent_memory_postgres.adapters.subprocess_runner import SubprocessRunner
    from agent_memory_postgres.factory import PluginContext

    return PluginContext(
        directory=directory or os.getcwd(),
        run=SubprocessRunner(),
        client=ConsoleHostClient(),
    )


def run_hook(args: argparse.Namespace) -> int:
    """Dispatch one hook invocation with a JSON payload from stdin.

    Always returns 0 (fail-open).
    """
    from agent_memory_postgres.hooks.dispatcher import (
        MAX_STDIN_BYTES,
        dispatch,
        normalize_event,
        parse_payload,
        write_response,
    )
    from agent_memory_postgres.hooks.plugin import create_plugin

    try:
        resolved = normalize_event(args.event)
        if resolved is None:
            logger.debug(f"Unknown hook event: {args.event}")
            return 0
        hook_name, event_type = resolved

        data = parse_payload(sys.stdin.buffer.read(MAX_STDIN_BYTES))

        async def _run() -> dict[str, Any] | None:
            hooks = await create_plugin(
                _cli_context(args.directory), verify_setup=args.verify
            )
            return await dispatch(hooks, hook_name, data, event_type=event_type)

        write_response(asyncio.run(_run()), sys.stdout)
    except Exception as e:
        logger.debug(f"Hook {args.event} failed: {e}", exc_info=True)
    return 0


def run_verify(args: argparse.Namespace) -> int:
    """Run one capability verification pass and print the results."""
    from agent_memory_postgres.config import get_settings
    from agent_memory_postgres.factory import ComponentFactory

    components = ComponentFactory(get_settings()).create_all(_cli_context(args.directory))
    result = asyncio.run(components.verifier.verify())
    if result is None:
        print(json.dumps({}))
        print("No setup selection recorded; nothing to verify.", file=sys.stderr)
        return 0
    print(json.dumps(result.journal_fields()))
    for error in result.failures.values():
        print(f"  {error}", file=sys.stderr)
    return 1 if result.failed else 0


def run_status(args: argparse.Namespace) -> int:
    """Print the effective state directory, setup record and connection."""
    from agent_memory_postgres.config import get_settings, resolve_connection, settings_summary
    from agent_memory_postgres.core.state_dir import StateDirectory

    settings = get_settings()
    state_dir = StateDirectory(settings.resolved_state_dir())
    setup = state_dir.read_setup()
    conn = resolve_connection()

    print("Agent Memory Postgres")
    print(f"State directory: {state_dir.path}")
    print(f"Journal: {state_dir.journal_path}")
    print(f"Setup record: {'present' if state_dir.has_setup() else 'missing'}")
    if setup is not None:
        if setup.selected is None:
            print("  selected: (none)")
        else:
            print(f"  pgvector: {setup.selected.pgvector}")
            print(f"  ollama: {setup.selected.ollama}")
    elif state_dir.has_setup():
        print("  (unreadable or malformed)")
    print(f"Store: {conn.user}@{conn.host}:{conn.port}/{conn.database}")
    print("Settings:")
    for key, value in settings_summary(settings).items():
        print(f"  {key}: {value}")
    return 0


def run_events(args: argparse.Namespace) -> int:
    """Print the most recent journal entries, one JSON object per line."""
    from agent_memory_postgres.config import get_settings
    from agent_memory_postgres.core.journal import EventJournal
    from agent_memory_postgres.core.state_dir import StateDirectory

    journal = EventJournal(StateDirectory(get_settings().resolved_state_dir()))
    for entry in journal.read_entries(limit=args.limit):
        print(json.dumps(entry, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-memory-postgres",
        description="Compaction journal and PostgreSQL memory hooks",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    hook_parser = subparsers.add_parser(
        "hook",
        help="Run one hook with a JSON payload on stdin",
        description="Load the plugin (journals plugin.loaded and shows the setup-missing "
        "toast when applicable), then run one hook with the JSON payload read from stdin. "
        "The capability verification pass is skipped unless --verify is given.",
    )
    hook_parser.add_argument(
        "event",
        help="Hook or event name (pre-compact, event, session.compacted, ...)",
    )
    hook_parser.add_argument("--directory", help="Session working directory (default: cwd)")
    hook_parser.add_argument(
        "--verify",
        action="store_true",
        help="Also run the capability verification pass before the hook",
    )
    hook_parser.set_defaults(func=run_hook)

    verify_parser = subparsers.add_parser("verify", help="Verify selected optional capabilities")
    verify_parser.add_argument("--directory", help="Working directory shown in notifications")
    verify_parser.set_defaults(func=run_verify)

    status_parser = subparsers.add_parser("status", help="Show state directory and connection")
    status_parser.set_defaults(func=run_status)

    events_parser = subparsers.add_parser("events", help="Show recent journal entries")
    events_parser.add_argument(
        "-n",
        "--limit",
        type=int,
        default=20,
        help="Number of entries to show (default: 20)",
    )
    events_parser.set_defaults(func=run_events)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    from agent_memory_postgres.core.errors import ConfigurationError

    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args)
    try:
        return int(args.func(args))
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
