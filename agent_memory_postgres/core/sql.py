"""SQL text generation for the external memory store.

Statements are executed through the ``psql`` command-line client, which
takes a single ``-c`` string rather than bound parameters.  Every value is
therefore spliced into a single-quoted literal after passing through
:func:`escape_sql_literal`.

Only single quotes are escaped.  Backslashes, statement terminators and
other metacharacters pass through unchanged, matching what the existing
``store_memory`` callers write.  Never use these helpers for identifiers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agent_memory_postgres.core.models import MemoryRecord

PGVECTOR_CHECK_SQL = "SELECT 1 FROM pg_extension WHERE extname='vector';"
"""Succeeds (possibly with zero rows) whenever the store accepts a query."""


def escape_sql_literal(value: object) -> str:
    """Escape a value for use inside a single-quoted SQL literal.

    Args:
        value: Any value. ``None`` becomes the empty string; everything
            else is converted with ``str()``.

    Returns:
        The string form with every ``'`` doubled.

    Example:
        >>> escape_sql_literal("O'Brien")
        "O''Brien"
        >>> escape_sql_literal(None)
        ''
    """
    if value is None:
        return ""
    return str(value).replace("'", "''")


def quote_literal(value: object) -> str:
    """Wrap an escaped value in single quotes."""
    return f"'{escape_sql_literal(value)}'"


def render_text_array(values: Iterable[object]) -> str:
    """Render ``ARRAY['a','b']`` from an iterable of values."""
    return "ARRAY[" + ",".join(quote_literal(v) for v in values) + "]"


def render_jsonb_object(fields: Mapping[str, object]) -> str:
    """Render ``jsonb_build_object('k','v',...)`` preserving key order."""
    args: list[str] = []
    for key, value in fields.items():
        args.append(quote_literal(key))
        args.append(quote_literal(value))
    return "jsonb_build_object(" + ",".join(args) + ")"


def render_store_memory_sql(record: MemoryRecord) -> str:
    """Render the ``store_memory`` call for one memory record.

    The procedure takes nine positional arguments: category, subtype, tag
    array, title, body, metadata object, source, session id and relevance.

    Args:
        record: The memory record to persist.

    Returns:
        A single ``SELECT store_memory(...);`` statement.
    """
    args = [
        quote_literal(record.category),
        quote_literal(record.subtype),
        render_text_array(record.tags),
        quote_literal(record.title),
        quote_literal(record.body),
        render_jsonb_object(record.metadata),
        quote_literal(record.source),
        quote_literal(record.session_id),
        repr(float(record.relevance)),
    ]
    return f"SELECT store_memory({','.join(args)});"
