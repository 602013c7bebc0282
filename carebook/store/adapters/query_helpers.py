from collections.abc import Sequence
from typing import Any

from carebook.store.ports import Order


def order_param(order: Sequence[Order]) -> str:
    """Render ``[Order("a"), Order("b", False)]`` as PostgREST's ``a.asc,b.desc``."""
    return ",".join(f"{o.column}.{'asc' if o.ascending else 'desc'}" for o in order)


def select_with_joins(columns: str, joins: dict[str, Sequence[str]]) -> str:
    """Build a ``select=`` value with embedded resources.

    ``select_with_joins("*", {"patients": ["first_name"]})`` gives
    ``*,patients(first_name)``.
    """
    parts = [columns]
    parts.extend(f"{table}({','.join(cols)})" for table, cols in joins.items())
    return ",".join(parts)


def error_message(payload: Any) -> str:
    """Pull a readable message out of a PostgREST error body."""
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error") or ""
        details = payload.get("details") or payload.get("hint")
        if message and details:
            return f"{message} ({details})"
        if message:
            return str(message)
    return str(payload) if payload else "unknown error"


def sort_rows(rows: list[dict[str, Any]], order: Sequence[Order]) -> list[dict[str, Any]]:
    """Stable in-memory ordering; nulls go last ascending and first descending."""
    result = list(rows)
    for o in reversed(order):
        present = [r for r in result if r.get(o.column) is not None]
        missing = [r for r in result if r.get(o.column) is None]
        present.sort(key=lambda r: r[o.column], reverse=not o.ascending)
        result = present + missing if o.ascending else missing + present
    return result
