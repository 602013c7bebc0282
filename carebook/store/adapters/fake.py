import asyncio
from collections.abc import Sequence
from typing import Any

from carebook.store.adapters.query_helpers import sort_rows
from carebook.store.ports import Order


class FakeStoreClient:
    """In-memory stand-in for the StoreClientProtocol protocol.

    Pre-load ``tables`` (table name -> rows) to control what ``select``
    returns; rows are returned as given, so embed joined ``patients`` /
    ``doctors`` dicts directly.  Set ``select_errors[table]`` or
    ``insert_error`` to make the corresponding call raise.

    After calls, inspect ``selects`` and ``inserted`` to verify what was
    passed to the client.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.selects: list[tuple[str, str, tuple[Order, ...]]] = []
        self.inserted: list[tuple[str, dict[str, Any]]] = []
        self.closed: bool = False
        self.healthy: bool = True

        self.select_errors: dict[str, Exception] = {}
        self.insert_error: Exception | None = None

    async def select(
        self, table: str, columns: str = "*", order: Sequence[Order] = ()
    ) -> list[dict[str, Any]]:
        self.selects.append((table, columns, tuple(order)))
        if table in self.select_errors:
            raise self.select_errors[table]
        return [dict(r) for r in sort_rows(self.tables.get(table, []), order)]

    async def insert(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        # Yield once so concurrent submissions interleave like real I/O.
        await asyncio.sleep(0)
        if self.insert_error:
            raise self.insert_error
        self.inserted.append((table, row))
        rows = self.tables.setdefault(table, [])
        stored = {"id": len(rows) + 1, **row}
        rows.append(stored)
        return dict(stored)

    async def health_check(self) -> bool:
        return self.healthy

    async def close(self) -> None:
        self.closed = True
