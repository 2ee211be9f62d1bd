"""In-memory stand-in for the supabase-py query builder used by the services."""

import itertools
from typing import Any, Optional


class FakeAPIError(Exception):
    """Mimics postgrest.APIError enough for duplicate-key detection."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.code = code


class FakeResult:
    def __init__(self, data: list[dict], count: Optional[int] = None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, client: "FakeSupabaseClient", table: str, op: str, payload: Any = None,
                 on_conflict: Optional[str] = None, count: Optional[str] = None):
        self.client = client
        self.table = table
        self.op = op
        self.payload = payload
        self.on_conflict = on_conflict
        self.count_mode = count
        self.filters: list[tuple[str, Any]] = []
        self._order: Optional[tuple[str, bool]] = None
        self._limit: Optional[int] = None

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append((column, value))
        return self

    def is_(self, column: str, value: str) -> "FakeQuery":
        assert value == "null"
        self.filters.append((column, None))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def limit(self, n: int) -> "FakeQuery":
        self._limit = n
        return self

    def _matches(self, row: dict) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self) -> FakeResult:
        self.client.calls.append((self.table, self.op, self.payload, list(self.filters)))
        if self.table in self.client.failing_tables:
            raise FakeAPIError(f"simulated failure on {self.table}")

        rows = self.client.tables.setdefault(self.table, [])

        if self.op == "select":
            selected = [dict(r) for r in rows if self._matches(r)]
            if self._order:
                column, desc = self._order
                selected.sort(key=lambda r: (r.get(column) is None, str(r.get(column))), reverse=desc)
            total = len(selected)
            if self._limit is not None:
                selected = selected[:self._limit]
            return FakeResult(selected, count=total if self.count_mode else None)

        if self.op == "insert":
            row = dict(self.payload)
            self.client._check_unique(self.table, row)
            row.setdefault("id", self.client.next_id())
            rows.append(row)
            return FakeResult([dict(row)])

        if self.op == "upsert":
            keys = [k.strip() for k in self.on_conflict.split(",")]
            for existing in rows:
                if all(existing.get(k) == self.payload.get(k) for k in keys):
                    existing.update(self.payload)
                    return FakeResult([dict(existing)])
            row = dict(self.payload)
            row.setdefault("id", self.client.next_id())
            rows.append(row)
            return FakeResult([dict(row)])

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResult(updated)

        if self.op == "delete":
            removed = [r for r in rows if self._matches(r)]
            self.client.tables[self.table] = [r for r in rows if not self._matches(r)]
            return FakeResult([dict(r) for r in removed])

        raise AssertionError(f"unsupported op {self.op}")


class FakeTable:
    def __init__(self, client: "FakeSupabaseClient", name: str):
        self.client = client
        self.name = name

    def select(self, columns: str = "*", count: Optional[str] = None) -> FakeQuery:
        return FakeQuery(self.client, self.name, "select", count=count)

    def insert(self, row: dict) -> FakeQuery:
        return FakeQuery(self.client, self.name, "insert", payload=row)

    def upsert(self, row: dict, on_conflict: str = "id") -> FakeQuery:
        return FakeQuery(self.client, self.name, "upsert", payload=row, on_conflict=on_conflict)

    def update(self, updates: dict) -> FakeQuery:
        return FakeQuery(self.client, self.name, "update", payload=updates)

    def delete(self) -> FakeQuery:
        return FakeQuery(self.client, self.name, "delete")


class FakeRPC:
    def __init__(self, client: "FakeSupabaseClient", name: str, params: dict):
        self.client = client
        self.name = name
        self.params = params

    def execute(self) -> FakeResult:
        self.client.calls.append((self.name, "rpc", self.params, []))
        return FakeResult(self.client.rpc_results.get(self.name, []))


class FakeSupabaseClient:
    """
    Tables are plain lists of dicts. unique_constraints maps a table to the
    column tuple that must be unique; violating it raises a 23505 error like
    Postgres would.
    """

    def __init__(self, tables: Optional[dict[str, list[dict]]] = None,
                 unique_constraints: Optional[dict[str, tuple[str, ...]]] = None):
        self.tables: dict[str, list[dict]] = {k: [dict(r) for r in v] for k, v in (tables or {}).items()}
        self.unique_constraints = unique_constraints or {}
        self.failing_tables: set[str] = set()
        self.rpc_results: dict[str, Any] = {}
        self.calls: list[tuple] = []
        self._ids = itertools.count(1)

    def next_id(self) -> str:
        return f"row_{next(self._ids)}"

    def table(self, name: str) -> FakeTable:
        return FakeTable(self, name)

    def rpc(self, name: str, params: dict) -> FakeRPC:
        return FakeRPC(self, name, params)

    def rows(self, table: str) -> list[dict]:
        return self.tables.get(table, [])

    def _check_unique(self, table: str, row: dict) -> None:
        columns = self.unique_constraints.get(table)
        if not columns:
            return
        for existing in self.tables.get(table, []):
            if all(existing.get(c) == row.get(c) for c in columns):
                raise FakeAPIError(
                    f'duplicate key value violates unique constraint "{table}_unique"',
                    code="23505",
                )
