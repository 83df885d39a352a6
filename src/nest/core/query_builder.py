"""
NEST Core - Mock Query Builder.

Chainable, PostgREST-style request object over a TableStore.

A builder is bound to one table and accumulates filters, sort keys, shape
flags and at most one write payload. Nothing touches the store until
``execute()`` is called; a builder executes exactly once.

Expected failures come back as ``QueryResult.error``. The only error the
emulation produces is the not-found code for ``single()`` reads. Anything
else that goes wrong during execution is raised to the caller.
"""

from __future__ import annotations

import copy
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Literal, Mapping
from uuid import uuid4

from nest.core.table_store import Row, TableStore
from nest.exceptions import QueryAlreadyExecutedError

logger = logging.getLogger(__name__)

# PostgREST code for "JSON object requested, multiple (or no) rows returned"
NOT_FOUND_CODE = "PGRST116"


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class QueryError:
    """Error half of a query result."""

    code: str
    message: str
    details: str | None = None
    hint: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "hint": self.hint,
        }


@dataclass
class QueryResult:
    """Outcome of an executed query: ``data`` or ``error``, never both."""

    data: Any = None
    error: QueryError | None = None
    count: int | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# =============================================================================
# Relations (embeds)
# =============================================================================


@dataclass(frozen=True)
class Relation:
    """A declared many-to-one link used to embed a related row.

    ``select("*, profiles(email)")`` on a table with a ``profiles`` relation
    attaches the row of ``table`` whose ``id`` equals ``row[foreign_key]``,
    or ``placeholder`` when there is none.
    """

    name: str
    table: str
    foreign_key: str
    placeholder: Mapping[str, Any] = field(default_factory=lambda: {"email": "unknown"})

    def embed(self, row: Row, store: TableStore, columns: list[str] | None = None) -> dict[str, Any]:
        key = row.get(self.foreign_key)
        related = None
        if key is not None:
            related = next(
                (r for r in store.get_table(self.table) if r.get("id") == key),
                None,
            )

        if related is None:
            return dict(self.placeholder)
        if not columns or "*" in columns:
            return copy.deepcopy(related)
        return {c: copy.deepcopy(related[c]) for c in columns if c in related}


# =============================================================================
# Plan pieces
# =============================================================================


@dataclass(frozen=True)
class _Filter:
    column: str
    op: Literal["eq", "in"]
    value: Any

    def matches(self, row: Row) -> bool:
        if self.column not in row:
            return False
        if self.op == "eq":
            return row[self.column] == self.value
        return row[self.column] in self.value


@dataclass(frozen=True)
class _Order:
    column: str
    desc: bool = False


def _split_columns(text: str) -> list[str]:
    """Split a column list on top-level commas: ``"a, rel(b, c)"`` -> ``["a", "rel(b, c)"]``."""
    parts: list[str] = []
    depth = 0
    current = ""
    for ch in text:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append(current.strip())
            current = ""
        else:
            current += ch
    if current.strip():
        parts.append(current.strip())
    return parts


def _parse_column(entry: str) -> tuple[str, list[str] | None]:
    if "(" in entry and entry.endswith(")"):
        name, _, inner = entry[:-1].partition("(")
        return name.strip(), _split_columns(inner)
    return entry, None


def _sort_rows(rows: list[Row], orders: list[_Order]) -> list[Row]:
    # Apply keys last-to-first; stable sorts make the first order() primary.
    for order in reversed(orders):
        present = [r for r in rows if r.get(order.column) is not None]
        missing = [r for r in rows if r.get(order.column) is None]
        present.sort(key=lambda r: r[order.column], reverse=order.desc)
        # NULLS LAST for ascending, NULLS FIRST for descending (Postgres default)
        rows = missing + present if order.desc else present + missing
    return rows


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Query Builder
# =============================================================================


class QueryBuilder:
    """
    Deferred query against a single table.

    Usage mirrors supabase-py:

        client.table("trips").select("*").eq("user_id", uid).order("start_date").execute()
        client.table("trips").insert({...}).single().execute()
        client.table("activities").delete().in_("id", ids).execute()
    """

    def __init__(
        self,
        table: str,
        store: TableStore,
        relations: Mapping[str, Relation] | None = None,
        latency: float = 0.0,
    ):
        self.table = table
        self._store = store
        self._relations = dict(relations or {})
        self._latency = latency

        self._filters: list[_Filter] = []
        self._orders: list[_Order] = []
        self._single: Literal["single", "maybe"] | None = None
        self._select_all = True
        self._columns: list[str] = []
        self._embeds: list[tuple[str, list[str] | None]] = []
        self._count: Literal["exact"] | None = None
        self._offset = 0
        self._limit: int | None = None
        self._write: tuple[Literal["insert", "update", "delete"], Any] | None = None
        self._executed = False

    def __repr__(self) -> str:
        action = self._write[0] if self._write else "select"
        return f"<QueryBuilder {action} {self.table} filters={len(self._filters)} orders={len(self._orders)}>"

    # -------------------------------------------------------------------------
    # Shape
    # -------------------------------------------------------------------------

    def select(self, *columns: str, count: Literal["exact"] | None = None) -> QueryBuilder:
        """Choose the returned fields and embeds. Never changes which rows match."""
        entries = _split_columns(",".join(columns)) if columns else ["*"]

        self._select_all = False
        self._columns = []
        self._embeds = []
        for entry in entries:
            name, sub_columns = _parse_column(entry)
            if name == "*":
                self._select_all = True
            elif name in self._relations:
                self._embeds.append((name, sub_columns))
            else:
                self._columns.append(name)

        if count is not None:
            self._count = count
        return self

    def single(self) -> QueryBuilder:
        """Resolve to one row; zero matching rows is a not-found error."""
        self._single = "single"
        return self

    def maybe_single(self) -> QueryBuilder:
        """Resolve to one row or ``None`` without an error."""
        self._single = "maybe"
        return self

    # -------------------------------------------------------------------------
    # Filters & ordering
    # -------------------------------------------------------------------------

    def eq(self, column: str, value: Any) -> QueryBuilder:
        self._filters.append(_Filter(column, "eq", value))
        return self

    def in_(self, column: str, values: Iterable[Any]) -> QueryBuilder:
        self._filters.append(_Filter(column, "in", tuple(values)))
        return self

    def order(self, column: str, *, desc: bool = False) -> QueryBuilder:
        self._orders.append(_Order(column, desc))
        return self

    def limit(self, size: int) -> QueryBuilder:
        self._limit = size
        return self

    def range(self, start: int, end: int) -> QueryBuilder:
        """Inclusive row window, applied after sorting."""
        self._offset = start
        self._limit = max(end - start + 1, 0)
        return self

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert(self, rows: Row | Iterable[Row]) -> QueryBuilder:
        self._write = ("insert", rows)
        return self

    def update(self, values: Row) -> QueryBuilder:
        self._write = ("update", values)
        return self

    def delete(self) -> QueryBuilder:
        self._write = ("delete", None)
        return self

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def execute(self) -> QueryResult:
        """Run the accumulated plan against the store."""
        if self._executed:
            raise QueryAlreadyExecutedError(self.table)
        self._executed = True

        if self._latency:
            time.sleep(self._latency)

        with self._store.lock:
            if self._write is None:
                return self._execute_select()

            action, payload = self._write
            if action == "insert":
                return self._execute_insert(payload)
            if action == "update":
                return self._execute_update(payload)
            return self._execute_delete()

    def _matching(self, rows: list[Row]) -> list[Row]:
        return [r for r in rows if all(f.matches(r) for f in self._filters)]

    def _shape(self, row: Row) -> Row:
        if self._select_all:
            shaped = copy.deepcopy(row)
        else:
            shaped = {c: copy.deepcopy(row[c]) for c in self._columns if c in row}
        for name, sub_columns in self._embeds:
            shaped[name] = self._relations[name].embed(row, self._store, sub_columns)
        return shaped

    def _one(self, rows: list[Row]) -> Row | None:
        return rows[0] if rows else None

    def _execute_insert(self, payload: Row | Iterable[Row]) -> QueryResult:
        rows = [payload] if isinstance(payload, Mapping) else list(payload)
        now = _utcnow_iso()

        created: list[Row] = []
        for row in rows:
            new_row = copy.deepcopy(dict(row))
            if new_row.get("id") is None:
                new_row["id"] = str(uuid4())
            if new_row.get("created_at") is None:
                new_row["created_at"] = now
            created.append(new_row)

        self._store.ensure_table(self.table).extend(created)
        logger.debug(f"[mock-db] insert {self.table}: {len(created)} row(s)")

        data = [self._shape(r) for r in created]
        return QueryResult(
            data=self._one(data) if self._single else data,
            count=len(created) if self._count else None,
        )

    def _execute_update(self, values: Row) -> QueryResult:
        matched = self._matching(self._store.get_table(self.table))
        # Row ids are fixed once assigned.
        changes = {k: v for k, v in dict(values).items() if k != "id"}
        for row in matched:
            row.update(copy.deepcopy(changes))
        logger.debug(f"[mock-db] update {self.table}: {len(matched)} row(s)")

        data = [self._shape(r) for r in matched]
        return QueryResult(
            data=self._one(data) if self._single else data,
            count=len(matched) if self._count else None,
        )

    def _execute_delete(self) -> QueryResult:
        table = self._store.get_table(self.table)
        doomed = {id(r) for r in self._matching(table)}
        if doomed:
            table[:] = [r for r in table if id(r) not in doomed]
        logger.debug(f"[mock-db] delete {self.table}: {len(doomed)} row(s)")

        return QueryResult(data=None, count=len(doomed) if self._count else None)

    def _execute_select(self) -> QueryResult:
        rows = _sort_rows(self._matching(self._store.get_table(self.table)), self._orders)
        count = len(rows) if self._count else None

        end = None if self._limit is None else self._offset + self._limit
        data = [self._shape(r) for r in rows[self._offset:end]]

        if self._single is None:
            return QueryResult(data=data, count=count)
        if data:
            return QueryResult(data=data[0], count=count)
        if self._single == "maybe":
            return QueryResult(data=None, count=count)

        return QueryResult(
            data=None,
            error=QueryError(
                code=NOT_FOUND_CODE,
                message="Row not found",
                details="The result contains 0 rows",
            ),
            count=count,
        )
