from __future__ import annotations

from threading import RLock
from typing import Any, Iterable

Row = dict[str, Any]


class TableStore:
    """Named, ordered collections of schemaless rows.

    Tables spring into existence on first write. Reads of unknown tables see
    an empty list that is not registered. The store exposes no mutation API
    of its own beyond ``ensure_table``; query builders edit the returned
    list in place while holding ``lock``.
    """

    def __init__(self, tables: dict[str, Iterable[Row]] | None = None):
        self.lock = RLock()
        self._tables: dict[str, list[Row]] = {}
        for name, rows in (tables or {}).items():
            self.seed(name, rows)

    def get_table(self, name: str) -> list[Row]:
        with self.lock:
            return self._tables.get(name, [])

    def ensure_table(self, name: str) -> list[Row]:
        with self.lock:
            return self._tables.setdefault(name, [])

    def seed(self, name: str, rows: Iterable[Row]) -> None:
        with self.lock:
            self.ensure_table(name).extend(dict(r) for r in rows)

    def table_names(self) -> list[str]:
        with self.lock:
            return list(self._tables)

    def clear(self) -> None:
        with self.lock:
            self._tables.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._tables
