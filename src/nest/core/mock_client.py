"""
NEST Core - Mock Supabase client.

Replaces the real Supabase client so the app runs without backend
credentials. Exposes the same three entry points the app uses:

- table(name) / from_(name): a fresh QueryBuilder per request
- auth: session emulator
- storage: in-memory buckets
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from nest.auth.emulator import MockAuth
from nest.auth.snapshot import SessionSnapshot
from nest.config import Settings, get_settings
from nest.core.query_builder import QueryBuilder, Relation
from nest.core.storage import MockStorage
from nest.core.table_store import TableStore

logger = logging.getLogger(__name__)

TABLES = ("profiles", "trips", "days", "activities", "trip_members", "activity_comments")

DEFAULT_RELATIONS = (
    Relation(name="profiles", table="profiles", foreign_key="user_id"),
)


class MockClient:
    """In-memory substitute for ``supabase.Client``."""

    def __init__(
        self,
        store: TableStore | None = None,
        settings: Settings | None = None,
        relations: tuple[Relation, ...] = DEFAULT_RELATIONS,
    ):
        settings = settings or get_settings()
        self._latency = settings.mock.latency_ms / 1000
        self.store = store or TableStore()
        self.relations = {r.name: r for r in relations}

        if store is None:
            self._seed(settings)

        session_file = settings.mock.session_file
        self.auth = MockAuth(
            table=self.table,
            snapshot=SessionSnapshot(Path(session_file) if session_file else None),
            latency=self._latency,
        )
        self.storage = MockStorage(latency=self._latency)

    def _seed(self, settings: Settings) -> None:
        for name in TABLES:
            self.store.ensure_table(name)

        if settings.mock.seed_demo_user:
            self.store.seed(
                "profiles",
                [
                    {
                        "id": settings.mock.demo_user_id,
                        "email": settings.mock.demo_user_email,
                        "created_at": datetime.now(timezone.utc).isoformat(),
                    }
                ],
            )

    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(name, self.store, relations=self.relations, latency=self._latency)

    def from_(self, name: str) -> QueryBuilder:
        return self.table(name)
