"""
NEST Core - In-memory backend emulation.

- table_store: named, ordered row collections
- query_builder: chainable deferred queries with embed emulation
- storage: mock object storage buckets
- mock_client: Supabase-compatible facade (table/auth/storage)
- supabase_client: picks the mock or a real Supabase client
- repository: base class for module repositories
"""

from nest.core.query_builder import NOT_FOUND_CODE, QueryBuilder, QueryError, QueryResult, Relation
from nest.core.table_store import TableStore

__all__ = [
    "NOT_FOUND_CODE",
    "QueryBuilder",
    "QueryError",
    "QueryResult",
    "Relation",
    "TableStore",
]
