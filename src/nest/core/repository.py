"""
NEST Core - Base Repository.

Abstract base class for all repositories following the repository pattern.
Works against either the mock client or a real Supabase client.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, TypeVar

from postgrest.exceptions import APIError

from nest.core.query_builder import NOT_FOUND_CODE, QueryError, QueryResult
from nest.core.supabase_client import get_supabase_client
from nest.exceptions import BackendException, NotFoundException, ValidationException

T = TypeVar("T")


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository for database operations.

    All module repositories should inherit from this class.
    """

    def __init__(self, client=None):
        """Initialize repository with optional client (mock or Supabase)."""
        self._client = client or get_supabase_client()

    @property
    @abstractmethod
    def table_name(self) -> str:
        """Return the table name for this repository."""
        ...

    @property
    def table(self):
        """Get a fresh query builder for this repository's table."""
        return self._client.table(self.table_name)

    @staticmethod
    def _run(query) -> QueryResult:
        """Execute a query and normalize the outcome to a QueryResult."""
        try:
            response = query.execute()
        except APIError as e:
            return QueryResult(
                error=QueryError(
                    code=e.code or "UNKNOWN",
                    message=e.message or str(e),
                    details=e.details,
                    hint=e.hint,
                )
            )

        if isinstance(response, QueryResult):
            return response
        # postgrest returns None for an empty maybe_single()
        if response is None:
            return QueryResult()
        return QueryResult(data=response.data, count=getattr(response, "count", None))

    def _data(self, query) -> Any:
        """Execute and return data, raising on any backend error."""
        result = self._run(query)
        if result.error is not None:
            if result.error.code == NOT_FOUND_CODE:
                raise NotFoundException(self.table_name, result.error.details or "")
            raise BackendException(result.error.code, result.error.message)
        return result.data

    async def get_by_id(self, id: str) -> T | None:
        """
        Get a single record by ID.

        Args:
            id: The record id

        Returns:
            The record if found, None otherwise
        """
        return self._data(self.table.select("*").eq("id", str(id)).maybe_single())

    async def get_by_id_or_raise(self, id: str) -> T:
        """
        Get a single record by ID, raise if not found.

        Raises:
            NotFoundException: If record not found
        """
        result = await self.get_by_id(id)
        if not result:
            raise NotFoundException(self.table_name, id)
        return result

    async def list(
        self,
        filters: dict[str, Any] | None = None,
        order_by: str = "created_at",
        desc: bool = False,
        columns: str = "*",
    ) -> list[T]:
        """List records matching all equality filters."""
        query = self.table.select(columns)
        for key, value in (filters or {}).items():
            query = query.eq(key, value)
        return self._data(query.order(order_by, desc=desc)) or []

    async def list_page(
        self,
        page_size: int = 20,
        page_token: str | None = None,
        filters: dict[str, Any] | None = None,
        order_by: str = "created_at",
        desc: bool = True,
        columns: str = "*",
    ) -> tuple[list[T], str | None]:
        """
        List records with pagination.

        Args:
            page_size: Number of records per page
            page_token: Token for next page (offset as string)
            filters: Optional filters to apply
            order_by: Sort column, newest first by default
            desc: Sort descending
            columns: Select list, embeds included

        Returns:
            Tuple of (records, next_page_token)

        Raises:
            ValidationException: If page_token is not an offset
        """
        if page_token and not page_token.isdigit():
            raise ValidationException(
                "Invalid page token",
                errors=[{"field": "page_token", "value": page_token}],
            )
        offset = int(page_token) if page_token else 0

        query = self.table.select(columns, count="exact")
        for key, value in (filters or {}).items():
            query = query.eq(key, value)

        result = self._run(query.order(order_by, desc=desc).range(offset, offset + page_size - 1))
        if result.error is not None:
            raise BackendException(result.error.code, result.error.message)

        items = result.data or []
        total = result.count or 0

        next_token = None
        if offset + len(items) < total:
            next_token = str(offset + page_size)

        return items, next_token

    async def list_in(self, column: str, values: Iterable[Any], order_by: str | None = None) -> list[T]:
        """List records whose ``column`` is one of ``values``."""
        values = list(values)
        if not values:
            return []
        query = self.table.select("*").in_(column, values)
        if order_by:
            query = query.order(order_by)
        return self._data(query) or []

    async def create(self, data: dict[str, Any]) -> T:
        """Create a new record and return it."""
        return self._data(self.table.insert(data))[0]

    async def create_many(self, rows: list[dict[str, Any]]) -> list[T]:
        """Create several records at once, preserving order."""
        if not rows:
            return []
        return self._data(self.table.insert(rows))

    async def update(self, id: str, data: dict[str, Any]) -> T:
        """
        Update an existing record.

        Raises:
            NotFoundException: If no record has this id
        """
        rows = self._data(self.table.update(data).eq("id", str(id)))
        if not rows:
            raise NotFoundException(self.table_name, id)
        return rows[0]

    async def delete(self, id: str) -> bool:
        """Delete a record by ID."""
        self._data(self.table.delete().eq("id", str(id)))
        return True

    async def delete_in(self, column: str, values: Iterable[Any]) -> None:
        """Delete every record whose ``column`` is one of ``values``."""
        values = list(values)
        if values:
            self._data(self.table.delete().in_(column, values))
