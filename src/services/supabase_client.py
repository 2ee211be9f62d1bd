"""Supabase client lifecycle and table helpers.

The client is built once per process by ``init_supabase_client`` and passed
explicitly into services; helpers below take that client as their first
argument and wrap store failures in ``SupabaseError``.
"""

from typing import Any, Optional
from supabase import create_client, Client
from supabase.client import ClientOptions
from src.utils.config import get_supabase_credentials
from src.utils.errors import SupabaseError, SkyRealtyError
from src.utils.logging import get_structured_logger

logger = get_structured_logger(__name__)

_client: Optional[Client] = None


def init_supabase_client() -> Client:
    """Create the process-wide Supabase client."""
    global _client

    try:
        url, key = get_supabase_credentials()
    except SkyRealtyError as e:
        raise SupabaseError(str(e))

    # Service-role client: no user session to persist or refresh
    options = ClientOptions(
        auto_refresh_token=False,
        persist_session=False,
    )
    _client = create_client(url, key, options)
    logger.info("Supabase client initialized", url=url)
    return _client


def get_supabase_client() -> Client:
    """Return the process-wide client, initializing it on first use."""
    if _client is None:
        return init_supabase_client()
    return _client


def close_supabase_client() -> None:
    """Drop the process-wide client."""
    global _client
    if _client is not None:
        _client = None
        logger.info("Supabase client closed")


def is_duplicate_key_error(error: Exception) -> bool:
    """True when a store error is a unique-constraint violation."""
    if getattr(error, "code", None) == "23505":
        return True
    return "duplicate key" in str(error).lower()


def _apply_filters(query, filters: Optional[dict[str, Any]]):
    for column, value in (filters or {}).items():
        if value is None:
            query = query.is_(column, "null")
        else:
            query = query.eq(column, value)
    return query


def fetch_rows(
    client: Client,
    table: str,
    filters: Optional[dict[str, Any]] = None,
    columns: str = "*",
    order_by: Optional[str] = None,
    descending: bool = False,
    limit: Optional[int] = None,
) -> list[dict]:
    """Select rows matching equality filters."""
    try:
        query = _apply_filters(client.table(table).select(columns), filters)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit:
            query = query.limit(limit)
        result = query.execute()
        return result.data if result.data else []
    except Exception as e:
        raise SupabaseError(f"Failed to fetch {table}: {e}")


def fetch_one(client: Client, table: str, filters: dict[str, Any], columns: str = "*") -> Optional[dict]:
    """Select the first row matching filters, or None."""
    rows = fetch_rows(client, table, filters, columns=columns, limit=1)
    return rows[0] if rows else None


def count_rows(client: Client, table: str, filters: Optional[dict[str, Any]] = None) -> int:
    """Exact row count for equality filters."""
    try:
        query = _apply_filters(client.table(table).select("id", count="exact"), filters)
        result = query.execute()
        if result.count is not None:
            return result.count
        return len(result.data or [])
    except Exception as e:
        raise SupabaseError(f"Failed to count {table}: {e}")


def insert_row(client: Client, table: str, row: dict, ignore_duplicates: bool = False) -> Optional[dict]:
    """
    Insert one row and return it.

    With ignore_duplicates, a unique-constraint violation returns None instead
    of raising.
    """
    try:
        result = client.table(table).insert(row).execute()
        if result.data and len(result.data) > 0:
            return result.data[0]
        raise SupabaseError(f"Failed to insert into {table}: no data returned")
    except SupabaseError:
        raise
    except Exception as e:
        if ignore_duplicates and is_duplicate_key_error(e):
            logger.info("Duplicate row ignored", table=table)
            return None
        raise SupabaseError(f"Failed to insert into {table}: {e}")


def upsert_row(client: Client, table: str, row: dict, on_conflict: str) -> dict:
    """Insert or update one row keyed by on_conflict."""
    try:
        result = client.table(table).upsert(row, on_conflict=on_conflict).execute()
        if result.data and len(result.data) > 0:
            return result.data[0]
        raise SupabaseError(f"Failed to upsert into {table}: no data returned")
    except SupabaseError:
        raise
    except Exception as e:
        raise SupabaseError(f"Failed to upsert into {table}: {e}")


def update_rows(client: Client, table: str, updates: dict, filters: dict[str, Any]) -> list[dict]:
    """Update rows matching filters and return the updated rows."""
    try:
        query = _apply_filters(client.table(table).update(updates), filters)
        result = query.execute()
        return result.data if result.data else []
    except Exception as e:
        raise SupabaseError(f"Failed to update {table}: {e}")


def delete_rows(client: Client, table: str, filters: dict[str, Any]) -> list[dict]:
    """Delete rows matching filters and return the deleted rows."""
    try:
        query = _apply_filters(client.table(table).delete(), filters)
        result = query.execute()
        return result.data if result.data else []
    except Exception as e:
        raise SupabaseError(f"Failed to delete from {table}: {e}")


def call_rpc(client: Client, function_name: str, params: dict) -> Any:
    """Call a Postgres function."""
    try:
        result = client.rpc(function_name, params).execute()
        return result.data
    except Exception as e:
        raise SupabaseError(f"Failed to call {function_name}: {e}")
