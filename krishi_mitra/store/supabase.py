"""Record store for the hosted Supabase backend."""

from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import Client, ClientOptions, create_client

from krishi_mitra.logging_config import get_logger
from krishi_mitra.store.base import RecordStore, StoreError, WriteResult

logger = get_logger(__name__)

# PostgREST rejections and transport failures
BACKEND_ERRORS = (APIError, httpx.HTTPError)


class SupabaseRecordStore(RecordStore):
    """Reads and writes the project's tables through the Supabase client."""

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout_s: float = 10.0,
        client: Client | None = None,
    ):
        """Initialize the store.

        Args:
            url: Project URL, e.g. ``https://<ref>.supabase.co``
            api_key: Project API key
            timeout_s: Request timeout for table queries
            client: Pre-built client (created on first use otherwise)
        """
        self.url = url
        self.api_key = api_key
        self.timeout_s = timeout_s
        self._client = client

    @property
    def name(self) -> str:
        return "supabase"

    def connect(self) -> Client:
        """Return the client, creating it on first use.

        Raises:
            SupabaseException: If the URL or key is malformed
        """
        if self._client is None:
            self._client = create_client(
                self.url,
                self.api_key,
                options=ClientOptions(postgrest_client_timeout=self.timeout_s),
            )
            logger.info(f"Connected SupabaseRecordStore to {self.url}")
        return self._client

    def close(self) -> None:
        self._client = None

    def insert(self, table: str, row: dict[str, Any]) -> WriteResult:
        self.validate_table(table)
        stored = self.prepare_row(row)
        client = self.connect()

        try:
            response = client.table(table).insert(stored).execute()
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to insert into {table}: {e}")
            return WriteResult.failure(str(e))

        # The server may add defaults; prefer its representation
        if response.data:
            stored = response.data[0]

        logger.debug(f"Inserted row {stored.get('id')} into {table}")
        return WriteResult.success(stored)

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        self.validate_table(table)
        client = self.connect()

        try:
            query = client.table(table).select("*")
            for column, value in (filters or {}).items():
                query = query.is_(column, "null") if value is None else query.eq(column, value)
            if order_by:
                query = query.order(order_by, desc=descending)
            if limit is not None:
                query = query.limit(limit)
            return list(query.execute().data)
        except BACKEND_ERRORS as e:
            logger.error(f"Failed to read {table}: {e}")
            raise StoreError(f"Failed to read {table}: {e}") from e
