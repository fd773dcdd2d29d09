"""MongoDB record store: one collection per logical table."""

from typing import Any

import pymongo
from pymongo.errors import PyMongoError

from krishi_mitra.logging_config import get_logger
from krishi_mitra.store.base import RecordStore, StoreError, WriteResult

logger = get_logger(__name__)


class MongoRecordStore(RecordStore):
    """Record store backed by a MongoDB database."""

    def __init__(
        self,
        connection_string: str | None = None,
        database_name: str = "krishi_mitra",
        timeout_s: float = 10.0,
        client: Any = None,
    ):
        """Initialize the store.

        Args:
            connection_string: MongoDB URI (ignored when ``client`` is given)
            database_name: Database holding the table collections
            timeout_s: Server selection timeout
            client: Pre-built ``MongoClient`` (connection is lazy otherwise)
        """
        self.connection_string = connection_string
        self.database_name = database_name
        self.timeout_s = timeout_s
        self._client: Any = client

    @property
    def name(self) -> str:
        return "mongo"

    def connect(self) -> Any:
        """Return the database handle, creating the client on first use."""
        if self._client is None:
            self._client = pymongo.MongoClient(
                self.connection_string,
                serverSelectionTimeoutMS=int(self.timeout_s * 1000),
            )
            logger.info(f"Connected MongoRecordStore to database {self.database_name}")
        return self._client[self.database_name]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def insert(self, table: str, row: dict[str, Any]) -> WriteResult:
        self.validate_table(table)
        stored = self.prepare_row(row)

        try:
            # insert_one mutates its argument with _id; keep ours clean
            self.connect()[table].insert_one(dict(stored))
        except PyMongoError as e:
            logger.error(f"Failed to insert into {table}: {e}")
            return WriteResult.failure(str(e))

        logger.debug(f"Inserted row {stored['id']} into {table}")
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
        # pymongo reads limit 0 as "no limit"
        if limit == 0:
            return []

        try:
            cursor = self.connect()[table].find(filters or {}, {"_id": 0})
            if order_by:
                cursor = cursor.sort(
                    order_by, pymongo.DESCENDING if descending else pymongo.ASCENDING
                )
            if limit is not None:
                cursor = cursor.limit(limit)
            return [dict(document) for document in cursor]
        except PyMongoError as e:
            logger.error(f"Failed to read {table}: {e}")
            raise StoreError(f"Failed to read {table}: {e}") from e
