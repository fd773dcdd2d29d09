"""In-process record store, used by default and in tests."""

import copy
import threading
from typing import Any

from krishi_mitra.logging_config import get_logger
from krishi_mitra.store.base import TABLES, RecordStore, WriteResult

logger = get_logger(__name__)


class MemoryRecordStore(RecordStore):
    """Keeps rows in per-table lists for the lifetime of the process."""

    def __init__(self) -> None:
        self._tables: dict[str, list[dict[str, Any]]] = {table: [] for table in TABLES}
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return "memory"

    def insert(self, table: str, row: dict[str, Any]) -> WriteResult:
        self.validate_table(table)
        stored = copy.deepcopy(self.prepare_row(row))
        with self._lock:
            self._tables[table].append(stored)
        logger.debug(f"Inserted row {stored['id']} into {table}")
        return WriteResult.success(copy.deepcopy(stored))

    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        self.validate_table(table)
        with self._lock:
            rows = copy.deepcopy(self._tables[table])

        if filters:
            rows = [
                row
                for row in rows
                if all(row.get(key) == value for key, value in filters.items())
            ]
        if order_by:
            # Rows missing the key sort first
            rows.sort(
                key=lambda row: (row.get(order_by) is not None, row.get(order_by)),
                reverse=descending,
            )
        if limit is not None:
            rows = rows[:limit]
        return rows
