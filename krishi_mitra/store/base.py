"""Abstract record store and write outcome types."""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

# Logical tables exposed by the hosted backend
TABLES = frozenset(
    {
        "soil_data",
        "crop_data",
        "pest_alerts",
        "chat_sessions",
        "chat_messages",
        "contact_queries",
        "evaluation_results",
    }
)


class StoreError(Exception):
    """Raised when a read from the record store fails."""


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a single insert.

    Exactly one of ``row`` (on success) and ``error`` (on failure) is set.
    """

    ok: bool
    row: dict[str, Any] | None = None
    error: str | None = None

    @classmethod
    def success(cls, row: dict[str, Any]) -> "WriteResult":
        return cls(ok=True, row=row)

    @classmethod
    def failure(cls, error: str) -> "WriteResult":
        return cls(ok=False, error=error)


class RecordStore(ABC):
    """Insert/select collaborator over the logical tables in :data:`TABLES`.

    Writes never raise for backend failures; they return a failed
    :class:`WriteResult`. Reads raise :class:`StoreError`.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name for logging."""
        pass

    @abstractmethod
    def insert(self, table: str, row: dict[str, Any]) -> WriteResult:
        """Insert one row and return the stored row (with ``id``/``created_at``)."""
        pass

    @abstractmethod
    def select(
        self,
        table: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return rows matching all equality ``filters``."""
        pass

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self) -> "RecordStore":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    @staticmethod
    def validate_table(table: str) -> None:
        if table not in TABLES:
            raise ValueError(f"Unknown table: {table}. Must be one of {sorted(TABLES)}")

    @staticmethod
    def prepare_row(row: dict[str, Any]) -> dict[str, Any]:
        """Copy of ``row`` with ``id`` and ``created_at`` filled in when missing."""
        prepared = dict(row)
        prepared.setdefault("id", str(uuid.uuid4()))
        prepared.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        return prepared
