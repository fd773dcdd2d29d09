"""Record stores for the hosted data backend.

All backends expose the same insert/select contract over the logical
tables in :data:`TABLES`.
"""

from krishi_mitra.config import AppSettings, get_settings
from krishi_mitra.logging_config import get_logger
from krishi_mitra.store.base import TABLES, RecordStore, StoreError, WriteResult
from krishi_mitra.store.memory import MemoryRecordStore
from krishi_mitra.store.mongo import MongoRecordStore
from krishi_mitra.store.supabase import SupabaseRecordStore

logger = get_logger(__name__)


def build_store(settings: AppSettings | None = None) -> RecordStore:
    """Create the record store selected in settings.

    Raises:
        ValueError: If the selected backend is missing its connection details
    """
    store_settings = (settings or get_settings()).store

    if store_settings.backend == "mongo":
        if not store_settings.mongo_uri:
            raise ValueError("KRISHI_MONGO_URI must be set for the mongo backend")
        return MongoRecordStore(
            connection_string=store_settings.mongo_uri,
            database_name=store_settings.mongo_database,
            timeout_s=store_settings.timeout_s,
        )

    if store_settings.backend == "supabase":
        if not store_settings.supabase_url or not store_settings.supabase_key:
            raise ValueError(
                "KRISHI_SUPABASE_URL and KRISHI_SUPABASE_KEY must be set "
                "for the supabase backend"
            )
        return SupabaseRecordStore(
            url=store_settings.supabase_url,
            api_key=store_settings.supabase_key,
            timeout_s=store_settings.timeout_s,
        )

    logger.debug("Using in-memory record store")
    return MemoryRecordStore()


__all__ = [
    "TABLES",
    "MemoryRecordStore",
    "MongoRecordStore",
    "RecordStore",
    "StoreError",
    "SupabaseRecordStore",
    "WriteResult",
    "build_store",
]
