"""Tests for the record store backends."""

from unittest.mock import MagicMock

import httpx
import pytest
from postgrest.exceptions import APIError
from pymongo.errors import ServerSelectionTimeoutError

from krishi_mitra.config import AppSettings, StoreSettings
from krishi_mitra.store import (
    MemoryRecordStore,
    MongoRecordStore,
    StoreError,
    SupabaseRecordStore,
    WriteResult,
    build_store,
)


class TestWriteResult:
    """Test write outcome values."""

    def test_success(self):
        """Test that a success carries the stored row."""
        result = WriteResult.success({"id": "1"})
        assert result.ok
        assert result.row == {"id": "1"}
        assert result.error is None

    def test_failure(self):
        """Test that a failure carries the error text only."""
        result = WriteResult.failure("boom")
        assert not result.ok
        assert result.row is None
        assert result.error == "boom"


class TestMemoryRecordStore:
    """Test the in-process store."""

    def test_insert_adds_id_and_timestamp(self, store):
        """Test that inserted rows get an id and creation time."""
        result = store.insert("soil_data", {"farmer_id": "F1"})

        assert result.ok
        assert result.row["farmer_id"] == "F1"
        assert result.row["id"]
        assert result.row["created_at"]

    def test_insert_keeps_given_id(self, store):
        """Test that a caller-supplied id is kept."""
        result = store.insert("soil_data", {"id": "abc", "farmer_id": "F1"})
        assert result.row["id"] == "abc"

    def test_insert_does_not_mutate_input(self, store):
        """Test that the caller's row is left untouched."""
        row = {"farmer_id": "F1"}
        store.insert("soil_data", row)
        assert row == {"farmer_id": "F1"}

    def test_unknown_table_rejected(self, store):
        """Test that tables outside the known set are refused."""
        with pytest.raises(ValueError, match="Unknown table"):
            store.insert("users", {})
        with pytest.raises(ValueError, match="Unknown table"):
            store.select("users")

    def test_select_filters_orders_and_limits(self, store):
        """Test equality filters, ordering and limits together."""
        store.insert("pest_alerts", {"alert_type": "Aphids", "status": "active", "created_at": "2024-01-02"})
        store.insert("pest_alerts", {"alert_type": "Blight", "status": "resolved", "created_at": "2024-01-03"})
        store.insert("pest_alerts", {"alert_type": "Borer", "status": "active", "created_at": "2024-01-04"})

        active = store.select("pest_alerts", filters={"status": "active"}, order_by="created_at", descending=True)
        assert [row["alert_type"] for row in active] == ["Borer", "Aphids"]

        oldest = store.select("pest_alerts", order_by="created_at", limit=1)
        assert oldest[0]["alert_type"] == "Aphids"

    def test_limit_zero_returns_nothing(self, store):
        """Test that a zero limit yields no rows."""
        store.insert("crop_data", {"crop_type": "Rice"})
        assert store.select("crop_data", limit=0) == []

    def test_select_returns_copies(self, store):
        """Test that callers cannot change stored rows, nested values included."""
        store.insert("evaluation_results", {"soil_data": {"ph": 6.5}})
        store.select("evaluation_results")[0]["soil_data"]["ph"] = 9.0
        assert store.select("evaluation_results")[0]["soil_data"]["ph"] == 6.5

    def test_tables_are_separate(self, store):
        """Test that rows land only in their own table."""
        store.insert("crop_data", {"crop_type": "Rice"})
        assert store.select("soil_data") == []


class TestMongoRecordStore:
    """Test the MongoDB backend against a mocked client."""

    def _store(self):
        client = MagicMock()
        collection = client.__getitem__.return_value.__getitem__.return_value
        return MongoRecordStore(database_name="farm", client=client), client, collection

    def test_insert(self):
        """Test that a row is written to the table's collection."""
        store, client, collection = self._store()

        result = store.insert("soil_data", {"farmer_id": "F1"})

        assert result.ok
        client.__getitem__.assert_called_with("farm")
        client.__getitem__.return_value.__getitem__.assert_called_with("soil_data")
        inserted = collection.insert_one.call_args.args[0]
        assert inserted["farmer_id"] == "F1"
        assert "_id" not in result.row

    def test_insert_failure_returns_result(self):
        """Test that driver errors become a failed result."""
        store, _, collection = self._store()
        collection.insert_one.side_effect = ServerSelectionTimeoutError("no server")

        result = store.insert("soil_data", {"farmer_id": "F1"})

        assert not result.ok
        assert "no server" in result.error

    def test_select_builds_query(self):
        """Test that filters, sort and limit reach the cursor."""
        store, _, collection = self._store()
        cursor = collection.find.return_value
        cursor.sort.return_value = cursor
        cursor.limit.return_value = cursor
        cursor.__iter__.return_value = iter([{"phone": "9876543210"}])

        rows = store.select(
            "contact_queries",
            filters={"phone": "9876543210"},
            order_by="created_at",
            descending=True,
            limit=5,
        )

        assert rows == [{"phone": "9876543210"}]
        collection.find.assert_called_once_with({"phone": "9876543210"}, {"_id": 0})
        cursor.sort.assert_called_once_with("created_at", -1)
        cursor.limit.assert_called_once_with(5)

    def test_limit_zero_returns_nothing(self):
        """Test that a zero limit is not sent to MongoDB as 'no limit'."""
        store, _, collection = self._store()

        assert store.select("crop_data", limit=0) == []
        collection.find.assert_not_called()

    def test_select_failure_raises_store_error(self):
        """Test that read failures raise StoreError."""
        store, _, collection = self._store()
        collection.find.side_effect = ServerSelectionTimeoutError("no server")

        with pytest.raises(StoreError):
            store.select("soil_data")

    def test_close(self):
        """Test that closing releases the client."""
        store, client, _ = self._store()
        store.close()
        client.close.assert_called_once()


class TestSupabaseRecordStore:
    """Test the Supabase backend against a mocked client."""

    def _store(self):
        client = MagicMock()
        query = client.table.return_value.select.return_value
        for method in ("eq", "is_", "order", "limit"):
            getattr(query, method).return_value = query
        store = SupabaseRecordStore("https://example.supabase.co", "anon-key", client=client)
        return store, client, query

    def test_insert_uses_server_row(self):
        """Test that the server's representation of the row is returned."""
        store, client, _ = self._store()
        execute = client.table.return_value.insert.return_value.execute
        execute.return_value.data = [{"id": "srv-1", "email": "a@gmail.com"}]

        result = store.insert("evaluation_results", {"email": "a@gmail.com"})

        assert result.ok
        assert result.row["id"] == "srv-1"
        client.table.assert_called_with("evaluation_results")
        sent = client.table.return_value.insert.call_args.args[0]
        assert sent["email"] == "a@gmail.com"
        assert sent["created_at"]

    def test_insert_api_error(self):
        """Test that a rejected insert becomes a failed result."""
        store, client, _ = self._store()
        execute = client.table.return_value.insert.return_value.execute
        execute.side_effect = APIError({"message": "permission denied", "code": "42501"})

        result = store.insert("evaluation_results", {"email": "a@gmail.com"})

        assert not result.ok
        assert result.error

    def test_insert_network_error(self):
        """Test that transport errors become a failed result."""
        store, client, _ = self._store()
        execute = client.table.return_value.insert.return_value.execute
        execute.side_effect = httpx.ConnectError("offline")

        result = store.insert("soil_data", {"farmer_id": "F1"})

        assert not result.ok
        assert "offline" in result.error

    def test_select_builds_query(self):
        """Test that filters, order and limit are applied to the query."""
        store, client, query = self._store()
        query.execute.return_value.data = [{"status": "active"}]

        rows = store.select(
            "pest_alerts",
            filters={"status": "active", "reported_by": None},
            order_by="created_at",
            descending=True,
            limit=10,
        )

        assert rows == [{"status": "active"}]
        client.table.return_value.select.assert_called_once_with("*")
        query.eq.assert_called_once_with("status", "active")
        query.is_.assert_called_once_with("reported_by", "null")
        query.order.assert_called_once_with("created_at", desc=True)
        query.limit.assert_called_once_with(10)

    def test_select_error_raises_store_error(self):
        """Test that read failures raise StoreError."""
        store, _, query = self._store()
        query.execute.side_effect = httpx.ConnectError("offline")

        with pytest.raises(StoreError):
            store.select("pest_alerts")

    def test_client_is_created_lazily(self):
        """Test that constructing the store does not contact the backend."""
        store = SupabaseRecordStore("https://example.supabase.co", "anon-key")
        assert store._client is None


class TestBuildStore:
    """Test backend selection from settings."""

    def test_default_is_memory(self):
        """Test that the in-memory store is the default."""
        assert isinstance(build_store(AppSettings()), MemoryRecordStore)

    def test_mongo_requires_uri(self):
        """Test that the mongo backend needs a connection URI."""
        with pytest.raises(ValueError, match="KRISHI_MONGO_URI"):
            build_store(AppSettings(store=StoreSettings(backend="mongo")))

    def test_mongo(self):
        """Test that mongo settings produce a MongoDB store."""
        settings = AppSettings(
            store=StoreSettings(backend="mongo", mongo_uri="mongodb://localhost:27017")
        )
        store = build_store(settings)
        assert isinstance(store, MongoRecordStore)
        assert store.database_name == "krishi_mitra"

    def test_supabase_requires_credentials(self):
        """Test that the supabase backend needs a URL and key."""
        with pytest.raises(ValueError, match="KRISHI_SUPABASE"):
            build_store(AppSettings(store=StoreSettings(backend="supabase")))

    def test_supabase(self):
        """Test that supabase settings produce a Supabase store."""
        settings = AppSettings(
            store=StoreSettings(
                backend="supabase", supabase_url="https://x.supabase.co", supabase_key="k"
            )
        )
        assert isinstance(build_store(settings), SupabaseRecordStore)
