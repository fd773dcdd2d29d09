"""Form submissions and lookups for the farmer dashboard."""

from typing import Any

from krishi_mitra.logging_config import get_logger
from krishi_mitra.notify import Notifier
from krishi_mitra.records import ContactQuery, DashboardRecord
from krishi_mitra.store.base import RecordStore, StoreError, WriteResult

logger = get_logger(__name__)

# Toast text on success, per table
SUCCESS_MESSAGES = {
    "soil_data": "Your soil data has been saved successfully.",
    "crop_data": "Crop record saved successfully.",
    "pest_alerts": "Pest alert created successfully",
    "contact_queries": "Your query has been received. Our team will contact you soon.",
}

# Lookups only run once a number is long enough to be real
MIN_PHONE_LENGTH = 10


def submit_record(
    store: RecordStore, record: DashboardRecord, notifier: Notifier
) -> WriteResult:
    """Insert a validated form record once and tell the user how it went."""
    result = store.insert(record.table, record.to_row())

    if result.ok:
        notifier.success("Success!", SUCCESS_MESSAGES.get(record.table, "Saved."))
    else:
        logger.error(f"Error saving {record.table} record: {result.error}")
        notifier.error(
            "Error", "There was an error saving your data. Please try again."
        )
    return result


def previous_queries(store: RecordStore, phone: str) -> list[dict[str, Any]]:
    """Earlier contact queries for a phone number, newest first.

    Short numbers and unreachable stores give an empty list.
    """
    phone = phone.strip()
    if len(phone) < MIN_PHONE_LENGTH:
        return []

    try:
        return store.select(
            ContactQuery.table,
            filters={"phone": phone},
            order_by="created_at",
            descending=True,
        )
    except StoreError as e:
        logger.error(f"Error fetching previous queries: {e}")
        return []


def active_pest_alerts(store: RecordStore) -> list[dict[str, Any]]:
    """Alerts still marked active, newest first.

    Raises:
        StoreError: If the alerts table cannot be read
    """
    return store.select(
        "pest_alerts",
        filters={"status": "active"},
        order_by="created_at",
        descending=True,
    )
