"""Dashboard summaries and CSV export of stored farm records.

Only measured values are summarized. There is no synthetic "actual yield":
yield figures are the stored ``yield_potential`` values.
"""

import csv
import io
from datetime import date
from pathlib import Path
from typing import Any, Literal

import pandas as pd
from pydantic import BaseModel, Field

from krishi_mitra.logging_config import get_logger
from krishi_mitra.store.base import RecordStore

logger = get_logger(__name__)

HEALTHY_YIELD_THRESHOLD = 80.0

EXPORT_KINDS = {
    "soil": "soil_data",
    "crop": "crop_data",
    "pest": "pest_alerts",
}
_COMBINED_DATA_TYPES = {"soil": "soil", "crop": "crop", "pest": "pest_alert"}


class FarmData(BaseModel):
    """Rows fetched for a report, newest first."""

    soil_data: list[dict[str, Any]] = Field(default_factory=list)
    crop_data: list[dict[str, Any]] = Field(default_factory=list)
    pest_alerts: list[dict[str, Any]] = Field(default_factory=list)

    def rows(self, kind: str) -> list[dict[str, Any]]:
        return getattr(self, EXPORT_KINDS[kind])


class ReportSummary(BaseModel):
    total_soil_records: int = 0
    total_crops: int = 0
    total_alerts: int = 0
    average_moisture: float = 0.0
    average_yield: float = 0.0
    active_alerts: int = 0


class SoilSnapshot(BaseModel):
    latest_moisture: float = 0.0
    latest_ph: float = 0.0
    latest_nitrogen: float = 0.0
    trend: Literal["up", "down", "stable"] = "stable"


class DashboardOverview(BaseModel):
    soil: SoilSnapshot = SoilSnapshot()
    total_crops: int = 0
    average_yield: int = 0
    healthy_crops: int = 0
    active_alerts_by_severity: dict[str, int] = Field(
        default_factory=lambda: {"high": 0, "medium": 0, "low": 0}
    )
    growth_stages: dict[str, int] = Field(default_factory=dict)


def fetch_farm_data(store: RecordStore) -> FarmData:
    """Load every soil, crop and pest row, newest first.

    Raises:
        StoreError: If any table cannot be read
    """
    data = FarmData(
        **{
            table: store.select(table, order_by="created_at", descending=True)
            for table in EXPORT_KINDS.values()
        }
    )
    logger.info(
        f"Fetched {len(data.soil_data)} soil, {len(data.crop_data)} crop and "
        f"{len(data.pest_alerts)} pest rows"
    )
    return data


def _column_mean(rows: list[dict[str, Any]], column: str) -> float:
    """Mean of a numeric column, ignoring missing values; 0 when empty."""
    frame = pd.DataFrame(rows)
    if column not in frame.columns:
        return 0.0
    values = pd.to_numeric(frame[column], errors="coerce").dropna()
    if values.empty:
        return 0.0
    return float(values.mean())


def summarize(data: FarmData) -> ReportSummary:
    """Totals and one-decimal averages for the reports page."""
    active = sum(1 for alert in data.pest_alerts if alert.get("status") == "active")
    return ReportSummary(
        total_soil_records=len(data.soil_data),
        total_crops=len(data.crop_data),
        total_alerts=len(data.pest_alerts),
        average_moisture=round(_column_mean(data.soil_data, "soil_moisture"), 1),
        average_yield=round(_column_mean(data.crop_data, "yield_potential"), 1),
        active_alerts=active,
    )


def soil_snapshot(soil_rows: list[dict[str, Any]]) -> SoilSnapshot:
    """Latest reading and moisture direction versus the one before it.

    ``soil_rows`` must be ordered newest first.
    """
    if not soil_rows:
        return SoilSnapshot()

    latest = soil_rows[0]
    trend: Literal["up", "down", "stable"] = "stable"
    if len(soil_rows) > 1:
        current = latest.get("soil_moisture") or 0
        previous = soil_rows[1].get("soil_moisture") or 0
        if current > previous:
            trend = "up"
        elif current < previous:
            trend = "down"

    return SoilSnapshot(
        latest_moisture=latest.get("soil_moisture") or 0,
        latest_ph=latest.get("soil_ph") or 0,
        latest_nitrogen=latest.get("nitrogen") or 0,
        trend=trend,
    )


def overview(data: FarmData) -> DashboardOverview:
    """Figures for the home dashboard cards."""
    severities = {"high": 0, "medium": 0, "low": 0}
    active = [a for a in data.pest_alerts if a.get("status") == "active"]
    if active:
        counts = pd.Series([a.get("severity") for a in active]).value_counts()
        for severity in severities:
            severities[severity] = int(counts.get(severity, 0))

    stages: dict[str, int] = {}
    for crop in data.crop_data:
        stage = crop.get("growth_stage") or "Unknown"
        stages[stage] = stages.get(stage, 0) + 1

    healthy = sum(
        1
        for crop in data.crop_data
        if (crop.get("yield_potential") or 0) > HEALTHY_YIELD_THRESHOLD
    )

    return DashboardOverview(
        soil=soil_snapshot(data.soil_data),
        total_crops=len(data.crop_data),
        average_yield=round(_column_mean(data.crop_data, "yield_potential")),
        healthy_crops=healthy,
        active_alerts_by_severity=severities,
        growth_stages=stages,
    )


def moisture_trend(soil_rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Weekly series (oldest first) of moisture, pH and nitrogen.

    ``soil_rows`` must be ordered oldest first.
    """
    return [
        {
            "week": f"Week {index}",
            "moisture": row.get("soil_moisture"),
            "ph": row.get("soil_ph"),
            "nitrogen": row.get("nitrogen"),
        }
        for index, row in enumerate(soil_rows, start=1)
    ]


def combined_rows(data: FarmData) -> list[dict[str, Any]]:
    """All rows tagged with a ``data_type`` column."""
    rows = []
    for kind, data_type in _COMBINED_DATA_TYPES.items():
        rows.extend({**row, "data_type": data_type} for row in data.rows(kind))
    return rows


def to_csv(rows: list[dict[str, Any]]) -> str:
    """Render rows as CSV; empty string when there are no rows.

    The header is every column seen, in first-seen order. Values containing
    commas or quotes are quoted; nested values are written as their repr.
    """
    if not rows:
        return ""

    fieldnames: list[str] = []
    for row in rows:
        for key in row:
            if key not in fieldnames:
                fieldnames.append(key)

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=fieldnames, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({key: "" if row.get(key) is None else row[key] for key in fieldnames})
    return buffer.getvalue()


def export_filename(kind: str, on: date | None = None) -> str:
    """``<prefix>_<YYYY-MM-DD>.csv`` for a report kind (soil, crop, pest, all)."""
    prefix = "farm_data" if kind == "all" else EXPORT_KINDS[kind]
    return f"{prefix}_{(on or date.today()).isoformat()}.csv"


def export_csv(data: FarmData, kind: str, output_dir: Path, on: date | None = None) -> Path | None:
    """Write one CSV export; returns the path, or None when there is nothing to write."""
    if kind != "all" and kind not in EXPORT_KINDS:
        raise ValueError(f"Unknown export kind: {kind}")

    rows = combined_rows(data) if kind == "all" else data.rows(kind)
    if not rows:
        logger.info(f"No {kind} rows to export")
        return None

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / export_filename(kind, on)
    path.write_text(to_csv(rows), encoding="utf-8")
    logger.info(f"Exported {len(rows)} rows to {path}")
    return path
