"""Pydantic models for soil evaluation."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SoilCategory(str, Enum):
    """Soil metrics that each evaluation reports on."""

    PH = "ph"
    MOISTURE = "moisture"
    NITROGEN = "nitrogen"

    @property
    def label(self) -> str:
        """Human readable English label."""
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    SoilCategory.PH: "Soil pH",
    SoilCategory.MOISTURE: "Soil Moisture",
    SoilCategory.NITROGEN: "Nitrogen Level",
}


class FindingStatus(str, Enum):
    """Severity of a finding, ordered from best to worst."""

    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def severity(self) -> int:
        return _STATUS_SEVERITY[self]


_STATUS_SEVERITY = {
    FindingStatus.GOOD: 0,
    FindingStatus.WARNING: 1,
    FindingStatus.CRITICAL: 2,
}


class SoilSample(BaseModel):
    """A single soil reading submitted by a farmer."""

    model_config = ConfigDict(frozen=True)

    moisture: float = Field(ge=0.0, le=100.0, description="Soil moisture (%)")
    ph: float = Field(ge=0.0, le=14.0, description="Soil pH (0-14 scale)")
    nitrogen: float = Field(ge=0.0, description="Nitrogen content (ppm)")
    notes: str | None = Field(None, description="Free-text notes from the farmer")


class Finding(BaseModel):
    """Classified result for one soil metric."""

    model_config = ConfigDict(frozen=True)

    category: SoilCategory
    status: FindingStatus
    message: str
    recommendation: str


class EvaluationRecord(BaseModel):
    """Evaluation persisted on user opt-in. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    email: str
    soil_sample: SoilSample
    findings: list[Finding]
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_row(self) -> dict[str, Any]:
        """Flatten into a JSON-compatible row for the ``evaluation_results`` table."""
        return {
            "email": self.email,
            "soil_data": self.soil_sample.model_dump(mode="json"),
            "evaluation_results": [
                finding.model_dump(mode="json") for finding in self.findings
            ],
            "created_at": self.created_at.isoformat(),
        }
