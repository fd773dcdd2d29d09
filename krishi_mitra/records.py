"""Validated dashboard records (form input) and their table names."""

from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, EmailStr, Field, field_validator

from krishi_mitra.soil.models import SoilSample


class WeatherCondition(str, Enum):
    SUNNY = "Sunny"
    RAINY = "Rainy"
    CLOUDY = "Cloudy"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AlertStatus(str, Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"
    INVESTIGATING = "investigating"


class QueryType(str, Enum):
    SOIL_HEALTH = "Soil Health"
    CROP_ISSUE = "Crop Issue"
    PEST_ALERT = "Pest Alert"
    OTHER = "Other"


class DashboardRecord(BaseModel):
    """Base for records that map onto one store table."""

    table: ClassVar[str] = ""

    def to_row(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class SoilDataEntry(DashboardRecord):
    """Soil test submitted from the data-entry form."""

    table: ClassVar[str] = "soil_data"

    farmer_id: str = Field(min_length=1, description="Farmer identifier")
    soil_moisture: float = Field(ge=0.0, le=100.0, description="Soil moisture (%)")
    soil_ph: float = Field(ge=0.0, le=14.0, description="Soil pH")
    nitrogen: float = Field(ge=0.0, description="Nitrogen (ppm)")
    phosphorus: float = Field(default=0.0, ge=0.0, description="Phosphorus (ppm)")
    potassium: float = Field(default=0.0, ge=0.0, description="Potassium (ppm)")
    weather_condition: WeatherCondition = WeatherCondition.SUNNY
    soil_image_url: str | None = None
    water_image_url: str | None = None
    notes: str | None = None

    @field_validator("farmer_id")
    @classmethod
    def strip_farmer_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Farmer ID is required")
        return v

    def to_sample(self) -> SoilSample:
        """The reading that goes to the classifier."""
        return SoilSample(
            moisture=self.soil_moisture,
            ph=self.soil_ph,
            nitrogen=self.nitrogen,
            notes=self.notes,
        )


class CropRecord(DashboardRecord):
    table: ClassVar[str] = "crop_data"

    crop_type: str = Field(min_length=1)
    growth_stage: str = Field(min_length=1)
    yield_potential: float = Field(ge=0.0, le=100.0, description="Expected yield (%)")
    field_location: str | None = None
    planting_date: str | None = None
    expected_harvest: str | None = None


class PestAlert(DashboardRecord):
    table: ClassVar[str] = "pest_alerts"

    alert_type: str = Field(min_length=1, description="Pest or disease observed")
    field: str = Field(min_length=1, description="Affected field")
    severity: Severity = Severity.LOW
    description: str | None = None
    reported_by: str | None = None
    status: AlertStatus = AlertStatus.ACTIVE


class ContactQuery(DashboardRecord):
    """Query sent through the contact form."""

    table: ClassVar[str] = "contact_queries"

    name: str | None = None
    phone: str = Field(min_length=10, max_length=15, description="Contact number")
    email: EmailStr | None = None
    query_type: QueryType = QueryType.SOIL_HEALTH
    message: str = Field(min_length=5)

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v: Any) -> Any:
        """Empty means no email; anything else must be a valid address."""
        if isinstance(v, str):
            return v.strip() or None
        return v

    @field_validator("name")
    @classmethod
    def empty_name_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None
