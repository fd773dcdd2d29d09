"""Soil evaluation: sample models and the threshold classifier.

Each evaluation yields exactly one finding per metric (pH, moisture,
nitrogen). Status depends only on the measured value.
"""

from krishi_mitra.soil.classifier import classify, classify_value, overall_status
from krishi_mitra.soil.models import (
    EvaluationRecord,
    Finding,
    FindingStatus,
    SoilCategory,
    SoilSample,
)

__all__ = [
    "EvaluationRecord",
    "Finding",
    "FindingStatus",
    "SoilCategory",
    "SoilSample",
    "classify",
    "classify_value",
    "overall_status",
]
