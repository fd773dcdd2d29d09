"""Krishi Mitra: soil evaluation, multilingual advice and farm records for farmers."""

__version__ = "0.1.0"

from .pipeline import EvaluationPipeline
from .soil import Finding, FindingStatus, SoilCategory, SoilSample, classify

__all__ = [
    "EvaluationPipeline",
    "Finding",
    "FindingStatus",
    "SoilCategory",
    "SoilSample",
    "classify",
]
