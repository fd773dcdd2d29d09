"""Threshold classifier for soil readings.

Every screen that shows a soil verdict goes through :func:`classify`; the
thresholds below are the only copy of them.
"""

from krishi_mitra.soil.models import Finding, FindingStatus, SoilCategory, SoilSample

# Inclusive "good" range per metric: below is critical, above is a warning
THRESHOLDS: dict[SoilCategory, tuple[float, float]] = {
    SoilCategory.PH: (6.0, 8.0),
    SoilCategory.MOISTURE: (50.0, 85.0),
    SoilCategory.NITROGEN: (50.0, 120.0),
}

# Order of findings in every evaluation
CATEGORY_ORDER = (SoilCategory.PH, SoilCategory.MOISTURE, SoilCategory.NITROGEN)

_SAMPLE_FIELDS = {
    SoilCategory.PH: "ph",
    SoilCategory.MOISTURE: "moisture",
    SoilCategory.NITROGEN: "nitrogen",
}

# (message, recommendation) in English
FINDING_TEXT: dict[tuple[SoilCategory, FindingStatus], tuple[str, str]] = {
    (SoilCategory.PH, FindingStatus.CRITICAL): (
        "Soil pH is too low",
        "Add lime to increase pH to 6.0-7.0 range",
    ),
    (SoilCategory.PH, FindingStatus.WARNING): (
        "Soil pH is too high",
        "Add sulfur or organic matter to lower pH",
    ),
    (SoilCategory.PH, FindingStatus.GOOD): (
        "Soil pH is optimal",
        "Maintain current pH level",
    ),
    (SoilCategory.MOISTURE, FindingStatus.CRITICAL): (
        "Soil moisture is too low",
        "Increase irrigation frequency",
    ),
    (SoilCategory.MOISTURE, FindingStatus.WARNING): (
        "Soil moisture is too high",
        "Reduce irrigation and improve drainage",
    ),
    (SoilCategory.MOISTURE, FindingStatus.GOOD): (
        "Soil moisture is optimal",
        "Maintain current irrigation schedule",
    ),
    (SoilCategory.NITROGEN, FindingStatus.CRITICAL): (
        "Nitrogen level is too low",
        "Apply nitrogen fertilizer (urea or ammonium nitrate)",
    ),
    (SoilCategory.NITROGEN, FindingStatus.WARNING): (
        "Nitrogen level is too high",
        "Reduce nitrogen application to prevent leaching",
    ),
    (SoilCategory.NITROGEN, FindingStatus.GOOD): (
        "Nitrogen level is adequate",
        "Continue current fertilization program",
    ),
}


def classify_value(category: SoilCategory, value: float) -> FindingStatus:
    """Map a single metric value to a status.

    Args:
        category: Metric the value belongs to
        value: Measured value

    Returns:
        CRITICAL below the good range, WARNING above it, GOOD inside it
        (both bounds inclusive)
    """
    low, high = THRESHOLDS[category]
    if value < low:
        return FindingStatus.CRITICAL
    if value > high:
        return FindingStatus.WARNING
    return FindingStatus.GOOD


def classify(sample: SoilSample) -> list[Finding]:
    """Classify a soil sample into one finding per category.

    Args:
        sample: Validated soil reading

    Returns:
        Findings ordered pH, moisture, nitrogen
    """
    findings = []
    for category in CATEGORY_ORDER:
        status = classify_value(category, getattr(sample, _SAMPLE_FIELDS[category]))
        message, recommendation = FINDING_TEXT[(category, status)]
        findings.append(
            Finding(
                category=category,
                status=status,
                message=message,
                recommendation=recommendation,
            )
        )
    return findings


def overall_status(findings: list[Finding]) -> FindingStatus:
    """Worst status across findings; GOOD for an empty list."""
    worst = FindingStatus.GOOD
    for finding in findings:
        if finding.status.severity > worst.severity:
            worst = finding.status
    return worst
