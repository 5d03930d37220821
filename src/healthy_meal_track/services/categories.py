"""Meal categorization from risk findings."""

from collections.abc import Sequence

from healthy_meal_track.domain.health import (
    MealCategory,
    RiskFinding,
    RiskLevel,
    Severity,
)


def categorize(findings: Sequence[RiskFinding] | None) -> MealCategory:
    """Derive the meal category from a snapshot of its findings.

    ``None`` means findings were never computed.
    """
    if findings is None:
        return MealCategory.UNKNOWN
    severities = {finding.severity for finding in findings}
    if Severity.DANGER in severities:
        return MealCategory.UNHEALTHY
    if Severity.WARNING in severities:
        return MealCategory.MODERATE
    return MealCategory.HEALTHY


def risk_level(findings: Sequence[RiskFinding] | None) -> RiskLevel:
    """Map findings onto the low/medium/high scale."""
    category = categorize(findings)
    return {
        MealCategory.UNHEALTHY: RiskLevel.HIGH,
        MealCategory.MODERATE: RiskLevel.MEDIUM,
        MealCategory.HEALTHY: RiskLevel.LOW,
    }.get(category, RiskLevel.UNKNOWN)
