"""Dietary recommendations derived from risk findings."""

from collections.abc import Iterable

from healthy_meal_track.domain.health import (
    FindingType,
    Priority,
    Recommendation,
    RiskFinding,
)

RECOMMENDATIONS: dict[str, tuple[str, Priority]] = {
    FindingType.HIGH_CARBS: (
        "Try replacing some carbs with vegetables or lean protein.",
        Priority.MEDIUM,
    ),
    FindingType.HIGH_SUGAR: (
        "Consider sugar-free alternatives or reduce portion size.",
        Priority.HIGH,
    ),
    FindingType.HIGH_SODIUM: (
        "Use herbs and spices instead of salt for flavoring.",
        Priority.HIGH,
    ),
    FindingType.HIGH_POTASSIUM: (
        "Choose lower potassium vegetables like green beans or cabbage.",
        Priority.HIGH,
    ),
    FindingType.HIGH_FAT: (
        "Opt for grilled or baked instead of fried foods.",
        Priority.MEDIUM,
    ),
}


def generate_recommendations(findings: Iterable[RiskFinding]) -> list[Recommendation]:
    """Return one recommendation per finding; unknown types are skipped."""
    recommendations: list[Recommendation] = []
    for finding in findings:
        entry = RECOMMENDATIONS.get(str(finding.type))
        if entry is None:
            continue
        message, priority = entry
        recommendations.append(Recommendation(message=message, priority=priority))
    return recommendations
