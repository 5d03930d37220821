"""Condition-aware health risk evaluation for a meal."""

from collections.abc import Iterable
from dataclasses import dataclass

from healthy_meal_track.domain.health import (
    ConditionEntry,
    FindingType,
    GenericWarning,
    HealthCondition,
    RiskFinding,
    Severity,
)
from healthy_meal_track.domain.nutrition import NutrientVector

CALORIE_WARNING_THRESHOLD = 600.0


@dataclass(frozen=True)
class RiskRule:
    """One row of the rule table: condition, nutrient, threshold, outcome."""

    condition: HealthCondition
    nutrient: str
    threshold: float
    severity: Severity
    finding_type: FindingType
    template: str

    def evaluate(self, nutrition: NutrientVector) -> RiskFinding | None:
        """Return a finding when the nutrient strictly exceeds the threshold."""
        value = nutrition.value(self.nutrient)
        if value <= self.threshold:
            return None
        return RiskFinding(
            type=self.finding_type,
            severity=self.severity,
            message=self.template.format(value=value, threshold=self.threshold),
            value=value,
            threshold=self.threshold,
        )


RISK_RULES: tuple[RiskRule, ...] = (
    RiskRule(
        condition=HealthCondition.DIABETES,
        nutrient="carbs",
        threshold=60.0,
        severity=Severity.WARNING,
        finding_type=FindingType.HIGH_CARBS,
        template=(
            "High carbohydrate content ({value:.1f}g, limit {threshold:.1f}g). "
            "Consider smaller portion for diabetes management."
        ),
    ),
    RiskRule(
        condition=HealthCondition.DIABETES,
        nutrient="sugar",
        threshold=15.0,
        severity=Severity.DANGER,
        finding_type=FindingType.HIGH_SUGAR,
        template=(
            "High sugar content ({value:.1f}g, limit {threshold:.1f}g). "
            "This may spike your blood sugar levels."
        ),
    ),
    RiskRule(
        condition=HealthCondition.BP,
        nutrient="sodium",
        threshold=500.0,
        severity=Severity.DANGER,
        finding_type=FindingType.HIGH_SODIUM,
        template=(
            "High sodium content ({value:.1f}mg, limit {threshold:.1f}mg). "
            "This may increase your blood pressure."
        ),
    ),
    RiskRule(
        condition=HealthCondition.KIDNEY,
        nutrient="potassium",
        threshold=400.0,
        severity=Severity.DANGER,
        finding_type=FindingType.HIGH_POTASSIUM,
        template=(
            "High potassium content ({value:.1f}mg, limit {threshold:.1f}mg). "
            "Limit intake for kidney health."
        ),
    ),
    RiskRule(
        condition=HealthCondition.CHOLESTEROL,
        nutrient="fat",
        threshold=20.0,
        severity=Severity.WARNING,
        finding_type=FindingType.HIGH_FAT,
        template=(
            "High fat content ({value:.1f}g, limit {threshold:.1f}g). "
            "Consider leaner alternatives."
        ),
    ),
)


@dataclass(frozen=True)
class RiskAssessment:
    """Findings and generic warnings for one meal."""

    findings: list[RiskFinding]
    warnings: list[GenericWarning]


def evaluate_risks(
    nutrition: NutrientVector,
    conditions: Iterable[ConditionEntry | str] | None,
    rules: Iterable[RiskRule] = RISK_RULES,
) -> RiskAssessment:
    """Apply every rule whose condition the user has, in table order.

    Unknown condition codes and duplicate entries are ignored. The calorie
    warning does not depend on any condition.
    """
    present = condition_codes(conditions)
    findings: list[RiskFinding] = []
    for rule in rules:
        if rule.condition not in present:
            continue
        finding = rule.evaluate(nutrition)
        if finding is not None:
            findings.append(finding)

    warnings: list[GenericWarning] = []
    if nutrition.calories > CALORIE_WARNING_THRESHOLD:
        warnings.append(
            GenericWarning(
                type="high_calories",
                message=(
                    f"High calorie meal ({nutrition.calories:.0f} calories). "
                    "Consider portion control."
                ),
            )
        )
    return RiskAssessment(findings=findings, warnings=warnings)


def condition_codes(
    conditions: Iterable[ConditionEntry | str] | None,
) -> frozenset[HealthCondition]:
    """Collect known condition codes, skipping anything unrecognized."""
    if not conditions:
        return frozenset()
    codes: set[HealthCondition] = set()
    for entry in conditions:
        raw = entry.condition if isinstance(entry, ConditionEntry) else entry
        try:
            codes.add(HealthCondition(str(raw).strip().lower()))
        except ValueError:
            continue
    return frozenset(codes)
