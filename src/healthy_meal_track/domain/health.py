"""Health profile and risk domain models."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID


class HealthCondition(StrEnum):
    """Chronic conditions a user can declare."""

    DIABETES = "diabetes"
    BP = "bp"
    CHOLESTEROL = "cholesterol"
    KIDNEY = "kidney"
    HEART = "heart"
    THYROID = "thyroid"
    OBESITY = "obesity"
    PCOS = "pcos"
    LACTOSE = "lactose"
    GLUTEN = "gluten"
    ANEMIA = "anemia"
    IBS = "ibs"
    OSTEOPOROSIS = "osteoporosis"
    GOUT = "gout"
    ALLERGIES = "allergies"
    NONE = "none"


class Severity(StrEnum):
    """Severity of a risk finding."""

    WARNING = "warning"
    DANGER = "danger"


class FindingType(StrEnum):
    """Kinds of condition-specific risk findings."""

    HIGH_CARBS = "high_carbs"
    HIGH_SUGAR = "high_sugar"
    HIGH_SODIUM = "high_sodium"
    HIGH_POTASSIUM = "high_potassium"
    HIGH_FAT = "high_fat"


class Priority(StrEnum):
    """Recommendation priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MealCategory(StrEnum):
    """Coarse health classification of a meal."""

    HEALTHY = "healthy"
    MODERATE = "moderate"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


class RiskLevel(StrEnum):
    """Risk level shown alongside a meal."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ConditionEntry:
    """A declared condition with optional free-text details."""

    condition: HealthCondition
    details: str | None = None


@dataclass(frozen=True)
class UserProfile:
    """User health profile consumed by the risk evaluator."""

    id: UUID
    name: str | None = None
    health_conditions: list[ConditionEntry] = field(default_factory=list)


@dataclass(frozen=True)
class RiskFinding:
    """A nutrient that exceeded a condition-specific threshold."""

    type: FindingType
    severity: Severity
    message: str
    value: float
    threshold: float

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
            "value": self.value,
            "threshold": self.threshold,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "RiskFinding":
        return cls(
            type=FindingType(str(data["type"])),
            severity=Severity(str(data["severity"])),
            message=str(data.get("message", "")),
            value=float(data.get("value", 0.0)),
            threshold=float(data.get("threshold", 0.0)),
        )


@dataclass(frozen=True)
class GenericWarning:
    """Condition-independent warning about a meal."""

    type: str
    message: str

    def to_dict(self) -> dict[str, object]:
        return {"type": self.type, "message": self.message}


@dataclass(frozen=True)
class Recommendation:
    """Actionable dietary advice derived from a finding."""

    message: str
    priority: Priority
    type: str = "dietary"

    def to_dict(self) -> dict[str, object]:
        return {
            "type": self.type,
            "message": self.message,
            "priority": self.priority.value,
        }
