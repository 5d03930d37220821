"""Nutrition domain models."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, fields

# Python field name -> wire key used in JSON payloads and storage.
NUTRIENT_KEYS: dict[str, str] = {
    "calories": "calories",
    "protein": "protein",
    "carbs": "carbs",
    "fat": "fat",
    "fiber": "fiber",
    "sugar": "sugar",
    "sodium": "sodium",
    "potassium": "potassium",
    "cholesterol": "cholesterol",
    "saturated_fat": "saturatedFat",
    "trans_fat": "transFat",
    "vitamin_a": "vitaminA",
    "vitamin_c": "vitaminC",
    "calcium": "calcium",
    "iron": "iron",
}


@dataclass(frozen=True)
class NutrientVector:
    """Fixed-key nutrient quantities for a single food or a whole meal.

    Values are grams for macronutrients, milligrams for minerals and
    cholesterol, and kcal for calories. Every value is non-negative.
    """

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0
    potassium: float = 0.0
    cholesterol: float = 0.0
    saturated_fat: float = 0.0
    trans_fat: float = 0.0
    vitamin_a: float = 0.0
    vitamin_c: float = 0.0
    calcium: float = 0.0
    iron: float = 0.0

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(
                    f"Nutrient {field.name} must be finite and >= 0, got {value}"
                )

    def __add__(self, other: "NutrientVector") -> "NutrientVector":
        if not isinstance(other, NutrientVector):
            return NotImplemented
        return NutrientVector(
            **{
                name: getattr(self, name) + getattr(other, name)
                for name in NUTRIENT_KEYS
            }
        )

    def value(self, nutrient: str) -> float:
        """Return a nutrient by field name or wire key."""
        if nutrient in NUTRIENT_KEYS:
            return float(getattr(self, nutrient))
        for name, wire_key in NUTRIENT_KEYS.items():
            if wire_key == nutrient:
                return float(getattr(self, name))
        raise KeyError(nutrient)

    def scaled(self, factor: float) -> "NutrientVector":
        """Return a new vector with every value multiplied by factor."""
        return NutrientVector(
            **{name: getattr(self, name) * factor for name in NUTRIENT_KEYS}
        )

    def to_dict(self) -> dict[str, float]:
        """Serialize using wire keys."""
        return {
            wire_key: float(getattr(self, name))
            for name, wire_key in NUTRIENT_KEYS.items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "NutrientVector":
        """Build a vector from wire or field keys.

        Missing and non-numeric values become 0, negatives are clamped to 0.
        """
        values: dict[str, float] = {}
        for name, wire_key in NUTRIENT_KEYS.items():
            raw = data.get(wire_key, data.get(name))
            values[name] = _non_negative(raw)
        return cls(**values)


@dataclass(frozen=True)
class Resolved:
    """Nutrients answered by the external lookup."""

    food_name: str
    vector: NutrientVector
    source: str = "edamam"


@dataclass(frozen=True)
class Fallback:
    """Nutrients taken from the local table or the default vector."""

    food_name: str
    vector: NutrientVector
    reason: str
    matched_key: str | None = None


LookupOutcome = Resolved | Fallback


def _non_negative(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return max(number, 0.0)
