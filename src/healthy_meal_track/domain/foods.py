"""Domain models for detected foods."""

from dataclasses import dataclass
from typing import Literal

from healthy_meal_track.domain.vision import BoundingBox

DetectionSource = Literal["label", "object"]


@dataclass(frozen=True)
class Detection:
    """Single labeled or localized signal from the vision step."""

    name: str
    confidence: float
    source: DetectionSource
    bounding_box: BoundingBox | None = None


@dataclass(frozen=True)
class FoodItem:
    """Food-relevant, deduplicated detection."""

    name: str
    confidence: float | None
    source: DetectionSource = "label"
    bounding_box: BoundingBox | None = None

    @property
    def weight(self) -> float:
        """Weight used when adding this food's nutrients to the meal."""
        return 1.0 if self.confidence is None else self.confidence

    def to_dict(self) -> dict[str, object]:
        """Serialize for storage and API responses."""
        return {
            "name": self.name,
            "confidence": self.confidence,
            "source": self.source,
            "boundingBox": (
                self.bounding_box.model_dump() if self.bounding_box else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "FoodItem":
        """Rebuild a stored food item."""
        box = data.get("boundingBox")
        confidence = data.get("confidence")
        source = data.get("source")
        return cls(
            name=str(data.get("name", "")),
            confidence=(
                float(confidence) if isinstance(confidence, int | float) else None
            ),
            source="object" if source == "object" else "label",
            bounding_box=BoundingBox.model_validate(box) if box else None,
        )
