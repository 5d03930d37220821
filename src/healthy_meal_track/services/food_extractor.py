"""Food extraction from raw vision signals."""

from collections.abc import Iterable

from healthy_meal_track.domain.foods import Detection, FoodItem
from healthy_meal_track.domain.vision import FoodSignals

MIN_CONFIDENCE = 0.7
MAX_FOOD_ITEMS = 10

# Meal-context words like "plate" also match and resolve to the default vector
# during nutrient lookup.
FOOD_KEYWORDS: tuple[str, ...] = (
    "food",
    "dish",
    "meal",
    "cuisine",
    "ingredient",
    "fruit",
    "vegetable",
    "meat",
    "fish",
    "chicken",
    "beef",
    "pork",
    "lamb",
    "rice",
    "pasta",
    "bread",
    "cake",
    "dessert",
    "soup",
    "salad",
    "sandwich",
    "pizza",
    "burger",
    "steak",
    "sushi",
    "curry",
    "noodles",
    "potato",
    "tomato",
    "onion",
    "garlic",
    "carrot",
    "broccoli",
    "spinach",
    "lettuce",
    "apple",
    "banana",
    "orange",
    "grape",
    "strawberry",
    "blueberry",
    "milk",
    "cheese",
    "yogurt",
    "egg",
    "butter",
    "oil",
    "sauce",
    "cooking",
    "kitchen",
    "restaurant",
    "dining",
    "plate",
    "bowl",
)


def is_food_related(name: str) -> bool:
    """Return true when the name contains any food vocabulary term."""
    lowered = name.lower()
    return any(keyword in lowered for keyword in FOOD_KEYWORDS)


def collect_detections(signals: FoodSignals) -> list[Detection]:
    """Flatten vision signals into detections, labels before objects.

    Text detections are ignored.
    """
    detections = [
        Detection(name=label.name, confidence=label.confidence, source="label")
        for label in signals.labels
    ]
    detections.extend(
        Detection(
            name=obj.name,
            confidence=obj.confidence,
            source="object",
            bounding_box=obj.bounding_box,
        )
        for obj in signals.objects
    )
    return detections


def extract_food_items(
    detections: Iterable[Detection],
    *,
    min_confidence: float = MIN_CONFIDENCE,
    limit: int = MAX_FOOD_ITEMS,
) -> list[FoodItem]:
    """Filter, deduplicate and rank detections into food items.

    The first occurrence of a lowercased name wins, so label detections beat
    object detections with the same name. The result is sorted by confidence
    descending and truncated to ``limit``.
    """
    seen: set[str] = set()
    foods: list[FoodItem] = []
    for detection in detections:
        name = detection.name.strip().lower()
        if not name or detection.confidence < min_confidence:
            continue
        if not is_food_related(name) or name in seen:
            continue
        seen.add(name)
        foods.append(
            FoodItem(
                name=name,
                confidence=detection.confidence,
                source=detection.source,
                bounding_box=detection.bounding_box,
            )
        )
    foods.sort(key=lambda food: food.weight, reverse=True)
    return foods[:limit]
