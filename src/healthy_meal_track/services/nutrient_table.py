"""Local nutrient table used when the external lookup is unavailable."""

from healthy_meal_track.domain.nutrition import NutrientVector

LOCAL_NUTRIENTS: dict[str, NutrientVector] = {
    "rice": NutrientVector(
        calories=130, protein=2.7, carbs=28, fat=0.3,
        fiber=0.4, sugar=0.1, sodium=1, potassium=35,
    ),
    "chicken": NutrientVector(
        calories=165, protein=31, carbs=0, fat=3.6,
        fiber=0, sugar=0, sodium=74, potassium=256,
    ),
    "fish": NutrientVector(
        calories=206, protein=22, carbs=0, fat=12,
        fiber=0, sugar=0, sodium=61, potassium=384,
    ),
    "vegetables": NutrientVector(
        calories=25, protein=2, carbs=5, fat=0.2,
        fiber=2, sugar=2, sodium=20, potassium=200,
    ),
    "bread": NutrientVector(
        calories=79, protein=3.1, carbs=14, fat=1.1,
        fiber=1.2, sugar=1.2, sodium=140, potassium=35,
    ),
    "pasta": NutrientVector(
        calories=131, protein=5, carbs=25, fat=1.1,
        fiber=1.8, sugar=0.8, sodium=6, potassium=44,
    ),
    "potato": NutrientVector(
        calories=77, protein=2, carbs=17, fat=0.1,
        fiber=2.2, sugar=0.8, sodium=6, potassium=421,
    ),
    "tomato": NutrientVector(
        calories=18, protein=0.9, carbs=3.9, fat=0.2,
        fiber=1.2, sugar=2.6, sodium=5, potassium=237,
    ),
    "onion": NutrientVector(
        calories=40, protein=1.1, carbs=9.3, fat=0.1,
        fiber=1.7, sugar=4.7, sodium=4, potassium=146,
    ),
    "garlic": NutrientVector(
        calories=4, protein=0.2, carbs=1, fat=0,
        fiber=0.1, sugar=0.1, sodium=1, potassium=12,
    ),
    "oil": NutrientVector(
        calories=120, protein=0, carbs=0, fat=14,
        fiber=0, sugar=0, sodium=0, potassium=0,
    ),
    "salt": NutrientVector(
        calories=0, protein=0, carbs=0, fat=0,
        fiber=0, sugar=0, sodium=581, potassium=0,
    ),
    "sugar": NutrientVector(
        calories=16, protein=0, carbs=4, fat=0,
        fiber=0, sugar=4, sodium=0, potassium=0,
    ),
    "milk": NutrientVector(
        calories=42, protein=3.4, carbs=5, fat=1,
        fiber=0, sugar=5, sodium=44, potassium=150,
    ),
    "cheese": NutrientVector(
        calories=113, protein=7, carbs=0.4, fat=9,
        fiber=0, sugar=0.1, sodium=174, potassium=28,
    ),
    "egg": NutrientVector(
        calories=74, protein=6.3, carbs=0.4, fat=5,
        fiber=0, sugar=0.4, sodium=70, potassium=67,
    ),
    "meat": NutrientVector(
        calories=250, protein=26, carbs=0, fat=15,
        fiber=0, sugar=0, sodium=72, potassium=318,
    ),
    "lentils": NutrientVector(
        calories=116, protein=9, carbs=20, fat=0.4,
        fiber=7.9, sugar=1.8, sodium=2, potassium=369,
    ),
}  # fmt: skip

DEFAULT_NUTRIENTS = NutrientVector(
    calories=50, protein=2, carbs=8, fat=1, fiber=1, sugar=1, sodium=10, potassium=50
)


def match_local(food_name: str) -> tuple[str | None, NutrientVector]:
    """Return the first table entry matching the name, or the default vector.

    A key matches when the name contains it or it contains the name.
    """
    lowered = food_name.strip().lower()
    if not lowered:
        return None, DEFAULT_NUTRIENTS
    for key, vector in LOCAL_NUTRIENTS.items():
        if key in lowered or lowered in key:
            return key, vector
    return None, DEFAULT_NUTRIENTS
